# Interop Module
"""
Export of public values to the `cryptography` library - cryptography_bridge.py
"""

from .cryptography_bridge import (
    MIN_FFDH_BITS,
    to_cryptography_public_key,
    from_cryptography_public_key,
    public_key_to_pem,
    public_key_from_pem,
    dh_parameter_numbers,
    dh_parameters_from_numbers,
)

__all__ = [
    'MIN_FFDH_BITS',
    'to_cryptography_public_key',
    'from_cryptography_public_key',
    'public_key_to_pem',
    'public_key_from_pem',
    'dh_parameter_numbers',
    'dh_parameters_from_numbers',
]
