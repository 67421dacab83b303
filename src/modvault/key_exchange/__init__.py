# Key Exchange Module
"""
Finite-field Diffie-Hellman key exchange - diffie_hellman.py
"""

from .diffie_hellman import (
    DHParameters,
    DiffieHellmanParty,
    generate_parameters,
    generate_private_exponent,
    compute_public_value,
    compute_shared_secret,
    validate_public_value,
)

__all__ = [
    'DHParameters',
    'DiffieHellmanParty',
    'generate_parameters',
    'generate_private_exponent',
    'compute_public_value',
    'compute_shared_secret',
    'validate_public_value',
]
