# modvault
"""
modvault - arbitrary-precision modular arithmetic and the public-key
primitives built on it.

Modules:
- core_math: BigInt, modular arithmetic, random sampling
- primality: Miller-Rabin testing and prime generation
- key_exchange: Diffie-Hellman
- rsa: textbook RSA key generation, encryption and signatures
- interop: export of public values to the `cryptography` library

The package logs through the standard logging module under the
'modvault' logger and installs no handlers besides a NullHandler.
"""

import logging

from .errors import (
    ModVaultError,
    InvalidModulus,
    DivisionByZero,
    Underflow,
    NoInverseExists,
    InvalidBound,
    InvalidParameters,
    InvalidExponent,
    MessageTooLarge,
    PrimeGenerationExhausted,
)

from .core_math import (
    BigInt,
    ModulusContext,
    RandomSampler,
    SystemEntropy,
    DeterministicEntropy,
    pow_mod,
    mod_inverse,
    reduce,
)

from .primality import miller_rabin, is_probable_prime, generate_prime

from .key_exchange import DHParameters, DiffieHellmanParty

from .rsa import RSAKeyPair, RSAPublicKey, RSAPrivateKey, KeyGenConfig, generate_keypair

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"

__all__ = [
    # Errors
    'ModVaultError',
    'InvalidModulus',
    'DivisionByZero',
    'Underflow',
    'NoInverseExists',
    'InvalidBound',
    'InvalidParameters',
    'InvalidExponent',
    'MessageTooLarge',
    'PrimeGenerationExhausted',
    # Core math
    'BigInt',
    'ModulusContext',
    'RandomSampler',
    'SystemEntropy',
    'DeterministicEntropy',
    'pow_mod',
    'mod_inverse',
    'reduce',
    # Primality
    'miller_rabin',
    'is_probable_prime',
    'generate_prime',
    # Key exchange
    'DHParameters',
    'DiffieHellmanParty',
    # RSA
    'RSAKeyPair',
    'RSAPublicKey',
    'RSAPrivateKey',
    'KeyGenConfig',
    'generate_keypair',
]
