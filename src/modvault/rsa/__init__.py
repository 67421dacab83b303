# RSA Module
"""
Textbook RSA - rsa_math.py:
- Key generation with Miller-Rabin prime search
- Encryption / decryption, sign / verify
- Per-component key export (hex dictionaries)
"""

from .rsa_math import (
    KeyGenConfig,
    RSAPublicKey,
    RSAPrivateKey,
    RSAKeyPair,
    generate_keypair,
    rsa_encrypt,
    rsa_decrypt,
    rsa_sign,
    rsa_verify,
    rsa_encrypt_bytes,
    rsa_decrypt_bytes,
    DEFAULT_PUBLIC_EXPONENT,
    DEFAULT_KEYGEN_ROUNDS,
    POLICY_REGENERATE,
    POLICY_ADVANCE,
)

__all__ = [
    'KeyGenConfig',
    'RSAPublicKey',
    'RSAPrivateKey',
    'RSAKeyPair',
    'generate_keypair',
    'rsa_encrypt',
    'rsa_decrypt',
    'rsa_sign',
    'rsa_verify',
    'rsa_encrypt_bytes',
    'rsa_decrypt_bytes',
    'DEFAULT_PUBLIC_EXPONENT',
    'DEFAULT_KEYGEN_ROUNDS',
    'POLICY_REGENERATE',
    'POLICY_ADVANCE',
]
