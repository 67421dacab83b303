"""
Bridge to the `cryptography` Library

modvault keys are plain (n, e) / (n, d) values with no wire format. This
module hands the public parts to the `cryptography` package, which owns
DER/PEM encoding:
- RSA public keys -> rsa.RSAPublicKey / SubjectPublicKeyInfo PEM
- DH parameters  -> dh.DHParameterNumbers (p of at least 512 bits)

Private keys are not exported: cryptography needs p and q (CRT values)
for an RSA private key, and modvault never keeps them.
"""

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import dh, rsa

from ..core_math.bigint import BigInt
from ..errors import InvalidParameters
from ..key_exchange.diffie_hellman import DHParameters
from ..rsa.rsa_math import RSAPublicKey


# ============================================================================
# Constants
# ============================================================================

MIN_FFDH_BITS = 512  # Smallest DH modulus cryptography accepts


def to_cryptography_public_key(public_key: RSAPublicKey) -> rsa.RSAPublicKey:
    """Build a cryptography RSA public key object from (n, e)."""
    numbers = rsa.RSAPublicNumbers(int(public_key.e), int(public_key.n))
    return numbers.public_key()


def from_cryptography_public_key(key: rsa.RSAPublicKey) -> RSAPublicKey:
    """Read (n, e) back out of a cryptography RSA public key."""
    numbers = key.public_numbers()
    return RSAPublicKey(BigInt(numbers.n), BigInt(numbers.e))


def public_key_to_pem(public_key: RSAPublicKey) -> bytes:
    """Encode a public key as SubjectPublicKeyInfo PEM."""
    return to_cryptography_public_key(public_key).public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )


def public_key_from_pem(data: bytes) -> RSAPublicKey:
    """
    Decode a SubjectPublicKeyInfo PEM public key.

    Raises:
        ValueError: If the PEM does not hold an RSA public key
    """
    key = serialization.load_pem_public_key(data)
    if not isinstance(key, rsa.RSAPublicKey):
        raise ValueError("PEM data is not an RSA public key")
    return from_cryptography_public_key(key)


def dh_parameter_numbers(params: DHParameters) -> dh.DHParameterNumbers:
    """
    Convert (p, g) to cryptography's DHParameterNumbers.

    cryptography refuses moduli below MIN_FFDH_BITS, so the small groups
    modvault accepts for exercises and test vectors cannot be exported.

    Raises:
        InvalidParameters: If p is shorter than MIN_FFDH_BITS or
                           cryptography rejects the values
    """
    if params.bit_length < MIN_FFDH_BITS:
        raise InvalidParameters(
            f"cryptography needs a DH modulus of at least {MIN_FFDH_BITS} bits, "
            f"got {params.bit_length}"
        )
    try:
        return dh.DHParameterNumbers(int(params.p), int(params.g))
    except ValueError as exc:
        raise InvalidParameters(f"cryptography rejected the DH parameters: {exc}") from exc


def dh_parameters_from_numbers(numbers: dh.DHParameterNumbers) -> DHParameters:
    return DHParameters(BigInt(numbers.p), BigInt(numbers.g))
