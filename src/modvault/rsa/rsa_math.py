"""
RSA Implementation

Implements textbook RSA on top of modvault's BigInt arithmetic:
- Key generation (Miller-Rabin prime search, Carmichael lambda)
- Encryption / decryption (square-and-multiply modular exponentiation)
- Digital signatures (textbook sign / verify)
- Per-component key export

Key derivation:
    n = p * q
    lambda(n) = lcm(p-1, q-1)        (or Euler's (p-1)(q-1) if configured)
    d = e^(-1) mod lambda(n)

Only (n, e) and (n, d) are kept. p, q and lambda(n) exist as local values
inside key derivation and are dropped when it returns.

Security Note:
    This is UNPADDED (textbook) RSA. It is deterministic and malleable;
    any real use needs a padding scheme such as OAEP for encryption and
    PSS for signatures on top of these primitives.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..core_math.bigint import BigInt, IntLike, ONE, TWO, as_bigint
from ..core_math.mod_arith import is_coprime, lcm, mod_inverse, pow_mod
from ..core_math.random_sampler import RandomSampler
from ..errors import (
    InvalidExponent,
    InvalidParameters,
    MessageTooLarge,
    PrimeGenerationExhausted,
)
from ..primality.prime_gen import DEFAULT_MAX_ATTEMPTS, generate_prime


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

DEFAULT_PUBLIC_EXPONENT = 65537  # 2^16 + 1, prime
DEFAULT_KEYGEN_ROUNDS = 40       # Miller-Rabin error <= 2^-80 per prime
DEFAULT_KEY_BITS = 2048
MIN_KEY_BITS = 16
DEFAULT_EXPONENT_RETRIES = 16

POLICY_REGENERATE = 'regenerate'  # Draw new primes when gcd(e, lambda) != 1
POLICY_ADVANCE = 'advance'        # Try e + 2, e + 4, ... first
EXPONENT_POLICIES = (POLICY_REGENERATE, POLICY_ADVANCE)


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True)
class KeyGenConfig:
    """
    Settings for RSA key generation.

    Attributes:
        rounds: Miller-Rabin rounds per prime candidate
        public_exponent: e (odd, >= 3)
        max_attempts: Candidate budget for each prime search
        exponent_policy: 'regenerate' or 'advance' when gcd(e, lambda) != 1
        exponent_retries: How many times the policy is applied before
                          giving up with InvalidExponent
        use_carmichael: lambda(n) = lcm(p-1, q-1) if True, else (p-1)(q-1)
    """
    rounds: int = DEFAULT_KEYGEN_ROUNDS
    public_exponent: BigInt = DEFAULT_PUBLIC_EXPONENT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    exponent_policy: str = POLICY_REGENERATE
    exponent_retries: int = DEFAULT_EXPONENT_RETRIES
    use_carmichael: bool = True

    def __post_init__(self):
        if self.rounds < 1:
            raise ValueError("rounds must be at least 1")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.exponent_retries < 1:
            raise ValueError("exponent_retries must be at least 1")
        if self.exponent_policy not in EXPONENT_POLICIES:
            raise ValueError(f"exponent_policy must be one of {EXPONENT_POLICIES}")
        e = as_bigint(self.public_exponent)
        _check_public_exponent(e)
        object.__setattr__(self, 'public_exponent', e)


def _check_public_exponent(e: BigInt) -> None:
    if e < 3 or e.is_even():
        raise InvalidExponent("Public exponent must be odd and at least 3")


# ============================================================================
# Keys
# ============================================================================

@dataclass(frozen=True)
class RSAPublicKey:
    """RSA public key (n, e)."""
    n: BigInt
    e: BigInt

    def __post_init__(self):
        object.__setattr__(self, 'n', as_bigint(self.n))
        object.__setattr__(self, 'e', as_bigint(self.e))

    @property
    def key_size(self) -> int:
        """Key size in bits."""
        return self.n.bit_length()

    @property
    def byte_length(self) -> int:
        """Length of a ciphertext / signature in bytes."""
        return (self.key_size + 7) // 8

    def to_dict(self) -> Dict[str, Any]:
        """Convert key to dictionary (hex strings per component)."""
        return {'n': self.n.hex(), 'e': self.e.hex()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RSAPublicKey':
        """Create key from dictionary."""
        return cls(BigInt.from_str(data['n'], 16), BigInt.from_str(data['e'], 16))


@dataclass(frozen=True)
class RSAPrivateKey:
    """RSA private key (n, d). d is kept out of repr()."""
    n: BigInt
    d: BigInt = field(repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'n', as_bigint(self.n))
        object.__setattr__(self, 'd', as_bigint(self.d))

    @property
    def key_size(self) -> int:
        return self.n.bit_length()

    @property
    def byte_length(self) -> int:
        return (self.key_size + 7) // 8

    def to_dict(self) -> Dict[str, Any]:
        """Convert key to dictionary. The result contains the secret d."""
        return {'n': self.n.hex(), 'd': self.d.hex()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RSAPrivateKey':
        return cls(BigInt.from_str(data['n'], 16), BigInt.from_str(data['d'], 16))


# ============================================================================
# Key Derivation / Generation
# ============================================================================

def _lambda(p: BigInt, q: BigInt, use_carmichael: bool) -> BigInt:
    if use_carmichael:
        return lcm(p - ONE, q - ONE)
    return (p - ONE) * (q - ONE)


def _derive_keys(p: BigInt, q: BigInt, e: BigInt, lam: BigInt) -> Tuple[RSAPublicKey, RSAPrivateKey]:
    if not is_coprime(e, lam):
        raise InvalidExponent("Public exponent is not coprime with lambda(n)")
    n = p * q
    d = mod_inverse(e, lam)
    return RSAPublicKey(n, e), RSAPrivateKey(n, d)


def _distinct_primes(
    prime_bits: int,
    config: KeyGenConfig,
    sampler: RandomSampler
) -> Tuple[BigInt, BigInt]:
    p = generate_prime(prime_bits, config.rounds, sampler, config.max_attempts)
    for _ in range(config.max_attempts):
        q = generate_prime(prime_bits, config.rounds, sampler, config.max_attempts)
        if q != p:
            return p, q
    raise PrimeGenerationExhausted(
        f"Could not find two distinct {prime_bits}-bit primes"
    )


def generate_keypair(
    bits: int = DEFAULT_KEY_BITS,
    config: Optional[KeyGenConfig] = None,
    sampler: Optional[RandomSampler] = None
) -> 'RSAKeyPair':
    """
    Generate an RSA key pair.

    Generates two distinct random primes of bits // 2 bits each, computes
    n = p*q and lambda(n), applies the configured exponent policy, and
    derives d = e^(-1) mod lambda(n).

    Args:
        bits: Desired bit length of modulus n (even, >= MIN_KEY_BITS).
              n = p*q has bits or bits - 1 bits
        config: Key generation settings (default: KeyGenConfig())
        sampler: Random source (default: system entropy)

    Returns:
        RSAKeyPair holding only (n, e) and (n, d)

    Raises:
        ValueError: If bits < MIN_KEY_BITS or bits is odd
        PrimeGenerationExhausted: If a prime search runs out of attempts
        InvalidExponent: If no usable exponent found within exponent_retries
    """
    if bits < MIN_KEY_BITS:
        raise ValueError(f"Key size must be at least {MIN_KEY_BITS} bits")
    if bits % 2:
        raise ValueError("Key size must be even (two primes of bits // 2 bits each)")
    config = config or KeyGenConfig()
    sampler = sampler or RandomSampler()
    prime_bits = bits // 2

    logger.debug("Generating %d-bit RSA key pair (%d Miller-Rabin rounds)", bits, config.rounds)

    for attempt in range(1, config.exponent_retries + 1):
        p, q = _distinct_primes(prime_bits, config, sampler)
        lam = _lambda(p, q, config.use_carmichael)

        e = config.public_exponent
        if config.exponent_policy == POLICY_ADVANCE:
            for _ in range(config.exponent_retries):
                if is_coprime(e, lam):
                    break
                e = e + TWO

        if is_coprime(e, lam):
            public_key, private_key = _derive_keys(p, q, e, lam)
            logger.debug("Generated RSA key pair: n has %d bits, e=%s", public_key.key_size, e)
            return RSAKeyPair(public_key, private_key)

        logger.debug("gcd(e, lambda) != 1 on attempt %d; drawing new primes", attempt)

    raise InvalidExponent(
        f"No usable public exponent after {config.exponent_retries} attempts"
    )


# ============================================================================
# Textbook RSA Operations
# ============================================================================

def _check_range(value: BigInt, n: BigInt, what: str) -> None:
    if value.is_negative or value >= n:
        raise MessageTooLarge(f"{what} must be in [0, n)")


def rsa_encrypt(message: IntLike, public_key: RSAPublicKey) -> BigInt:
    """
    RSA encryption of a message.

    Computes ciphertext = message^e mod n

    Raises:
        MessageTooLarge: Unless 0 <= message < n
    """
    message = as_bigint(message)
    _check_range(message, public_key.n, "Message")
    return pow_mod(message, public_key.e, public_key.n)


def rsa_decrypt(ciphertext: IntLike, private_key: RSAPrivateKey) -> BigInt:
    """
    RSA decryption of a ciphertext.

    Computes message = ciphertext^d mod n

    Raises:
        MessageTooLarge: Unless 0 <= ciphertext < n
    """
    ciphertext = as_bigint(ciphertext)
    _check_range(ciphertext, private_key.n, "Ciphertext")
    return pow_mod(ciphertext, private_key.d, private_key.n)


def rsa_sign(message: IntLike, private_key: RSAPrivateKey) -> BigInt:
    """
    RSA digital signature.

    Computes signature = message^d mod n

    Args:
        message: Message hash as integer (must be < n)
        private_key: Signing key
    """
    message = as_bigint(message)
    _check_range(message, private_key.n, "Message")
    return pow_mod(message, private_key.d, private_key.n)


def rsa_verify(message: IntLike, signature: IntLike, public_key: RSAPublicKey) -> bool:
    """
    Verify an RSA digital signature.

    Checks if signature^e mod n == message. Out-of-range values simply
    fail verification.
    """
    message, signature = as_bigint(message), as_bigint(signature)
    n = public_key.n
    if message.is_negative or message >= n or signature.is_negative or signature >= n:
        return False
    return pow_mod(signature, public_key.e, n) == message


def rsa_encrypt_bytes(data: bytes, public_key: RSAPublicKey) -> bytes:
    """Encrypt bytes (as a big-endian integer < n); fixed-length output."""
    cipher_int = rsa_encrypt(BigInt.from_bytes(data), public_key)
    return cipher_int.to_bytes(public_key.byte_length)


def rsa_decrypt_bytes(
    data: bytes,
    private_key: RSAPrivateKey,
    length: Optional[int] = None
) -> bytes:
    """
    Decrypt bytes.

    Args:
        data: Ciphertext bytes
        private_key: Decryption key
        length: Plaintext length to restore leading zero bytes; minimal
                encoding when None
    """
    msg_int = rsa_decrypt(BigInt.from_bytes(data), private_key)
    return msg_int.to_bytes(length)


# ============================================================================
# Key Pair
# ============================================================================

class RSAKeyPair:
    """
    RSA key pair container with convenient methods.

    Example:
        >>> keypair = RSAKeyPair.from_primes(61, 53, e=17)
        >>> keypair.modulus
        BigInt(3233)
        >>> keypair.decrypt(keypair.encrypt(65))
        BigInt(65)
    """

    def __init__(self, public_key: RSAPublicKey, private_key: RSAPrivateKey):
        """
        Initialize with existing keys.

        Raises:
            InvalidParameters: If the keys use different moduli
        """
        if public_key.n != private_key.n:
            raise InvalidParameters("Public and private keys use different moduli")
        self._public_key = public_key
        self._private_key = private_key

    @classmethod
    def generate(
        cls,
        bits: int = DEFAULT_KEY_BITS,
        config: Optional[KeyGenConfig] = None,
        sampler: Optional[RandomSampler] = None
    ) -> 'RSAKeyPair':
        """Generate a new RSA key pair (see generate_keypair)."""
        return generate_keypair(bits, config, sampler)

    @classmethod
    def from_primes(
        cls,
        p: IntLike,
        q: IntLike,
        e: IntLike = DEFAULT_PUBLIC_EXPONENT,
        use_carmichael: bool = True
    ) -> 'RSAKeyPair':
        """
        Derive a key pair from caller-supplied primes.

        The primes are not checked for primality.

        Raises:
            InvalidParameters: If p == q or either is < 3
            InvalidExponent: If e is unusable or gcd(e, lambda(n)) != 1
        """
        p, q, e = as_bigint(p), as_bigint(q), as_bigint(e)
        if p < 3 or q < 3:
            raise InvalidParameters("Primes must be at least 3")
        if p == q:
            raise InvalidParameters("Primes p and q must be distinct")
        _check_public_exponent(e)
        public_key, private_key = _derive_keys(p, q, e, _lambda(p, q, use_carmichael))
        return cls(public_key, private_key)

    @property
    def public_key(self) -> RSAPublicKey:
        """Public key (n, e)."""
        return self._public_key

    @property
    def private_key(self) -> RSAPrivateKey:
        """Private key (n, d)."""
        return self._private_key

    @property
    def modulus(self) -> BigInt:
        """Modulus n."""
        return self._public_key.n

    @property
    def public_exponent(self) -> BigInt:
        """Public exponent e."""
        return self._public_key.e

    @property
    def private_exponent(self) -> BigInt:
        """Private exponent d."""
        return self._private_key.d

    @property
    def key_size(self) -> int:
        """Key size in bits."""
        return self._public_key.key_size

    def encrypt(self, message: IntLike) -> BigInt:
        """Encrypt a message using public key."""
        return rsa_encrypt(message, self._public_key)

    def decrypt(self, ciphertext: IntLike) -> BigInt:
        """Decrypt a ciphertext using private key."""
        return rsa_decrypt(ciphertext, self._private_key)

    def sign(self, message: IntLike) -> BigInt:
        """Sign a message using private key."""
        return rsa_sign(message, self._private_key)

    def verify(self, message: IntLike, signature: IntLike) -> bool:
        """Verify a signature using public key."""
        return rsa_verify(message, signature, self._public_key)

    def encrypt_bytes(self, data: bytes) -> bytes:
        """Encrypt bytes (must be shorter than key size)."""
        return rsa_encrypt_bytes(data, self._public_key)

    def decrypt_bytes(self, data: bytes, length: Optional[int] = None) -> bytes:
        """Decrypt bytes."""
        return rsa_decrypt_bytes(data, self._private_key, length)

    def __repr__(self) -> str:
        return f"RSAKeyPair(bits={self.key_size}, e={self.public_exponent})"
