"""
Diffie-Hellman Key Exchange

Finite-field Diffie-Hellman over a prime modulus p with generator g:
1. Both parties agree on public parameters (p, g)
2. Each party samples a private exponent x uniformly from [1, p-2]
3. Each party publishes A = g^x mod p
4. Each party computes S = B^x mod p from the peer's public value B

Both sides arrive at g^(x_A * x_B) mod p. Transport of A and B is up to
the caller.

Trust assumption:
    g is checked to lie in [2, p-2] but is NOT verified to generate a
    large subgroup. Parameters from generate_parameters() use a safe prime
    and a generator of its prime-order subgroup; parameters from anywhere
    else are trusted as given.

Security features:
- Optional Miller-Rabin verification of p
- Peer public values outside [2, p-1] are rejected
- Private exponents never appear in repr() or log output
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..core_math.bigint import BigInt, IntLike, ONE, TWO, as_bigint
from ..core_math.mod_arith import pow_mod
from ..core_math.random_sampler import RandomSampler
from ..errors import InvalidParameters
from ..primality.miller_rabin import miller_rabin
from ..primality.prime_gen import DEFAULT_SAFE_PRIME_MAX_ATTEMPTS, generate_safe_prime


logger = logging.getLogger(__name__)


# ============================================================================
# Parameters
# ============================================================================

@dataclass(frozen=True)
class DHParameters:
    """
    Public Diffie-Hellman group parameters (p, g).

    The ranges (p > 3, g in [2, p-2]) are checked on construction, so every
    DHParameters instance reaching the protocol steps is in range. Primality
    of p is only checked by validate() when rounds are given.

    Example:
        >>> params = DHParameters(23, 5).validate(rounds=10)
        >>> params.p, params.g
        (BigInt(23), BigInt(5))
    """
    p: BigInt
    g: BigInt

    def __post_init__(self):
        object.__setattr__(self, 'p', as_bigint(self.p))
        object.__setattr__(self, 'g', as_bigint(self.g))
        if self.p <= 3:
            raise InvalidParameters("Prime modulus p must be greater than 3")
        if not TWO <= self.g <= self.p - TWO:
            raise InvalidParameters("Generator g must be in [2, p-2]")

    @property
    def bit_length(self) -> int:
        return self.p.bit_length()

    def validate(
        self,
        rounds: Optional[int] = None,
        sampler: Optional[RandomSampler] = None
    ) -> 'DHParameters':
        """
        Check that p is prime.

        Args:
            rounds: Miller-Rabin rounds for checking p, or None to trust
                    that p is prime
            sampler: Witness source for the primality check

        Returns:
            self, so calls can be chained

        Raises:
            InvalidParameters: If p fails the primality check
        """
        if rounds is not None:
            if not miller_rabin(self.p, rounds, sampler):
                raise InvalidParameters("Modulus p is not prime")
            logger.debug("DH modulus (%d bits) passed %d Miller-Rabin rounds",
                         self.bit_length, rounds)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary (hex strings)."""
        return {'p': self.p.hex(), 'g': self.g.hex()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DHParameters':
        """Create parameters from dictionary."""
        return cls(
            BigInt.from_str(data['p'], 16),
            BigInt.from_str(data['g'], 16),
        )


def generate_parameters(
    bits: int,
    rounds: int,
    sampler: Optional[RandomSampler] = None,
    max_attempts: int = DEFAULT_SAFE_PRIME_MAX_ATTEMPTS
) -> DHParameters:
    """
    Generate fresh parameters: a safe prime p = 2q + 1 and a generator of
    the subgroup of prime order q.

    2 is used when it is a quadratic residue (p = 7 mod 8); otherwise 4,
    which always is. A quadratic residue other than 1 has order q.

    Raises:
        PrimeGenerationExhausted: If no safe prime found within max_attempts
    """
    p = generate_safe_prime(bits, rounds, sampler, max_attempts)
    g = TWO if p % 8 == 7 else BigInt(4)
    logger.debug("Generated %d-bit DH parameters", p.bit_length())
    return DHParameters(p, g)


# ============================================================================
# Protocol Steps
# ============================================================================

def generate_private_exponent(
    params: DHParameters,
    sampler: Optional[RandomSampler] = None
) -> BigInt:
    """Sample a private exponent uniformly from [1, p-2]."""
    sampler = sampler or RandomSampler()
    return sampler.random_range(ONE, params.p - TWO)


def compute_public_value(params: DHParameters, private_exponent: IntLike) -> BigInt:
    """Compute g^x mod p."""
    return pow_mod(params.g, private_exponent, params.p)


def validate_public_value(params: DHParameters, value: IntLike) -> BigInt:
    """
    Basic peer validation before exponentiation.

    Rejects 0, 1 and anything >= p. p-1 is accepted: an honest party
    publishes it whenever g^x happens to land on it (x = 11 for p = 23,
    g = 5).

    Raises:
        InvalidParameters: If value is not in [2, p-1]
    """
    value = as_bigint(value)
    if not ONE < value < params.p:
        raise InvalidParameters("Peer public value is out of the valid range [2, p-1]")
    return value


def compute_shared_secret(
    params: DHParameters,
    private_exponent: IntLike,
    peer_public: IntLike
) -> BigInt:
    """Validate the peer's public value and compute peer^x mod p."""
    peer_public = validate_public_value(params, peer_public)
    return pow_mod(peer_public, private_exponent, params.p)


# ============================================================================
# Party
# ============================================================================

class DiffieHellmanParty:
    """
    One side of a Diffie-Hellman exchange.

    Example:
        >>> params = DHParameters(23, 5)
        >>> alice = DiffieHellmanParty(params, private_exponent=6)
        >>> bob = DiffieHellmanParty(params, private_exponent=15)
        >>> alice.public_value, bob.public_value
        (BigInt(8), BigInt(19))
        >>> alice.compute_shared_secret(bob.public_value)
        BigInt(2)
    """

    def __init__(
        self,
        params: DHParameters,
        sampler: Optional[RandomSampler] = None,
        private_exponent: Optional[IntLike] = None,
        verify_rounds: Optional[int] = None
    ):
        """
        Initialize a party.

        Args:
            params: Public parameters (p, g)
            sampler: Random source for the private exponent and for
                     primality verification
            private_exponent: Fixed exponent (tests / known vectors);
                              sampled from [1, p-2] when None
            verify_rounds: Miller-Rabin rounds to verify p, or None to
                           trust the parameters

        Raises:
            InvalidParameters: If the parameters or the given exponent are
                               invalid
        """
        self._sampler = sampler or RandomSampler()
        self._params = params.validate(verify_rounds, self._sampler)

        if private_exponent is None:
            x = generate_private_exponent(params, self._sampler)
        else:
            x = as_bigint(private_exponent)
            if not ONE <= x <= params.p - TWO:
                raise InvalidParameters("Private exponent must be in [1, p-2]")

        self._private_exponent = x
        self._public_value = compute_public_value(params, x)

    @property
    def params(self) -> DHParameters:
        return self._params

    @property
    def public_value(self) -> BigInt:
        """Value to send to the peer (g^x mod p)."""
        return self._public_value

    def compute_shared_secret(self, peer_public: IntLike) -> BigInt:
        """
        Derive the shared secret from the peer's public value.

        Raises:
            InvalidParameters: If peer_public is not in [2, p-1]
        """
        return compute_shared_secret(self._params, self._private_exponent, peer_public)

    def __repr__(self) -> str:
        return f"DiffieHellmanParty(p_bits={self._params.bit_length}, public={self._public_value})"
