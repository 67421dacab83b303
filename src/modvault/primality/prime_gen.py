"""
Prime Number Generation

Bounded random prime search:
- generate_prime: random odd candidates of exact bit length, filtered by
  trial division and confirmed with Miller-Rabin
- generate_safe_prime: p = 2q + 1 with p and q both prime

Every search has an attempt budget and raises PrimeGenerationExhausted
instead of looping forever.
"""

import logging
from typing import Optional

from ..core_math.bigint import BigInt, ONE
from ..core_math.random_sampler import RandomSampler
from ..errors import InvalidBound, PrimeGenerationExhausted
from .miller_rabin import miller_rabin, trial_division


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

DEFAULT_MAX_ATTEMPTS = 100_000  # Candidates drawn before giving up
DEFAULT_SAFE_PRIME_MAX_ATTEMPTS = 1_000_000


def _is_candidate_prime(candidate: BigInt, rounds: int, sampler: RandomSampler) -> bool:
    quick = trial_division(candidate)
    if quick is not None:
        return quick
    return miller_rabin(candidate, rounds, sampler).probably_prime


def generate_prime(
    bits: int,
    rounds: int,
    sampler: Optional[RandomSampler] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
) -> BigInt:
    """
    Generate a random prime number of specified bit length.

    Args:
        bits: Desired bit length of the prime (>= 2)
        rounds: Number of Miller-Rabin rounds per candidate
        sampler: Random source (default: system entropy)
        max_attempts: Candidates to try before giving up

    Returns:
        A probable prime with exactly `bits` bits (bits == 2 always gives 3,
        since candidates are odd)

    Raises:
        InvalidBound: If bits < 2
        PrimeGenerationExhausted: If no prime found within max_attempts
    """
    if bits < 2:
        raise InvalidBound("Bit length must be at least 2")
    sampler = sampler or RandomSampler()

    for attempt in range(1, max_attempts + 1):
        # MSB set for exact bit length, LSB set for odd
        candidate = sampler.random_odd_with_bit_length(bits)
        if _is_candidate_prime(candidate, rounds, sampler):
            logger.debug("Found %d-bit prime after %d candidates", bits, attempt)
            return candidate

    raise PrimeGenerationExhausted(
        f"No {bits}-bit prime found after {max_attempts} attempts"
    )


def generate_safe_prime(
    bits: int,
    rounds: int,
    sampler: Optional[RandomSampler] = None,
    max_attempts: int = DEFAULT_SAFE_PRIME_MAX_ATTEMPTS
) -> BigInt:
    """
    Generate a safe prime p = 2q + 1 (q also prime) of the given bit length.

    Args:
        bits: Bit length of p (>= 3)
        rounds: Miller-Rabin rounds for both p and q
        sampler: Random source (default: system entropy)
        max_attempts: Candidates for q to try before giving up

    Raises:
        InvalidBound: If bits < 3
        PrimeGenerationExhausted: If no safe prime found within max_attempts
    """
    if bits < 3:
        raise InvalidBound("Safe prime bit length must be at least 3")
    sampler = sampler or RandomSampler()

    for attempt in range(1, max_attempts + 1):
        q = sampler.random_odd_with_bit_length(bits - 1)
        p = (q << 1) + ONE
        # Cheap filter on p first; most candidates fail here
        if trial_division(p) is False:
            continue
        if _is_candidate_prime(q, rounds, sampler) and _is_candidate_prime(p, rounds, sampler):
            logger.debug("Found %d-bit safe prime after %d candidates", bits, attempt)
            return p

    raise PrimeGenerationExhausted(
        f"No {bits}-bit safe prime found after {max_attempts} attempts"
    )
