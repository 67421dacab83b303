"""
Miller-Rabin Primality Testing

A probabilistic test that determines if n is probably prime.
Probability of a false "probably prime" verdict: at most (1/4)^k for k
independently chosen random witnesses.

Algorithm:
1. Trivial cases: n < 2 composite, 2 and 3 prime, even n composite
2. Write n-1 as 2^s * d (factor out powers of 2)
3. For k random witnesses a in [2, n-2]:
   - Compute x = a^d mod n
   - If x = 1 or x = n-1, the witness passes
   - Square x up to s-1 times, looking for n-1
   - If never found, n is composite (stop immediately)
4. Every witness passed: n is probably prime

The number of rounds is always chosen by the caller; RECOMMENDED_ROUNDS is
the suggested minimum for key generation.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Tuple

from ..core_math.bigint import BigInt, IntLike, ONE, TWO, as_bigint
from ..core_math.mod_arith import ModulusContext
from ..core_math.random_sampler import RandomSampler


# ============================================================================
# Constants
# ============================================================================

RECOMMENDED_ROUNDS = 20  # Error probability <= 2^-40
SMALL_PRIME_LIMIT = 1000


def _sieve(limit: int) -> List[int]:
    """Sieve of Eratosthenes for primes below limit."""
    flags = [True] * limit
    flags[0] = flags[1] = False
    for i in range(2, int(limit ** 0.5) + 1):
        if flags[i]:
            for multiple in range(i * i, limit, i):
                flags[multiple] = False
    return [i for i, is_prime in enumerate(flags) if is_prime]


SMALL_PRIMES = tuple(_sieve(SMALL_PRIME_LIMIT))


# ============================================================================
# Verdict
# ============================================================================

@dataclass(frozen=True)
class PrimalityVerdict:
    """
    Result of a primality check.

    probably_prime is False only when n is composite for certain.
    error_bound is the probability that a "probably prime" verdict is
    wrong: 4^-rounds, or 0 when the verdict is certain.
    """
    probably_prime: bool
    rounds: int
    error_bound: Fraction

    @property
    def is_composite(self) -> bool:
        return not self.probably_prime

    def __bool__(self) -> bool:
        return self.probably_prime


def _certain(is_prime: bool) -> PrimalityVerdict:
    return PrimalityVerdict(is_prime, 0, Fraction(0))


# ============================================================================
# Building Blocks
# ============================================================================

def decompose(n: IntLike) -> Tuple[int, BigInt]:
    """
    Write n - 1 as 2^s * d with d odd.

    Args:
        n: Odd integer >= 3

    Returns:
        Tuple (s, d)
    """
    n = as_bigint(n)
    if n < 3 or n.is_even():
        raise ValueError("decompose expects an odd integer >= 3")
    d = n - ONE
    s = 0
    while d.is_even():
        d = d >> 1
        s += 1
    return s, d


def _witness_passes(ctx: ModulusContext, witness: BigInt, s: int, d: BigInt) -> bool:
    n_minus_one = ctx.modulus - ONE

    x = ctx.pow(witness, d)
    if x == 1 or x == n_minus_one:
        return True

    # Square up to s-1 times
    for _ in range(s - 1):
        x = ctx.square(x)
        if x == n_minus_one:
            return True
    return False


def is_strong_probable_prime(n: IntLike, witness: IntLike) -> bool:
    """
    Run a single Miller-Rabin round with a chosen witness.

    Args:
        n: Odd integer >= 5
        witness: Base in [2, n-2]

    Returns:
        False if the witness proves n composite, True otherwise
    """
    n, witness = as_bigint(n), as_bigint(witness)
    s, d = decompose(n)
    if n < 5:
        raise ValueError("Single-witness test needs n >= 5")
    if not TWO <= witness <= n - TWO:
        raise ValueError("Witness must be in [2, n-2]")
    return _witness_passes(ModulusContext(n), witness, s, d)


def trial_division(n: IntLike) -> Optional[bool]:
    """
    Quick check against SMALL_PRIMES.

    Returns:
        True if n is itself a small prime, False if n < 2 or n has a small
        prime factor, None if the check is inconclusive
    """
    n = as_bigint(n)
    if n < 2:
        return False
    for p in SMALL_PRIMES:
        if n == p:
            return True
        if not n % p:
            return False
    return None


# ============================================================================
# Miller-Rabin
# ============================================================================

def miller_rabin(
    n: IntLike,
    rounds: int,
    sampler: Optional[RandomSampler] = None
) -> PrimalityVerdict:
    """
    Miller-Rabin probabilistic primality test.

    Args:
        n: Number to test for primality
        rounds: Number of random witnesses k (required; >= 1)
        sampler: Source of witnesses (default: system entropy)

    Returns:
        PrimalityVerdict; composite verdicts are certain, probable-prime
        verdicts carry error_bound <= 4^-rounds
    """
    if rounds < 1:
        raise ValueError("Miller-Rabin needs at least one round")

    n = as_bigint(n)
    if n < 2:
        return _certain(False)
    if n == 2 or n == 3:
        return _certain(True)
    if n.is_even():
        return _certain(False)

    sampler = sampler or RandomSampler()
    s, d = decompose(n)
    ctx = ModulusContext(n)
    upper = n - TWO

    for _ in range(rounds):
        witness = sampler.random_range(TWO, upper)
        if not _witness_passes(ctx, witness, s, d):
            return _certain(False)

    return PrimalityVerdict(True, rounds, Fraction(1, 4 ** rounds))


def is_probable_prime(
    n: IntLike,
    rounds: int,
    sampler: Optional[RandomSampler] = None
) -> bool:
    """Boolean form of miller_rabin()."""
    return miller_rabin(n, rounds, sampler).probably_prime
