# Primality Module
"""
Primality testing and prime generation:
- Miller-Rabin probabilistic test - miller_rabin.py
- Bounded random prime / safe prime search - prime_gen.py
"""

from .miller_rabin import (
    PrimalityVerdict,
    miller_rabin,
    is_probable_prime,
    is_strong_probable_prime,
    decompose,
    trial_division,
    SMALL_PRIMES,
    RECOMMENDED_ROUNDS,
)

from .prime_gen import (
    generate_prime,
    generate_safe_prime,
    DEFAULT_MAX_ATTEMPTS,
)

__all__ = [
    'PrimalityVerdict',
    'miller_rabin',
    'is_probable_prime',
    'is_strong_probable_prime',
    'decompose',
    'trial_division',
    'SMALL_PRIMES',
    'RECOMMENDED_ROUNDS',
    'generate_prime',
    'generate_safe_prime',
    'DEFAULT_MAX_ATTEMPTS',
]
