# Core Math Module
"""
Arbitrary-precision arithmetic the public-key algorithms build on:
- BigInt (base 2^32 digits) - bigint.py
- Modular exponentiation / inverse / reduction - mod_arith.py
- Uniform random sampling from an injected entropy source - random_sampler.py
"""

from .bigint import BigInt, as_bigint, ZERO, ONE, TWO, DIGIT_BITS

from .mod_arith import (
    ModulusContext,
    pow_mod,
    mod_inverse,
    reduce,
    mul_mod,
    gcd,
    lcm,
    is_coprime,
    extended_gcd,
)

from .random_sampler import (
    EntropySource,
    SystemEntropy,
    DeterministicEntropy,
    RandomSampler,
)

__all__ = [
    # BigInt
    'BigInt',
    'as_bigint',
    'ZERO',
    'ONE',
    'TWO',
    'DIGIT_BITS',
    # Modular arithmetic
    'ModulusContext',
    'pow_mod',
    'mod_inverse',
    'reduce',
    'mul_mod',
    'gcd',
    'lcm',
    'is_coprime',
    'extended_gcd',
    # Random sampling
    'EntropySource',
    'SystemEntropy',
    'DeterministicEntropy',
    'RandomSampler',
]
