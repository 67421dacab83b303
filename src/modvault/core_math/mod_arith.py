"""
Modular Arithmetic Operations

Implements the modular operations the public-key algorithms are built on:
- Modular exponentiation (left-to-right square-and-multiply)
- Modular inverse (iterative Extended Euclidean Algorithm)
- True (non-negative) modular reduction
- GCD / LCM helpers

All functions take BigInt or int arguments and return BigInt values.

Side-channel policy:
    pow_mod branches on exponent bits and the digit arithmetic underneath
    is not constant-time. Timing may leak information about secret
    exponents; callers needing hardening must provide it themselves.
"""

from dataclasses import dataclass, field
from typing import Tuple

from ..errors import InvalidModulus, NoInverseExists
from .bigint import BigInt, IntLike, ONE, ZERO, as_bigint


# ============================================================================
# Modulus Context
# ============================================================================

@dataclass(frozen=True)
class ModulusContext:
    """
    A modulus together with the precomputation kept for exponentiation.

    Built per call by pow_mod; callers reducing many values against the
    same modulus can build one and reuse it. Never shared as global state.

    Example:
        >>> ctx = ModulusContext(BigInt(13))
        >>> ctx.pow(3, 7)
        BigInt(3)
    """
    modulus: BigInt
    bit_length: int = field(init=False)
    digit_count: int = field(init=False)

    def __post_init__(self):
        modulus = as_bigint(self.modulus)
        if modulus <= 1:
            raise InvalidModulus("Modulus must be greater than 1")
        object.__setattr__(self, 'modulus', modulus)
        object.__setattr__(self, 'bit_length', modulus.bit_length())
        object.__setattr__(self, 'digit_count', len(modulus.digits))

    def reduce(self, value: IntLike) -> BigInt:
        """Reduce value into [0, modulus)."""
        value = as_bigint(value)
        if not value.is_negative and value < self.modulus:
            return value
        return value % self.modulus

    def mul(self, a: IntLike, b: IntLike) -> BigInt:
        """Compute (a * b) mod modulus."""
        return (as_bigint(a) * as_bigint(b)) % self.modulus

    def square(self, a: IntLike) -> BigInt:
        a = as_bigint(a)
        return (a * a) % self.modulus

    def pow(self, base: IntLike, exponent: IntLike) -> BigInt:
        """
        Compute base^exponent mod modulus for a non-negative exponent.

        Left-to-right binary method:
        1. Start with result = 1
        2. For each bit of the exponent, most significant first:
           - Square the result (mod modulus)
           - If the bit is 1, multiply in the base (mod modulus)
        """
        exponent = as_bigint(exponent)
        if exponent.is_negative:
            raise ValueError("ModulusContext.pow requires a non-negative exponent")

        base = self.reduce(base)
        result = ONE
        for index in range(exponent.bit_length() - 1, -1, -1):
            result = self.square(result)
            if exponent.test_bit(index):
                result = self.mul(result, base)
        # exponent == 0 leaves 1, which is already reduced for modulus > 1
        return result


# ============================================================================
# Core Operations
# ============================================================================

def pow_mod(base: IntLike, exponent: IntLike, modulus: IntLike) -> BigInt:
    """
    Modular exponentiation using square-and-multiply.

    Computes (base^exponent) mod modulus, reducing every intermediate
    product so operands never grow past twice the modulus size.

    Time complexity: O(log exponent) modular multiplications

    Args:
        base: The base (may be negative; it is reduced first)
        exponent: The exponent. A negative exponent means the inverse of
                  base raised to -exponent, like Python's pow(b, e, m)
        modulus: The modulus (must be > 1)

    Returns:
        (base^exponent) mod modulus, in [0, modulus)

    Raises:
        InvalidModulus: If modulus <= 1
        NoInverseExists: If exponent < 0 and base has no inverse
    """
    ctx = ModulusContext(as_bigint(modulus))
    exponent = as_bigint(exponent)
    if exponent.is_negative:
        return ctx.pow(mod_inverse(base, ctx.modulus), -exponent)
    return ctx.pow(base, exponent)


def reduce(a: IntLike, modulus: IntLike) -> BigInt:
    """
    True modular reduction.

    Unlike a truncating remainder, the result is non-negative even when a
    is negative: reduce(-3, 7) == 4.

    Raises:
        InvalidModulus: If modulus <= 0
    """
    modulus = as_bigint(modulus)
    if modulus <= 0:
        raise InvalidModulus("Modulus must be positive")
    return as_bigint(a) % modulus


def mul_mod(a: IntLike, b: IntLike, modulus: IntLike) -> BigInt:
    """Compute (a * b) mod modulus, result in [0, modulus)."""
    return reduce(as_bigint(a) * as_bigint(b), modulus)


def gcd(a: IntLike, b: IntLike) -> BigInt:
    """
    Compute the greatest common divisor using Euclidean algorithm.

    Returns:
        Non-negative GCD of a and b
    """
    a, b = abs(as_bigint(a)), abs(as_bigint(b))
    while b:
        a, b = b, a % b
    return a


def lcm(a: IntLike, b: IntLike) -> BigInt:
    """Least common multiple (0 if either argument is 0)."""
    a, b = abs(as_bigint(a)), abs(as_bigint(b))
    if not a or not b:
        return ZERO
    return (a // gcd(a, b)) * b


def is_coprime(a: IntLike, b: IntLike) -> bool:
    return gcd(a, b) == 1


def extended_gcd(a: IntLike, b: IntLike) -> Tuple[BigInt, BigInt, BigInt]:
    """
    Extended Euclidean Algorithm (iterative).

    Finds integers x, y such that: a*x + b*y = gcd(a, b)

    Coefficients may be negative, so the bookkeeping uses signed
    subtraction.

    Args:
        a: First integer (non-negative)
        b: Second integer (non-negative)

    Returns:
        Tuple (gcd, x, y) where a*x + b*y = gcd
    """
    old_r, r = as_bigint(a), as_bigint(b)
    if old_r.is_negative or r.is_negative:
        raise ValueError("extended_gcd expects non-negative arguments")
    old_x, x = ONE, ZERO
    old_y, y = ZERO, ONE

    while r:
        q, remainder = divmod(old_r, r)
        old_r, r = r, remainder
        old_x, x = x, old_x.sub(q * x, signed=True)
        old_y, y = y, old_y.sub(q * y, signed=True)

    return old_r, old_x, old_y


def mod_inverse(a: IntLike, modulus: IntLike) -> BigInt:
    """
    Compute modular multiplicative inverse using Extended Euclidean Algorithm.

    Finds x such that (a * x) mod modulus = 1

    Args:
        a: The number to find inverse of (reduced first, may be negative)
        modulus: The modulus (must be > 1)

    Returns:
        Modular inverse of a mod modulus, in [1, modulus)

    Raises:
        InvalidModulus: If modulus <= 1
        NoInverseExists: If gcd(a, modulus) != 1
    """
    modulus = as_bigint(modulus)
    if modulus <= 1:
        raise InvalidModulus("Modulus must be greater than 1")

    g, x, _ = extended_gcd(reduce(a, modulus), modulus)
    if g != 1:
        raise NoInverseExists("Modular inverse does not exist (gcd(a, modulus) != 1)")

    return reduce(x, modulus)
