"""
Error Types

Every failure in modvault is reported as a typed exception. Each kind also
derives from the closest builtin exception so callers catching ValueError,
ZeroDivisionError, ArithmeticError or RuntimeError keep working.

Error messages never include secret values (private exponents, primes,
shared secrets).
"""


class ModVaultError(Exception):
    """Base class for all modvault errors."""
    pass


class InvalidModulus(ModVaultError, ValueError):
    """Raised when a modulus is out of range (e.g. modulus <= 1)."""
    pass


class DivisionByZero(ModVaultError, ZeroDivisionError):
    """Raised when dividing by a zero BigInt."""
    pass


class Underflow(ModVaultError, ArithmeticError):
    """Raised when an unsigned operation would produce a negative value."""
    pass


class NoInverseExists(ModVaultError, ValueError):
    """Raised when gcd(a, modulus) != 1."""
    pass


class InvalidBound(ModVaultError, ValueError):
    """Raised when a sampling bound or bit length is out of range."""
    pass


class InvalidParameters(ModVaultError, ValueError):
    """Raised for unusable Diffie-Hellman (or RSA prime) parameters."""
    pass


class InvalidExponent(ModVaultError, ValueError):
    """Raised when an RSA public exponent is not usable with a modulus."""
    pass


class MessageTooLarge(ModVaultError, ValueError):
    """Raised when an RSA message or ciphertext is outside [0, n)."""
    pass


class PrimeGenerationExhausted(ModVaultError, RuntimeError):
    """Raised when a prime search runs out of its attempt budget."""
    pass


__all__ = [
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
]
