"""
Arbitrary-Precision Integer Implementation

Implements BigInt, an immutable arbitrary-precision integer built from
fixed-width digits:
- Digits are base 2^32, least significant digit first
- Zero is the single digit (0,); no redundant high zero digits
- A sign flag allows signed values where the algorithms need them

Arithmetic:
- Addition / subtraction (unsigned subtraction raises Underflow)
- Schoolbook O(n^2) multiplication
- Long division (Knuth, TAOCP Vol. 2, Algorithm D)
- Shifts, bit tests, parity

Conversions:
- Native int, decimal / hex strings, big / little endian bytes

Note: Digit-level work is done on small Python ints (at most 64 bits wide,
      the size of a double-width product). Whole-number arithmetic never
      delegates to Python's native big integers.
"""

import functools
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ..errors import DivisionByZero, Underflow


# ============================================================================
# Constants
# ============================================================================

DIGIT_BITS = 32
DIGIT_BASE = 1 << DIGIT_BITS
DIGIT_MASK = DIGIT_BASE - 1
DIGIT_BYTES = DIGIT_BITS // 8

DECIMAL_CHUNK = 10 ** 9  # Largest power of ten below 2^32
DECIMAL_CHUNK_WIDTH = 9
HEX_CHUNK_WIDTH = DIGIT_BITS // 4

_HEX_CHARS = '0123456789abcdef'

Magnitude = Tuple[int, ...]
IntLike = Union['BigInt', int]


# ============================================================================
# Magnitude Helpers (unsigned digit sequences)
# ============================================================================

def _normalize(digits: Sequence[int]) -> Magnitude:
    """Strip high zero digits, keeping a single zero digit for zero."""
    end = len(digits)
    while end > 1 and digits[end - 1] == 0:
        end -= 1
    if end == 0:
        return (0,)
    return tuple(digits[:end])


def _is_zero_mag(a: Magnitude) -> bool:
    return len(a) == 1 and a[0] == 0


def _cmp_mag(a: Magnitude, b: Magnitude) -> int:
    """Compare two normalized magnitudes. Returns -1, 0 or 1."""
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    for i in range(len(a) - 1, -1, -1):
        if a[i] != b[i]:
            return -1 if a[i] < b[i] else 1
    return 0


def _add_mag(a: Magnitude, b: Magnitude) -> Magnitude:
    if len(a) < len(b):
        a, b = b, a
    result: List[int] = []
    carry = 0
    for i in range(len(a)):
        total = a[i] + (b[i] if i < len(b) else 0) + carry
        result.append(total & DIGIT_MASK)
        carry = total >> DIGIT_BITS
    if carry:
        result.append(carry)
    return _normalize(result)


def _sub_mag(a: Magnitude, b: Magnitude) -> Magnitude:
    """Compute a - b for magnitudes with a >= b."""
    result: List[int] = []
    borrow = 0
    for i in range(len(a)):
        diff = a[i] - (b[i] if i < len(b) else 0) - borrow
        if diff < 0:
            diff += DIGIT_BASE
            borrow = 1
        else:
            borrow = 0
        result.append(diff)
    return _normalize(result)


def _mul_schoolbook(a: Magnitude, b: Magnitude) -> Magnitude:
    """
    Schoolbook multiplication.

    Time complexity: O(len(a) * len(b)) digit multiplications
    """
    if _is_zero_mag(a) or _is_zero_mag(b):
        return (0,)
    result = [0] * (len(a) + len(b))
    for i, a_digit in enumerate(a):
        if a_digit == 0:
            continue
        carry = 0
        for j, b_digit in enumerate(b):
            total = result[i + j] + a_digit * b_digit + carry
            result[i + j] = total & DIGIT_MASK
            carry = total >> DIGIT_BITS
        result[i + len(b)] = carry
    return _normalize(result)


# Single hook for magnitude multiplication; a sub-quadratic algorithm
# (e.g. Karatsuba) can be swapped in here.
_mul_magnitudes = _mul_schoolbook


def _mul_small(a: Magnitude, factor: int, addend: int = 0) -> Magnitude:
    """Compute a * factor + addend for a single-digit factor and addend."""
    result: List[int] = []
    carry = addend
    for digit in a:
        total = digit * factor + carry
        result.append(total & DIGIT_MASK)
        carry = total >> DIGIT_BITS
    while carry:
        result.append(carry & DIGIT_MASK)
        carry >>= DIGIT_BITS
    return _normalize(result)


def _divmod_small(a: Magnitude, divisor: int) -> Tuple[Magnitude, int]:
    """Divide a magnitude by a single non-zero digit."""
    quotient = [0] * len(a)
    remainder = 0
    for i in range(len(a) - 1, -1, -1):
        current = (remainder << DIGIT_BITS) | a[i]
        quotient[i], remainder = divmod(current, divisor)
    return _normalize(quotient), remainder


def _shl_mag(a: Magnitude, bits: int) -> Magnitude:
    if _is_zero_mag(a) or bits == 0:
        return a
    digit_shift, bit_shift = divmod(bits, DIGIT_BITS)
    if bit_shift == 0:
        return (0,) * digit_shift + a
    result = [0] * digit_shift
    carry = 0
    for digit in a:
        shifted = (digit << bit_shift) | carry
        result.append(shifted & DIGIT_MASK)
        carry = shifted >> DIGIT_BITS
    if carry:
        result.append(carry)
    return _normalize(result)


def _shr_mag(a: Magnitude, bits: int) -> Magnitude:
    if bits == 0:
        return a
    digit_shift, bit_shift = divmod(bits, DIGIT_BITS)
    if digit_shift >= len(a):
        return (0,)
    a = a[digit_shift:]
    if bit_shift == 0:
        return _normalize(a)
    result = []
    for i in range(len(a)):
        high = a[i + 1] if i + 1 < len(a) else 0
        result.append(((a[i] >> bit_shift) | (high << (DIGIT_BITS - bit_shift))) & DIGIT_MASK)
    return _normalize(result)


def _divmod_mag(u: Magnitude, v: Magnitude) -> Tuple[Magnitude, Magnitude]:
    """
    Long division of magnitudes (Knuth Algorithm D).

    Returns (quotient, remainder) with u = quotient*v + remainder and
    0 <= remainder < v. The divisor must be non-zero.
    """
    if _cmp_mag(u, v) < 0:
        return (0,), u
    if len(v) == 1:
        quotient, remainder = _divmod_small(u, v[0])
        return quotient, (remainder,)

    # D1: normalize so the divisor's top digit has its high bit set
    shift = DIGIT_BITS - v[-1].bit_length()
    vn = list(_shl_mag(v, shift))
    un = list(_shl_mag(u, shift))
    if len(un) == len(u):
        un.append(0)

    n = len(vn)
    m = len(un) - n - 1
    v_top = vn[n - 1]
    v_next = vn[n - 2]
    quotient = [0] * (m + 1)

    for j in range(m, -1, -1):
        # D3: estimate the quotient digit
        numerator = (un[j + n] << DIGIT_BITS) | un[j + n - 1]
        q_hat, r_hat = divmod(numerator, v_top)
        while q_hat >= DIGIT_BASE or q_hat * v_next > ((r_hat << DIGIT_BITS) | un[j + n - 2]):
            q_hat -= 1
            r_hat += v_top
            if r_hat >= DIGIT_BASE:
                break

        # D4: multiply and subtract
        borrow = 0
        carry = 0
        for i in range(n):
            product = q_hat * vn[i] + carry
            carry = product >> DIGIT_BITS
            diff = un[i + j] - (product & DIGIT_MASK) - borrow
            un[i + j] = diff & DIGIT_MASK
            borrow = 1 if diff < 0 else 0
        diff = un[j + n] - carry - borrow
        un[j + n] = diff & DIGIT_MASK

        # D5/D6: estimate was one too large, add the divisor back
        if diff < 0:
            q_hat -= 1
            carry = 0
            for i in range(n):
                total = un[i + j] + vn[i] + carry
                un[i + j] = total & DIGIT_MASK
                carry = total >> DIGIT_BITS
            un[j + n] = (un[j + n] + carry) & DIGIT_MASK

        quotient[j] = q_hat

    # D8: unnormalize the remainder
    remainder = _shr_mag(_normalize(un[:n]), shift)
    return _normalize(quotient), remainder


# ============================================================================
# BigInt
# ============================================================================

@functools.total_ordering
class BigInt:
    """
    Immutable arbitrary-precision integer.

    Values behave like Python ints for the operations below, and accept
    plain ints as the other operand. Subtraction of two non-negative values
    is unsigned by default and raises Underflow instead of going negative;
    use sub(other, signed=True) to opt into a signed result.

    Example:
        >>> a = BigInt.from_str("123456789012345678901234567890")
        >>> b = BigInt(987654321)
        >>> q, r = divmod(a, b)
        >>> q * b + r == a
        True
    """

    __slots__ = ('_digits', '_negative')

    def __init__(self, value: Union['BigInt', int, str] = 0):
        """
        Initialize from an int, another BigInt, or a string.

        Strings are decimal, or hexadecimal with a 0x prefix.

        Raises:
            TypeError: For unsupported value types
            ValueError: For malformed strings
        """
        if isinstance(value, BigInt):
            digits, negative = value._digits, value._negative
        elif isinstance(value, int):
            digits, negative = _int_to_mag(value)
        elif isinstance(value, str):
            parsed = BigInt.from_str(value, 16 if _has_hex_prefix(value) else 10)
            digits, negative = parsed._digits, parsed._negative
        else:
            raise TypeError(f"Cannot build BigInt from {type(value).__name__}")
        object.__setattr__(self, '_digits', digits)
        object.__setattr__(self, '_negative', negative)

    @classmethod
    def _make(cls, digits: Magnitude, negative: bool = False) -> 'BigInt':
        """Build from an already normalized magnitude."""
        obj = object.__new__(cls)
        object.__setattr__(obj, '_digits', digits)
        object.__setattr__(obj, '_negative', negative and not _is_zero_mag(digits))
        return obj

    def __setattr__(self, name, value):
        raise AttributeError("BigInt is immutable")

    def __delattr__(self, name):
        raise AttributeError("BigInt is immutable")

    def __reduce__(self):
        # copy / pickle support without going through __setattr__
        return (BigInt._make, (self._digits, self._negative))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_int(cls, value: int) -> 'BigInt':
        """Create from a native int."""
        digits, negative = _int_to_mag(value)
        return cls._make(digits, negative)

    @classmethod
    def from_digits(cls, digits: Iterable[int], negative: bool = False) -> 'BigInt':
        """
        Create from base 2^32 digits, least significant first.

        Raises:
            ValueError: If a digit is outside [0, 2^32)
        """
        digits = list(digits)
        for digit in digits:
            if not 0 <= digit < DIGIT_BASE:
                raise ValueError(f"Digit {digit} out of range [0, 2^{DIGIT_BITS})")
        return cls._make(_normalize(digits), negative)

    @classmethod
    def from_str(cls, text: str, base: int = 10) -> 'BigInt':
        """
        Parse a decimal (base 10) or hexadecimal (base 16) string.

        Accepts an optional leading sign, a 0x prefix for base 16, and
        underscores between digits.

        Raises:
            ValueError: For an unsupported base or malformed text
        """
        if base not in (10, 16):
            raise ValueError("Base must be 10 or 16")

        body = text.strip().replace('_', '')
        negative = False
        if body[:1] in ('-', '+'):
            negative = body[0] == '-'
            body = body[1:]
        if base == 16 and body[:2].lower() == '0x':
            body = body[2:]
        if not body:
            raise ValueError(f"Invalid BigInt literal: {text!r}")

        body = body.lower()
        allowed = _HEX_CHARS if base == 16 else _HEX_CHARS[:10]
        if any(ch not in allowed for ch in body):
            raise ValueError(f"Invalid base-{base} BigInt literal: {text!r}")

        if base == 16:
            digits = []
            for end in range(len(body), 0, -HEX_CHUNK_WIDTH):
                chunk = body[max(0, end - HEX_CHUNK_WIDTH):end]
                value = 0
                for ch in chunk:
                    value = (value << 4) | _HEX_CHARS.index(ch)
                digits.append(value)
            return cls._make(_normalize(digits), negative)

        magnitude: Magnitude = (0,)
        head = len(body) % DECIMAL_CHUNK_WIDTH or DECIMAL_CHUNK_WIDTH
        chunks = [body[:head]] + [
            body[i:i + DECIMAL_CHUNK_WIDTH]
            for i in range(head, len(body), DECIMAL_CHUNK_WIDTH)
        ]
        for index, chunk in enumerate(chunks):
            scale = 10 ** len(chunk) if index == 0 else DECIMAL_CHUNK
            value = 0
            for ch in chunk:
                value = value * 10 + (ord(ch) - ord('0'))
            magnitude = _mul_small(magnitude, scale, value)
        return cls._make(magnitude, negative)

    @classmethod
    def from_bytes(cls, data: bytes, byteorder: str = 'big') -> 'BigInt':
        """
        Create a non-negative BigInt from raw bytes.

        Args:
            data: Encoded integer
            byteorder: 'big' or 'little'
        """
        if byteorder not in ('big', 'little'):
            raise ValueError("byteorder must be 'big' or 'little'")
        little = bytes(data) if byteorder == 'little' else bytes(data)[::-1]
        digits = [
            int.from_bytes(little[i:i + DIGIT_BYTES], 'little')
            for i in range(0, len(little), DIGIT_BYTES)
        ]
        return cls._make(_normalize(digits))

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_int(self) -> int:
        """Convert to a native int."""
        value = 0
        for digit in reversed(self._digits):
            value = (value << DIGIT_BITS) | digit
        return -value if self._negative else value

    def __int__(self) -> int:
        return self.to_int()

    def to_bytes(self, length: Optional[int] = None, byteorder: str = 'big') -> bytes:
        """
        Encode as unsigned bytes.

        Args:
            length: Fixed output length, or None for the minimal length
                    (at least one byte)
            byteorder: 'big' or 'little'

        Raises:
            Underflow: If the value is negative
            OverflowError: If the value does not fit in length bytes
        """
        if byteorder not in ('big', 'little'):
            raise ValueError("byteorder must be 'big' or 'little'")
        if self._negative:
            raise Underflow("Cannot encode a negative BigInt as unsigned bytes")

        little = b''.join(digit.to_bytes(DIGIT_BYTES, 'little') for digit in self._digits)
        little = little.rstrip(b'\x00') or b'\x00'
        if length is not None:
            if len(little) > length and self:
                raise OverflowError(f"BigInt too big to encode in {length} bytes")
            little = little[:length].ljust(length, b'\x00')
        return little if byteorder == 'little' else little[::-1]

    def to_str(self, base: int = 10) -> str:
        """
        Encode as a decimal (base 10) or lowercase hexadecimal (base 16)
        string, without any prefix.
        """
        if base not in (10, 16):
            raise ValueError("Base must be 10 or 16")
        sign = '-' if self._negative else ''

        if base == 16:
            top = self._digits[-1]
            text = format(top, 'x') + ''.join(
                format(digit, '08x') for digit in reversed(self._digits[:-1])
            )
            return sign + text

        chunks = []
        magnitude = self._digits
        while not _is_zero_mag(magnitude):
            magnitude, chunk = _divmod_small(magnitude, DECIMAL_CHUNK)
            chunks.append(chunk)
        if not chunks:
            return '0'
        text = str(chunks[-1]) + ''.join(
            str(chunk).zfill(DECIMAL_CHUNK_WIDTH) for chunk in reversed(chunks[:-1])
        )
        return sign + text

    def hex(self) -> str:
        """Hex string with a 0x prefix."""
        if self._negative:
            return '-0x' + abs(self).to_str(16)
        return '0x' + self.to_str(16)

    def __str__(self) -> str:
        return self.to_str(10)

    def __repr__(self) -> str:
        return f"BigInt({self.to_str(10)})"

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def digits(self) -> Magnitude:
        """Base 2^32 digits of the magnitude, least significant first."""
        return self._digits

    @property
    def is_negative(self) -> bool:
        return self._negative

    def is_zero(self) -> bool:
        return _is_zero_mag(self._digits)

    def is_even(self) -> bool:
        return self._digits[0] & 1 == 0

    def is_odd(self) -> bool:
        return self._digits[0] & 1 == 1

    def __bool__(self) -> bool:
        return not _is_zero_mag(self._digits)

    def bit_length(self) -> int:
        """Number of bits in the magnitude (0 for zero)."""
        if self.is_zero():
            return 0
        return (len(self._digits) - 1) * DIGIT_BITS + self._digits[-1].bit_length()

    def test_bit(self, index: int) -> bool:
        """Return True if bit `index` of a non-negative value is set."""
        if index < 0:
            raise ValueError("Bit index must be non-negative")
        if self._negative:
            raise ValueError("Bit test is defined for non-negative values only")
        digit_index, bit_index = divmod(index, DIGIT_BITS)
        if digit_index >= len(self._digits):
            return False
        return (self._digits[digit_index] >> bit_index) & 1 == 1

    def with_bit(self, index: int) -> 'BigInt':
        """Return a copy of a non-negative value with bit `index` set."""
        if index < 0:
            raise ValueError("Bit index must be non-negative")
        if self._negative:
            raise ValueError("Bit set is defined for non-negative values only")
        digit_index, bit_index = divmod(index, DIGIT_BITS)
        digits = list(self._digits) + [0] * max(0, digit_index + 1 - len(self._digits))
        digits[digit_index] |= 1 << bit_index
        return BigInt._make(_normalize(digits))

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _plus(self, other: 'BigInt') -> 'BigInt':
        """Signed addition without any underflow check."""
        if self._negative == other._negative:
            return BigInt._make(_add_mag(self._digits, other._digits), self._negative)
        if _cmp_mag(self._digits, other._digits) >= 0:
            return BigInt._make(_sub_mag(self._digits, other._digits), self._negative)
        return BigInt._make(_sub_mag(other._digits, self._digits), other._negative)

    def __add__(self, other: IntLike) -> 'BigInt':
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._plus(other)

    __radd__ = __add__

    def sub(self, other: IntLike, signed: bool = False) -> 'BigInt':
        """
        Subtract other from self.

        Args:
            other: Subtrahend
            signed: Allow a negative result for non-negative operands

        Raises:
            Underflow: If both operands are non-negative, the result would
                       be negative and signed is False
        """
        other = _coerce(other)
        if other is NotImplemented:
            raise TypeError("Unsupported operand for BigInt.sub")
        result = self._plus(-other)
        if result._negative and not signed and not self._negative and not other._negative:
            raise Underflow("Unsigned subtraction would produce a negative value")
        return result

    def __sub__(self, other: IntLike) -> 'BigInt':
        if _coerce(other) is NotImplemented:
            return NotImplemented
        return self.sub(other)

    def __rsub__(self, other: IntLike) -> 'BigInt':
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other.sub(self)

    def __neg__(self) -> 'BigInt':
        return BigInt._make(self._digits, not self._negative)

    def __pos__(self) -> 'BigInt':
        return self

    def __abs__(self) -> 'BigInt':
        return BigInt._make(self._digits) if self._negative else self

    def __mul__(self, other: IntLike) -> 'BigInt':
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return BigInt._make(
            _mul_magnitudes(self._digits, other._digits),
            self._negative != other._negative
        )

    __rmul__ = __mul__

    def __divmod__(self, other: IntLike) -> Tuple['BigInt', 'BigInt']:
        """
        Floor division with remainder.

        Satisfies self == q*other + r, with 0 <= r < other for a positive
        divisor (the remainder takes the divisor's sign in general).

        Raises:
            DivisionByZero: If other is zero
        """
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        if other.is_zero():
            raise DivisionByZero("BigInt division by zero")

        q_mag, r_mag = _divmod_mag(self._digits, other._digits)
        quotient = BigInt._make(q_mag, self._negative != other._negative)
        remainder = BigInt._make(r_mag, self._negative)
        if remainder and self._negative != other._negative:
            quotient = quotient._plus(BigInt._make((1,), True))
            remainder = remainder._plus(other)
        return quotient, remainder

    def __rdivmod__(self, other: IntLike) -> Tuple['BigInt', 'BigInt']:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return divmod(other, self)

    def __floordiv__(self, other: IntLike) -> 'BigInt':
        result = self.__divmod__(other)
        if result is NotImplemented:
            return NotImplemented
        return result[0]

    def __rfloordiv__(self, other: IntLike) -> 'BigInt':
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return divmod(other, self)[0]

    def __mod__(self, other: IntLike) -> 'BigInt':
        result = self.__divmod__(other)
        if result is NotImplemented:
            return NotImplemented
        return result[1]

    def __rmod__(self, other: IntLike) -> 'BigInt':
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return divmod(other, self)[1]

    # ------------------------------------------------------------------
    # Shifts
    # ------------------------------------------------------------------

    def __lshift__(self, bits: int) -> 'BigInt':
        if not isinstance(bits, int):
            return NotImplemented
        if bits < 0:
            raise ValueError("Negative shift count")
        return BigInt._make(_shl_mag(self._digits, bits), self._negative)

    def __rshift__(self, bits: int) -> 'BigInt':
        if not isinstance(bits, int):
            return NotImplemented
        if bits < 0:
            raise ValueError("Negative shift count")
        if self._negative:
            # Floor semantics, as for native ints
            return divmod(self, BigInt._make(_shl_mag((1,), bits)))[0]
        return BigInt._make(_shr_mag(self._digits, bits))

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def _compare(self, other: 'BigInt') -> int:
        if self._negative != other._negative:
            return -1 if self._negative else 1
        result = _cmp_mag(self._digits, other._digits)
        return -result if self._negative else result

    def __eq__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._negative == other._negative and self._digits == other._digits

    def __lt__(self, other) -> bool:
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._compare(other) < 0

    def __hash__(self) -> int:
        # Consistent with equality against native ints
        return hash(self.to_int())


# ============================================================================
# Module Helpers
# ============================================================================

def _int_to_mag(value: int) -> Tuple[Magnitude, bool]:
    negative = value < 0
    value = -value if negative else value
    digits = []
    while value:
        digits.append(value & DIGIT_MASK)
        value >>= DIGIT_BITS
    return _normalize(digits), negative


def _has_hex_prefix(text: str) -> bool:
    return text.strip().lstrip('+-')[:2].lower() == '0x'


def _coerce(value):
    """Convert an int operand to BigInt; NotImplemented for other types."""
    if isinstance(value, BigInt):
        return value
    if isinstance(value, int):
        return BigInt.from_int(value)
    return NotImplemented


def as_bigint(value: IntLike) -> BigInt:
    """
    Convert an int or BigInt argument to BigInt.

    Raises:
        TypeError: For any other type
    """
    result = _coerce(value)
    if result is NotImplemented:
        raise TypeError(f"Expected BigInt or int, got {type(value).__name__}")
    return result


ZERO = BigInt._make((0,))
ONE = BigInt._make((1,))
TWO = BigInt._make((2,))
