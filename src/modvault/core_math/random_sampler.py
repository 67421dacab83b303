"""
Random Integer Sampling

Implements uniform random BigInt generation on top of an injected
entropy source:
- random_bits: uniform in [0, 2^bits)
- random_below: uniform in [0, bound) by rejection sampling (no modulo bias)
- random_range: uniform in [low, high] inclusive
- random_odd_with_bit_length: prime candidates with exact bit length

Entropy sources:
- SystemEntropy: the OS CSPRNG via the secrets module (default)
- DeterministicEntropy: seeded SHA-256 counter stream, for tests only

Security Note:
    The entropy source is a capability passed to RandomSampler, never a
    hidden module-level generator. Substituting a non-cryptographic source
    (e.g. the random module) in production is a defect.
"""

import hashlib
import secrets
import threading
from typing import Optional, Protocol, Union

from ..errors import InvalidBound
from .bigint import BigInt, IntLike, ONE, ZERO, as_bigint


# ============================================================================
# Entropy Sources
# ============================================================================

class EntropySource(Protocol):
    """Anything that can hand out independent random bytes."""

    def random_bytes(self, count: int) -> bytes:
        ...


class SystemEntropy:
    """
    Cryptographically secure entropy from the operating system.

    secrets.token_bytes is safe to call from several threads at once;
    every call is an independent draw.
    """

    def random_bytes(self, count: int) -> bytes:
        if count < 0:
            raise ValueError("Byte count must be non-negative")
        return secrets.token_bytes(count)

    def __repr__(self) -> str:
        return "SystemEntropy()"


class DeterministicEntropy:
    """
    Reproducible byte stream: SHA-256(seed || counter) blocks.

    FOR TESTS AND REPRODUCIBLE VECTORS ONLY. Anyone who knows the seed can
    predict every output. Draws are serialized with a lock so concurrent
    callers never receive the same bytes.

    Example:
        >>> a = DeterministicEntropy(b"seed").random_bytes(8)
        >>> b = DeterministicEntropy(b"seed").random_bytes(8)
        >>> a == b
        True
    """

    def __init__(self, seed: Union[bytes, str, int]):
        if isinstance(seed, int):
            seed = str(seed).encode()
        elif isinstance(seed, str):
            seed = seed.encode()
        self._seed = bytes(seed)
        self._counter = 0
        self._buffer = b''
        self._lock = threading.Lock()

    def random_bytes(self, count: int) -> bytes:
        if count < 0:
            raise ValueError("Byte count must be non-negative")
        with self._lock:
            while len(self._buffer) < count:
                block = hashlib.sha256(
                    self._seed + self._counter.to_bytes(8, 'big')
                ).digest()
                self._counter += 1
                self._buffer += block
            out, self._buffer = self._buffer[:count], self._buffer[count:]
        return out

    def __repr__(self) -> str:
        return "DeterministicEntropy(<seeded>)"


# ============================================================================
# Random Sampler
# ============================================================================

class RandomSampler:
    """
    Uniform random BigInt sampler.

    Example:
        >>> sampler = RandomSampler()
        >>> 0 <= sampler.random_below(100) < 100
        True
    """

    def __init__(self, entropy: Optional[EntropySource] = None):
        """
        Initialize the sampler.

        Args:
            entropy: Source of random bytes (default: SystemEntropy)
        """
        self._entropy = entropy if entropy is not None else SystemEntropy()

    @property
    def entropy(self) -> EntropySource:
        return self._entropy

    def random_bits(self, bits: int) -> BigInt:
        """
        Uniform random integer in [0, 2^bits).

        Draws ceil(bits / 8) bytes and masks off the excess high bits.
        """
        if bits < 0:
            raise InvalidBound("Bit count must be non-negative")
        if bits == 0:
            return ZERO
        byte_count = (bits + 7) // 8
        data = bytearray(self._entropy.random_bytes(byte_count))
        if len(data) != byte_count:
            raise RuntimeError("Entropy source returned the wrong number of bytes")
        excess = byte_count * 8 - bits
        data[0] &= 0xFF >> excess  # big-endian: first byte holds the high bits
        return BigInt.from_bytes(bytes(data), 'big')

    def random_below(self, bound: IntLike) -> BigInt:
        """
        Uniform random integer in [0, bound).

        Rejection sampling: draw a candidate with the same bit length as
        bound and redraw while it is >= bound. Each draw succeeds with
        probability > 1/2.

        Raises:
            InvalidBound: If bound <= 0
        """
        bound = as_bigint(bound)
        if bound <= 0:
            raise InvalidBound("Bound must be positive")
        if bound == 1:
            return ZERO

        bits = bound.bit_length()
        while True:
            candidate = self.random_bits(bits)
            if candidate < bound:
                return candidate

    def random_range(self, low: IntLike, high_inclusive: IntLike) -> BigInt:
        """
        Uniform random integer in [low, high_inclusive].

        Raises:
            InvalidBound: If high_inclusive < low
        """
        low, high = as_bigint(low), as_bigint(high_inclusive)
        if high < low:
            raise InvalidBound("Range is empty (high < low)")
        span = high.sub(low, signed=True) + ONE
        return low + self.random_below(span)

    def random_odd_with_bit_length(self, bits: int) -> BigInt:
        """
        Random odd integer with exactly `bits` bits.

        The top bit is forced to 1 (exact bit length) and the bottom bit
        is forced to 1 (odd), as needed for prime candidates > 2.

        Raises:
            InvalidBound: If bits < 2
        """
        if bits < 2:
            raise InvalidBound("Bit length must be at least 2")
        candidate = self.random_bits(bits)
        return candidate.with_bit(bits - 1).with_bit(0)

    def __repr__(self) -> str:
        return f"RandomSampler({self._entropy!r})"
