"""
Shared fixtures and test doubles.
"""

from typing import Iterable, List

import pytest

from modvault.core_math.bigint import BigInt
from modvault.core_math.random_sampler import DeterministicEntropy, RandomSampler


class ScriptedEntropy:
    """Hands out a fixed byte script; fails once it runs dry."""

    def __init__(self, script: bytes):
        self._script = bytearray(script)
        self.requests: List[int] = []

    def random_bytes(self, count: int) -> bytes:
        self.requests.append(count)
        if count > len(self._script):
            raise AssertionError("Scripted entropy exhausted")
        out = bytes(self._script[:count])
        del self._script[:count]
        return out


class ZeroEntropy:
    """Always returns zero bytes."""

    def random_bytes(self, count: int) -> bytes:
        return bytes(count)


class ExplodingEntropy:
    """Fails on any draw; proves that a code path draws nothing."""

    def random_bytes(self, count: int) -> bytes:
        raise AssertionError("Entropy should not be consumed")


class ScriptedWitnessSampler(RandomSampler):
    """Returns witnesses from a list instead of sampling them."""

    def __init__(self, witnesses: Iterable[int]):
        super().__init__(ExplodingEntropy())
        self._witnesses = list(witnesses)
        self.calls = 0

    def random_range(self, low, high_inclusive):
        self.calls += 1
        return BigInt(self._witnesses.pop(0))


@pytest.fixture
def sampler() -> RandomSampler:
    """Reproducible sampler so failures can be replayed."""
    return RandomSampler(DeterministicEntropy(b"modvault-tests"))


@pytest.fixture
def system_sampler() -> RandomSampler:
    return RandomSampler()
