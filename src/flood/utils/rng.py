"""Deterministic SplitMix64 random stream.

Board colours, obstacle placement and countdown scrambles all draw from this
generator so that a seed reproduces the same board on every machine. It
subclasses :class:`random.Random` so it can be handed to any code expecting a
``rng`` argument, but the helpers that matter for reproducibility
(:meth:`randbelow`, :meth:`choice`, :meth:`shuffle`) are implemented here and
never defer to interpreter internals.
"""
from __future__ import annotations

import random
from typing import MutableSequence, Sequence, TypeVar

MASK64 = (1 << 64) - 1
GOLDEN_GAMMA = 0x9E3779B97F4A7C15

T = TypeVar("T")


class SplitMix64(random.Random):
    """64-bit SplitMix generator; a pure function of seed and call count."""

    def __init__(self, seed: int = 0) -> None:
        self._state = 0
        super().__init__(seed)

    def seed(self, a=0, version=2) -> None:
        if a is None:
            raise ValueError("SplitMix64 requires an explicit integer seed")
        self._state = int(a) & MASK64

    def getstate(self) -> int:
        return self._state

    def setstate(self, state: int) -> None:
        self._state = int(state) & MASK64

    def next_u64(self) -> int:
        self._state = (self._state + GOLDEN_GAMMA) & MASK64
        z = self._state
        z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK64
        z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK64
        return z ^ (z >> 31)

    def getrandbits(self, k: int) -> int:
        if k < 0:
            raise ValueError("number of bits must be non-negative")
        if k == 0:
            return 0
        value = 0
        produced = 0
        while produced < k:
            value = (value << 64) | self.next_u64()
            produced += 64
        return value >> (produced - k)

    def random(self) -> float:
        return (self.next_u64() >> 11) * (1.0 / (1 << 53))

    def randbelow(self, n: int) -> int:
        """Uniform integer in ``[0, n)`` using multiply-high rejection."""
        if n <= 0:
            raise ValueError("upper bound must be positive")
        product = self.next_u64() * n
        low = product & MASK64
        if low < n:
            threshold = (-n & MASK64) % n
            while low < threshold:
                product = self.next_u64() * n
                low = product & MASK64
        return product >> 64

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("cannot choose from an empty sequence")
        return seq[self.randbelow(len(seq))]

    def shuffle(self, x: MutableSequence) -> None:
        """In-place Fisher-Yates, walking from the back with ``next % (i + 1)``."""
        for i in range(len(x) - 1, 0, -1):
            j = self.next_u64() % (i + 1)
            x[i], x[j] = x[j], x[i]
