"""Deterministic, platform-independent pseudo-random numbers.

``Mulberry32`` keeps a single 32-bit state and mixes it with integer
multiply/xor/shift steps, so a given seed yields the same stream on every
platform and Python version.  Use it wherever generated geometry must be
reproducible; :mod:`random` makes no such promise across versions.
"""

from __future__ import annotations

_MASK = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply (low 32 bits of the product)."""

    return (a * b) & _MASK


class Mulberry32:

    __slots__ = ('_state',)

    def __init__(self, seed: int = 0):
        self._state = int(seed) & _MASK

    @property
    def state(self) -> int:
        return self._state

    def next_uint32(self) -> int:
        self._state = (self._state + _INCREMENT) & _MASK
        s = self._state
        t = _imul(s ^ (s >> 15), s | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        return (t ^ (t >> 14)) & _MASK

    def random(self) -> float:
        """Return the next float in ``[0, 1)``."""

        return self.next_uint32() / 4294967296.0

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def __call__(self) -> float:
        return self.random()


__all__ = ['Mulberry32']
