"""Seeded random stream used by every generation step.

The stream is a mulberry32 generator: a single 32-bit state advanced by a
fixed increment and mixed with two xorshift/multiply rounds. The sequence is
a pure function of the seed, so the same seed always rebuilds the same galaxy.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence, TypeVar

from ..constants import DEFAULT_SEED

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MASK_32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_NORMALIZER = 4294967296.0  # 2**32


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK_32


def normalize_seed(value: object) -> int:
    """Coerce user input into a usable seed, falling back to the default."""
    seed: int | None = None
    if isinstance(value, bool) or value is None:
        seed = None
    elif isinstance(value, int):
        seed = value
    elif isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            seed = int(value)
    elif isinstance(value, str):
        try:
            seed = int(value.strip())
        except ValueError:
            seed = None

    if seed is None:
        logger.warning("invalid galaxy seed %r, using default %d", value, DEFAULT_SEED)
        return DEFAULT_SEED
    return seed


class SeededStream:
    """Deterministic pseudo-random sequence derived from an integer seed."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._state = seed & _MASK_32
        self.draws = 0

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state + _INCREMENT) & _MASK_32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK_32
        self.draws += 1
        return ((t ^ (t >> 14)) & _MASK_32) / _NORMALIZER

    # Each helper below consumes exactly one draw.

    def uniform(self, low: float, high: float) -> float:
        return low + self.next() * (high - low)

    def randint(self, low: int, high: int) -> int:
        """Integer in [low, high], both inclusive."""
        return low + int(self.next() * (high - low + 1))

    def choice(self, seq: Sequence[T]) -> T:
        return seq[int(self.next() * len(seq))]

    def chance(self, probability: float) -> bool:
        return self.next() < probability
