"""
Seeded linear-congruential PRNG used by every map generator.

The recurrence is part of the reproducibility contract: saved maps are
re-created bit-for-bit from their seed, so the constants below must never
change.
"""

import math
from typing import Sequence, TypeVar

T = TypeVar("T")

# Shared with every previously saved map
MULTIPLIER = 9301
INCREMENT = 49297
MODULUS = 233280


class SeededRandom:
    """
    Deterministic random source.

    Every call to ``random()`` advances the state with
    ``seed = (seed * 9301 + 49297) % 233280`` and returns ``seed / 233280``.
    All other helpers are built on ``random()`` so they consume exactly one
    draw each.
    """

    def __init__(self, seed: int):
        """Initialize with an integer seed."""
        self.initial_seed = int(seed)
        self.seed = int(seed)
        # Add call counter
        self.call_count = 0

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        # Python's modulo is non-negative for a positive modulus
        self.seed = (self.seed * MULTIPLIER + INCREMENT) % MODULUS
        return self.seed / MODULUS

    def next_int(self, min_value: int, max_value: int) -> int:
        """Random integer in [min_value, max_value], both inclusive."""
        return math.floor(self.random() * (max_value - min_value + 1)) + min_value

    def next_float(self, min_value: float, max_value: float) -> float:
        """Random float in [min_value, max_value)."""
        return self.random() * (max_value - min_value) + min_value

    def choice(self, items: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence."""
        if not items:
            raise IndexError("Cannot choose from an empty sequence")
        return items[self.next_int(0, len(items) - 1)]

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.initial_seed}, calls={self.call_count})"
