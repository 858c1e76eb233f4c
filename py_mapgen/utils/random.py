"""
Random number generation utilities.

Each generation request owns its own ``SeededRandom``; there is no
module-level generator so concurrent requests can never share state.
Python's random and NumPy's random should not be used in generator code.
"""

import time
from typing import Optional, Union

from ..core.lcg_prng import SeededRandom


def resolve_seed(seed: Optional[Union[int, str]] = None) -> int:
    """
    Turn a user-supplied seed into the integer the PRNG expects.

    Args:
        seed: Integer seed, numeric string, or None for a time-based seed

    Returns:
        Integer seed
    """
    if seed is None:
        return int(time.time() * 1000)
    if isinstance(seed, str):
        seed = seed.strip()
        try:
            return int(seed)
        except ValueError:
            # Non-numeric seeds hash to a stable integer
            value = 0
            for char in seed:
                value = (value * 31 + ord(char)) & 0x7FFFFFFF
            return value
    return int(seed)


def create_prng(seed: Optional[Union[int, str]] = None) -> SeededRandom:
    """
    Create a fresh PRNG for one generation request.

    Returns:
        SeededRandom instance
    """
    return SeededRandom(resolve_seed(seed))
