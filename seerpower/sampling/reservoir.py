"""
Reservoir sampling of population indices
"""

import numpy as np
from typing import Optional


class InsufficientPopulationError(ValueError):
    """Requested subsample is larger than the population it is drawn from."""

    def __init__(self, size: int, population_size: int):
        self.size = size
        self.population_size = population_size
        super().__init__(
            f"Cannot draw {size} samples without replacement from a population of {population_size}"
        )


def reservoir_sample(size: int,
                     population_size: int,
                     rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Draw a uniform random subset of population indices in a single pass

    The reservoir starts as ``0..size-1``. Each later index ``i`` replaces a
    random slot with probability ``size / (i + 1)``, so every index in
    ``[0, population_size)`` ends up selected with probability
    ``size / population_size``. Only the reservoir is kept in memory.

    Args:
        size: Number of indices to draw
        population_size: Number of individuals to draw from
        rng: Random generator (a fresh unseeded one if None)

    Returns:
        int64 array of ``size`` distinct indices, in reservoir order

    Raises:
        InsufficientPopulationError: If size exceeds population_size
        ValueError: If either argument is negative
    """
    size = int(size)
    population_size = int(population_size)
    if size < 0 or population_size < 0:
        raise ValueError(f"Sample and population sizes must be non-negative, got {size} and {population_size}")
    if size > population_size:
        raise InsufficientPopulationError(size, population_size)

    if rng is None:
        rng = np.random.default_rng()

    reservoir = np.arange(size, dtype=np.int64)
    if size == 0:
        return reservoir

    for i in range(size, population_size):
        j = rng.integers(0, i + 1)
        if j < size:
            reservoir[j] = i

    return reservoir
