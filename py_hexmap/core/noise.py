"""
Seeded coherent noise for the threshold-based painters.

Each stage builds its own NoiseSource from its own seed. The OpenSimplex
permutation is seeded from the stage seed and the sampling window is moved by
an offset drawn from the stage PRNG, mirroring the offset-plus-scale sampling
every painter uses.
"""

from typing import Optional

import numpy as np
from opensimplex import OpenSimplex

from .alea_prng import AleaPRNG

# Largest float strictly below 1.0; keeps samples in [0, 1)
NOISE_MAX = float(np.nextafter(1.0, 0.0))

DEFAULT_OFFSET_RANGE = 10000.0


class NoiseSource:
    """
    Deterministic 2D noise in [0, 1).

    Args:
        seed: Stage seed (must already be resolved, i.e. non-zero)
        scale: Multiplier applied to coordinates; smaller means smoother
        prng: Stage PRNG to draw the window offset from. If omitted, a fresh
            AleaPRNG seeded with ``seed`` is used.
        offset_low, offset_high: Range of the random window offset
    """

    def __init__(
        self,
        seed: int,
        scale: float,
        prng: Optional[AleaPRNG] = None,
        offset_low: float = -DEFAULT_OFFSET_RANGE,
        offset_high: float = DEFAULT_OFFSET_RANGE,
    ):
        self.seed = seed
        self.scale = scale
        prng = prng if prng is not None else AleaPRNG(seed)
        self.offset_x = prng.uniform(offset_low, offset_high)
        self.offset_y = prng.uniform(offset_low, offset_high)
        self._simplex = OpenSimplex(seed=int(seed))

    def sample(self, col: int, row: int) -> float:
        """Noise value at an integer cell coordinate."""
        raw = self._simplex.noise2(
            (col + self.offset_x) * self.scale, (row + self.offset_y) * self.scale
        )
        value = (raw + 1.0) * 0.5
        if value < 0.0:
            return 0.0
        if value > NOISE_MAX:
            return NOISE_MAX
        return value

    def sample_grid(self, width: int, height: int) -> np.ndarray:
        """Noise for every cell as a (height, width) array."""
        values = np.empty((height, width), dtype=np.float64)
        for row in range(height):
            for col in range(width):
                values[row, col] = self.sample(col, row)
        return values
