"""
Coherent 2D noise sampled by the height synthesis stage.

Wraps OpenSimplex and remaps its output from roughly [-1, 1] to [0, 1].
The field has no mutable state once built, so samples depend only on the
seed and the coordinates.
"""

import numpy as np
from opensimplex import OpenSimplex

# OpenSimplex seeds its permutation table with int64 arithmetic
_SEED_MASK = 0x7FFFFFFF


class NoiseField:
    """Seeded, stateless scalar noise in [0, 1]."""

    def __init__(self, seed: int):
        self.seed = seed
        self._generator = OpenSimplex(seed=seed & _SEED_MASK)

    def sample(self, x: float, y: float) -> float:
        """Sample the field at a single (possibly fractional) coordinate."""
        value = (self._generator.noise2(x, y) + 1.0) * 0.5
        return float(min(max(value, 0.0), 1.0))

    def sample_grid(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """
        Sample the field on the cartesian product of xs and ys.

        Args:
            xs: 1D array of x coordinates
            ys: 1D array of y coordinates

        Returns:
            Array of shape (len(ys), len(xs)) indexed [y, x]
        """
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        values = (self._generator.noise2array(xs, ys) + 1.0) * 0.5
        return np.clip(values, 0.0, 1.0)
