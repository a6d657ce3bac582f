"""Steepness estimation from a height grid."""

import numpy as np

from .errors import InvalidParameter
from .heightmap_generator import HeightGrid
from .params import TerrainExtent


class SlopeEstimator:
    """
    Derives per-cell steepness normalized to [0, 1] (0 to 90 degrees).

    Gradients use central differences inside the grid and one-sided
    differences on the border, scaled by the physical cell spacing and the
    terrain's maximum height.
    """

    def __init__(self, extent: TerrainExtent):
        extent.validate()
        self.extent = extent

    def gradient(self, heights: HeightGrid):
        """Return (d/dz, d/dx) of world-space height."""
        if heights.resolution < 2:
            raise InvalidParameter("heightmap_resolution", heights.resolution, "must be >= 2")
        spacing_x, spacing_z = self.extent.cell_spacing(heights.resolution)
        world = heights.values * self.extent.max_height
        grad_z, grad_x = np.gradient(world, spacing_z, spacing_x)
        return grad_z, grad_x

    def estimate(self, heights: HeightGrid) -> np.ndarray:
        """
        Compute the normalized slope grid.

        Args:
            heights: Normalized height grid

        Returns:
            Read-only array with the grid's shape, values in [0, 1]
        """
        grad_z, grad_x = self.gradient(heights)
        angle = np.degrees(np.arctan(np.hypot(grad_x, grad_z)))
        slopes = np.clip(angle / 90.0, 0.0, 1.0)
        slopes.setflags(write=False)
        return slopes
