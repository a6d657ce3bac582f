"""Tests for slope estimation."""

import math

import pytest
import numpy as np
from py_terrain.core.errors import InvalidParameter
from py_terrain.core.heightmap_generator import HeightGrid
from py_terrain.core.params import TerrainExtent
from py_terrain.core.slope import SlopeEstimator


def ramp_x(resolution, rise):
    """Heights rising linearly along x by `rise` over the full width."""
    row = np.linspace(0.0, rise, resolution)
    return HeightGrid(np.tile(row, (resolution, 1)))


class TestSlopeEstimator:
    """Test finite-difference steepness."""

    def test_flat_terrain_has_zero_slope(self):
        estimator = SlopeEstimator(TerrainExtent(100, 50, 100))
        slopes = estimator.estimate(HeightGrid(np.full((9, 9), 0.3)))
        assert slopes.shape == (9, 9)
        np.testing.assert_array_equal(slopes, 0.0)

    def test_linear_ramp_is_uniform(self):
        """A planar ramp has the same slope everywhere, edges included."""
        extent = TerrainExtent(100, 50, 100)
        slopes = SlopeEstimator(extent).estimate(ramp_x(11, 1.0))
        # 50 units of rise over 100 units of run
        expected = math.degrees(math.atan(0.5)) / 90.0
        np.testing.assert_allclose(slopes, expected)

    def test_ramp_along_z(self):
        extent = TerrainExtent(10, 10, 10)
        heights = HeightGrid(ramp_x(5, 1.0).values.T)
        slopes = SlopeEstimator(extent).estimate(heights)
        np.testing.assert_allclose(slopes, 0.5)  # 45 degrees

    def test_extent_scales_slope(self):
        heights = ramp_x(5, 0.5)
        gentle = SlopeEstimator(TerrainExtent(1000, 10, 1000)).estimate(heights)
        steep = SlopeEstimator(TerrainExtent(10, 1000, 10)).estimate(heights)
        assert np.all(steep > gentle)
        assert np.all(steep < 1.0)

    def test_edge_uses_one_sided_difference(self):
        values = np.zeros((3, 3))
        values[:, 2] = 1.0
        extent = TerrainExtent(2, 1, 2)  # spacing 1
        slopes = SlopeEstimator(extent).estimate(HeightGrid(values))
        # Left edge: (0 - 0) / 1, centre: (1 - 0) / 2, right edge: (1 - 0) / 1
        np.testing.assert_allclose(slopes[0], [0.0, 26.565051177 / 90, 0.5], atol=1e-9)

    def test_range_and_read_only(self):
        rng = np.random.default_rng(0)
        heights = HeightGrid(rng.random((17, 17)))
        slopes = SlopeEstimator(TerrainExtent(1, 1000, 1)).estimate(heights)
        assert np.all((slopes >= 0.0) & (slopes <= 1.0))
        with pytest.raises(ValueError):
            slopes[0, 0] = 0.0

    def test_invalid_extent(self):
        with pytest.raises(InvalidParameter):
            SlopeEstimator(TerrainExtent(0, 10, 10))
