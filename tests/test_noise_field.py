"""Tests for the scalar noise field."""

import numpy as np
from py_terrain.core.noise_field import NoiseField


class TestNoiseField:
    """Test noise range, determinism and continuity."""

    def test_range(self):
        field = NoiseField(42)
        xs = np.linspace(-5, 5, 41)
        values = field.sample_grid(xs, xs)
        assert values.shape == (41, 41)
        assert np.all(values >= 0.0)
        assert np.all(values <= 1.0)

    def test_deterministic(self):
        a = NoiseField(7)
        b = NoiseField(7)
        for x, y in [(0.1, 0.2), (1.5, -3.25), (10.0, 0.0)]:
            assert a.sample(x, y) == b.sample(x, y)

    def test_seed_changes_field(self):
        xs = np.linspace(0, 3, 16)
        assert not np.array_equal(NoiseField(1).sample_grid(xs, xs), NoiseField(2).sample_grid(xs, xs))

    def test_grid_matches_point_samples(self):
        """sample_grid is indexed [y, x]."""
        field = NoiseField(11)
        xs = np.array([0.0, 0.5, 1.25])
        ys = np.array([0.3, 2.0])
        grid = field.sample_grid(xs, ys)
        assert grid.shape == (2, 3)
        for j, y in enumerate(ys):
            for i, x in enumerate(xs):
                assert np.isclose(grid[j, i], field.sample(x, y))

    def test_continuity(self):
        """Nearby coordinates give nearby values."""
        field = NoiseField(3)
        for x, y in [(0.2, 0.7), (2.4, 1.1), (5.0, 5.0)]:
            assert abs(field.sample(x, y) - field.sample(x + 1e-5, y + 1e-5)) < 1e-3

    def test_no_state_between_samples(self):
        field = NoiseField(5)
        first = field.sample(0.3, 0.4)
        field.sample(9.0, 9.0)
        assert field.sample(0.3, 0.4) == first
