"""Tests for decoration scattering."""

import pytest
import numpy as np
from py_terrain.core.alea_prng import AleaPRNG
from py_terrain.core.decorations import (
    IDENTITY_ROTATION,
    LYING_FLAT_ROTATION,
    DecorationKind,
    DecorationScatterer,
    ExhaustionPolicy,
    ScatterOptions,
)
from py_terrain.core.errors import InvalidParameter, PlacementExhausted
from py_terrain.core.heightmap_generator import HeightGrid, HeightmapGenerator
from py_terrain.core.noise_field import NoiseField
from py_terrain.core.params import TerrainExtent


@pytest.fixture
def heights():
    return HeightmapGenerator(NoiseField(42), AleaPRNG(42)).generate(33)


def make_scatterer(heights, extent, seed=42, **options):
    return DecorationScatterer(heights, extent, AleaPRNG(seed), ScatterOptions(**options))


class TestTreePlacement:
    """Trees retry rejected slots and are placed in exact numbers."""

    def test_exact_count_when_acceptance_likely(self, heights):
        # Every cell is above 6 units when the terrain is 1000 units tall
        scatterer = make_scatterer(heights, TerrainExtent(100, 1000, 100))
        trees = scatterer.scatter_trees(25)
        assert len(trees) == 25
        assert all(t.kind == DecorationKind.TREE for t in trees)

    def test_exact_count_with_rejections(self, heights):
        # Only the mountain band clears 6 units on a 30-unit terrain
        scatterer = make_scatterer(heights, TerrainExtent(100, 30, 100))
        trees = scatterer.scatter_trees(10)
        assert len(trees) == 10
        assert all(t.position[1] >= 6.0 for t in trees)
        # Rejections consumed extra draws: 2 per attempt plus 1 scale per tree
        assert scatterer.prng.call_count > 10 * 3

    def test_tree_attributes(self, heights):
        extent = TerrainExtent(200, 500, 300)
        trees = make_scatterer(heights, extent).scatter_trees(30)
        for tree in trees:
            x, y, z = tree.position
            assert 0.0 <= x <= 200
            assert 0.0 <= z <= 300
            assert y == pytest.approx(heights.sample_normalized(x / 200, z / 300) * 500)
            assert tree.rotation == IDENTITY_ROTATION
            assert 0.8 <= tree.scale <= 1.5

    def test_draw_order(self, heights):
        """Each accepted tree consumes x, z, then scale from the stream."""
        extent = TerrainExtent(200, 1000, 300)
        trees = make_scatterer(heights, extent, seed=5).scatter_trees(2)
        replay = AleaPRNG(5)
        for tree in trees:
            x = replay.uniform(0.0, 200)
            z = replay.uniform(0.0, 300)
            scale = replay.uniform(0.8, 1.5)
            assert (tree.position[0], tree.position[2], tree.scale) == (x, z, scale)

    def test_unreachable_threshold_raises(self, heights):
        # Terrain never rises above 5 units, trees need 6
        scatterer = make_scatterer(heights, TerrainExtent(100, 5, 100), max_attempts_per_slot=50)
        with pytest.raises(PlacementExhausted) as excinfo:
            scatterer.scatter_trees(3)
        assert excinfo.value.slot == 0
        assert excinfo.value.attempts == 50
        assert scatterer.prng.call_count == 100

    def test_unreachable_threshold_under_places(self, heights):
        scatterer = make_scatterer(
            heights,
            TerrainExtent(100, 5, 100),
            max_attempts_per_slot=20,
            on_exhausted=ExhaustionPolicy.UNDER_PLACE,
        )
        assert scatterer.scatter_trees(3) == []

    def test_base_elevation_shifts_positions_not_acceptance(self, heights):
        extent = TerrainExtent(100, 1000, 100)
        flat = DecorationScatterer(heights, extent, AleaPRNG(1)).scatter_trees(5)
        raised = DecorationScatterer(heights, extent, AleaPRNG(1), base_elevation=250.0).scatter_trees(5)
        for a, b in zip(flat, raised):
            assert b.position[1] == pytest.approx(a.position[1] + 250.0)
            assert (a.position[0], a.position[2]) == (b.position[0], b.position[2])


class TestGrassPlacement:
    """Grass skips rejected slots; the count is an upper bound."""

    def test_grass_is_upper_bound(self, heights):
        scatterer = make_scatterer(heights, TerrainExtent(100, 30, 100))
        grass = scatterer.scatter_grass(200)
        assert len(grass) <= 200
        assert all(g.position[1] >= 4.0 for g in grass)

    def test_grass_skips_without_retry(self, heights):
        # Nothing clears 4 units on a 3-unit terrain: every slot is skipped
        scatterer = make_scatterer(heights, TerrainExtent(100, 3, 100))
        assert scatterer.scatter_grass(50) == []
        assert scatterer.prng.call_count == 100

    def test_grass_attributes(self, heights):
        grass = make_scatterer(heights, TerrainExtent(100, 1000, 100)).scatter_grass(40)
        assert len(grass) == 40
        for patch in grass:
            assert patch.kind == DecorationKind.GRASS
            assert patch.rotation == LYING_FLAT_ROTATION
            assert 0.4 <= patch.scale <= 0.9


class TestScatter:
    """Test the combined tree + grass pass."""

    def test_zero_counts_yield_nothing(self, heights):
        scatterer = make_scatterer(heights, TerrainExtent(10, 10, 10))
        assert scatterer.scatter(0, 0) == []
        assert scatterer.prng.call_count == 0

    def test_trees_before_grass(self, heights):
        decorations = make_scatterer(heights, TerrainExtent(100, 1000, 100)).scatter(5, 5)
        kinds = [d.kind for d in decorations]
        assert kinds == [DecorationKind.TREE] * 5 + [DecorationKind.GRASS] * 5

    def test_deterministic_sequence(self, heights):
        extent = TerrainExtent(100, 30, 100)
        a = make_scatterer(heights, extent, seed=9).scatter(8, 30)
        b = make_scatterer(heights, extent, seed=9).scatter(8, 30)
        assert a == b

    def test_negative_counts(self, heights):
        scatterer = make_scatterer(heights, TerrainExtent(10, 10, 10))
        with pytest.raises(InvalidParameter):
            scatterer.scatter(-1, 0)
        with pytest.raises(InvalidParameter):
            scatterer.scatter(0, -1)

    def test_invalid_attempt_budget(self, heights):
        with pytest.raises(InvalidParameter):
            make_scatterer(heights, TerrainExtent(10, 10, 10), max_attempts_per_slot=0)

    def test_to_dict(self, heights):
        tree = make_scatterer(heights, TerrainExtent(100, 1000, 100)).scatter_trees(1)[0]
        data = tree.to_dict()
        assert data["kind"] == "tree"
        assert data["rotation"] == [0.0, 0.0, 0.0]
        assert len(data["position"]) == 3

    def test_flat_grid_sampling(self):
        grid = HeightGrid(np.full((3, 3), 0.5))
        scatterer = DecorationScatterer(grid, TerrainExtent(10, 20, 10), AleaPRNG(0))
        assert scatterer.sample_elevation(3.3, 7.1) == pytest.approx(10.0)
