"""
Terrain generation pipeline.

Runs the stages in a fixed order (heights, slopes, splatmap, decorations)
with a single random source per run. The pipeline keeps no state between
runs; callers that want to hold on to the latest terrain use
``TerrainSession``.
"""

import time
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import structlog

from .alea_prng import AleaPRNG
from .decorations import DecorationInstance, DecorationKind, DecorationScatterer, ScatterOptions
from .heightmap_generator import HeightGrid, HeightmapConfig, HeightmapGenerator
from .noise_field import NoiseField
from .params import GenerationParams
from .slope import SlopeEstimator
from .splatmap import LayerWeightComputer, SplatGrid

logger = structlog.get_logger()


@dataclass(frozen=True, eq=False)
class TerrainData:
    """Immutable outputs of one generation run."""

    params: GenerationParams
    heights: HeightGrid
    slopes: np.ndarray
    splatmap: SplatGrid
    decorations: tuple

    @property
    def trees(self) -> List[DecorationInstance]:
        return [d for d in self.decorations if d.kind == DecorationKind.TREE]

    @property
    def grass(self) -> List[DecorationInstance]:
        return [d for d in self.decorations if d.kind == DecorationKind.GRASS]

    def summary(self) -> dict:
        """Compact statistics for logging and API responses."""
        values = self.heights.values
        return {
            "seed": self.params.seed,
            "heightmap_resolution": self.heights.resolution,
            "alphamap_resolution": self.splatmap.resolution,
            "height_min": float(values.min()),
            "height_max": float(values.max()),
            "height_mean": float(values.mean()),
            "slope_max": float(self.slopes.max()),
            "layer_coverage": self.splatmap.coverage(),
            "tree_count": len(self.trees),
            "grass_count": len(self.grass),
        }


class TerrainGenerator:
    """Runs the full generation pipeline for a GenerationParams."""

    def __init__(
        self,
        heightmap_config: Optional[HeightmapConfig] = None,
        scatter_options: Optional[ScatterOptions] = None,
    ):
        self.heightmap_config = heightmap_config or HeightmapConfig()
        self.scatter_options = scatter_options or ScatterOptions()

    def generate(self, params: GenerationParams) -> TerrainData:
        """
        Generate terrain for the given parameters.

        Args:
            params: Validated or unvalidated generation parameters

        Returns:
            TerrainData with heights, slopes, splatmap and decorations

        Raises:
            InvalidParameter: If params are out of range
            UnsupportedLayerCount: If the layer list cannot be weighted
            PlacementExhausted: If a tree slot exhausts its retry budget
        """
        params.validate()
        # Fail on an unusable layer list before spending time on heights
        weights = LayerWeightComputer(params.layers)

        start = time.perf_counter()
        log = logger.bind(seed=params.seed)
        log.info(
            "Generating terrain",
            heightmap_resolution=params.heightmap_resolution,
            alphamap_resolution=params.alphamap_resolution,
            layers=len(params.layers),
        )

        prng = AleaPRNG(params.seed)
        noise = NoiseField(params.seed)

        heights = HeightmapGenerator(noise, prng, self.heightmap_config).generate(
            params.heightmap_resolution
        )
        slopes = SlopeEstimator(params.extent).estimate(heights)
        splatmap = weights.compute(heights, slopes, params.alphamap_resolution)

        scatterer = DecorationScatterer(
            heights,
            params.extent,
            prng,
            options=self.scatter_options,
            base_elevation=params.base_elevation,
        )
        decorations = scatterer.scatter(params.tree_count, params.grass_count)

        terrain = TerrainData(
            params=params,
            heights=heights,
            slopes=slopes,
            splatmap=splatmap,
            decorations=tuple(decorations),
        )
        log.info(
            "Terrain generated",
            elapsed_seconds=round(time.perf_counter() - start, 3),
            trees=len(terrain.trees),
            grass=len(terrain.grass),
            random_draws=prng.call_count,
        )
        return terrain


def generate(params: GenerationParams) -> TerrainData:
    """Generate terrain with default pipeline settings."""
    return TerrainGenerator().generate(params)


def regenerate(params: GenerationParams) -> TerrainData:
    """
    Explicit on-demand regeneration entry point.

    Equivalent to ``generate``; provided for callers that rebuild terrain
    whenever their parameters change.
    """
    return generate(params)


class TerrainSession:
    """
    Holds the current terrain of one consumer.

    Passed by reference to whatever needs the terrain; there is no
    process-wide instance.
    """

    def __init__(self, generator: Optional[TerrainGenerator] = None):
        self.generator = generator or TerrainGenerator()
        self.terrain: Optional[TerrainData] = None

    @property
    def params(self) -> Optional[GenerationParams]:
        return self.terrain.params if self.terrain is not None else None

    def generate_if_needed(self, params: GenerationParams) -> TerrainData:
        """Return the current terrain, generating it only if absent or stale."""
        if self.terrain is not None and self.terrain.params == params:
            return self.terrain
        return self.regenerate(params)

    def regenerate(self, params: GenerationParams, generator: Optional[TerrainGenerator] = None) -> TerrainData:
        """
        Discard the current terrain and build a new one.

        Args:
            params: Generation parameters
            generator: Pipeline for this call only; the session generator is used when omitted
        """
        terrain = (generator or self.generator).generate(params)
        self.terrain = terrain
        return terrain

    def clear(self) -> None:
        self.terrain = None
