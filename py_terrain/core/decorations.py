"""
Decoration scattering over a height field.

Trees and ground cover are sampled uniformly over the terrain footprint and
rejected when they land too low. The two kinds deliberately differ:

- trees retry the same slot until a sample is accepted, so the requested
  count is exact (bounded by ``max_attempts_per_slot``);
- grass skips a rejected slot, so the requested count is an upper bound.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import structlog

from .alea_prng import AleaPRNG
from .errors import InvalidParameter, PlacementExhausted
from .heightmap_generator import HeightGrid
from .params import TerrainExtent

logger = structlog.get_logger()

Vector3 = Tuple[float, float, float]

IDENTITY_ROTATION: Vector3 = (0.0, 0.0, 0.0)
LYING_FLAT_ROTATION: Vector3 = (90.0, 0.0, 0.0)


class DecorationKind(str, Enum):
    TREE = "tree"
    GRASS = "grass"


class ExhaustionPolicy(str, Enum):
    """What to do when a tree slot runs out of attempts."""

    RAISE = "raise"
    UNDER_PLACE = "under_place"


@dataclass(frozen=True)
class DecorationInstance:
    """A placed decoration; rotation is Euler angles in degrees."""

    kind: DecorationKind
    position: Vector3
    rotation: Vector3
    scale: float

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "position": list(self.position),
            "rotation": list(self.rotation),
            "scale": self.scale,
        }


@dataclass
class ScatterOptions:
    """Acceptance thresholds and scale ranges for decoration placement."""

    tree_min_elevation: float = 6.0  # world units above the terrain base
    grass_min_elevation: float = 4.0
    tree_scale_range: Tuple[float, float] = (0.8, 1.5)
    grass_scale_range: Tuple[float, float] = (0.4, 0.9)
    max_attempts_per_slot: int = 10000
    on_exhausted: ExhaustionPolicy = ExhaustionPolicy.RAISE


class DecorationScatterer:
    """Samples decoration instances from a height grid."""

    def __init__(
        self,
        heights: HeightGrid,
        extent: TerrainExtent,
        prng: AleaPRNG,
        options: Optional[ScatterOptions] = None,
        base_elevation: float = 0.0,
    ):
        """
        Initialize the scatterer.

        Args:
            heights: Normalized height grid to sample
            extent: Physical terrain size
            prng: Random source, consumed in placement order
            options: Thresholds and retry budget
            base_elevation: World y of the terrain origin
        """
        extent.validate()
        self.heights = heights
        self.extent = extent
        self.prng = prng
        self.options = options or ScatterOptions()
        self.base_elevation = base_elevation

        if self.options.max_attempts_per_slot < 1:
            raise InvalidParameter(
                "max_attempts_per_slot", self.options.max_attempts_per_slot, "must be >= 1"
            )

    def sample_elevation(self, x: float, z: float) -> float:
        """World-space terrain elevation at world (x, z)."""
        u = x / self.extent.width
        v = z / self.extent.depth
        return self.base_elevation + self.heights.sample_normalized(u, v) * self.extent.max_height

    def random_point(self) -> Vector3:
        """Draw a uniform footprint point and lift it onto the terrain."""
        x = self.prng.uniform(0.0, self.extent.width)
        z = self.prng.uniform(0.0, self.extent.depth)
        return (x, self.sample_elevation(x, z), z)

    def scatter_trees(self, count: int) -> List[DecorationInstance]:
        """Place exactly count trees, retrying rejected slots."""
        opts = self.options
        threshold = self.base_elevation + opts.tree_min_elevation
        trees = []

        for slot in range(count):
            for _ in range(opts.max_attempts_per_slot):
                position = self.random_point()
                if position[1] >= threshold:
                    break
            else:
                if opts.on_exhausted == ExhaustionPolicy.RAISE:
                    raise PlacementExhausted(
                        DecorationKind.TREE.value, slot, opts.max_attempts_per_slot, threshold
                    )
                logger.warning(
                    "Tree placement exhausted, under-placing",
                    placed=len(trees),
                    requested=count,
                    attempts=opts.max_attempts_per_slot,
                )
                break

            scale = self.prng.uniform(*opts.tree_scale_range)
            trees.append(DecorationInstance(DecorationKind.TREE, position, IDENTITY_ROTATION, scale))

        return trees

    def scatter_grass(self, count: int) -> List[DecorationInstance]:
        """Place up to count grass patches, skipping rejected slots."""
        opts = self.options
        threshold = self.base_elevation + opts.grass_min_elevation
        grass = []

        for _ in range(count):
            position = self.random_point()
            if position[1] < threshold:
                continue
            scale = self.prng.uniform(*opts.grass_scale_range)
            grass.append(DecorationInstance(DecorationKind.GRASS, position, LYING_FLAT_ROTATION, scale))

        return grass

    def scatter(self, tree_count: int, grass_count: int) -> List[DecorationInstance]:
        """
        Place trees, then grass.

        Args:
            tree_count: Exact number of trees to place
            grass_count: Upper bound on grass patches

        Returns:
            Ordered list of instances, trees first
        """
        if tree_count < 0:
            raise InvalidParameter("tree_count", tree_count, "must be a non-negative integer")
        if grass_count < 0:
            raise InvalidParameter("grass_count", grass_count, "must be a non-negative integer")

        trees = self.scatter_trees(tree_count)
        grass = self.scatter_grass(grass_count)

        logger.debug(
            "Decorations scattered",
            trees=len(trees),
            grass=len(grass),
            grass_requested=grass_count,
        )
        return trees + grass
