"""
Input data model for a terrain generation run.

A run is a pure function of ``GenerationParams``: the same parameters
always reproduce the same heights, splatmap and decoration sequence.
"""

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Integral, Real
from typing import Optional, Tuple

from .errors import InvalidParameter


class LayerRole(str, Enum):
    """Surface semantics used by the layer weighting heuristics."""

    SAND = "sand"
    GRASS_ROCKY = "grass_rocky"
    GRASS_HILL = "grass_hill"
    ROCKY = "rocky"
    CLIFF = "cliff"


# Canonical order of the five-layer default set
CANONICAL_ROLES: Tuple[LayerRole, ...] = (
    LayerRole.SAND,
    LayerRole.GRASS_ROCKY,
    LayerRole.GRASS_HILL,
    LayerRole.ROCKY,
    LayerRole.CLIFF,
)


@dataclass(frozen=True)
class TerrainExtent:
    """Physical terrain size in world units."""

    width: float
    max_height: float
    depth: float

    def validate(self) -> None:
        for name in ("width", "max_height", "depth"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Real):
                raise InvalidParameter(f"extent.{name}", value, "must be a number")
            if not math.isfinite(value) or value <= 0:
                raise InvalidParameter(f"extent.{name}", value, "must be a positive finite number")

    def cell_spacing(self, resolution: int) -> Tuple[float, float]:
        """World distance between neighbouring samples along x and z."""
        return self.width / (resolution - 1), self.depth / (resolution - 1)


@dataclass(frozen=True)
class TerrainLayer:
    """A surface layer: display descriptor plus optional weighting role."""

    name: str
    color: Tuple[float, float, float]
    tile_size: Tuple[float, float] = (18.0, 18.0)
    role: Optional[LayerRole] = None


@dataclass(frozen=True)
class GenerationParams:
    """Immutable input of one generation run."""

    seed: int
    extent: TerrainExtent
    heightmap_resolution: int
    alphamap_resolution: int
    layers: Tuple[TerrainLayer, ...]
    tree_count: int = 0
    grass_count: int = 0
    base_elevation: float = 0.0  # world y of the terrain origin

    def __post_init__(self):
        # Accept any sequence but store a tuple so the params stay hashable
        object.__setattr__(self, "layers", tuple(self.layers))

    def validate(self) -> None:
        """Raise InvalidParameter when any field is out of range."""
        if isinstance(self.seed, bool) or not isinstance(self.seed, Integral):
            raise InvalidParameter("seed", self.seed, "must be an integer")

        self.extent.validate()

        for name in ("heightmap_resolution", "alphamap_resolution"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral) or value < 2:
                raise InvalidParameter(name, value, "must be an integer >= 2")

        if not self.layers:
            raise InvalidParameter("layers", self.layers, "at least one layer is required")

        for name in ("tree_count", "grass_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral) or value < 0:
                raise InvalidParameter(name, value, "must be a non-negative integer")

        if not math.isfinite(self.base_elevation):
            raise InvalidParameter("base_elevation", self.base_elevation, "must be finite")
