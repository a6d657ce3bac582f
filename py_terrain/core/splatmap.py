"""
Splatmap (per-cell layer weight) computation.

Each surface role owns a contribution rule over normalized height and
slope. Rules are evaluated in order, so a rule may read the contributions
computed before it (grass_rocky is attenuated by sand). The resulting
vectors are normalized per cell; cells whose raw contributions are all ~0
fall back to full weight on the first layer.
"""

from collections import OrderedDict
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
import structlog
from scipy import ndimage

from .errors import InvalidParameter, UnsupportedLayerCount
from .heightmap_generator import HeightGrid
from .interpolation import clamp01, inverse_lerp
from .params import CANONICAL_ROLES, LayerRole, TerrainLayer

logger = structlog.get_logger()

DEGENERATE_EPSILON = 1e-6

# rule(height, slope, earlier contributions) -> contribution
RoleRule = Callable[[np.ndarray, np.ndarray, Dict[LayerRole, np.ndarray]], np.ndarray]


def _sand(height, slope, computed):
    return clamp01(1.0 - inverse_lerp(0.03, 0.09, height)) * clamp01(1.0 - slope * 2.0)


def _grass_rocky(height, slope, computed):
    return clamp01(1.0 - inverse_lerp(0.06, 0.14, height)) * (1.0 - computed[LayerRole.SAND])


_grass_rocky.requires = (LayerRole.SAND,)


def _grass_hill(height, slope, computed):
    return clamp01(1.0 - slope * 1.6) * inverse_lerp(0.05, 0.2, height)


def _rocky(height, slope, computed):
    return clamp01(slope * 1.7) * inverse_lerp(0.12, 0.45, height)


def _cliff(height, slope, computed):
    return clamp01(inverse_lerp(0.55, 0.85, height))


DEFAULT_ROLE_RULES: "OrderedDict[LayerRole, RoleRule]" = OrderedDict(
    [
        (LayerRole.SAND, _sand),
        (LayerRole.GRASS_ROCKY, _grass_rocky),
        (LayerRole.GRASS_HILL, _grass_hill),
        (LayerRole.ROCKY, _rocky),
        (LayerRole.CLIFF, _cliff),
    ]
)


def normalize_weights(raw: np.ndarray, epsilon: float = DEGENERATE_EPSILON) -> np.ndarray:
    """
    Normalize weight vectors along the last axis.

    Vectors whose sum is below epsilon become [1, 0, ..., 0].
    """
    raw = np.asarray(raw, dtype=np.float64)
    totals = raw.sum(axis=-1, keepdims=True)
    degenerate = totals < epsilon
    safe_totals = np.where(degenerate, 1.0, totals)
    weights = np.where(degenerate, 0.0, raw / safe_totals)
    weights[..., 0] = np.where(degenerate[..., 0], 1.0, weights[..., 0])
    return weights


def resample_bilinear(values: np.ndarray, resolution: int) -> np.ndarray:
    """Bilinearly resample a square grid to resolution x resolution."""
    source = np.asarray(values, dtype=np.float64)
    if source.shape[0] == resolution:
        return source.copy()
    coords = np.arange(resolution, dtype=np.float64) / (resolution - 1) * (source.shape[0] - 1)
    rows, cols = np.meshgrid(coords, coords, indexing="ij")
    return ndimage.map_coordinates(source, [rows, cols], order=1, mode="nearest")


class SplatGrid:
    """Immutable alphamap of per-layer weights, indexed [z, x, layer]."""

    def __init__(self, weights: np.ndarray, layers: Sequence[TerrainLayer]):
        weights = np.array(weights, dtype=np.float64)
        if weights.ndim != 3 or weights.shape[2] != len(layers):
            raise InvalidParameter("splatmap", weights.shape, "weights must be (res, res, n_layers)")
        weights.setflags(write=False)
        self._weights = weights
        self.layers = tuple(layers)

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def resolution(self) -> int:
        return self._weights.shape[0]

    @property
    def layer_count(self) -> int:
        return self._weights.shape[2]

    def __getitem__(self, index):
        return self._weights[index]

    def __eq__(self, other):
        if not isinstance(other, SplatGrid):
            return NotImplemented
        return self.layers == other.layers and np.array_equal(self._weights, other._weights)

    __hash__ = None

    def dominant_layers(self) -> np.ndarray:
        """Index of the heaviest layer per cell."""
        return np.argmax(self._weights, axis=2)

    def coverage(self) -> Dict[str, float]:
        """Mean weight of each layer over the whole map."""
        means = self._weights.mean(axis=(0, 1))
        return {layer.name: float(mean) for layer, mean in zip(self.layers, means)}

    def to_list(self) -> List[List[List[float]]]:
        return self._weights.tolist()


class LayerWeightComputer:
    """
    Maps (height, slope) to normalized layer weight vectors.

    Layers are weighted by role. A role-less list of exactly five layers
    is read in canonical order (sand, grass_rocky, grass_hill, rocky,
    cliff); a single layer always receives full weight.
    """

    def __init__(
        self,
        layers: Sequence[TerrainLayer],
        rules: Optional["OrderedDict[LayerRole, RoleRule]"] = None,
        epsilon: float = DEGENERATE_EPSILON,
    ):
        if not layers:
            raise InvalidParameter("layers", layers, "at least one layer is required")
        self.layers = tuple(layers)
        self.rules = rules if rules is not None else DEFAULT_ROLE_RULES
        self.epsilon = epsilon
        self.roles = self._resolve_roles(self.layers)

        missing = {role for role in self.roles if role is not None} - set(self.rules)
        if missing:
            raise UnsupportedLayerCount(len(self.layers))

        # A rule may only read contributions of roles evaluated before it
        evaluated = set()
        for role, rule in self.rules.items():
            if not set(getattr(rule, "requires", ())) <= evaluated:
                raise UnsupportedLayerCount(len(self.layers))
            evaluated.add(role)

    @staticmethod
    def _resolve_roles(layers) -> List[Optional[LayerRole]]:
        if len(layers) == 1:
            return [layers[0].role]

        roles = []
        for index, layer in enumerate(layers):
            role = layer.role
            if role is None and len(layers) == len(CANONICAL_ROLES):
                role = CANONICAL_ROLES[index]
            if role is None:
                raise UnsupportedLayerCount(len(layers), expected=len(CANONICAL_ROLES))
            roles.append(role)
        return roles

    def raw_contributions(self, height, slope) -> np.ndarray:
        """Unnormalized contributions, shape (..., n_layers)."""
        height = np.asarray(height, dtype=np.float64)
        slope = np.asarray(slope, dtype=np.float64)

        if len(self.layers) == 1 and self.roles[0] is None:
            return np.ones(np.broadcast(height, slope).shape + (1,))

        computed: Dict[LayerRole, np.ndarray] = {}
        for role, rule in self.rules.items():
            computed[role] = np.broadcast_to(rule(height, slope, computed), np.broadcast(height, slope).shape)

        return np.stack([computed[role] for role in self.roles], axis=-1)

    def weights_for(self, height, slope) -> np.ndarray:
        """Normalized weight vector(s) for the given height and slope."""
        return normalize_weights(self.raw_contributions(height, slope), self.epsilon)

    def compute(self, heights: HeightGrid, slopes: np.ndarray, alpha_resolution: int) -> SplatGrid:
        """
        Build the splatmap at alphamap resolution.

        Args:
            heights: Normalized height grid
            slopes: Normalized slope grid aligned with heights
            alpha_resolution: Samples per side of the splatmap, at least 2

        Returns:
            Immutable SplatGrid aligned to the layer order
        """
        if alpha_resolution < 2:
            raise InvalidParameter("alphamap_resolution", alpha_resolution, "must be an integer >= 2")

        height = resample_bilinear(heights.values, alpha_resolution)
        slope = resample_bilinear(slopes, alpha_resolution)
        splat = SplatGrid(self.weights_for(height, slope), self.layers)

        logger.debug("Splatmap computed", resolution=alpha_resolution, layers=len(self.layers))
        return splat
