"""
Core terrain generation functionality.
"""

from .alea_prng import AleaPRNG
from .decorations import (
    DecorationInstance,
    DecorationKind,
    DecorationScatterer,
    ExhaustionPolicy,
    ScatterOptions,
)
from .errors import InvalidParameter, PlacementExhausted, TerrainGenerationError, UnsupportedLayerCount
from .heightmap_generator import HeightGrid, HeightmapConfig, HeightmapGenerator
from .noise_field import NoiseField
from .params import CANONICAL_ROLES, GenerationParams, LayerRole, TerrainExtent, TerrainLayer
from .slope import SlopeEstimator
from .splatmap import LayerWeightComputer, SplatGrid, normalize_weights
from .terrain_generator import TerrainData, TerrainGenerator, TerrainSession, generate, regenerate

__all__ = ['AleaPRNG', 'NoiseField',
           'HeightGrid', 'HeightmapConfig', 'HeightmapGenerator', 'SlopeEstimator',
           'LayerWeightComputer', 'SplatGrid', 'normalize_weights',
           'DecorationInstance', 'DecorationKind', 'DecorationScatterer', 'ExhaustionPolicy', 'ScatterOptions',
           'CANONICAL_ROLES', 'GenerationParams', 'LayerRole', 'TerrainExtent', 'TerrainLayer',
           'TerrainData', 'TerrainGenerator', 'TerrainSession', 'generate', 'regenerate',
           'TerrainGenerationError', 'InvalidParameter', 'UnsupportedLayerCount', 'PlacementExhausted']
