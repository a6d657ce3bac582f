"""
Terrain layer presets.

Each preset is an ordered tuple of layers; the order defines the meaning
of the splatmap's weight-vector indices.
"""

from typing import Dict, List, Tuple

from ..core.params import LayerRole, TerrainLayer

DEFAULT_TILE_SIZE = (18.0, 18.0)

DEFAULT_LAYERS: Tuple[TerrainLayer, ...] = (
    TerrainLayer("SandAlbedo", (0.76, 0.70, 0.50), DEFAULT_TILE_SIZE, LayerRole.SAND),
    TerrainLayer("GrassRockyAlbedo", (0.36, 0.47, 0.25), DEFAULT_TILE_SIZE, LayerRole.GRASS_ROCKY),
    TerrainLayer("GrassHillAlbedo", (0.29, 0.55, 0.30), DEFAULT_TILE_SIZE, LayerRole.GRASS_HILL),
    TerrainLayer("RockyAlbedo", (0.43, 0.43, 0.43), DEFAULT_TILE_SIZE, LayerRole.ROCKY),
    TerrainLayer("Cliff", (0.35, 0.35, 0.35), DEFAULT_TILE_SIZE, LayerRole.CLIFF),
)

LAYER_PRESETS: Dict[str, Tuple[TerrainLayer, ...]] = {
    "default": DEFAULT_LAYERS,
    # Beach-and-grass only; rock and cliff weight is dropped before normalization
    "lowland": (
        DEFAULT_LAYERS[0],
        DEFAULT_LAYERS[1],
        DEFAULT_LAYERS[2],
    ),
    "single": (
        TerrainLayer("Ground", (0.45, 0.40, 0.30), DEFAULT_TILE_SIZE),
    ),
}


def get_layer_preset(name: str) -> Tuple[TerrainLayer, ...]:
    """
    Get a layer preset by name.

    Raises:
        KeyError: If no preset has that name
    """
    try:
        return LAYER_PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown layer preset: {name!r}") from None


def list_layer_presets() -> List[str]:
    """List available layer preset names."""
    return sorted(LAYER_PRESETS)
