"""
Configuration modules for terrain generation.
"""

from .layer_presets import DEFAULT_LAYERS, LAYER_PRESETS, get_layer_preset, list_layer_presets
from .log_setup import configure_logging
from .settings import Settings, settings

__all__ = ['DEFAULT_LAYERS', 'LAYER_PRESETS', 'get_layer_preset', 'list_layer_presets',
           'configure_logging', 'Settings', 'settings']
