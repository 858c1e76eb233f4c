"""
Configuration modules for map generation.
"""

from .config import Settings, settings
from .terrain_presets import (
    TerrainType, GenerationAlgorithm, HouseSubtype, HouseStory, CaveSubtype,
    get_subtype_config, list_presets,
)

__all__ = ['Settings', 'settings', 'TerrainType', 'GenerationAlgorithm',
           'HouseSubtype', 'HouseStory', 'CaveSubtype', 'get_subtype_config', 'list_presets']
