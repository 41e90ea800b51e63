"""
Procedural hex terrain generation for turn-based strategy maps.
"""

from .config import GenerationConfig, get_preset, list_presets
from .core import (
    GenerationResult,
    HexCoordinate,
    MapGenerator,
    TerrainGrid,
    TileType,
    generate_terrain,
)
from .exceptions import InvalidDimensionsError, TerrainGenerationError

__version__ = "0.1.0"

__all__ = [
    "GenerationConfig",
    "GenerationResult",
    "HexCoordinate",
    "InvalidDimensionsError",
    "MapGenerator",
    "TerrainGenerationError",
    "TerrainGrid",
    "TileType",
    "generate_terrain",
    "get_preset",
    "list_presets",
]
