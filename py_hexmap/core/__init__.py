"""
Core terrain generation functionality.
"""

from .tiles import TileType, TILE_NAMES, LAND_TILES, WATER_TILES, is_land, is_water
from .hex_grid import HexCoordinate, TerrainGrid, hex_neighbors
from .alea_prng import AleaPRNG
from .noise import NoiseSource
from .distribution import TileDistribution
from .pipeline import GenerationResult, MapGenerator, generate_terrain

__all__ = ['TileType', 'TILE_NAMES', 'LAND_TILES', 'WATER_TILES', 'is_land', 'is_water',
           'HexCoordinate', 'TerrainGrid', 'hex_neighbors', 'AleaPRNG', 'NoiseSource',
           'TileDistribution', 'GenerationResult', 'MapGenerator', 'generate_terrain']
