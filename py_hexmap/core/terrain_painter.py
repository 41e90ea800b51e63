"""
Noise-threshold painting of desert, forest and mountain onto Plain cells.

Painters only ever look at cells that are still Plain, so the order in which
they run is their priority: desert first, then forest, then mountain.
"""

from dataclasses import dataclass
from typing import Dict, Sequence

import structlog

from .alea_prng import AleaPRNG
from .hex_grid import TerrainGrid
from .noise import NoiseSource
from .tiles import TILE_NAMES, TileType

logger = structlog.get_logger()

FEATURE_BASE_SCALE = 0.1

PAINT_ORDER = (TileType.DESERT, TileType.FOREST, TileType.MOUNTAIN)


@dataclass
class FeatureLayer:
    """One painter: which tile, how much of it, and how scattered."""

    tile: TileType
    frequency: float
    fragmentation: float
    seed: int


def feature_noise_scale(fragmentation: float) -> float:
    """0.1 at fragmentation 0, 0.2 at fragmentation 1."""
    return FEATURE_BASE_SCALE * (1.0 + fragmentation)


def paint_feature(grid: TerrainGrid, layer: FeatureLayer) -> int:
    """
    Convert Plain cells whose noise is below ``layer.frequency``.

    Returns:
        Number of cells painted
    """
    if layer.tile in (TileType.PLAIN, TileType.SHALLOW_WATER, TileType.DEEP_WATER):
        raise ValueError(f"Cannot paint {TILE_NAMES[layer.tile]} as a land feature")

    name = TILE_NAMES[layer.tile]
    prng = AleaPRNG([layer.seed, name])
    noise = NoiseSource(layer.seed, feature_noise_scale(layer.fragmentation), prng)

    painted = 0
    for coord in grid.coordinates():
        if grid[coord] != TileType.PLAIN:
            continue
        if noise.sample(coord.col, coord.row) < layer.frequency:
            grid[coord] = layer.tile
            painted += 1

    logger.info("Feature painted", feature=name, painted=painted, seed=layer.seed)
    return painted


def paint_features(
    grid: TerrainGrid, layers: Sequence[FeatureLayer]
) -> Dict[TileType, int]:
    """Run ``layers`` in the given order; earlier layers win contested cells."""
    return {layer.tile: paint_feature(grid, layer) for layer in layers}
