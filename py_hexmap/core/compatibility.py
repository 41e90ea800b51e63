"""
Neighbor compatibility between tile types.

This module implements:
- The desert pass run at the end of every generation
- A general allowed-neighbor table with a majority-vote relaxation that can be
  run as an extra, optional consistency pass
"""

from collections import Counter
from typing import Dict, FrozenSet, List, Mapping

import structlog

from .alea_prng import AleaPRNG
from .hex_grid import TerrainGrid
from .tiles import TILE_NAMES, TileType

logger = structlog.get_logger()

DESERT_SHALLOW_CHANCE = 0.2

_ALL_TILES = frozenset(TileType)

ALLOWED_NEIGHBORS: Dict[TileType, FrozenSet[TileType]] = {
    TileType.DEEP_WATER: frozenset({TileType.DEEP_WATER, TileType.SHALLOW_WATER}),
    TileType.SHALLOW_WATER: _ALL_TILES,
    TileType.PLAIN: _ALL_TILES - {TileType.DEEP_WATER},
    TileType.FOREST: frozenset(
        {TileType.FOREST, TileType.SHALLOW_WATER, TileType.PLAIN, TileType.MOUNTAIN}
    ),
    TileType.DESERT: frozenset(
        {TileType.MOUNTAIN, TileType.PLAIN, TileType.DESERT, TileType.SHALLOW_WATER}
    ),
    TileType.MOUNTAIN: _ALL_TILES - {TileType.DEEP_WATER},
}


def resolve_desert_conflicts(
    grid: TerrainGrid, prng: AleaPRNG, shallow_chance: float = DESERT_SHALLOW_CHANCE
) -> int:
    """
    Single simultaneous pass over Desert cells.

    Desert next to Forest always becomes Plain. Otherwise Desert next to
    ShallowWater becomes Plain with ``shallow_chance``. Everything else stays.

    Returns:
        Number of Desert cells converted
    """
    updates = []
    for coord in grid.coordinates():
        if grid[coord] != TileType.DESERT:
            continue
        neighbor_types = grid.neighbor_types(coord)
        if TileType.FOREST in neighbor_types:
            updates.append((coord, TileType.PLAIN))
        elif TileType.SHALLOW_WATER in neighbor_types:
            if prng.random() < shallow_chance:
                updates.append((coord, TileType.PLAIN))

    converted = grid.apply(updates)
    logger.info("Desert conflicts resolved", converted=converted)
    return converted


def is_compatible(
    tile: TileType,
    neighbor_types: List[TileType],
    allowed: Mapping[TileType, FrozenSet[TileType]] = ALLOWED_NEIGHBORS,
) -> bool:
    permitted = allowed[tile]
    return all(n in permitted for n in neighbor_types)


def correct_tile(
    tile: TileType,
    neighbor_types: List[TileType],
    allowed: Mapping[TileType, FrozenSet[TileType]] = ALLOWED_NEIGHBORS,
) -> TileType:
    """
    Replacement for ``tile`` given its neighbors.

    A compatible tile is kept. Otherwise the most frequent neighbor type that
    ``tile`` allows (other than ``tile`` itself) wins; ties prefer Plain, then
    the lower enum value. With no such neighbor the tile is kept.
    """
    if not neighbor_types or is_compatible(tile, neighbor_types, allowed):
        return tile

    permitted = allowed[tile]
    counts = Counter(n for n in neighbor_types if n in permitted and n != tile)
    if not counts:
        return tile

    return max(
        counts,
        key=lambda t: (counts[t], t == TileType.PLAIN, -int(t)),
    )


def relax_grid(
    grid: TerrainGrid,
    max_iterations: int = 10,
    allowed: Mapping[TileType, FrozenSet[TileType]] = ALLOWED_NEIGHBORS,
) -> int:
    """
    Repeat simultaneous ``correct_tile`` passes until nothing changes or
    ``max_iterations`` is reached.

    Returns:
        Number of passes performed
    """
    iterations = 0
    while iterations < max_iterations:
        iterations += 1
        updates = []
        for coord in grid.coordinates():
            current = grid[coord]
            corrected = correct_tile(current, grid.neighbor_types(coord), allowed)
            if corrected != current:
                updates.append((coord, corrected))

        changed = grid.apply(updates)
        logger.debug("Relaxation pass", iteration=iterations, changed=changed)
        if changed == 0:
            break

    logger.info("Relaxation finished", iterations=iterations)
    return iterations


def describe_rules(
    allowed: Mapping[TileType, FrozenSet[TileType]] = ALLOWED_NEIGHBORS,
) -> Dict[str, List[str]]:
    """Allowed-neighbor table keyed and valued by tile names."""
    return {
        TILE_NAMES[tile]: sorted(TILE_NAMES[n] for n in permitted)
        for tile, permitted in allowed.items()
    }
