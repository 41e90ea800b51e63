"""
Water-body carving and shallow/deep classification.

Classification applies five rules per iteration:

1. water with a land neighbor is Shallow
2. otherwise, water with a water neighbor that has a land neighbor is Shallow
3. otherwise the water is Deep
4. Shallow whose neighbors are all Shallow becomes Deep
5. Shallow with a Deep neighbor becomes Deep with a fixed chance

Rules 1-3 read the grid as it was at the start of the iteration and are
committed together. Rules 4 and 5 write straight into the grid while scanning
it row by row, so later cells see earlier changes. Double-buffering 4 and 5
changes the resulting coastlines; keep them in place.

Rule 5 never touches a cell with a land neighbor: rule 1 is absolute and a
Deep cell must never border land once classification is done.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog

from .alea_prng import AleaPRNG
from .hex_grid import TerrainGrid
from .noise import NoiseSource
from .tiles import TileType, is_land, is_water

logger = structlog.get_logger()

WATER_BASE_SCALE = 0.1


@dataclass
class WaterOptions:
    """Water classification options."""

    shallow_to_deep_chance: float = 0.3
    iterations: int = 3
    convert_shallow_only_to_deep: bool = True
    convert_shallow_near_deep_to_deep: bool = True


def water_noise_scale(fragmentation: float) -> float:
    return WATER_BASE_SCALE * (1.0 + fragmentation)


def carve_water_bodies(
    grid: TerrainGrid, frequency: float, fragmentation: float, seed: int
) -> int:
    """
    Turn Plain cells into ShallowWater where the water noise is below
    ``frequency``.

    Returns:
        Number of cells converted
    """
    prng = AleaPRNG([seed, "water_bodies"])
    noise = NoiseSource(seed, water_noise_scale(fragmentation), prng)

    converted = 0
    for coord in grid.coordinates():
        if grid[coord] != TileType.PLAIN:
            continue
        if noise.sample(coord.col, coord.row) < frequency:
            grid[coord] = TileType.SHALLOW_WATER
            converted += 1

    logger.info("Water bodies carved", converted=converted, seed=seed)
    return converted


def _land_contact(grid: TerrainGrid) -> np.ndarray:
    """Bool array: cell has at least one land neighbor."""
    contact = np.zeros((grid.height, grid.width), dtype=bool)
    for coord in grid.coordinates():
        contact[coord.row, coord.col] = any(
            is_land(grid[n]) for n in grid.neighbors(coord)
        )
    return contact


def apply_proximity_rules(grid: TerrainGrid) -> int:
    """
    Rules 1-3 as one simultaneous update.

    Returns:
        Number of cells whose tile changed
    """
    contact = _land_contact(grid)
    updates = []

    for coord in grid.coordinates():
        if not is_water(grid[coord]):
            continue
        if contact[coord.row, coord.col]:
            updates.append((coord, TileType.SHALLOW_WATER))
            continue
        near_coast = any(
            is_water(grid[n]) and contact[n.row, n.col] for n in grid.neighbors(coord)
        )
        updates.append(
            (coord, TileType.SHALLOW_WATER if near_coast else TileType.DEEP_WATER)
        )

    return grid.apply(updates)


def collapse_interior_shallow(grid: TerrainGrid) -> int:
    """Rule 4, in place: Shallow surrounded only by Shallow becomes Deep."""
    changed = 0
    for coord in grid.coordinates():
        if grid[coord] != TileType.SHALLOW_WATER:
            continue
        neighbors = grid.neighbors(coord)
        if neighbors and all(grid[n] == TileType.SHALLOW_WATER for n in neighbors):
            grid[coord] = TileType.DEEP_WATER
            changed += 1
    return changed


def deepen_near_deep(grid: TerrainGrid, chance: float, prng: AleaPRNG) -> int:
    """
    Rule 5, in place: Shallow next to Deep becomes Deep with ``chance``.

    The chance does not grow with the number of Deep neighbors. One random
    number is drawn per eligible cell.
    """
    changed = 0
    for coord in grid.coordinates():
        if grid[coord] != TileType.SHALLOW_WATER:
            continue
        neighbor_types = grid.neighbor_types(coord)
        if any(is_land(t) for t in neighbor_types):
            continue
        if TileType.DEEP_WATER not in neighbor_types:
            continue
        if prng.random() < chance:
            grid[coord] = TileType.DEEP_WATER
            changed += 1
    return changed


def classify_water(
    grid: TerrainGrid, prng: AleaPRNG, options: Optional[WaterOptions] = None
) -> None:
    """Run rules 1-5 ``options.iterations`` times."""
    options = options or WaterOptions()
    for iteration in range(options.iterations):
        buffered = apply_proximity_rules(grid)
        collapsed = 0
        deepened = 0
        if options.convert_shallow_only_to_deep:
            collapsed = collapse_interior_shallow(grid)
        if options.convert_shallow_near_deep_to_deep:
            deepened = deepen_near_deep(grid, options.shallow_to_deep_chance, prng)
        logger.debug(
            "Water classification iteration",
            iteration=iteration + 1,
            proximity_changes=buffered,
            collapsed=collapsed,
            deepened=deepened,
        )

    logger.info(
        "Water classified",
        shallow=grid.count(TileType.SHALLOW_WATER),
        deep=grid.count(TileType.DEEP_WATER),
        iterations=options.iterations,
    )
