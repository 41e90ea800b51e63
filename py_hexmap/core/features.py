"""
Connected-component search and pocket carving.

This module handles:
- Generic flood fill over cells accepted by a tile predicate
- Lakes: noise-selected Plain components that never touch deep water
- Inland seas: larger Plain components gated by their ratio of Plain borders

Both carvers convert an accepted component to shallow water in one go.
"""

import math
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

import numpy as np
import structlog

from .alea_prng import AleaPRNG
from .hex_grid import HexCoordinate, TerrainGrid
from .noise import NoiseSource
from .tiles import TileType

logger = structlog.get_logger()

TilePredicate = Callable[[TileType], bool]
ComponentFilter = Callable[[TerrainGrid, List[HexCoordinate]], bool]

LAKE_NOISE_SCALE = 0.08
INLAND_SEA_NOISE_SCALE = 0.05


def accepts(*tiles: TileType) -> TilePredicate:
    """Predicate accepting exactly the given tile types."""
    allowed = frozenset(int(t) for t in tiles)
    return lambda tile: int(tile) in allowed


def flood_fill(
    grid: TerrainGrid,
    start: HexCoordinate,
    accept: TilePredicate,
    visited: Optional[np.ndarray] = None,
) -> List[HexCoordinate]:
    """
    Collect the connected component containing ``start``.

    Breadth-first over ``grid.neighbors``; a neighbor joins the component when
    ``accept(tile)`` is true. The start cell is always included. If
    ``visited`` (bool array, shape (height, width)) is given, every collected
    cell is marked in it so callers can skip processed cells.

    Returns:
        Coordinates in visitation order
    """
    component: List[HexCoordinate] = []
    seen = {start}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        component.append(current)
        if visited is not None:
            visited[current.row, current.col] = True

        for neighbor in grid.neighbors(current):
            if neighbor in seen:
                continue
            if accept(grid[neighbor]):
                seen.add(neighbor)
                queue.append(neighbor)

    return component


def find_components(
    grid: TerrainGrid, accept: TilePredicate
) -> List[List[HexCoordinate]]:
    """All components of accepted cells, seeded in row-major order."""
    visited = np.zeros((grid.height, grid.width), dtype=bool)
    components = []
    for coord in grid.coordinates():
        if visited[coord.row, coord.col] or not accept(grid[coord]):
            continue
        components.append(flood_fill(grid, coord, accept, visited))
    return components


def border_neighbors(
    grid: TerrainGrid, component: List[HexCoordinate]
) -> Iterator[HexCoordinate]:
    """
    Yield every neighbor outside ``component``, once per adjacent pair.

    A cell bordering the component along two edges is yielded twice; the
    inland-sea ratio counts edges, not cells.
    """
    members = set(component)
    for cell in component:
        for neighbor in grid.neighbors(cell):
            if neighbor not in members:
                yield neighbor


def touches_deep_water(grid: TerrainGrid, component: List[HexCoordinate]) -> bool:
    return any(
        grid[n] == TileType.DEEP_WATER for n in border_neighbors(grid, component)
    )


def plain_border_ratio(grid: TerrainGrid, component: List[HexCoordinate]) -> float:
    """Fraction of border edges leading to Plain. 0.0 for a borderless component."""
    total = 0
    plain = 0
    for neighbor in border_neighbors(grid, component):
        total += 1
        if grid[neighbor] == TileType.PLAIN:
            plain += 1
    if total == 0:
        return 0.0
    return plain / total


def max_component_size(grid: TerrainGrid, max_percentage: float) -> int:
    """Largest accepted component: floor(total cells * clamped percentage)."""
    clamped = min(max(max_percentage, 0.0), 1.0)
    return int(math.floor(grid.size * clamped))


@dataclass
class PocketOptions:
    """Parameters of one pocket-carving stage."""

    frequency: float
    min_size: int
    max_percentage: float
    seed: int
    noise_scale: float


def carve_pockets(
    grid: TerrainGrid,
    options: PocketOptions,
    component_filter: ComponentFilter,
    label: str = "pocket",
) -> List[List[HexCoordinate]]:
    """
    Turn noise-selected Plain components into shallow water.

    For each unprocessed Plain cell (row-major) whose noise is below
    ``options.frequency``, flood-fill its Plain component. The component is
    accepted when its size lies within [min_size, max_component_size] and
    ``component_filter`` agrees; accepted components become ShallowWater.

    Returns:
        Accepted components, in acceptance order
    """
    prng = AleaPRNG([options.seed, label])
    noise = NoiseSource(options.seed, options.noise_scale, prng)
    max_size = max_component_size(grid, options.max_percentage)
    processed = np.zeros((grid.height, grid.width), dtype=bool)
    is_plain = accepts(TileType.PLAIN)

    carved: List[List[HexCoordinate]] = []
    rejected = 0

    for coord in grid.coordinates():
        if processed[coord.row, coord.col] or grid[coord] != TileType.PLAIN:
            continue
        if noise.sample(coord.col, coord.row) >= options.frequency:
            continue

        component = flood_fill(grid, coord, is_plain, processed)
        if not (options.min_size <= len(component) <= max_size):
            rejected += 1
            continue
        if not component_filter(grid, component):
            rejected += 1
            continue

        for cell in component:
            grid[cell] = TileType.SHALLOW_WATER
        carved.append(component)

    logger.info(
        "Pockets carved",
        kind=label,
        carved=len(carved),
        rejected=rejected,
        cells=sum(len(c) for c in carved),
        max_size=max_size,
    )
    return carved


def carve_lakes(
    grid: TerrainGrid,
    frequency: float,
    min_size: int,
    max_percentage: float,
    seed: int,
) -> List[List[HexCoordinate]]:
    """Lakes: Plain components with no deep water anywhere on their border."""
    options = PocketOptions(
        frequency=frequency,
        min_size=min_size,
        max_percentage=max_percentage,
        seed=seed,
        noise_scale=LAKE_NOISE_SCALE,
    )
    return carve_pockets(
        grid,
        options,
        lambda g, component: not touches_deep_water(g, component),
        label="lake",
    )


def carve_inland_seas(
    grid: TerrainGrid,
    frequency: float,
    min_size: int,
    max_percentage: float,
    land_neighbor_threshold: float,
    seed: int,
) -> List[List[HexCoordinate]]:
    """
    Inland seas: Plain components whose Plain-border ratio meets the threshold.

    A component is a full Plain flood fill, so none of its border neighbors
    is Plain and the ratio is always 0.0. The threshold therefore only lets
    components through at 0.0; any positive value rejects them all. A
    component with no border at all (it spans the whole map) never
    qualifies.
    """
    threshold = min(max(land_neighbor_threshold, 0.0), 1.0)
    options = PocketOptions(
        frequency=frequency,
        min_size=min_size,
        max_percentage=max_percentage,
        seed=seed,
        noise_scale=INLAND_SEA_NOISE_SCALE,
    )

    def has_land_neighbors(g: TerrainGrid, component: List[HexCoordinate]) -> bool:
        if next(border_neighbors(g, component), None) is None:
            return False
        return plain_border_ratio(g, component) >= threshold

    return carve_pockets(grid, options, has_land_neighbors, label="inland_sea")
