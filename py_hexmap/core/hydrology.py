"""
River carving from water bodies to the nearest other water.

This module implements:
- Lake detection (connected Shallow+Deep bodies)
- Shoreline and nearest-water search
- Meander-weighted A* between a lake shore and its target
- Carving of Plain cells along the path into shallow water
"""

import heapq
from dataclasses import dataclass, field
from collections import deque
from typing import Dict, List, Optional, Set

import structlog

from .alea_prng import AleaPRNG
from .features import accepts, border_neighbors, find_components
from .hex_grid import HexCoordinate, TerrainGrid
from .noise import NoiseSource
from .tiles import TileType, is_water

logger = structlog.get_logger()

MIN_HEURISTIC_WEIGHT = 0.2
MAX_RIVERS_PER_LAKE = 2


@dataclass
class RiverOptions:
    """River carving options."""

    chance: float = 0.5  # Probability that a single river attempt proceeds
    meander_strength: float = 0.5  # Weight of the noise term in the step cost
    meander_noise_scale: float = 0.1  # Scale of the meander noise


@dataclass
class River:
    """A carved river."""

    id: int
    lake_index: int
    source: HexCoordinate  # Shoreline cell of the source lake
    target: HexCoordinate  # Water cell the river drains into
    cells: List[HexCoordinate] = field(default_factory=list)  # Full path
    carved_cells: int = 0  # Plain cells turned into water

    @property
    def length(self) -> int:
        return len(self.cells)


def find_lakes(grid: TerrainGrid) -> List[List[HexCoordinate]]:
    """
    Connected water bodies that can feed rivers.

    The fill runs over ShallowWater and DeepWater together, so a lake whose
    middle was deepened stays one body. A body is kept when none of its
    cells has a DeepWater neighbor outside the body. Since Deep cells are
    absorbed by the fill this holds for every body, open sea included;
    rivers still only start from Shallow shore cells.
    """
    bodies = find_components(
        grid, accepts(TileType.SHALLOW_WATER, TileType.DEEP_WATER)
    )
    return [
        body
        for body in bodies
        if all(grid[n] != TileType.DEEP_WATER for n in border_neighbors(grid, body))
    ]


def find_shore_cells(
    grid: TerrainGrid, lake: List[HexCoordinate]
) -> List[HexCoordinate]:
    """Shallow lake cells with at least one Plain neighbor."""
    return [
        cell
        for cell in lake
        if grid[cell] == TileType.SHALLOW_WATER
        and any(grid[n] == TileType.PLAIN for n in grid.neighbors(cell))
    ]


def find_nearest_water(
    grid: TerrainGrid, start: HexCoordinate, exclude: Set[HexCoordinate]
) -> Optional[HexCoordinate]:
    """
    Breadth-first search through Plain cells for the closest water cell that
    is not in ``exclude``.

    Returns:
        The first such water cell reached, or None
    """
    visited = {start}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        for neighbor in grid.neighbors(current):
            if neighbor in visited:
                continue
            visited.add(neighbor)

            tile = grid[neighbor]
            if is_water(tile) and neighbor not in exclude:
                return neighbor
            if tile == TileType.PLAIN:
                queue.append(neighbor)

    return None


def heuristic_weight(meander_strength: float) -> float:
    """Stronger meander shrinks the heuristic so the search wanders more."""
    return min(max(1.0 - meander_strength * 0.5, MIN_HEURISTIC_WEIGHT), 1.0)


def _manhattan(a: HexCoordinate, b: HexCoordinate) -> int:
    return abs(a.col - b.col) + abs(a.row - b.row)


def find_river_path(
    grid: TerrainGrid,
    start: HexCoordinate,
    target: HexCoordinate,
    meander_strength: float,
    noise: Optional[NoiseSource] = None,
) -> Optional[List[HexCoordinate]]:
    """
    A* from ``start`` to ``target`` through Plain cells.

    The target is admitted whatever its tile; every other non-Plain cell is
    rejected. Entering a cell costs ``1 + (1 - noise) * meander_strength``
    (just 1 without noise or meander), so low-noise areas are avoided. The
    heap is keyed by (f, h, insertion order): on equal totals the node closer
    to the target wins, then the older entry.

    Returns:
        Path including both ends, or None when the target is unreachable
    """
    weight = heuristic_weight(meander_strength)
    meander = max(0.0, meander_strength)
    use_noise = noise is not None and noise.scale > 0.0 and meander > 0.0

    def h(coord: HexCoordinate) -> float:
        return _manhattan(coord, target) * weight

    g_score: Dict[HexCoordinate, float] = {start: 0.0}
    came_from: Dict[HexCoordinate, HexCoordinate] = {}
    closed: Set[HexCoordinate] = set()
    counter = 0
    open_heap = [(h(start), h(start), counter, start)]

    while open_heap:
        _, _, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue

        if current == target:
            path = [current]
            while current in came_from:
                current = came_from[current]
                path.append(current)
            path.reverse()
            return path

        closed.add(current)

        for neighbor in grid.neighbors(current):
            if neighbor in closed:
                continue
            if neighbor != target and grid[neighbor] != TileType.PLAIN:
                continue

            step = 1.0
            if use_noise:
                step += (1.0 - noise.sample(neighbor.col, neighbor.row)) * meander

            tentative = g_score[current] + step
            if tentative < g_score.get(neighbor, float("inf")):
                came_from[neighbor] = current
                g_score[neighbor] = tentative
                counter += 1
                h_value = h(neighbor)
                heapq.heappush(
                    open_heap, (tentative + h_value, h_value, counter, neighbor)
                )

    return None


def carve_path(grid: TerrainGrid, path: List[HexCoordinate]) -> int:
    """Turn the Plain cells of ``path`` into ShallowWater; leave the rest."""
    carved = 0
    for cell in path:
        if grid[cell] == TileType.PLAIN:
            grid[cell] = TileType.SHALLOW_WATER
            carved += 1
    return carved


def carve_rivers(
    grid: TerrainGrid, seed: int, options: Optional[RiverOptions] = None
) -> List[River]:
    """
    Carve rivers out of every lake.

    Each lake draws 1 or 2 attempts; each attempt proceeds with
    ``options.chance``. An attempt picks a random shoreline cell, finds the
    nearest other water and carves an A* path to it. Attempts without a
    shoreline, a target or a path are skipped.
    """
    options = options or RiverOptions()
    prng = AleaPRNG([seed, "rivers"])
    noise = NoiseSource(
        seed, options.meander_noise_scale, prng, offset_low=0.0, offset_high=10000.0
    )
    lakes = find_lakes(grid)
    rivers: List[River] = []
    skipped = 0

    for lake_index, lake in enumerate(lakes):
        lake_cells = set(lake)
        attempts = prng.randint(1, MAX_RIVERS_PER_LAKE)

        for _ in range(attempts):
            if prng.random() >= options.chance:
                continue

            shore = find_shore_cells(grid, lake)
            if not shore:
                logger.debug("Lake has no shoreline", lake=lake_index)
                skipped += 1
                continue
            source = prng.choice(shore)

            target = find_nearest_water(grid, source, lake_cells)
            if target is None:
                logger.debug("No water reachable from lake", lake=lake_index)
                skipped += 1
                continue

            path = find_river_path(
                grid, source, target, options.meander_strength, noise
            )
            if not path:
                logger.debug("No river path found", lake=lake_index, target=target)
                skipped += 1
                continue

            carved = carve_path(grid, path)
            rivers.append(
                River(
                    id=len(rivers) + 1,
                    lake_index=lake_index,
                    source=source,
                    target=target,
                    cells=path,
                    carved_cells=carved,
                )
            )

    logger.info(
        "Rivers carved",
        lakes=len(lakes),
        rivers=len(rivers),
        skipped=skipped,
        cells=sum(r.carved_cells for r in rivers),
    )
    return rivers
