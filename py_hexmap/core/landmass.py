"""
Land-mass generation: turns the initial all-water grid into land.

Two interchangeable strategies:
- noise: threshold painting of coherent noise over water cells
- regions: Voronoi partition with whole regions classified land or water

The noise strategy is reused later for islands, where it may raise land out
of deep water as well.
"""

from typing import Iterable

import structlog

from .alea_prng import AleaPRNG
from .hex_grid import TerrainGrid
from .noise import NoiseSource
from .tiles import TileType
from .voronoi_regions import HexLayout, RegionPartition, partition_regions

logger = structlog.get_logger()

LAND_BASE_SCALE = 0.05


def land_noise_scale(fragmentation: float) -> float:
    """Noise scale for land: 0.05 at fragmentation 0, 0.1 at fragmentation 1."""
    return LAND_BASE_SCALE * (1.0 + fragmentation)


def paint_land_from_noise(
    grid: TerrainGrid,
    frequency: float,
    fragmentation: float,
    seed: int,
    convertible: Iterable[TileType] = (TileType.SHALLOW_WATER,),
    label: str = "land",
) -> int:
    """
    Convert cells to Plain where noise is below ``frequency``.

    Only cells whose tile is in ``convertible`` are sampled.

    Returns:
        Number of cells converted
    """
    prng = AleaPRNG([seed, label])
    noise = NoiseSource(seed, land_noise_scale(fragmentation), prng)
    allowed = frozenset(int(t) for t in convertible)

    converted = 0
    for coord in grid.coordinates():
        if int(grid[coord]) not in allowed:
            continue
        if noise.sample(coord.col, coord.row) < frequency:
            grid[coord] = TileType.PLAIN
            converted += 1

    logger.info("Land painted from noise", kind=label, converted=converted, seed=seed)
    return converted


def generate_land_regions(
    grid: TerrainGrid,
    land_frequency: float,
    num_regions: int,
    min_region_size: int,
    seed: int,
    layout: HexLayout = HexLayout(),
) -> RegionPartition:
    """
    Region mode: every cell of a land region becomes Plain, every cell of a
    water region ShallowWater.
    """
    prng = AleaPRNG([seed, "regions"])
    partition = partition_regions(
        grid, num_regions, min_region_size, land_frequency, prng, layout
    )

    for coord in grid.coordinates():
        region_id = int(partition.regions[coord.row, coord.col])
        if region_id in partition.land_regions:
            grid[coord] = TileType.PLAIN
        else:
            grid[coord] = TileType.SHALLOW_WATER

    logger.info(
        "Land generated from regions",
        land_cells=grid.count(TileType.PLAIN),
        land_fraction=round(partition.land_fraction, 3),
    )
    return partition


def generate_islands(
    grid: TerrainGrid, frequency: float, fragmentation: float, seed: int
) -> int:
    """Second noise land pass over all water, shallow or deep."""
    return paint_land_from_noise(
        grid,
        frequency,
        fragmentation,
        seed,
        convertible=(TileType.SHALLOW_WATER, TileType.DEEP_WATER),
        label="islands",
    )
