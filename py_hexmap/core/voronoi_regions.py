"""
Voronoi-style region partitioning of the hex grid.

Region sites are scattered in world space, every cell joins its nearest site,
undersized regions are folded into their largest neighbor, and each surviving
region is then classified wholesale as land or water.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Set

import numpy as np
import structlog
from scipy.spatial.distance import cdist

from .alea_prng import AleaPRNG
from .hex_grid import HexCoordinate, TerrainGrid

logger = structlog.get_logger()

# Land regions must make up at least 3/10 of all surviving regions
MIN_LAND_REGIONS_NUMERATOR = 3
MIN_LAND_REGIONS_DENOMINATOR = 10

# Cells per cdist call; bounds the (chunk x sites) distance matrix
ASSIGN_CHUNK_SIZE = 4096


@dataclass(frozen=True)
class HexLayout:
    """World-space geometry of pointy-top hexes in offset rows."""

    size: float = 1.0

    @property
    def hex_width(self) -> float:
        return math.sqrt(3.0) * self.size

    @property
    def hex_height(self) -> float:
        return 1.5 * self.size

    @property
    def row_offset(self) -> float:
        return self.hex_width * 0.5

    def center(self, col: int, row: int):
        x = col * self.hex_width + (self.row_offset if row % 2 else 0.0)
        return x, row * self.hex_height


@dataclass
class RegionPartition:
    """Result of partitioning: region id per cell and the land regions."""

    regions: np.ndarray  # (height, width) region id per cell
    sites: np.ndarray  # (num_regions, 2) world-space site positions
    land_regions: Set[int] = field(default_factory=set)
    merged_regions: int = 0

    @property
    def region_ids(self) -> List[int]:
        return [int(r) for r in np.unique(self.regions)]

    @property
    def land_fraction(self) -> float:
        ids = self.region_ids
        if not ids:
            return 0.0
        return len(self.land_regions & set(ids)) / len(ids)


def cell_centers(width: int, height: int, layout: HexLayout) -> np.ndarray:
    """World-space centers of all cells, row-major, shape (height*width, 2)."""
    cols, rows = np.meshgrid(np.arange(width), np.arange(height))
    xs = cols * layout.hex_width + np.where(rows % 2 == 1, layout.row_offset, 0.0)
    ys = rows * layout.hex_height
    return np.column_stack([xs.ravel(), ys.ravel()]).astype(np.float64)


def scatter_sites(
    num_regions: int, width: int, height: int, layout: HexLayout, prng: AleaPRNG
) -> np.ndarray:
    """Uniform random sites over the world-space extent of the grid."""
    max_x = width * layout.hex_width
    max_y = height * layout.hex_height
    sites = np.empty((num_regions, 2), dtype=np.float64)
    for i in range(num_regions):
        sites[i, 0] = prng.uniform(0.0, max_x)
        sites[i, 1] = prng.uniform(0.0, max_y)
    return sites


def assign_regions(
    width: int, height: int, sites: np.ndarray, layout: HexLayout
) -> np.ndarray:
    """
    Label every cell with the index of its nearest site.

    Euclidean distance; ``argmin`` returns the first minimum, so ties go to
    the lowest site index.
    """
    centers = cell_centers(width, height, layout)
    labels = np.empty(len(centers), dtype=np.int32)
    for start in range(0, len(centers), ASSIGN_CHUNK_SIZE):
        chunk = centers[start:start + ASSIGN_CHUNK_SIZE]
        labels[start:start + len(chunk)] = np.argmin(cdist(chunk, sites), axis=1)
    return labels.reshape(height, width)


def merge_small_regions(
    grid: TerrainGrid, regions: np.ndarray, min_region_size: int
) -> int:
    """
    Fold regions smaller than ``min_region_size`` into their largest neighbor.

    One pass in region-id order using the sizes current at that moment. A
    region that absorbs another is not re-examined for having grown, and a
    region with no neighboring region stays as it is. Mutates ``regions``.

    Returns:
        Number of regions merged away
    """
    n_regions = int(regions.max()) + 1
    sizes = np.bincount(regions.ravel(), minlength=n_regions)
    merged = 0

    for region_id in range(n_regions):
        size = int(sizes[region_id])
        if size == 0 or size >= min_region_size:
            continue

        cell_rows, cell_cols = np.nonzero(regions == region_id)
        neighbor_ids = set()
        for row, col in zip(cell_rows, cell_cols):
            for n in grid.neighbors(HexCoordinate(int(col), int(row))):
                other = int(regions[n.row, n.col])
                if other != region_id:
                    neighbor_ids.add(other)

        if not neighbor_ids:
            logger.debug("Region has no neighbors to merge into", region=region_id)
            continue

        # max() keeps the first maximum, so equal sizes go to the lowest id
        target = max(sorted(neighbor_ids), key=lambda r: sizes[r])
        regions[cell_rows, cell_cols] = target
        sizes[target] += size
        sizes[region_id] = 0
        merged += 1

    return merged


def minimum_land_regions(region_count: int) -> int:
    """Smallest land-region count meeting the 30% floor."""
    return (
        MIN_LAND_REGIONS_NUMERATOR * region_count + MIN_LAND_REGIONS_DENOMINATOR - 1
    ) // MIN_LAND_REGIONS_DENOMINATOR


def classify_regions(
    region_ids: List[int], land_frequency: float, prng: AleaPRNG
) -> Set[int]:
    """
    Decide land/water per region, then top up land to the 30% floor.

    Each region is land with probability ``land_frequency``, independently.
    If too few came up land, a random subset of water regions is flipped.
    """
    is_land: Dict[int, bool] = {
        region_id: prng.random() < land_frequency for region_id in region_ids
    }
    land_count = sum(is_land.values())
    required = minimum_land_regions(len(region_ids))

    if land_count < required:
        water_ids = [r for r in region_ids if not is_land[r]]
        prng.shuffle(water_ids)
        for region_id in water_ids[: required - land_count]:
            is_land[region_id] = True
        logger.debug(
            "Land quota enforced", flipped=required - land_count, required=required
        )

    return {r for r, land in is_land.items() if land}


def partition_regions(
    grid: TerrainGrid,
    num_regions: int,
    min_region_size: int,
    land_frequency: float,
    prng: AleaPRNG,
    layout: HexLayout = HexLayout(),
) -> RegionPartition:
    """Scatter sites, assign cells, merge small regions and classify."""
    sites = scatter_sites(num_regions, grid.width, grid.height, layout, prng)
    regions = assign_regions(grid.width, grid.height, sites, layout)
    merged = merge_small_regions(grid, regions, min_region_size)

    region_ids = [int(r) for r in np.unique(regions)]
    land_regions = classify_regions(region_ids, land_frequency, prng)

    logger.info(
        "Regions partitioned",
        sites=num_regions,
        surviving=len(region_ids),
        merged=merged,
        land=len(land_regions),
    )
    return RegionPartition(
        regions=regions, sites=sites, land_regions=land_regions, merged_regions=merged
    )
