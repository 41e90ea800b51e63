"""
Map generation pipeline.

Runs every stage over one shared grid in a fixed order:

    initialize (all ShallowWater)
    -> land mass (noise or regions)
    -> water bodies + water classification
    -> islands -> lakes -> inland seas -> rivers
    -> water classification again
    -> desert -> forest -> mountain
    -> desert compatibility
    -> optional relaxation

Each stage builds its own AleaPRNG from its own resolved seed, so a stage
behaves the same whatever ran before it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog

from ..config.generation import SEED_FIELDS, GenerationConfig
from ..utils.random import resolve_seeds
from .alea_prng import AleaPRNG
from .compatibility import relax_grid, resolve_desert_conflicts
from .features import carve_inland_seas, carve_lakes
from .hex_grid import TerrainGrid, validate_dimensions
from .hydrology import River, RiverOptions, carve_rivers
from .landmass import generate_islands, generate_land_regions, paint_land_from_noise
from .terrain_painter import FeatureLayer, PAINT_ORDER, paint_features
from .tiles import TILE_NAMES, TileType
from .voronoi_regions import HexLayout, RegionPartition
from .water import WaterOptions, carve_water_bodies, classify_water

logger = structlog.get_logger()


@dataclass
class GenerationResult:
    """Finished map plus everything needed to reproduce it."""

    grid: TerrainGrid  # Frozen
    config: GenerationConfig  # Config with every seed resolved
    seeds: Dict[str, int]  # Stage name -> seed used
    stats: Dict[str, Any] = field(default_factory=dict)
    rivers: List[River] = field(default_factory=list)
    partition: Optional[RegionPartition] = None  # Region mode only

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height


class MapGenerator:
    """
    One generation run.

    Seeds are resolved at construction, so calling ``generate`` again
    rebuilds the same map from scratch.
    """

    def __init__(
        self, width: int, height: int, config: Optional[GenerationConfig] = None
    ):
        validate_dimensions(width, height)
        self.width = width
        self.height = height
        self.seeds = resolve_seeds((config or GenerationConfig()).seeds())
        self.config = (config or GenerationConfig()).with_overrides(
            {SEED_FIELDS[stage]: seed for stage, seed in self.seeds.items()}
        )

        self.grid: Optional[TerrainGrid] = None
        self.stats: Dict[str, Any] = {}
        self.rivers: List[River] = []
        self.partition: Optional[RegionPartition] = None

    def water_options(self) -> WaterOptions:
        return WaterOptions(
            shallow_to_deep_chance=self.config.shallow_to_deep_neighbor_chance,
            iterations=self.config.water_processing_iterations,
            convert_shallow_only_to_deep=self.config.convert_shallow_only_to_deep,
            convert_shallow_near_deep_to_deep=self.config.convert_shallow_near_deep_to_deep,
        )

    def feature_layers(self) -> List[FeatureLayer]:
        """Painter layers in priority order."""
        layers = []
        for tile in PAINT_ORDER:
            name = TILE_NAMES[tile]
            layers.append(
                FeatureLayer(
                    tile=tile,
                    frequency=getattr(self.config, f"{name}_frequency"),
                    fragmentation=getattr(self.config, f"{name}_fragmentation"),
                    seed=self.seeds[name],
                )
            )
        return layers

    def generate_land(self) -> None:
        cfg = self.config
        if cfg.use_region_partition:
            self.partition = generate_land_regions(
                self.grid,
                cfg.land_frequency,
                cfg.num_regions,
                cfg.min_region_size,
                self.seeds["land"],
                HexLayout(cfg.hex_size),
            )
            self.stats["regions"] = len(self.partition.region_ids)
            self.stats["land_regions"] = len(self.partition.land_regions)
            self.stats["merged_regions"] = self.partition.merged_regions
        else:
            paint_land_from_noise(
                self.grid, cfg.land_frequency, cfg.land_fragmentation, self.seeds["land"]
            )
        self.stats["initial_land_cells"] = self.grid.count(TileType.PLAIN)

    def classify_initial_water(self) -> None:
        cfg = self.config
        self.stats["water_body_cells"] = carve_water_bodies(
            self.grid, cfg.water_frequency, cfg.water_fragmentation, self.seeds["water"]
        )
        classify_water(
            self.grid, AleaPRNG([self.seeds["water"], "classify"]), self.water_options()
        )

    def carve_water_features(self) -> None:
        cfg = self.config
        self.stats["island_cells"] = generate_islands(
            self.grid, cfg.island_frequency, cfg.island_fragmentation, self.seeds["island"]
        )

        lakes = carve_lakes(
            self.grid,
            cfg.lake_frequency,
            cfg.lake_min_size,
            cfg.lake_max_percentage,
            self.seeds["lake"],
        )
        self.stats["lakes"] = len(lakes)

        seas = carve_inland_seas(
            self.grid,
            cfg.inland_sea_frequency,
            cfg.inland_sea_min_size,
            cfg.inland_sea_max_percentage,
            cfg.inland_sea_land_neighbor_threshold,
            self.seeds["inland_sea"],
        )
        self.stats["inland_seas"] = len(seas)

    def generate_rivers(self) -> None:
        cfg = self.config
        options = RiverOptions(
            chance=cfg.river_chance,
            meander_strength=cfg.river_meander_strength,
            meander_noise_scale=cfg.river_meander_noise_scale,
        )
        self.rivers = carve_rivers(self.grid, self.seeds["river"], options)
        self.stats["rivers"] = len(self.rivers)

    def reclassify_water(self) -> None:
        classify_water(
            self.grid, AleaPRNG([self.seeds["water"], "reclassify"]), self.water_options()
        )

    def paint_terrain(self) -> None:
        painted = paint_features(self.grid, self.feature_layers())
        for tile, count in painted.items():
            self.stats[f"{TILE_NAMES[tile]}_painted"] = count

    def resolve_compatibility(self) -> None:
        cfg = self.config
        prng = AleaPRNG([self.seeds["compatibility"], "compatibility"])
        self.stats["deserts_converted"] = resolve_desert_conflicts(
            self.grid, prng, cfg.compatibility_shallow_chance
        )
        if cfg.relaxation_enabled:
            self.stats["relaxation_iterations"] = relax_grid(
                self.grid, cfg.relaxation_max_iterations
            )

    def generate(self) -> GenerationResult:
        """Run every stage and return the frozen map."""
        logger.info(
            "Starting map generation",
            width=self.width,
            height=self.height,
            mode="regions" if self.config.use_region_partition else "noise",
            seeds=self.seeds,
        )

        self.grid = TerrainGrid.filled(
            self.width,
            self.height,
            TileType.SHALLOW_WATER,
            wrap_horizontal=self.config.wrap_horizontal,
        )
        self.stats = {}
        self.rivers = []
        self.partition = None

        self.generate_land()
        self.classify_initial_water()
        self.carve_water_features()
        self.generate_rivers()
        self.reclassify_water()
        self.paint_terrain()
        self.resolve_compatibility()

        grid = self.grid.freeze()
        self.stats["tile_counts"] = {
            TILE_NAMES[tile]: grid.count(tile) for tile in TileType
        }

        logger.info(
            "Map generation completed",
            width=self.width,
            height=self.height,
            rivers=self.stats["rivers"],
            lakes=self.stats["lakes"],
        )
        return GenerationResult(
            grid=grid,
            config=self.config,
            seeds=dict(self.seeds),
            stats=dict(self.stats),
            rivers=list(self.rivers),
            partition=self.partition,
        )


def generate_terrain(
    width: int, height: int, config: Optional[GenerationConfig] = None
) -> GenerationResult:
    """
    Generate a complete map.

    Args:
        width: Columns, positive integer
        height: Rows, positive integer
        config: Generation parameters (defaults if omitted)

    Returns:
        GenerationResult with a frozen grid and the seeds actually used

    Raises:
        InvalidDimensionsError: width or height is not a positive integer
    """
    return MapGenerator(width, height, config).generate()
