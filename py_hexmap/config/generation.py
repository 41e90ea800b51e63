"""Generation parameters, validated once and immutable during a run."""

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Stage name -> config field holding its seed
SEED_FIELDS: Dict[str, str] = {
    "land": "land_seed",
    "water": "water_seed",
    "island": "island_seed",
    "lake": "lake_seed",
    "inland_sea": "inland_sea_seed",
    "river": "river_seed",
    "desert": "desert_seed",
    "forest": "forest_seed",
    "mountain": "mountain_seed",
    "compatibility": "compatibility_seed",
}

MAX_SEED = 2**32 - 1


def _unit(default: float, description: str):
    return Field(default, ge=0.0, le=1.0, description=description)


def _seed(description: str):
    return Field(
        0, ge=0, le=MAX_SEED, description=f"{description} (0 = pick a random seed)"
    )


class GenerationConfig(BaseModel):
    """
    Every tunable of one generation run.

    Accepts snake_case names or the camelCase aliases (``landFrequency``,
    ``shallowToDeepNeighborChance``, ...).
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    # Land mass
    land_frequency: float = _unit(0.5, "Noise threshold below which water becomes land")
    land_fragmentation: float = _unit(0.5, "Higher values scatter land into smaller pieces")
    land_seed: int = _seed("Land seed")
    use_region_partition: bool = Field(False, description="Use Voronoi regions instead of noise for land")
    num_regions: int = Field(24, ge=1, description="Number of Voronoi sites")
    min_region_size: int = Field(8, ge=0, description="Regions smaller than this are merged")
    hex_size: float = Field(1.0, gt=0.0, description="Hex radius used for world-space distances")
    wrap_horizontal: bool = Field(False, description="Wrap adjacency around the left/right edges")

    # Water bodies and classification
    water_frequency: float = _unit(0.2, "Noise threshold below which land becomes water")
    water_fragmentation: float = _unit(0.5, "Higher values scatter water bodies")
    water_seed: int = _seed("Water seed")
    shallow_to_deep_neighbor_chance: float = _unit(0.3, "Chance shallow next to deep becomes deep")
    water_processing_iterations: int = Field(3, ge=1, description="Rounds of water classification rules")
    convert_shallow_only_to_deep: bool = Field(True, description="Shallow surrounded by shallow becomes deep")
    convert_shallow_near_deep_to_deep: bool = Field(True, description="Shallow next to deep may become deep")

    # Islands
    island_frequency: float = _unit(0.1, "Noise threshold below which water becomes island")
    island_fragmentation: float = _unit(0.8, "Higher values make smaller islands")
    island_seed: int = _seed("Island seed")

    # Lakes
    lake_frequency: float = _unit(0.3, "Noise threshold for lake candidates")
    lake_min_size: int = Field(3, ge=1, description="Smallest lake in cells")
    lake_max_percentage: float = _unit(0.05, "Largest lake as a fraction of the map")
    lake_seed: int = _seed("Lake seed")

    # Inland seas
    inland_sea_frequency: float = _unit(0.2, "Noise threshold for inland sea candidates")
    inland_sea_min_size: int = Field(12, ge=1, description="Smallest inland sea in cells")
    inland_sea_max_percentage: float = _unit(0.12, "Largest inland sea as a fraction of the map")
    inland_sea_land_neighbor_threshold: float = _unit(
        0.0,
        "Required fraction of Plain border edges; components are whole Plain"
        " regions, so only 0.0 lets any through",
    )
    inland_sea_seed: int = _seed("Inland sea seed")

    # Rivers
    river_chance: float = _unit(0.5, "Chance each river attempt proceeds")
    river_seed: int = _seed("River seed")
    river_meander_strength: float = Field(0.5, ge=0.0, description="Weight of noise in river step cost")
    river_meander_noise_scale: float = Field(0.1, ge=0.0, description="Scale of the meander noise")

    # Terrain features
    desert_frequency: float = _unit(0.15, "Noise threshold for desert")
    desert_fragmentation: float = _unit(0.5, "Higher values scatter desert")
    desert_seed: int = _seed("Desert seed")
    forest_frequency: float = _unit(0.2, "Noise threshold for forest")
    forest_fragmentation: float = _unit(0.5, "Higher values scatter forest")
    forest_seed: int = _seed("Forest seed")
    mountain_frequency: float = _unit(0.15, "Noise threshold for mountains")
    mountain_fragmentation: float = _unit(0.5, "Higher values scatter mountains")
    mountain_seed: int = _seed("Mountain seed")

    # Compatibility
    compatibility_seed: int = _seed("Compatibility pass seed")
    compatibility_shallow_chance: float = _unit(0.2, "Chance desert next to shallow becomes plain")
    relaxation_enabled: bool = Field(False, description="Run the neighbor-majority relaxation at the end")
    relaxation_max_iterations: int = Field(10, ge=1, description="Cap on relaxation passes")

    def seeds(self) -> Dict[str, int]:
        """Configured seed per stage (0 where a random seed is wanted)."""
        return {stage: getattr(self, name) for stage, name in SEED_FIELDS.items()}

    def with_overrides(self, overrides: Mapping[str, Any]) -> "GenerationConfig":
        """Validated copy with ``overrides`` (snake_case or camelCase) applied."""
        data = self.model_dump()
        data.update(normalize_keys(overrides))
        return GenerationConfig.model_validate(data)

    def with_seed(self, seed: int) -> "GenerationConfig":
        """Copy where every stage seed is ``seed``."""
        return self.with_overrides({name: seed for name in SEED_FIELDS.values()})


def normalize_keys(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase aliases onto field names; unknown keys pass through."""
    aliases = {
        (info.alias or name): name
        for name, info in GenerationConfig.model_fields.items()
    }
    return {aliases.get(key, key): value for key, value in values.items()}


__all__ = ["GenerationConfig", "SEED_FIELDS", "normalize_keys"]
