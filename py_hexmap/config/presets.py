"""Named parameter sets for common map styles."""

from typing import Any, Dict, List, Optional

from .generation import GenerationConfig

PRESETS: Dict[str, Dict[str, Any]] = {
    "default": {},
    "continents": {
        "land_frequency": 0.55,
        "land_fragmentation": 0.2,
        "island_frequency": 0.05,
        "lake_frequency": 0.25,
    },
    "archipelago": {
        "land_frequency": 0.35,
        "land_fragmentation": 0.9,
        "island_frequency": 0.2,
        "island_fragmentation": 1.0,
        "water_frequency": 0.25,
        "lake_frequency": 0.1,
        "inland_sea_frequency": 0.0,
    },
    "pangaea": {
        "use_region_partition": True,
        "land_frequency": 0.7,
        "num_regions": 16,
        "min_region_size": 12,
        "water_frequency": 0.1,
        "island_frequency": 0.0,
        "inland_sea_frequency": 0.3,
    },
    "lakelands": {
        "land_frequency": 0.65,
        "water_frequency": 0.25,
        "lake_frequency": 0.5,
        "lake_max_percentage": 0.08,
        "inland_sea_frequency": 0.35,
        "river_chance": 0.9,
        "river_meander_strength": 0.8,
    },
    "highlands": {
        "land_frequency": 0.6,
        "desert_frequency": 0.05,
        "forest_frequency": 0.15,
        "mountain_frequency": 0.4,
        "mountain_fragmentation": 0.3,
        "relaxation_enabled": True,
    },
}


def list_presets() -> List[str]:
    return sorted(PRESETS)


def get_preset(name: str, overrides: Optional[Dict[str, Any]] = None) -> GenerationConfig:
    """
    Build the GenerationConfig for preset ``name``.

    Args:
        name: Preset name (see ``list_presets``)
        overrides: Extra fields applied on top of the preset

    Raises:
        KeyError: Unknown preset name
        pydantic.ValidationError: Overrides are invalid
    """
    if name not in PRESETS:
        raise KeyError(
            f"Unknown preset '{name}'. Available presets: {', '.join(list_presets())}"
        )

    config = GenerationConfig.model_validate(PRESETS[name])
    if overrides:
        config = config.with_overrides(overrides)
    return config
