"""
Tests for GenerationConfig, presets, settings and seed resolution.
"""

import pytest
from pydantic import ValidationError

from py_hexmap.config import (
    PRESETS,
    SEED_FIELDS,
    GenerationConfig,
    Settings,
    get_preset,
    list_presets,
)
from py_hexmap.utils.random import MAX_RANDOM_SEED, resolve_seed, resolve_seeds


class TestGenerationConfig:
    def test_defaults(self):
        config = GenerationConfig()
        assert config.shallow_to_deep_neighbor_chance == 0.3
        assert config.water_processing_iterations == 3
        assert config.compatibility_shallow_chance == 0.2
        assert config.relaxation_enabled is False
        assert config.use_region_partition is False

    def test_camel_case_aliases(self):
        config = GenerationConfig.model_validate(
            {"landFrequency": 0.7, "inlandSeaLandNeighborThreshold": 0.25}
        )
        assert config.land_frequency == 0.7
        assert config.inland_sea_land_neighbor_threshold == 0.25

    def test_snake_case_names(self):
        assert GenerationConfig(lake_min_size=5).lake_min_size == 5

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            GenerationConfig.model_validate({"landFrequncy": 0.5})

    @pytest.mark.parametrize(
        "field,value",
        [
            ("land_frequency", 1.5),
            ("river_chance", -0.1),
            ("lake_min_size", 0),
            ("num_regions", 0),
            ("water_processing_iterations", 0),
            ("desert_seed", -1),
            ("river_meander_strength", -1.0),
            ("hex_size", 0.0),
        ],
    )
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            GenerationConfig.model_validate({field: value})

    def test_immutable(self):
        config = GenerationConfig()
        with pytest.raises(ValidationError):
            config.land_frequency = 0.9

    def test_with_overrides_accepts_both_spellings(self):
        config = GenerationConfig().with_overrides({"riverChance": 0.9, "lake_seed": 4})
        assert config.river_chance == 0.9
        assert config.lake_seed == 4

    def test_with_overrides_validates(self):
        with pytest.raises(ValidationError):
            GenerationConfig().with_overrides({"riverChance": 2.0})

    def test_with_seed_sets_every_stage(self):
        config = GenerationConfig().with_seed(77)
        assert set(config.seeds().values()) == {77}
        assert set(config.seeds()) == set(SEED_FIELDS)

    def test_dump_by_alias(self):
        dumped = GenerationConfig().model_dump(by_alias=True)
        assert "shallowToDeepNeighborChance" in dumped
        assert "desertFragmentation" in dumped


class TestPresets:
    def test_list_presets(self):
        assert list_presets() == sorted(
            ["default", "continents", "archipelago", "pangaea", "lakelands", "highlands"]
        )

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_every_preset_is_valid(self, name):
        assert isinstance(get_preset(name), GenerationConfig)

    def test_default_preset_is_default_config(self):
        assert get_preset("default") == GenerationConfig()

    def test_preset_values(self):
        assert get_preset("pangaea").use_region_partition is True
        assert get_preset("highlands").relaxation_enabled is True

    def test_overrides_on_top_of_preset(self):
        config = get_preset("archipelago", {"islandFrequency": 0.3})
        assert config.island_frequency == 0.3
        assert config.land_fragmentation == 0.9

    def test_unknown_preset(self):
        with pytest.raises(KeyError, match="archipelago"):
            get_preset("atlantis")


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.log_format in ("json", "console")
        assert settings.default_preset in PRESETS

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("PY_HEXMAP_API_PORT", "9100")
        monkeypatch.setenv("PY_HEXMAP_MAX_MAP_WIDTH", "64")
        settings = Settings()
        assert settings.api_port == 9100
        assert settings.max_map_width == 64


class TestSeedResolution:
    def test_non_zero_seed_is_kept(self):
        assert resolve_seed(1234) == 1234

    def test_zero_seed_is_replaced(self):
        for _ in range(50):
            seed = resolve_seed(0)
            assert 1 <= seed <= MAX_RANDOM_SEED

    def test_resolve_seeds(self):
        resolved = resolve_seeds({"land": 5, "water": 0})
        assert resolved["land"] == 5
        assert resolved["water"] != 0
