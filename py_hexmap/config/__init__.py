"""
Configuration for map generation.
"""

from .generation import GenerationConfig, SEED_FIELDS, normalize_keys
from .presets import PRESETS, get_preset, list_presets
from .settings import Settings, settings

__all__ = [
    "GenerationConfig",
    "SEED_FIELDS",
    "normalize_keys",
    "PRESETS",
    "get_preset",
    "list_presets",
    "Settings",
    "settings",
]
