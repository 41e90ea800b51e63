"""Tile types produced by the terrain generator."""

from enum import IntEnum
from typing import Dict, FrozenSet


class TileType(IntEnum):
    """Terrain of a single hex cell. Stored as int8 in the grid array."""

    DEEP_WATER = 0
    SHALLOW_WATER = 1
    PLAIN = 2
    FOREST = 3
    DESERT = 4
    MOUNTAIN = 5


TILE_NAMES: Dict[TileType, str] = {
    TileType.DEEP_WATER: "deep_water",
    TileType.SHALLOW_WATER: "shallow_water",
    TileType.PLAIN: "plain",
    TileType.FOREST: "forest",
    TileType.DESERT: "desert",
    TileType.MOUNTAIN: "mountain",
}

# Single-character glyphs for ASCII previews
TILE_GLYPHS: Dict[TileType, str] = {
    TileType.DEEP_WATER: "~",
    TileType.SHALLOW_WATER: "-",
    TileType.PLAIN: ".",
    TileType.FOREST: "T",
    TileType.DESERT: ":",
    TileType.MOUNTAIN: "^",
}

WATER_TILES: FrozenSet[TileType] = frozenset(
    {TileType.DEEP_WATER, TileType.SHALLOW_WATER}
)
LAND_TILES: FrozenSet[TileType] = frozenset(
    {TileType.PLAIN, TileType.FOREST, TileType.DESERT, TileType.MOUNTAIN}
)


def is_water(tile: int) -> bool:
    """True for shallow or deep water."""
    return tile == TileType.SHALLOW_WATER or tile == TileType.DEEP_WATER


def is_land(tile: int) -> bool:
    """True for plain, forest, desert and mountain."""
    return tile >= TileType.PLAIN


def tile_from_name(name: str) -> TileType:
    """Case-insensitive lookup by name. Raises ValueError if unknown."""
    key = name.strip().lower()
    for tile, tile_name in TILE_NAMES.items():
        if tile_name == key:
            return tile
    valid = ", ".join(TILE_NAMES.values())
    raise ValueError(f"Invalid tile type '{name}'. Valid values: {valid}")
