"""
Read-only views of a finished map: JSON-friendly dicts, ASCII previews and
tile statistics.
"""

from typing import Any, Dict, List

from .core.hex_grid import TerrainGrid
from .core.pipeline import GenerationResult
from .core.tiles import LAND_TILES, TILE_GLYPHS, TILE_NAMES, TileType


def tile_statistics(grid: TerrainGrid) -> Dict[str, Any]:
    """Per-tile counts and fractions plus land/water totals."""
    counts = {TILE_NAMES[tile]: grid.count(tile) for tile in TileType}
    total = grid.size
    land = sum(grid.count(tile) for tile in LAND_TILES)

    return {
        "total_cells": total,
        "counts": counts,
        "fractions": {name: round(count / total, 4) for name, count in counts.items()},
        "land_cells": land,
        "water_cells": total - land,
        "land_fraction": round(land / total, 4),
    }


def grid_to_rows(grid: TerrainGrid) -> List[List[int]]:
    """Tile values as plain ints, ``rows[row][col]``."""
    return grid.tiles.astype(int).tolist()


def grid_to_ascii(grid: TerrainGrid) -> str:
    """One line per row; odd rows are indented to show the hex offset."""
    lines = []
    for row in range(grid.height):
        glyphs = " ".join(TILE_GLYPHS[TileType(int(t))] for t in grid.tiles[row])
        lines.append((" " if row % 2 else "") + glyphs)
    return "\n".join(lines)


def result_to_dict(result: GenerationResult, include_tiles: bool = True) -> Dict[str, Any]:
    """Serializable summary of a generation run."""
    data: Dict[str, Any] = {
        "width": result.width,
        "height": result.height,
        "wrap_horizontal": result.grid.wrap_horizontal,
        "seeds": dict(result.seeds),
        "config": result.config.model_dump(by_alias=True),
        "stats": result.stats,
        "legend": {int(tile): TILE_NAMES[tile] for tile in TileType},
        "rivers": [
            {
                "id": river.id,
                "source": list(river.source),
                "target": list(river.target),
                "length": river.length,
            }
            for river in result.rivers
        ],
    }
    if include_tiles:
        data["tiles"] = grid_to_rows(result.grid)
    return data
