#!/usr/bin/env python3
"""
Generate sample hex maps from the command line.

Prints an ASCII preview and the seeds used; optionally writes the map as JSON
and renders a PNG.

Usage:
    python generate_sample_maps.py --width 48 --height 32 --preset archipelago
    python generate_sample_maps.py --all-presets --seed 1234 --png
"""

import argparse
import json
import sys
from pathlib import Path

import numpy as np
import structlog
from pydantic import ValidationError

from py_hexmap.config import get_preset, list_presets, settings
from py_hexmap.core.pipeline import GenerationResult, generate_terrain
from py_hexmap.core.tiles import TILE_NAMES, TileType
from py_hexmap.exceptions import TerrainGenerationError
from py_hexmap.export import grid_to_ascii, result_to_dict, tile_statistics
from py_hexmap.utils.logging import configure_logging

logger = structlog.get_logger()

TILE_COLORS = {
    TileType.DEEP_WATER: "#003366",
    TileType.SHALLOW_WATER: "#3d85c6",
    TileType.PLAIN: "#9fcf7f",
    TileType.FOREST: "#2f6b2f",
    TileType.DESERT: "#e6d28c",
    TileType.MOUNTAIN: "#8c7b6b",
}


def render_png(result: GenerationResult, output_file: Path) -> None:
    """Render the tile grid with odd rows shifted half a cell."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from matplotlib.patches import RegularPolygon

    grid = result.grid
    fig, ax = plt.subplots(figsize=(max(4, grid.width * 0.25), max(3, grid.height * 0.22)))

    hex_width = np.sqrt(3.0)
    for row in range(grid.height):
        for col in range(grid.width):
            tile = TileType(int(grid.tiles[row, col]))
            x = col * hex_width + (hex_width / 2 if row % 2 else 0.0)
            y = -row * 1.5
            ax.add_patch(
                RegularPolygon(
                    (x, y),
                    numVertices=6,
                    radius=1.0,
                    facecolor=TILE_COLORS[tile],
                    edgecolor="none",
                )
            )

    ax.set_xlim(-hex_width, grid.width * hex_width + hex_width)
    ax.set_ylim(-grid.height * 1.5, 1.5)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])

    stats = tile_statistics(grid)
    ax.set_title(
        f"{grid.width}x{grid.height} | land {stats['land_fraction'] * 100:.1f}% | "
        f"rivers {result.stats.get('rivers', 0)}",
        fontsize=10,
    )

    plt.savefig(output_file, dpi=150, bbox_inches="tight", pad_inches=0.1)
    plt.close(fig)


def print_summary(name: str, result: GenerationResult) -> None:
    stats = tile_statistics(result.grid)
    print(f"\n{name}: {result.width}x{result.height}")
    print("  Seeds: " + ", ".join(f"{k}={v}" for k, v in result.seeds.items()))
    for tile in TileType:
        label = TILE_NAMES[tile]
        print(f"  {label:<14} {stats['counts'][label]:>6} ({stats['fractions'][label] * 100:5.1f}%)")
    print(f"  Lakes: {result.stats['lakes']}  Rivers: {result.stats['rivers']}")
    print()
    print(grid_to_ascii(result.grid))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate sample hex terrain maps")
    parser.add_argument("--width", type=int, default=settings.default_map_width, help="Map columns")
    parser.add_argument("--height", type=int, default=settings.default_map_height, help="Map rows")
    parser.add_argument(
        "--preset",
        default=settings.default_preset,
        choices=list_presets(),
        help="Parameter preset",
    )
    parser.add_argument("--all-presets", action="store_true", help="Generate one map per preset")
    parser.add_argument("--seed", type=int, default=None, help="Seed for every stage (0 = random)")
    parser.add_argument("--json", type=Path, default=None, help="Write the map as JSON to this path")
    parser.add_argument("--png", action="store_true", help="Render map_<preset>_<seed>.png")
    parser.add_argument("--quiet", action="store_true", help="Skip the ASCII preview")
    parser.add_argument("--log-level", default="WARNING", help="Log level")
    return parser


def main(argv=None) -> int:
    """Generate sample maps."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, "console")

    presets = list_presets() if args.all_presets else [args.preset]
    for preset in presets:
        try:
            config = get_preset(preset)
            if args.seed is not None:
                config = config.with_seed(args.seed)
            result = generate_terrain(args.width, args.height, config)
        except (TerrainGenerationError, ValidationError) as e:
            print(f"ERROR generating {preset}: {e}", file=sys.stderr)
            return 1
        logger.info("Sample map generated", preset=preset, seeds=result.seeds)

        if not args.quiet:
            print_summary(preset, result)

        if args.json:
            path = args.json
            if len(presets) > 1:
                path = path.with_name(f"{path.stem}_{preset}{path.suffix}")
            path.write_text(json.dumps(result_to_dict(result), indent=2))
            print(f"Saved JSON to: {path}")

        if args.png:
            output_file = Path(f"map_{preset}_{result.seeds['land']}.png")
            render_png(result, output_file)
            print(f"Saved PNG to: {output_file}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
