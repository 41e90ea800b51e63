#!/usr/bin/env python3
"""
Tests for river carving.

Tests cover:
- Lake detection (connected Shallow+Deep bodies)
- Shoreline and nearest-water search
- Meander-weighted A* path search
- Carving scope (only Plain ever changes)
"""

import numpy as np
import pytest

from py_hexmap.core.hex_grid import HexCoordinate, TerrainGrid
from py_hexmap.core.hydrology import (
    RiverOptions,
    carve_path,
    carve_rivers,
    find_lakes,
    find_nearest_water,
    find_river_path,
    find_shore_cells,
    heuristic_weight,
)
from py_hexmap.core.noise import NoiseSource
from py_hexmap.core.tiles import TileType

C = HexCoordinate
D = TileType.DEEP_WATER
S = TileType.SHALLOW_WATER
P = TileType.PLAIN
M = TileType.MOUNTAIN
F = TileType.FOREST


@pytest.fixture
def lake_and_sea():
    """Plain 12x7 map with a one-cell lake, a shallow coast and deep sea."""
    grid = TerrainGrid.filled(12, 7, P)
    for row in range(7):
        grid[C(10, row)] = S
        grid[C(11, row)] = D
    grid[C(2, 3)] = S
    return grid


@pytest.fixture
def deep_centre_lake():
    """Plain 15x11 map with a 7x7 landlocked lake (3x3 Deep centre) and a pond."""
    grid = TerrainGrid.filled(15, 11, P)
    for row in range(2, 9):
        for col in range(1, 8):
            grid[C(col, row)] = S
    for row in range(4, 7):
        for col in range(3, 6):
            grid[C(col, row)] = D
    grid[C(14, 5)] = S
    return grid


def assert_connected(grid, path):
    for a, b in zip(path, path[1:]):
        assert b in grid.neighbors(a)


class TestLakes:
    def test_each_water_body_is_found(self, lake_and_sea):
        lakes = find_lakes(lake_and_sea)
        assert len(lakes) == 2
        assert [C(2, 3)] in lakes
        sea = next(lake for lake in lakes if C(11, 0) in lake)
        assert len(sea) == 14

    def test_deep_cells_join_the_body(self):
        grid = TerrainGrid.from_rows([[P, S, S, D]])
        assert find_lakes(grid) == [[C(1, 0), C(2, 0), C(3, 0)]]

    def test_deep_centre_keeps_lake_whole(self, deep_centre_lake):
        lakes = find_lakes(deep_centre_lake)
        big = next(lake for lake in lakes if C(4, 5) in lake)
        assert len(big) == 49
        assert C(2, 2) in big
        assert [C(14, 5)] in lakes

    def test_shore_cells(self, lake_and_sea):
        assert find_shore_cells(lake_and_sea, [C(2, 3)]) == [C(2, 3)]

    def test_no_shore_when_ringed_by_mountains(self):
        grid = TerrainGrid.filled(5, 5, M)
        grid[C(2, 2)] = S
        assert find_shore_cells(grid, [C(2, 2)]) == []


class TestSearch:
    def test_nearest_water_outside_lake(self):
        grid = TerrainGrid.from_rows([[S, P, P, S]])
        assert find_nearest_water(grid, C(0, 0), {C(0, 0)}) == C(3, 0)

    def test_nearest_water_only_crosses_plain(self):
        grid = TerrainGrid.from_rows([[S, P, M, S]])
        assert find_nearest_water(grid, C(0, 0), {C(0, 0)}) is None

    def test_straight_path(self):
        grid = TerrainGrid.from_rows([[S, P, P, S]])
        path = find_river_path(grid, C(0, 0), C(3, 0), 0.0)
        assert path == [C(0, 0), C(1, 0), C(2, 0), C(3, 0)]

    def test_path_blocked_by_mountain(self):
        grid = TerrainGrid.from_rows([[S, P, M, S]])
        assert find_river_path(grid, C(0, 0), C(3, 0), 0.5) is None

    def test_path_avoids_forest(self):
        grid = TerrainGrid.filled(6, 5, P)
        grid[C(3, 1)] = F
        grid[C(3, 2)] = F
        grid[C(3, 3)] = F
        path = find_river_path(grid, C(0, 2), C(5, 2), 0.0)
        assert path[0] == C(0, 2) and path[-1] == C(5, 2)
        assert all(grid[c] == P for c in path)
        assert_connected(grid, path)

    def test_meandering_path_is_valid(self, lake_and_sea):
        noise = NoiseSource(31, 0.1)
        path = find_river_path(lake_and_sea, C(2, 3), C(10, 3), 1.0, noise)
        assert path[0] == C(2, 3) and path[-1] == C(10, 3)
        assert all(lake_and_sea[c] == P for c in path[1:-1])
        assert_connected(lake_and_sea, path)

    @pytest.mark.parametrize(
        "meander,expected", [(0.0, 1.0), (0.5, 0.75), (1.0, 0.5), (1.6, 0.2), (5.0, 0.2)]
    )
    def test_heuristic_weight(self, meander, expected):
        assert heuristic_weight(meander) == pytest.approx(expected)


class TestCarving:
    def test_carve_path_only_touches_plain(self):
        grid = TerrainGrid.from_rows([[S, P, P, D]])
        carved = carve_path(grid, [C(0, 0), C(1, 0), C(2, 0), C(3, 0)])
        assert carved == 2
        assert grid.to_rows()[0] == [S, S, S, D]

    def test_rivers_connect_lake_to_sea(self, lake_and_sea):
        before = lake_and_sea.tiles.copy()
        rivers = carve_rivers(lake_and_sea, 7, RiverOptions(chance=1.0))

        # The sea is seeded first in row-major order; its nearest other
        # water is the one-cell lake.
        first = rivers[0]
        assert first.source.col == 10
        assert first.target == C(2, 3)
        assert first.carved_cells == first.length - 2
        assert_connected(lake_and_sea, first.cells)

        changed = before != lake_and_sea.tiles
        assert np.all(before[changed] == P)
        assert np.all(lake_and_sea.tiles[changed] == S)

    def test_lake_with_deep_centre_feeds_a_river(self, deep_centre_lake):
        lake = set(
            next(body for body in find_lakes(deep_centre_lake) if C(4, 5) in body)
        )
        before = deep_centre_lake.copy()
        rivers = carve_rivers(deep_centre_lake, 7, RiverOptions(chance=1.0))

        from_lake = [r for r in rivers if r.source in lake]
        assert from_lake
        for river in from_lake:
            assert before[river.source] == S

    def test_default_options(self, lake_and_sea):
        other = lake_and_sea.copy()
        first = carve_rivers(lake_and_sea, 11)
        second = carve_rivers(other, 11, RiverOptions())
        assert [r.cells for r in first] == [r.cells for r in second]
        np.testing.assert_array_equal(lake_and_sea.tiles, other.tiles)

    def test_zero_chance_carves_nothing(self, lake_and_sea):
        before = lake_and_sea.tiles.copy()
        assert carve_rivers(lake_and_sea, 7, RiverOptions(chance=0.0)) == []
        np.testing.assert_array_equal(before, lake_and_sea.tiles)

    def test_lake_ringed_by_mountains_yields_no_rivers(self):
        grid = TerrainGrid.filled(5, 5, M)
        grid[C(2, 2)] = S
        before = grid.tiles.copy()
        assert carve_rivers(grid, 3, RiverOptions(chance=1.0)) == []
        np.testing.assert_array_equal(before, grid.tiles)

    def test_map_without_lakes(self):
        grid = TerrainGrid.filled(8, 8, P)
        assert carve_rivers(grid, 3, RiverOptions(chance=1.0)) == []

    def test_reproducible(self, lake_and_sea):
        other = lake_and_sea.copy()
        carve_rivers(lake_and_sea, 123, RiverOptions(chance=1.0, meander_strength=0.8))
        carve_rivers(other, 123, RiverOptions(chance=1.0, meander_strength=0.8))
        np.testing.assert_array_equal(lake_and_sea.tiles, other.tiles)
