"""Offset-coordinate hex grid and the tile grid shared by every stage."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, NamedTuple, Sequence, Tuple

import numpy as np

from ..exceptions import InvalidDimensionsError
from .tiles import TileType


class HexCoordinate(NamedTuple):
    """Offset hex coordinate. Odd rows are shifted half a cell to the right."""

    col: int
    row: int


# (dcol, drow) in the order: upper-left, upper-right, left, right,
# lower-left, lower-right
EVEN_ROW_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (0, -1), (-1, 0), (1, 0), (-1, 1), (0, 1),
)
ODD_ROW_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (0, -1), (1, -1), (-1, 0), (1, 0), (0, 1), (1, 1),
)


def validate_dimensions(width, height) -> None:
    """Raise InvalidDimensionsError unless both are positive integers."""
    for value in (width, height):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidDimensionsError(width, height)
        if value <= 0:
            raise InvalidDimensionsError(width, height)


def hex_neighbors(
    coord: HexCoordinate, width: int, height: int, wrap_horizontal: bool = False
) -> List[HexCoordinate]:
    """
    Return the up-to-six neighbors of ``coord``.

    Rows never wrap; neighbors above the first or below the last row are
    dropped. Columns are dropped at the edges too unless ``wrap_horizontal``
    is set, in which case they wrap modulo ``width``. The cell itself is never
    returned and no neighbor appears twice, which keeps the relation symmetric
    even on one- or two-column wrapped grids.
    """
    col, row = coord
    offsets = EVEN_ROW_OFFSETS if row % 2 == 0 else ODD_ROW_OFFSETS

    result: List[HexCoordinate] = []
    for dcol, drow in offsets:
        n_row = row + drow
        if n_row < 0 or n_row >= height:
            continue
        n_col = col + dcol
        if wrap_horizontal:
            n_col %= width
        elif n_col < 0 or n_col >= width:
            continue
        neighbor = HexCoordinate(n_col, n_row)
        if neighbor == coord or neighbor in result:
            continue
        result.append(neighbor)
    return result


def build_neighbor_table(
    width: int, height: int, wrap_horizontal: bool = False
) -> List[List[Tuple[HexCoordinate, ...]]]:
    """Pre-compute neighbors for every cell, indexed ``[row][col]``."""
    return [
        [
            tuple(hex_neighbors(HexCoordinate(col, row), width, height, wrap_horizontal))
            for col in range(width)
        ]
        for row in range(height)
    ]


@dataclass
class TerrainGrid:
    """
    Fixed-size grid of tile types.

    ``tiles`` is an int8 array of shape (height, width) indexed ``[row, col]``;
    all public accessors take a HexCoordinate so callers never transpose.
    The neighbor table built at construction is the only adjacency used by
    the generator.
    """

    width: int
    height: int
    tiles: np.ndarray
    wrap_horizontal: bool = False
    neighbor_table: List[List[Tuple[HexCoordinate, ...]]] = field(
        default=None, repr=False
    )

    def __post_init__(self):
        validate_dimensions(self.width, self.height)
        if self.tiles.shape != (self.height, self.width):
            raise ValueError(
                f"tiles shape {self.tiles.shape} does not match "
                f"{self.width}x{self.height}"
            )
        if self.neighbor_table is None:
            self.neighbor_table = build_neighbor_table(
                self.width, self.height, self.wrap_horizontal
            )

    @classmethod
    def filled(
        cls,
        width: int,
        height: int,
        tile: TileType = TileType.SHALLOW_WATER,
        wrap_horizontal: bool = False,
    ) -> "TerrainGrid":
        """Create a grid with every cell set to ``tile``."""
        validate_dimensions(width, height)
        tiles = np.full((height, width), int(tile), dtype=np.int8)
        return cls(width, height, tiles, wrap_horizontal=wrap_horizontal)

    @classmethod
    def from_rows(
        cls, rows: Sequence[Sequence[int]], wrap_horizontal: bool = False
    ) -> "TerrainGrid":
        """Create a grid from row-major tile values (``rows[row][col]``)."""
        if not rows or not rows[0]:
            raise InvalidDimensionsError(len(rows[0]) if rows else 0, len(rows))
        tiles = np.array([[int(t) for t in row] for row in rows], dtype=np.int8)
        height, width = tiles.shape
        return cls(width, height, tiles, wrap_horizontal=wrap_horizontal)

    @property
    def size(self) -> int:
        return self.width * self.height

    @property
    def is_frozen(self) -> bool:
        return not self.tiles.flags.writeable

    def __getitem__(self, coord: HexCoordinate) -> TileType:
        return TileType(int(self.tiles[coord[1], coord[0]]))

    def __setitem__(self, coord: HexCoordinate, tile: TileType) -> None:
        self.tiles[coord[1], coord[0]] = int(tile)

    def in_bounds(self, coord: HexCoordinate) -> bool:
        return 0 <= coord[0] < self.width and 0 <= coord[1] < self.height

    def neighbors(self, coord: HexCoordinate) -> Tuple[HexCoordinate, ...]:
        """Neighbors of ``coord`` from the pre-computed table."""
        return self.neighbor_table[coord[1]][coord[0]]

    def neighbor_types(self, coord: HexCoordinate) -> List[TileType]:
        return [self[n] for n in self.neighbors(coord)]

    def coordinates(self) -> Iterator[HexCoordinate]:
        """All coordinates in row-major order."""
        for row in range(self.height):
            for col in range(self.width):
                yield HexCoordinate(col, row)

    def cells_of(self, *tiles: TileType) -> List[HexCoordinate]:
        """Coordinates (row-major) whose tile is one of ``tiles``."""
        mask = np.isin(self.tiles, [int(t) for t in tiles])
        rows, cols = np.nonzero(mask)
        return [HexCoordinate(int(c), int(r)) for r, c in zip(rows, cols)]

    def count(self, tile: TileType) -> int:
        return int(np.count_nonzero(self.tiles == int(tile)))

    def copy(self) -> "TerrainGrid":
        """Writable deep copy sharing the (immutable) neighbor table."""
        return TerrainGrid(
            self.width,
            self.height,
            self.tiles.copy(),
            wrap_horizontal=self.wrap_horizontal,
            neighbor_table=self.neighbor_table,
        )

    def apply(self, updates: Iterable[Tuple[HexCoordinate, TileType]]) -> int:
        """Commit a buffer of (coord, tile) updates at once. Returns changes."""
        changed = 0
        for coord, tile in updates:
            if self.tiles[coord[1], coord[0]] != int(tile):
                self.tiles[coord[1], coord[0]] = int(tile)
                changed += 1
        return changed

    def freeze(self) -> "TerrainGrid":
        """Make the tile array read-only for hand-off to collaborators."""
        self.tiles.setflags(write=False)
        return self

    def to_rows(self) -> List[List[TileType]]:
        return [
            [TileType(int(t)) for t in self.tiles[row]] for row in range(self.height)
        ]
