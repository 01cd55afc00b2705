"""
The tile aggregate: a 4x4 cell grid, its walls and escalators.

Walls live in two matrices:
- horz_walls[y][x] is the wall above cell (x, y); row GRID_WIDTH is the bottom edge
- vert_walls[y][x] is the wall left of cell (x, y); column GRID_WIDTH is the right edge
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Sequence, TypeVar

from grid_coord import EscalatorLocation, TileGridCoord
from tile_types import (
    ALL_DIRECTIONS,
    GRID_WIDTH,
    MAX_ESCALATORS_PER_TILE,
    CellItemAvailability,
    Direction,
    Empty,
    Entrance,
    Explore,
    Open,
    SpinDirection,
    TileCell,
    WallState,
    with_availability,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ReachabilityGrid = list[list[bool]]

POSSIBLE_ENTRANCE_COORDS: tuple[TileGridCoord, ...] = (
    TileGridCoord(0, 1),
    TileGridCoord(1, 3),
    TileGridCoord(2, 0),
    TileGridCoord(3, 2),
)
"""Cells whose outer wall can lead onto the tile; fixed by the board design."""


def rotate_matrix(matrix: Sequence[Sequence[T]], spin: SpinDirection) -> list[list[T]]:
    """
    Rotate a rectangular matrix a quarter turn.

    An H x W matrix becomes W x H.
    Clockwise: (row, col) -> (col, H - 1 - row)
    Counter-clockwise: (row, col) -> (W - 1 - col, row)
    """
    height = len(matrix)
    width = len(matrix[0]) if matrix else 0
    out: list[list[T]] = [[None] * height for _ in range(width)]  # type: ignore

    for row_idx, row in enumerate(matrix):
        for col_idx, value in enumerate(row):
            if spin is SpinDirection.CLOCKWISE:
                out[col_idx][height - 1 - row_idx] = value
            else:
                out[width - 1 - col_idx][row_idx] = value
    return out


def _default_cells() -> list[list[TileCell]]:
    return [[Empty() for _ in range(GRID_WIDTH)] for _ in range(GRID_WIDTH)]


def _default_horz_walls() -> list[list[WallState]]:
    return [[Open() for _ in range(GRID_WIDTH)] for _ in range(GRID_WIDTH + 1)]


def _default_vert_walls() -> list[list[WallState]]:
    return [[Open() for _ in range(GRID_WIDTH + 1)] for _ in range(GRID_WIDTH)]


def _check_shape(name: str, matrix: Sequence[Sequence[object]], rows: int, cols: int) -> None:
    if len(matrix) != rows or any(len(row) != cols for row in matrix):
        raise ValueError(
            f"{name} must be {rows}x{cols}, got "
            f"{len(matrix)} rows of lengths {[len(row) for row in matrix]}"
        )


@dataclass
class Tile:
    """
    One M-Mazing tile.

    A default tile is all `Empty` cells behind all `Open` walls; real tiles
    come from the parser.
    """

    cell_grid: list[list[TileCell]] = field(default_factory=_default_cells)
    horz_walls: list[list[WallState]] = field(default_factory=_default_horz_walls)
    vert_walls: list[list[WallState]] = field(default_factory=_default_vert_walls)
    escalators: list[EscalatorLocation] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.cell_grid = [list(row) for row in self.cell_grid]
        self.horz_walls = [list(row) for row in self.horz_walls]
        self.vert_walls = [list(row) for row in self.vert_walls]
        self.escalators = list(self.escalators)

        _check_shape("cell_grid", self.cell_grid, GRID_WIDTH, GRID_WIDTH)
        _check_shape("horz_walls", self.horz_walls, GRID_WIDTH + 1, GRID_WIDTH)
        _check_shape("vert_walls", self.vert_walls, GRID_WIDTH, GRID_WIDTH + 1)
        if len(self.escalators) > MAX_ESCALATORS_PER_TILE:
            raise ValueError(
                f"Tile holds at most {MAX_ESCALATORS_PER_TILE} escalators, "
                f"got {len(self.escalators)}"
            )

    @classmethod
    def from_str(cls, text: str) -> Tile:
        """Parse a single tile from its text notation."""
        from tile_parser import parse_tile

        return parse_tile(text)

    def copy(self) -> Tile:
        return Tile(self.cell_grid, self.horz_walls, self.vert_walls, self.escalators)

    # -------------------------------------------------------------------------
    # Cells
    # -------------------------------------------------------------------------

    def cell_value(self, coord: TileGridCoord) -> TileCell:
        return self.cell_grid[coord.y][coord.x]

    def cells(self) -> Iterator[TileCell]:
        """All cells, row by row."""
        for row in self.cell_grid:
            yield from row

    def set_availability(self, coord: TileGridCoord, availability: CellItemAvailability) -> None:
        """Mark the item at `coord` available or used; no-op for cells without items."""
        self.cell_grid[coord.y][coord.x] = with_availability(self.cell_value(coord), availability)

    def set_all_availability(self, availability: CellItemAvailability) -> None:
        for coord in TileGridCoord.all():
            self.set_availability(coord, availability)

    def add_escalator(self, escalator: EscalatorLocation) -> None:
        if len(self.escalators) >= MAX_ESCALATORS_PER_TILE:
            raise ValueError(f"Exceeded max of {MAX_ESCALATORS_PER_TILE} escalators")
        self.escalators.append(escalator)

    # -------------------------------------------------------------------------
    # Geometry queries
    # -------------------------------------------------------------------------

    def cell_outer_edge_directions(self, coord: TileGridCoord) -> list[Direction]:
        """
        Directions pointing to the edge of the tile.

        Interior cells have none, corner cells have two.
        """
        max_idx = GRID_WIDTH - 1
        dirs: list[Direction] = []
        if coord.x == 0:
            dirs.append(Direction.LEFT)
        if coord.x == max_idx:
            dirs.append(Direction.RIGHT)
        if coord.y == 0:
            dirs.append(Direction.UP)
        if coord.y == max_idx:
            dirs.append(Direction.DOWN)
        return dirs

    def cell_wall(self, coord: TileGridCoord, direction: Direction) -> WallState:
        x, y = coord.x, coord.y
        match direction:
            case Direction.UP:
                return self.horz_walls[y][x]
            case Direction.DOWN:
                return self.horz_walls[y + 1][x]
            case Direction.LEFT:
                return self.vert_walls[y][x]
            case Direction.RIGHT:
                return self.vert_walls[y][x + 1]
        raise ValueError(f"Unknown direction: {direction!r}")

    def cell_cardinal_neighbor_coords(
        self, coord: TileGridCoord, direction: Direction
    ) -> TileGridCoord | None:
        """Neighbor one step away in `direction`, ignoring walls."""
        return coord.added(*direction.neighbor_transform())

    def cell_cardinal_neighbor(self, coord: TileGridCoord, direction: Direction) -> TileCell | None:
        neighbor = self.cell_cardinal_neighbor_coords(coord, direction)
        if neighbor is None:
            return None
        return self.cell_value(neighbor)

    def cell_immediate_neighbor_coords(self, coord: TileGridCoord) -> list[TileGridCoord]:
        """
        Coordinates one step away, either by walking through an open wall or
        by riding an escalator. Sorted, without duplicates.
        """
        neighbors: set[TileGridCoord] = set()

        for direction in ALL_DIRECTIONS:
            neighbor = self.cell_cardinal_neighbor_coords(coord, direction)
            # TODO: let the orange pawn through OrangeOnly walls once pawns take part in movement
            if neighbor is not None and isinstance(self.cell_wall(coord, direction), Open):
                neighbors.add(neighbor)

        for escalator in self.escalators:
            neighbor = escalator.coord_neighbor(coord)
            if neighbor is not None:
                neighbors.add(neighbor)

        return sorted(neighbors)

    def cell_exit_direction(self, coord: TileGridCoord) -> Direction:
        """
        The single outer edge of `coord` with an open wall, used to point exit
        arrows off the tile. Falls back to RIGHT when there is not exactly one.
        """
        open_exit_dirs = [
            direction
            for direction in self.cell_outer_edge_directions(coord)
            if isinstance(self.cell_wall(coord, direction), Open)
        ]
        if len(open_exit_dirs) == 1:
            return open_exit_dirs[0]

        logger.warning("Unable to find a good direction for exit direction at %s", coord)
        return Direction.RIGHT

    # -------------------------------------------------------------------------
    # Reachability
    # -------------------------------------------------------------------------

    def reachable_coords_starting(self) -> list[TileGridCoord]:
        """Entrance cells whose outer wall is not blocked."""
        starting: list[TileGridCoord] = []
        for coord in POSSIBLE_ENTRANCE_COORDS:
            edge_dirs = self.cell_outer_edge_directions(coord)
            if len(edge_dirs) != 1:
                raise AssertionError(
                    f"there should only be one edge direction for possible entrance {coord}, "
                    f"found {edge_dirs}"
                )
            wall = self.cell_wall(coord, edge_dirs[0])
            if isinstance(wall, (Entrance, Explore, Open)):
                starting.append(coord)
        return starting

    def reachable_coords(self) -> ReachabilityGrid:
        """
        Which cells can be reached from the tile's entrances.

        Returns a GRID_WIDTH x GRID_WIDTH matrix indexed [y][x].
        """
        explore_coords = self.reachable_coords_starting()
        visited: set[TileGridCoord] = set()
        is_reachable = [[False] * GRID_WIDTH for _ in range(GRID_WIDTH)]

        while explore_coords:
            coord = explore_coords.pop()
            visited.add(coord)
            is_reachable[coord.y][coord.x] = True

            for neighbor in self.cell_immediate_neighbor_coords(coord):
                if neighbor not in visited and neighbor not in explore_coords:
                    explore_coords.append(neighbor)

        return is_reachable

    # -------------------------------------------------------------------------
    # Rotation
    # -------------------------------------------------------------------------

    def rotated(self, spin: SpinDirection) -> Tile:
        """
        Copy of this tile turned a quarter turn.

        Horizontal walls become vertical walls and vice versa.
        """
        return Tile(
            cell_grid=rotate_matrix(self.cell_grid, spin),
            horz_walls=rotate_matrix(self.vert_walls, spin),
            vert_walls=rotate_matrix(self.horz_walls, spin),
            escalators=[escalator.rotated(spin) for escalator in self.escalators],
        )

    def rotate(self, spin: SpinDirection) -> None:
        new_tile = self.rotated(spin)
        self.cell_grid = new_tile.cell_grid
        self.horz_walls = new_tile.horz_walls
        self.vert_walls = new_tile.vert_walls
        self.escalators = new_tile.escalators
