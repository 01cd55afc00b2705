"""
Coordinates inside a tile and the escalators linking them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from tile_types import GRID_WIDTH, SpinDirection


@dataclass(frozen=True, order=True)
class TileGridCoord:
    """
    Index (x, y) into a tile grid.

    - x: goes from left to right
    - y: goes from top to bottom

    Ordering is by x, then y.
    """

    x: int
    y: int

    def __post_init__(self) -> None:
        if not (0 <= self.x < GRID_WIDTH and 0 <= self.y < GRID_WIDTH):
            raise ValueError(
                f"Tile coordinate ({self.x}, {self.y}) outside of "
                f"{GRID_WIDTH}x{GRID_WIDTH} grid"
            )

    @classmethod
    def new(cls, x: int, y: int) -> TileGridCoord | None:
        """Build a coordinate, or None when (x, y) is off the grid."""
        if 0 <= x < GRID_WIDTH and 0 <= y < GRID_WIDTH:
            return cls(x, y)
        return None

    @classmethod
    def all(cls) -> Iterator[TileGridCoord]:
        """Every coordinate of the grid, row by row."""
        for y in range(GRID_WIDTH):
            for x in range(GRID_WIDTH):
                yield cls(x, y)

    def added(self, dx: int, dy: int) -> TileGridCoord | None:
        return TileGridCoord.new(self.x + dx, self.y + dy)

    def rotated(self, spin: SpinDirection) -> TileGridCoord:
        """Position of this coordinate after a quarter turn of the tile."""
        max_idx = GRID_WIDTH - 1
        if spin is SpinDirection.CLOCKWISE:
            return TileGridCoord(max_idx - self.y, self.x)
        return TileGridCoord(self.y, max_idx - self.x)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class EscalatorLocation:
    """Escalator joining two distinct coordinates of the same tile."""

    first: TileGridCoord
    second: TileGridCoord

    def __post_init__(self) -> None:
        if self.first == self.second:
            raise ValueError(f"Escalator endpoints must differ, got {self.first} twice")

    @property
    def coords(self) -> tuple[TileGridCoord, TileGridCoord]:
        return (self.first, self.second)

    def rotated(self, spin: SpinDirection) -> EscalatorLocation:
        return EscalatorLocation(self.first.rotated(spin), self.second.rotated(spin))

    def coord_neighbor(self, coord: TileGridCoord) -> TileGridCoord | None:
        """If `coord` is one end of the escalator, return the other end."""
        if self.first == coord:
            return self.second
        if self.second == coord:
            return self.first
        return None
