"""
Shared type definitions for M-Mazing tiles.

Cells and walls are modelled as small frozen dataclasses (one per variant)
joined into the `TileCell` and `WallState` unions, so tiles can be compared
and copied like plain values.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

GRID_WIDTH = 4
"""Cells per side of a tile."""

MAX_ESCALATORS_PER_TILE = 4


class Pawn(Enum):
    """Hero pawn colors."""

    GREEN = "green"
    ORANGE = "orange"
    YELLOW = "yellow"
    PURPLE = "purple"


class CellItemAvailability(Enum):
    """Whether a one-shot cell item (timer, camera, crystal ball) was used."""

    AVAILABLE = "available"
    USED = "used"

    def toggled(self) -> CellItemAvailability:
        if self is CellItemAvailability.AVAILABLE:
            return CellItemAvailability.USED
        return CellItemAvailability.AVAILABLE


class Direction(Enum):
    """Cardinal direction on a tile (y grows downward)."""

    RIGHT = "right"
    UP = "up"
    LEFT = "left"
    DOWN = "down"

    def neighbor_transform(self) -> tuple[int, int]:
        """What to add to a coordinate to step one cell in this direction."""
        return _NEIGHBOR_TRANSFORMS[self]

    def as_angle(self) -> float:
        """Direction as an angle in radians, counter-clockwise from RIGHT."""
        return _ANGLES[self]


ALL_DIRECTIONS: tuple[Direction, ...] = (
    Direction.RIGHT,
    Direction.UP,
    Direction.LEFT,
    Direction.DOWN,
)

_NEIGHBOR_TRANSFORMS = {
    Direction.RIGHT: (1, 0),
    Direction.UP: (0, -1),
    Direction.LEFT: (-1, 0),
    Direction.DOWN: (0, 1),
}

_ANGLES = {
    Direction.RIGHT: 0.0,
    Direction.UP: math.pi / 2,
    Direction.LEFT: math.pi,
    Direction.DOWN: 1.5 * math.pi,
}


class SpinDirection(Enum):
    """Quarter-turn rotation sense."""

    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counter_clockwise"


# =============================================================================
# Cell Types
# =============================================================================


@dataclass(frozen=True)
class Empty:
    """Pawns walk freely through."""

    pass


@dataclass(frozen=True)
class Warp:
    """A pawn of this color can be warped to this point."""

    pawn: Pawn


@dataclass(frozen=True)
class TimerFlip:
    """Sand timer can be flipped here."""

    availability: CellItemAvailability = CellItemAvailability.AVAILABLE


@dataclass(frozen=True)
class Camera:
    """Security camera."""

    availability: CellItemAvailability = CellItemAvailability.AVAILABLE


@dataclass(frozen=True)
class Loot:
    """Loot the pawn of this color must steal before leaving."""

    pawn: Pawn


@dataclass(frozen=True)
class FinalExit:
    """Exit for the pawn of this color."""

    pawn: Pawn


@dataclass(frozen=True)
class CrystalBall:
    """Crystal ball."""

    availability: CellItemAvailability = CellItemAvailability.AVAILABLE


TileCell = Empty | Warp | TimerFlip | Camera | Loot | FinalExit | CrystalBall

_STATEFUL_CELLS = (TimerFlip, Camera, CrystalBall)


def is_used(cell: TileCell) -> bool:
    """True for a timer, camera or crystal ball that has been used."""
    return (
        isinstance(cell, _STATEFUL_CELLS)
        and cell.availability is CellItemAvailability.USED
    )


def with_availability(cell: TileCell, availability: CellItemAvailability) -> TileCell:
    """
    Return `cell` with its availability replaced.

    Cells that carry no availability come back unchanged.
    """
    if isinstance(cell, _STATEFUL_CELLS):
        return dataclasses.replace(cell, availability=availability)
    return cell


# =============================================================================
# Wall Types
# =============================================================================


@dataclass(frozen=True)
class Open:
    """No wall."""

    pass


@dataclass(frozen=True)
class Blocked:
    """Solid wall."""

    pass


@dataclass(frozen=True)
class Explore:
    """Edge opening onto an unexplored tile, tied to one pawn color."""

    pawn: Pawn


@dataclass(frozen=True)
class Entrance:
    """Edge opening through which the tile was entered."""

    pass


@dataclass(frozen=True)
class OrangeOnly:
    """Passage only the orange pawn may cross."""

    pass


WallState = Open | Blocked | Explore | Entrance | OrangeOnly


# =============================================================================
# Textual Encoding
# =============================================================================

T = TypeVar("T")


@dataclass(frozen=True)
class TokenTable(Generic[T]):
    """Single-character alphabet for one slot of the tile notation."""

    name: str
    chars: dict[str, T]

    @property
    def allowed(self) -> str:
        return "".join(self.chars)

    def parse(self, char: str) -> T | None:
        return self.chars.get(char)


@dataclass(frozen=True)
class Placeholder:
    """Corner filler between walls in the tile notation."""

    pass


CELL_TOKENS: TokenTable[TileCell] = TokenTable(
    "TileCell",
    {
        " ": Empty(),
        "1": Warp(Pawn.GREEN),
        "2": Warp(Pawn.ORANGE),
        "3": Warp(Pawn.YELLOW),
        "4": Warp(Pawn.PURPLE),
        "G": FinalExit(Pawn.GREEN),
        "O": FinalExit(Pawn.ORANGE),
        "Y": FinalExit(Pawn.YELLOW),
        "P": FinalExit(Pawn.PURPLE),
        "g": Loot(Pawn.GREEN),
        "o": Loot(Pawn.ORANGE),
        "y": Loot(Pawn.YELLOW),
        "p": Loot(Pawn.PURPLE),
        "c": Camera(),
        "t": TimerFlip(),
        "b": CrystalBall(),
    },
)

WALL_TOKENS: TokenTable[WallState] = TokenTable(
    "Wall",
    {
        " ": Open(),
        "-": Blocked(),
        "|": Blocked(),
        "^": Entrance(),
        "5": Explore(Pawn.GREEN),
        "6": Explore(Pawn.ORANGE),
        "7": Explore(Pawn.YELLOW),
        "8": Explore(Pawn.PURPLE),
    },
)

PLACEHOLDER_TOKENS: TokenTable[Placeholder] = TokenTable("Placeholder", {"+": Placeholder()})
