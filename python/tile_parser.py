"""
Parser for the ASCII tile notation.

A tile is five wall rows interleaved with four cell rows, optionally
followed by an escalator line:

    +-+-+7+-+
    |  1   c|
    + +-+-+ +
    |   |t  |
    +-+ + +-+
    |   |   |
    + +-+-+ +
    |O|     |
    + +^+ + +
    E: 01-23, 00-33

A tileset is a sequence of tiles, each introduced by an `@name` line.
Blank lines and `#` comments may appear between tiles.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterator, TypeVar

from grid_coord import EscalatorLocation, TileGridCoord
from tile import Tile
from tile_types import (
    CELL_TOKENS,
    GRID_WIDTH,
    MAX_ESCALATORS_PER_TILE,
    PLACEHOLDER_TOKENS,
    WALL_TOKENS,
    TokenTable,
)

__all__ = [
    "IncompleteLine",
    "IncompleteTile",
    "InvalidEscalator",
    "InvalidNameLeader",
    "InvalidTileName",
    "ItemParse",
    "NoMoreTiles",
    "RowHasExtra",
    "TileParsingError",
    "WrongNumberOfRows",
    "parse_tile",
    "parse_tileset",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

NumberedLines = Iterator[tuple[int, str]]

ESCALATOR_PREFIX = "E:"
TILE_NAME_LEADER = "@"
COMMENT_LEADER = "#"


# =============================================================================
# Errors
# =============================================================================


class TileParsingError(ValueError):
    """Base class for every failure to read the tile notation."""

    line_number: int


class InvalidNameLeader(TileParsingError):
    def __init__(self, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(
            f"Expected tile name leader '{TILE_NAME_LEADER}', "
            f"at line {line_number} found line {line!r}"
        )


class InvalidTileName(TileParsingError):
    def __init__(self, line_number: int, name: str) -> None:
        self.line_number = line_number
        self.name = name
        super().__init__(f"Expected ASCII tile name, at line {line_number} found {name!r}")


class IncompleteTile(TileParsingError):
    def __init__(self, line_number: int) -> None:
        self.line_number = line_number
        super().__init__(f"Incomplete tile at line {line_number}")


class IncompleteLine(TileParsingError):
    def __init__(self, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"Unexpected end-of-line for line {line_number}: {line!r}")


class WrongNumberOfRows(TileParsingError):
    def __init__(self, line_number: int, num_rows: int) -> None:
        self.line_number = line_number
        self.num_rows = num_rows
        super().__init__(f"Invalid number of rows at line {line_number}, found {num_rows} rows")


class RowHasExtra(TileParsingError):
    def __init__(self, line_number: int, col_number: int, line: str) -> None:
        self.line_number = line_number
        self.col_number = col_number
        self.line = line
        super().__init__(
            f"Row has extra characters on line {line_number}, column {col_number}: {line!r}"
        )


class ItemParse(TileParsingError):
    """A character that is not in the alphabet of its slot."""

    def __init__(
        self, line_number: int, col_number: int, line: str, char: str, name: str, allowed: str
    ) -> None:
        self.line_number = line_number
        self.col_number = col_number
        self.line = line
        self.char = char
        self.name = name
        self.allowed = allowed
        super().__init__(
            f"Failed to parse item {char!r} as {name} on line {line_number}, "
            f"column {col_number}: {line!r}; must be in {allowed!r}"
        )


class InvalidEscalator(TileParsingError):
    def __init__(self, line_number: int, line: str, msg: str) -> None:
        self.line_number = line_number
        self.line = line
        self.msg = msg
        super().__init__(
            f"Invalid escalator line {line_number}: {line!r}; {msg}"
        )


class NoMoreTiles(TileParsingError):
    """Input ran out before another tile header."""

    def __init__(self, line_number: int = 0) -> None:
        self.line_number = line_number
        super().__init__("No more tiles found")


# =============================================================================
# Line handling
# =============================================================================


def _numbered_lines(text: str) -> NumberedLines:
    """
    Yield (line_number, line) with 1-based numbers.

    Splits on newlines only; a trailing newline does not start an extra line
    and a carriage return before the newline is dropped.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    for idx, line in enumerate(lines):
        if line.endswith("\r"):
            line = line[:-1]
        yield idx + 1, line


def _is_skippable(line: str) -> bool:
    return not line or line.startswith(COMMENT_LEADER)


class _LineCursor:
    """Consumes one line a character at a time."""

    def __init__(self, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        self.col = 0

    def eat(self, tokens: TokenTable[T]) -> T:
        if self.col >= len(self.line):
            raise IncompleteLine(self.line_number, self.line)

        char = self.line[self.col]
        value = tokens.parse(char)
        if value is None:
            raise ItemParse(
                self.line_number, self.col, self.line, char, tokens.name, tokens.allowed
            )
        self.col += 1
        return value

    def ensure_consumed(self) -> None:
        if self.col < len(self.line):
            raise RowHasExtra(self.line_number, self.col, self.line)


# =============================================================================
# Tile parsing
# =============================================================================


class _RowKind(Enum):
    WALL = "wall"
    CELL = "cell"
    ESCALATOR = "escalator"


def _parse_wall_row(cursor: _LineCursor, tile: Tile, row_num: int) -> None:
    """`+W+W+W+W+`: the horizontal walls above cell row `row_num`."""
    if row_num > GRID_WIDTH:
        raise WrongNumberOfRows(cursor.line_number, row_num + 1)

    cursor.eat(PLACEHOLDER_TOKENS)
    for x in range(GRID_WIDTH):
        tile.horz_walls[row_num][x] = cursor.eat(WALL_TOKENS)
        cursor.eat(PLACEHOLDER_TOKENS)


def _parse_cell_row(cursor: _LineCursor, tile: Tile, row_num: int) -> None:
    """`WCWCWCWCW`: one row of cells with the vertical walls around them."""
    if row_num >= GRID_WIDTH:
        raise WrongNumberOfRows(cursor.line_number, row_num + 1)

    tile.vert_walls[row_num][0] = cursor.eat(WALL_TOKENS)
    for x in range(GRID_WIDTH):
        tile.cell_grid[row_num][x] = cursor.eat(CELL_TOKENS)
        tile.vert_walls[row_num][x + 1] = cursor.eat(WALL_TOKENS)


def _parse_escalator_digit(char: str, line_number: int, line: str) -> int:
    if len(char) != 1 or char not in "0123456789":
        raise InvalidEscalator(line_number, line, "Unable to parse digit")
    return int(char)


def _parse_escalator_line(line_number: int, line: str, tile: Tile) -> None:
    """
    Parse `E: x1y1-x2y2, ...` into the tile's escalators.

    An empty line means the tile has no escalators.
    """
    if not line:
        logger.debug("    found empty escalator line")
        return
    if not line.startswith(ESCALATOR_PREFIX):
        raise InvalidEscalator(line_number, line, "Invalid prefix")

    for hunk in line[len(ESCALATOR_PREFIX):].split(","):
        hunk = hunk.strip()
        if len(hunk) != 5 or hunk[2] != "-":
            raise InvalidEscalator(line_number, line, "invalid escalator hunk")

        x1, y1, x2, y2 = (
            _parse_escalator_digit(char, line_number, line) for char in hunk[:2] + hunk[3:]
        )
        first = TileGridCoord.new(x1, y1)
        second = TileGridCoord.new(x2, y2)
        if first is None or second is None:
            raise InvalidEscalator(line_number, line, "Invalid tile coordinates")
        if first == second:
            raise InvalidEscalator(line_number, line, "Escalator endpoints must differ")
        if len(tile.escalators) >= MAX_ESCALATORS_PER_TILE:
            raise InvalidEscalator(line_number, line, "Exceeded max escalators")

        tile.add_escalator(EscalatorLocation(first, second))


def _tile_from_lines(lines: NumberedLines) -> Tile:
    """
    Read one tile body (and its optional escalator line) from `lines`.

    Blank and comment lines are skipped only before the first wall row.
    The line after the last wall row is always taken as the escalator line.
    """
    kind = _RowKind.WALL
    row_num = 0
    allow_line_skips = True
    line_number = 0
    tile = Tile()

    for line_number, line in lines:
        logger.debug(
            "line %d: %r ; state=%s %d; allow_line_skips=%s",
            line_number,
            line,
            kind.value,
            row_num,
            allow_line_skips,
        )

        if allow_line_skips and _is_skippable(line):
            continue
        allow_line_skips = False

        if kind is _RowKind.ESCALATOR:
            _parse_escalator_line(line_number, line, tile)
            return tile

        cursor = _LineCursor(line_number, line)
        if kind is _RowKind.WALL:
            _parse_wall_row(cursor, tile, row_num)
            kind = _RowKind.ESCALATOR if row_num == GRID_WIDTH else _RowKind.CELL
        else:
            _parse_cell_row(cursor, tile, row_num)
            kind = _RowKind.WALL
            row_num += 1
        cursor.ensure_consumed()

    if kind is not _RowKind.ESCALATOR:
        raise IncompleteTile(line_number)
    return tile


def parse_tile(text: str) -> Tile:
    """
    Parse a single tile.

    Raises:
        TileParsingError: (a subclass of) when the text is not a valid tile
    """
    return _tile_from_lines(_numbered_lines(text))


# =============================================================================
# Tileset parsing
# =============================================================================


def _next_tile_name(lines: NumberedLines) -> str:
    """Skip to the next `@name` header and return the name."""
    for line_number, line in lines:
        logger.debug("tileset line %d: %r", line_number, line)
        if _is_skippable(line):
            continue

        if not line.startswith(TILE_NAME_LEADER):
            raise InvalidNameLeader(line_number, line)
        name = line[len(TILE_NAME_LEADER):]
        if not name.isascii():
            raise InvalidTileName(line_number, name)

        logger.debug("parsed tile_name %r", name)
        return name

    raise NoMoreTiles()


def iter_tileset(text: str) -> Iterator[tuple[str, Tile]]:
    """Yield (name, tile) pairs as they are parsed."""
    lines = _numbered_lines(text)
    while True:
        try:
            name = _next_tile_name(lines)
        except NoMoreTiles:
            return
        yield name, _tile_from_lines(lines)


def parse_tileset(text: str) -> list[tuple[str, Tile]]:
    """
    Parse a tileset file: `@name` headers each followed by a tile.

    Empty input gives an empty tileset.

    Raises:
        TileParsingError: (a subclass of) on the first malformed tile
    """
    logger.info("Parsing tileset")
    tileset = list(iter_tileset(text))
    logger.info("Parsed %d tiles", len(tileset))
    return tileset
