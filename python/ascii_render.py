"""
ASCII rendering for tiles.

Provides two outputs:
1. Notation - plain text that the tile parser reads back
2. Colored view - the notation layout with ANSI colors, used items and
   unreachable cells marked, for terminal display
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

import simple_chalk as chalk  # type: ignore[import-untyped]

from tile import Tile
from tile_types import (
    CELL_TOKENS,
    GRID_WIDTH,
    PLACEHOLDER_TOKENS,
    WALL_TOKENS,
    Blocked,
    Camera,
    CellItemAvailability,
    CrystalBall,
    Empty,
    Entrance,
    Explore,
    FinalExit,
    Loot,
    OrangeOnly,
    Pawn,
    TileCell,
    TimerFlip,
    WallState,
    Warp,
    is_used,
    with_availability,
)

logger = logging.getLogger(__name__)

Colorize = Callable[[str], str]

PLACEHOLDER_CHAR = PLACEHOLDER_TOKENS.allowed
HORZ_BLOCKED_CHAR = "-"
VERT_BLOCKED_CHAR = "|"
ORANGE_ONLY_CHAR = "="
UNREACHABLE_CHAR = "."

_CELL_CHARS: dict[TileCell, str] = {cell: char for char, cell in CELL_TOKENS.chars.items()}
_WALL_CHARS: dict[WallState, str] = {
    wall: char for char, wall in WALL_TOKENS.chars.items() if not isinstance(wall, Blocked)
}

PAWN_COLORS: dict[Pawn, Colorize] = {
    Pawn.GREEN: chalk.green,
    Pawn.ORANGE: chalk.redBright,
    Pawn.YELLOW: chalk.yellow,
    Pawn.PURPLE: chalk.magenta,
}


# =============================================================================
# Notation
# =============================================================================


def _wall_char(wall: WallState, blocked_char: str) -> str:
    if isinstance(wall, Blocked):
        return blocked_char
    try:
        return _WALL_CHARS[wall]
    except KeyError:
        raise ValueError(f"Wall {wall} has no textual encoding") from None


def _cell_char(cell: TileCell) -> str:
    try:
        return _CELL_CHARS[cell]
    except KeyError:
        raise ValueError(f"Cell {cell} has no textual encoding") from None


def _notation_rows(
    tile: Tile,
    wall_char: Callable[[WallState, str], str],
    cell_char: Callable[[int, int, TileCell], str],
    placeholder: str,
) -> list[str]:
    """Lay out wall rows and cell rows in notation order."""
    rows: list[str] = []
    for y in range(GRID_WIDTH + 1):
        wall_row = placeholder + "".join(
            wall_char(tile.horz_walls[y][x], HORZ_BLOCKED_CHAR) + placeholder
            for x in range(GRID_WIDTH)
        )
        rows.append(wall_row)
        if y == GRID_WIDTH:
            break

        cell_row = wall_char(tile.vert_walls[y][0], VERT_BLOCKED_CHAR) + "".join(
            cell_char(x, y, tile.cell_grid[y][x])
            + wall_char(tile.vert_walls[y][x + 1], VERT_BLOCKED_CHAR)
            for x in range(GRID_WIDTH)
        )
        rows.append(cell_row)
    return rows


def format_escalators(tile: Tile) -> str:
    """`E: x1y1-x2y2, ...` line, or an empty string for a tile without escalators."""
    if not tile.escalators:
        return ""
    hunks = [
        f"{esc.first.x}{esc.first.y}-{esc.second.x}{esc.second.y}" for esc in tile.escalators
    ]
    return "E: " + ", ".join(hunks)


def format_tile(tile: Tile) -> str:
    """
    Write a tile in the notation read by `tile_parser.parse_tile`.

    Raises:
        ValueError: if the tile holds a used item or an orange-only wall,
            which the notation cannot express
    """
    rows = _notation_rows(tile, _wall_char, lambda x, y, cell: _cell_char(cell), PLACEHOLDER_CHAR)
    escalators = format_escalators(tile)
    if escalators:
        rows.append(escalators)
    return "\n".join(rows) + "\n"


def format_tileset(tiles: Iterable[tuple[str, Tile]]) -> str:
    """Write named tiles as a tileset file, a blank line between tiles."""
    return "\n".join(f"@{name}\n{format_tile(tile)}" for name, tile in tiles)


# =============================================================================
# Colored view
# =============================================================================


def _wall_color(wall: WallState) -> Colorize:
    match wall:
        case Explore(pawn=pawn):
            return PAWN_COLORS[pawn]
        case Entrance():
            return chalk.yellowBright
        case OrangeOnly():
            return PAWN_COLORS[Pawn.ORANGE]
        case _:
            return chalk.white


def _render_wall(wall: WallState, blocked_char: str) -> str:
    if isinstance(wall, OrangeOnly):
        char = ORANGE_ONLY_CHAR
    else:
        char = _wall_char(wall, blocked_char)
    return _wall_color(wall)(char)


def _render_cell(cell: TileCell, reachable: bool) -> str:
    if isinstance(cell, Empty):
        return chalk.red(UNREACHABLE_CHAR) if not reachable else " "

    # Used items are drawn with the character of their available form
    char = _cell_char(with_availability(cell, CellItemAvailability.AVAILABLE))
    match cell:
        case Warp(pawn=pawn) | Loot(pawn=pawn) | FinalExit(pawn=pawn):
            colorize = PAWN_COLORS[pawn]
        case TimerFlip() | Camera() | CrystalBall():
            colorize = chalk.blue if is_used(cell) else chalk.cyan
        case _:
            colorize = chalk.white
    return colorize(char)


def render_tile(tile: Tile, show_reachability: bool = True) -> str:
    """
    Render a tile to an ASCII string with colors.

    Args:
        tile: The tile to render
        show_reachability: Mark empty cells that cannot be reached from an
            entrance with '.'

    Returns:
        Rendered string with ANSI color codes
    """
    if show_reachability:
        reachable = tile.reachable_coords()
    else:
        reachable = [[True] * GRID_WIDTH for _ in range(GRID_WIDTH)]

    rows = _notation_rows(
        tile,
        _render_wall,
        lambda x, y, cell: _render_cell(cell, reachable[y][x]),
        chalk.white(PLACEHOLDER_CHAR),
    )
    escalators = format_escalators(tile)
    if escalators:
        rows.append(chalk.cyan(escalators))

    logger.debug(
        "render_tile: %d unreachable cells, %d escalators",
        sum(not flag for row in reachable for flag in row),
        len(tile.escalators),
    )
    return "\n".join(rows)
