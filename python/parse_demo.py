#!/usr/bin/env python3
"""
Demo of the tile notation: parsing, rotation and reachability.
"""

from ascii_render import format_tile, render_tile
from grid_coord import TileGridCoord
from tile_parser import parse_tile, parse_tileset
from tile_types import FinalExit, SpinDirection


def main() -> None:
    """Demonstrate parsing tiles from strings."""

    # Example 1: A single tile
    print("Example 1: Single tile")
    print("-" * 40)
    tile = parse_tile("""
+-+-+7+-+
|  1   c|
+ +-+-+ +
|   |t  |
+-+ + +-+
|   |   |
+ +-+-+ +
|O|     |
+ +^+ + +
""")
    print(render_tile(tile))
    print()

    # Example 2: Rotation
    print("Example 2: Same tile turned clockwise")
    print("-" * 40)
    print(format_tile(tile.rotated(SpinDirection.CLOCKWISE)))

    # Example 3: Exit arrows
    print("Example 3: Exit directions")
    print("-" * 40)
    for coord in TileGridCoord.all():
        cell = tile.cell_value(coord)
        if isinstance(cell, FinalExit):
            print(f"{cell.pawn.value} exit at {coord} points {tile.cell_exit_direction(coord).value}")
    print()

    # Example 4: Tileset with escalators; '.' marks unreachable cells
    print("Example 4: Tileset with escalators")
    print("-" * 40)
    tileset = parse_tileset("""
@2
+ +-+-+-+
|P|     |
+ + + +-+
| |   |4|
+-+ +-+ +
| | |   ^
+ +-+ +-+
| |    1|
+-+6+-+-+
E: 01-13
""")
    for name, tileset_tile in tileset:
        print(f"@{name}")
        print(render_tile(tileset_tile))


if __name__ == "__main__":
    main()
