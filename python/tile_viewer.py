"""
Terminal viewer for tileset files.
Display one tile at a time and cycle, rotate, or mark items used with keyboard commands.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import format_tile, render_tile
from tile import Tile
from tile_parser import TileParsingError, parse_tileset
from tile_types import CellItemAvailability, SpinDirection

logger = logging.getLogger(__name__)

NUM_SPIN_DIRS = 4

LOG_LEVELS = [logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG]

LEGEND = """\
  ←/→ ↑/↓ n/p d/a - cycle tiles
  Home/End g/G - first/last tile
  K/U - toggle cell used
  [ ] - rotate
  P - print
  R - reload
  Q - quit"""


def log_level(verbose: int, quiet: int) -> int:
    """Logging level for `-v`/`-q` counts; INFO by default."""
    idx = min(max(2 + verbose - quiet, 0), len(LOG_LEVELS) - 1)
    return LOG_LEVELS[idx]


class TileViewer:
    """Interactive viewer over the tiles of one tileset file."""

    def __init__(self, tile_file: Path, start_idx: int = 0) -> None:
        self.tile_file = tile_file
        self.tileset: list[tuple[str, Tile]] = []
        self.tile_idx = start_idx
        self.availability = CellItemAvailability.AVAILABLE
        self.left_turns = 0
        self.printed: str | None = None
        self.console = Console()
        self.status_message = "Ready"
        self.load()

    def load(self) -> None:
        """Read and parse the tileset file, replacing the current tileset."""
        self.tileset = parse_tileset(self.tile_file.read_text(encoding="utf-8"))
        self.step(0)

    def reload(self) -> None:
        """Reload the file; keep the previous tileset when it cannot be read."""
        try:
            self.load()
        except (OSError, TileParsingError) as err:
            logger.error("Failed to reload %s: %s", self.tile_file, err)
            self.status_message = f"✗ Reload failed: {err}"
        else:
            logger.info("Reloaded %s", self.tile_file)
            self.status_message = f"✓ Reloaded {len(self.tileset)} tiles"

    def step(self, delta: int) -> None:
        """Move `delta` tiles forward, wrapping around."""
        if not self.tileset:
            self.tile_idx = 0
            return
        self.tile_idx = (self.tile_idx + delta) % len(self.tileset)

    def toggle_availability(self) -> None:
        self.availability = self.availability.toggled()
        logger.info("availability = %s", self.availability.value)

    def turn(self, left_turns: int) -> None:
        self.left_turns = (self.left_turns + left_turns) % NUM_SPIN_DIRS

    def current_tile(self) -> tuple[str, Tile] | None:
        """Selected tile with the viewer's availability and rotation applied."""
        if not self.tileset:
            return None
        name, tile = self.tileset[self.tile_idx]
        tile = tile.copy()
        tile.set_all_availability(self.availability)
        for _ in range(self.left_turns):
            tile.rotate(SpinDirection.COUNTER_CLOCKWISE)
        return name, tile

    def print_current(self) -> None:
        current = self.current_tile()
        if current is None:
            self.printed = "No tile"
            return
        name, tile = current
        # Printing uses the available form; used items have no notation
        tile.set_all_availability(CellItemAvailability.AVAILABLE)
        self.printed = f"@{name}\n{format_tile(tile)}"

    def generate_display(self) -> Panel:
        """Generate the current display with tile and status."""
        current = self.current_tile()
        if current is None:
            status = Text()
            status.append("No tile\n", style="bold red")
            status.append(f"{self.tile_file} holds no tiles.\n")
            status.append(self.status_message)
            return Panel(status, title="M-Mazing Tiles - Empty", border_style="red")

        name, tile = current
        status = Text()
        status.append("TILE: ", style="bold")
        status.append(f"{name} (idx={self.tile_idx})\n")
        status.append("avail=", style="bold")
        status.append(f"{self.availability.value}, ")
        status.append("left_turns=", style="bold")
        status.append(f"{self.left_turns}\n\n")

        status.append(Text.from_ansi(render_tile(tile)))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append(LEGEND + "\n\n")

        if self.printed:
            status.append(self.printed + "\n", style="dim")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title=f"M-Mazing Tiles - {self.tile_file.name}", border_style="green", width=80)

    def handle_key(self, key: str) -> bool:
        """Apply one key press. Returns False when the viewer should quit."""
        if key in ("q", "Q", readchar.key.ESC):
            self.status_message = "Quitting..."
            return False
        elif key in ("r", "R"):
            self.reload()
        elif key in (readchar.key.RIGHT, readchar.key.DOWN, "n", "d"):
            self.step(1)
        elif key in (readchar.key.LEFT, readchar.key.UP, "p", "a"):
            self.step(-1)
        elif key in (readchar.key.HOME, "g"):
            self.tile_idx = 0
        elif key in (readchar.key.END, "G"):
            self.tile_idx = max(len(self.tileset) - 1, 0)
        elif key in ("k", "K", "u", "U"):
            self.toggle_availability()
        elif key == "[":
            self.turn(1)
        elif key == "]":
            self.turn(-1)
        elif key == "P":
            self.print_current()
        else:
            self.status_message = f"Unknown key: {repr(key)}"
        return True

    def run(self) -> None:
        """Run the viewer until the user quits."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())
                    key = readchar.readkey()
                    if not self.handle_key(key):
                        live.update(self.generate_display())
                        break
            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Utility to debug M-Mazing tiles")
    parser.add_argument("tile_file", type=Path, help="File with tile data")
    parser.add_argument("-i", "--start-idx", type=int, default=0, help="Start index")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="count", default=0, help="Log verbosity")
    verbosity.add_argument("-q", "--quiet", action="count", default=0, help="Quiet log")
    parser.add_argument(
        "--once", action="store_true", help="Render the starting tile and exit"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=log_level(args.verbose, args.quiet), format="%(levelname)s: %(message)s")

    try:
        viewer = TileViewer(args.tile_file, args.start_idx)
    except (OSError, TileParsingError) as err:
        logger.error("Failed to load tileset %s: %s", args.tile_file, err)
        return 1

    if args.once:
        viewer.console.print(viewer.generate_display())
    else:
        viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
