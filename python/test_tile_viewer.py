"""Tests for the terminal tile viewer (no live terminal needed)."""

import logging
from pathlib import Path

import pytest
import readchar
from rich.panel import Panel

from tile_types import CellItemAvailability, SpinDirection
from tile_viewer import TileViewer, log_level, main, parse_args
from test_tile_parser import TILE1_STR, TILE3_STR, make_tile1, make_tile3


@pytest.fixture
def tile_file(tmp_path: Path) -> Path:
    path = tmp_path / "test.tiles"
    path.write_text(f"@one{TILE1_STR}\n@two{TILE3_STR}\n@three{TILE1_STR}")
    return path


class TestLogLevel:
    """Tests for -v/-q mapping."""

    def test_default_is_info(self) -> None:
        assert log_level(0, 0) == logging.INFO

    def test_verbose_and_quiet(self) -> None:
        assert log_level(1, 0) == logging.DEBUG
        assert log_level(0, 1) == logging.WARNING
        assert log_level(0, 2) == logging.ERROR

    def test_clamped(self) -> None:
        """Extra flags stay at the ends of the range."""
        assert log_level(5, 0) == logging.DEBUG
        assert log_level(0, 7) == logging.ERROR


class TestParseArgs:
    def test_defaults(self) -> None:
        args = parse_args(["tiles.txt"])
        assert args.tile_file == Path("tiles.txt")
        assert args.start_idx == 0
        assert args.verbose == 0
        assert args.quiet == 0
        assert not args.once

    def test_options(self) -> None:
        args = parse_args(["-vv", "-i", "3", "--once", "tiles.txt"])
        assert args.verbose == 2
        assert args.start_idx == 3
        assert args.once

    def test_verbose_and_quiet_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["-v", "-q", "tiles.txt"])


class TestTileViewer:
    """Tests for viewer state changes driven by keys."""

    def test_load(self, tile_file: Path) -> None:
        viewer = TileViewer(tile_file)
        assert [name for name, _ in viewer.tileset] == ["one", "two", "three"]
        assert viewer.tileset[1][1] == make_tile3()

    def test_start_index_wraps(self, tile_file: Path) -> None:
        assert TileViewer(tile_file, start_idx=4).tile_idx == 1

    def test_cycling_wraps(self, tile_file: Path) -> None:
        viewer = TileViewer(tile_file)
        viewer.handle_key(readchar.key.LEFT)
        assert viewer.tile_idx == 2
        viewer.handle_key("n")
        viewer.handle_key(readchar.key.DOWN)
        assert viewer.tile_idx == 1
        viewer.handle_key("G")
        assert viewer.tile_idx == 2
        viewer.handle_key("g")
        assert viewer.tile_idx == 0

    def test_rotation_keys(self, tile_file: Path) -> None:
        """'[' turns left, ']' turns right, modulo four."""
        viewer = TileViewer(tile_file)
        viewer.handle_key("]")
        assert viewer.left_turns == 3
        viewer.handle_key("[")
        viewer.handle_key("[")
        assert viewer.left_turns == 1
        _, tile = viewer.current_tile()
        assert tile == make_tile1().rotated(SpinDirection.COUNTER_CLOCKWISE)

    def test_stored_tile_untouched(self, tile_file: Path) -> None:
        """Rotation and availability only apply to the displayed copy."""
        viewer = TileViewer(tile_file)
        viewer.handle_key("[")
        viewer.handle_key("k")
        _, shown = viewer.current_tile()
        assert shown != make_tile1()
        assert viewer.tileset[0][1] == make_tile1()

    def test_toggle_availability(self, tile_file: Path) -> None:
        viewer = TileViewer(tile_file)
        viewer.handle_key("U")
        assert viewer.availability is CellItemAvailability.USED
        _, tile = viewer.current_tile()
        assert all(
            getattr(cell, "availability", CellItemAvailability.USED) is CellItemAvailability.USED
            for cell in tile.cells()
        )
        viewer.handle_key("k")
        assert viewer.availability is CellItemAvailability.AVAILABLE

    def test_print_current(self, tile_file: Path) -> None:
        """Printing writes the notation even while items are shown used."""
        viewer = TileViewer(tile_file)
        viewer.handle_key("k")
        viewer.handle_key("P")
        assert viewer.printed == "@one\n" + TILE1_STR.lstrip("\n")

    @pytest.mark.parametrize("key", ["q", "Q", readchar.key.ESC])
    def test_quit_keys(self, tile_file: Path, key: str) -> None:
        assert TileViewer(tile_file).handle_key(key) is False

    def test_unknown_key(self, tile_file: Path) -> None:
        viewer = TileViewer(tile_file)
        assert viewer.handle_key("z") is True
        assert viewer.status_message == "Unknown key: 'z'"

    def test_reload_picks_up_changes(self, tile_file: Path) -> None:
        viewer = TileViewer(tile_file)
        tile_file.write_text(f"@only{TILE1_STR}")
        viewer.handle_key("r")
        assert [name for name, _ in viewer.tileset] == ["only"]
        assert viewer.status_message.startswith("✓")

    def test_failed_reload_keeps_tileset(self, tile_file: Path) -> None:
        viewer = TileViewer(tile_file)
        tile_file.write_text("@broken\n+-+-+\n")
        viewer.handle_key("R")
        assert len(viewer.tileset) == 3
        assert viewer.status_message.startswith("✗ Reload failed")

    def test_display(self, tile_file: Path) -> None:
        assert isinstance(TileViewer(tile_file).generate_display(), Panel)

    def test_empty_tileset(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.tiles"
        path.write_text("# nothing yet\n")
        viewer = TileViewer(path)
        assert viewer.current_tile() is None
        viewer.handle_key("n")
        viewer.handle_key("P")
        assert viewer.printed == "No tile"
        assert isinstance(viewer.generate_display(), Panel)


class TestMain:
    def test_once(self, tile_file: Path) -> None:
        assert main(["--once", "-q", str(tile_file)]) == 0

    def test_missing_file(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR):
            assert main(["--once", str(tmp_path / "missing.tiles")]) == 1
        assert "Failed to load tileset" in caplog.text

    def test_bad_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.tiles"
        path.write_text("not a header\n")
        assert main(["--once", str(path)]) == 1
