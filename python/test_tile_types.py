"""Tests for tile_types module."""

import math

import pytest

from tile_types import (
    ALL_DIRECTIONS,
    CELL_TOKENS,
    PLACEHOLDER_TOKENS,
    WALL_TOKENS,
    Blocked,
    Camera,
    CellItemAvailability,
    CrystalBall,
    Direction,
    Empty,
    Entrance,
    Explore,
    FinalExit,
    Loot,
    Pawn,
    Placeholder,
    TimerFlip,
    Warp,
    is_used,
    with_availability,
)

USED = CellItemAvailability.USED
AVAILABLE = CellItemAvailability.AVAILABLE


class TestDirection:
    """Tests for Direction helpers."""

    def test_neighbor_transforms(self) -> None:
        """y grows downward."""
        assert Direction.RIGHT.neighbor_transform() == (1, 0)
        assert Direction.UP.neighbor_transform() == (0, -1)
        assert Direction.LEFT.neighbor_transform() == (-1, 0)
        assert Direction.DOWN.neighbor_transform() == (0, 1)

    def test_angles(self) -> None:
        """Counter-clockwise from RIGHT."""
        assert Direction.RIGHT.as_angle() == 0.0
        assert math.isclose(Direction.UP.as_angle(), math.pi / 2)
        assert math.isclose(Direction.LEFT.as_angle(), math.pi)
        assert math.isclose(Direction.DOWN.as_angle(), 3 * math.pi / 2)

    def test_all_directions(self) -> None:
        assert ALL_DIRECTIONS == (Direction.RIGHT, Direction.UP, Direction.LEFT, Direction.DOWN)


class TestAvailability:
    """Tests for one-shot cell items."""

    def test_toggled(self) -> None:
        assert AVAILABLE.toggled() is USED
        assert USED.toggled() is AVAILABLE

    def test_items_default_available(self) -> None:
        """Parsed items start out unused."""
        for cell in (TimerFlip(), Camera(), CrystalBall()):
            assert cell.availability is AVAILABLE
            assert not is_used(cell)

    def test_with_availability(self) -> None:
        """Stateful cells change; the rest come back as given."""
        assert with_availability(Camera(), USED) == Camera(USED)
        assert is_used(with_availability(TimerFlip(), USED))
        assert with_availability(CrystalBall(USED), AVAILABLE) == CrystalBall()
        for cell in (Empty(), Warp(Pawn.GREEN), Loot(Pawn.PURPLE), FinalExit(Pawn.ORANGE)):
            assert with_availability(cell, USED) == cell
            assert not is_used(cell)


class TestTokenTables:
    """Tests for the notation alphabets."""

    def test_allowed_strings(self) -> None:
        """Allowed characters are listed in table order."""
        assert CELL_TOKENS.allowed == " 1234GOYPgoypctb"
        assert WALL_TOKENS.allowed == " -|^5678"
        assert PLACEHOLDER_TOKENS.allowed == "+"

    @pytest.mark.parametrize(
        "char,expected",
        [
            (" ", Empty()),
            ("3", Warp(Pawn.YELLOW)),
            ("G", FinalExit(Pawn.GREEN)),
            ("o", Loot(Pawn.ORANGE)),
            ("b", CrystalBall()),
        ],
    )
    def test_cell_tokens(self, char: str, expected: object) -> None:
        assert CELL_TOKENS.parse(char) == expected

    def test_both_blocked_chars(self) -> None:
        """Horizontal and vertical dashes mean the same wall."""
        assert WALL_TOKENS.parse("-") == Blocked()
        assert WALL_TOKENS.parse("|") == Blocked()
        assert WALL_TOKENS.parse("^") == Entrance()
        assert WALL_TOKENS.parse("8") == Explore(Pawn.PURPLE)

    def test_unknown_chars(self) -> None:
        assert CELL_TOKENS.parse("x") is None
        assert WALL_TOKENS.parse("=") is None
        assert PLACEHOLDER_TOKENS.parse("+") == Placeholder()
        assert PLACEHOLDER_TOKENS.parse("-") is None
