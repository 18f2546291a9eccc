"""Catalog definitions and quick-text parsing."""
import pytest

from tracklayout.model.catalog import (
    ALL_PIECES, STRAIGHT_PIECES, CURVE_PIECES, QuickTextError, get_definition, parse_quick_text,
    piece_from_quick_text,
)
from tracklayout.model.geometry_primitives import Point
from tracklayout.model.pieces import Straight, Curve


class TestQuickText:

    @pytest.mark.parametrize("text, kind", [
        ("L100", Straight(100.0)),
        ("l37.5", Straight(37.5)),
        ("  L25 ", Straight(25.0)),
        ("R50-90", Curve(50.0, 90.0)),
        ("r50-90", Curve(50.0, 90.0)),
        ("R60.5-22.5", Curve(60.5, 22.5)),
    ])
    def test_valid(self, text, kind):
        assert parse_quick_text(text) == kind

    @pytest.mark.parametrize("text", ["L", "R50", "R-90", "X10", "L-5", "L10cm", "", "R50-90-1", "L 10"])
    def test_rejected(self, text):
        with pytest.raises(QuickTextError):
            parse_quick_text(text)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError, match="Invalid piece format"):
            parse_quick_text("nope")

    def test_spawn_positions(self):
        assert piece_from_quick_text("L100").position == Point(100.0, 100.0)
        assert piece_from_quick_text("R50-90").position == Point(200.0, 100.0)


class TestCatalog:

    def test_codes(self):
        assert [d.code for d in STRAIGHT_PIECES] == ["L25", "L37.5", "L50", "L75", "L100"]
        assert "R50-90" in ALL_PIECES
        assert "R70-45" in ALL_PIECES
        assert len(ALL_PIECES) == len(STRAIGHT_PIECES) + len(CURVE_PIECES)

    def test_lookup_is_case_insensitive(self):
        assert get_definition(" r50-90 ").kind == Curve(50.0, 90.0)
        assert get_definition("L999") is None

    def test_create_gives_new_piece_each_time(self):
        definition = get_definition("L50")
        first, second = definition.create(), definition.create(Point(1.0, 2.0))
        assert first.id != second.id
        assert first.position == Point(200.0, 200.0)
        assert second.position == Point(1.0, 2.0)
