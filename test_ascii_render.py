"""Tests for ASCII rendering."""

import re

from pyrsistent import pmap

from ascii_render import ABSENT_GLYPH, CONTRADICTION_GLYPH, cell_glyph, field_bounds, render_field
from tile_types import ORIGIN, Coordinate, Tile, TileState
from tileset_parser import parse_tileset_concise
from wavefield import get_default_superstate

ANSI = re.compile(r"\x1b\[[0-9;]*m")

TILESET = parse_tileset_concise(
    """
    ocean: ocean
    road*: road grass road grass
    """
)


def plain(text: str) -> str:
    return ANSI.sub("", text)


class TestCellGlyph:
    def test_absent(self) -> None:
        assert cell_glyph(None) == ABSENT_GLYPH

    def test_contradiction(self) -> None:
        assert cell_glyph(Tile(())) == CONTRADICTION_GLYPH

    def test_resolved_fixed_type(self) -> None:
        assert cell_glyph(Tile((TileState(TILESET["ocean"]),))) == "o "

    def test_resolved_rotated_type(self) -> None:
        assert cell_glyph(Tile((TileState(TILESET["road"], 0),))) == "r→"
        assert cell_glyph(Tile((TileState(TILESET["road"], 1),))) == "r↑"
        assert cell_glyph(Tile((TileState(TILESET["road"], 3),))) == "r↓"

    def test_unresolved_shows_count(self) -> None:
        assert cell_glyph(Tile(get_default_superstate(TILESET))) == " 5"

    def test_large_count_saturates(self) -> None:
        road = TileState(TILESET["road"])
        assert cell_glyph(Tile((road,) * 100)) == "++"


class TestRenderField:
    def test_bounds(self) -> None:
        field = pmap({Coordinate(-2, 1): Tile(()), Coordinate(3, -1): Tile(())})
        assert field_bounds(field) == (-2, -1, 3, 1)
        assert field_bounds(field, margin=1) == (-3, -2, 4, 2)
        assert field_bounds(pmap()) is None

    def test_window_rows(self) -> None:
        field = pmap(
            {
                ORIGIN: Tile((TileState(TILESET["ocean"]),)),
                Coordinate(1, 0): Tile(()),
            }
        )
        lines = plain(render_field(field, bounds=(0, -1, 2, 0))).split("\n")

        assert lines == [
            "┌──────┐",
            "│······│",
            "│o !!··│",
            "└──────┘",
        ]

    def test_default_window_is_materialized_area(self) -> None:
        field = pmap({Coordinate(5, 5): Tile(get_default_superstate(TILESET))})
        assert plain(render_field(field)).split("\n")[1] == "│ 5│"

    def test_empty_field(self) -> None:
        assert plain(render_field(pmap())).split("\n")[1] == "│··│"

    def test_highlight_extends_default_window(self) -> None:
        field = pmap({ORIGIN: Tile(())})
        lines = plain(render_field(field, highlight_pos=Coordinate(1, 0))).split("\n")
        assert lines[1] == "│!!··│"
