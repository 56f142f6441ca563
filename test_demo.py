"""Tests for the scripted and interactive demos (without a terminal loop)."""

import pytest

from demo import TILESETS, generate, load_tileset
from interactive_demo import DemoConfig, InteractiveDemo
from tile_types import ORIGIN, Coordinate
from wavefield import get_tile


class TestBuiltinTilesets:
    @pytest.mark.parametrize("name", sorted(TILESETS))
    def test_tilesets_parse(self, name: str) -> None:
        assert load_tileset(name)

    def test_generate_is_seeded(self) -> None:
        tileset = load_tileset("roads")
        assert generate(tileset, 15, seed=4) == generate(tileset, 15, seed=4)

    def test_generate_weighted_resolves_origin(self) -> None:
        field = generate(load_tileset("basic"), 1, seed=0, weighted=True)
        assert field[ORIGIN].is_resolved


class TestInteractiveDemo:
    def make_demo(self) -> InteractiveDemo:
        return InteractiveDemo(load_tileset("coast"), DemoConfig(view_width=8, view_height=4), seed=2)

    def test_place_and_undo(self) -> None:
        demo = self.make_demo()
        demo.select_type(0)

        demo.place()
        tile = get_tile(demo.field, ORIGIN)
        assert tile is not None and tile.superstate[0].tile_type.id == "ocean"

        demo.history.undo()
        assert demo.field == {}

    def test_rotate_fixed_selection_refused(self) -> None:
        demo = self.make_demo()
        demo.select_type(0)  # ocean is fixed
        demo.rotate_selection()
        assert demo.selected_rotation == 0

        demo.select_type(2)  # coast is rotatable
        demo.rotate_selection()
        assert demo.selected_rotation == 1

    def test_select_out_of_range(self) -> None:
        demo = self.make_demo()
        demo.select_type(8)
        assert demo.selected_type == "ocean"
        assert "No tile type #9" in demo.status_message

    def test_step_records_history(self) -> None:
        demo = self.make_demo()
        assert demo.step()
        assert len(demo.history) == 2
        assert demo.field[ORIGIN].is_resolved

    def test_delete_cursor(self) -> None:
        demo = self.make_demo()
        demo.place()
        demo.cursor = Coordinate(0, 0)
        demo.delete_cursor()
        assert ORIGIN not in demo.field

    def test_display_builds(self) -> None:
        demo = self.make_demo()
        demo.place()
        demo.generate_display()

    def test_step_without_candidates_reports_it(self) -> None:
        demo = InteractiveDemo(load_tileset("basic"), seed=0)
        demo.place()

        assert not demo.step()
        assert demo.status_message == "No collapsible cells"
        assert len(demo.history) == 2
