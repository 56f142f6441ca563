"""Tests for tileset_parser module."""

import pytest

from tileset_parser import parse_tileset, parse_tileset_concise


class TestParseTilesetConcise:
    """Tests for the concise tileset parser."""

    def test_single_key_shorthand(self) -> None:
        """One key applies to every side."""
        tileset = parse_tileset_concise("ocean: ocean")

        ocean = tileset["ocean"]
        assert ocean.id == "ocean"
        assert ocean.name == "ocean"
        assert ocean.connection_keys == ("ocean", "ocean", "ocean", "ocean")
        assert ocean.can_be_rotated is False
        assert ocean.weight == 1.0

    def test_four_keys_in_side_order(self) -> None:
        """Keys are read RIGHT TOP LEFT BOTTOM."""
        tileset = parse_tileset_concise("bend: road road grass grass")
        assert tileset["bend"].connection_keys == ("road", "road", "grass", "grass")

    def test_rotatable_marker(self) -> None:
        """A trailing '*' marks the type rotatable and is not part of the id."""
        tileset = parse_tileset_concise("coast*: grass/ocean ocean ocean/grass grass")

        assert list(tileset) == ["coast"]
        assert tileset["coast"].can_be_rotated is True
        assert tileset["coast"].name == "coast"

    def test_no_key_placeholder(self) -> None:
        """Underscores become sides with no connection key."""
        tileset = parse_tileset_concise("edge: wall _ wall _")
        assert tileset["edge"].connection_keys == ("wall", None, "wall", None)

    def test_weight_suffix(self) -> None:
        tileset = parse_tileset_concise(
            """
            ocean: ocean @3
            reef: ocean @0.25
            rock: _ @0
            """
        )
        assert tileset["ocean"].weight == 3.0
        assert tileset["reef"].weight == 0.25
        assert tileset["rock"].weight == 0.0
        assert tileset["rock"].connection_keys == (None, None, None, None)

    def test_catalog_order_preserved(self) -> None:
        tileset = parse_tileset_concise(
            """
            zebra: z
            apple: a
            mango*: m
            """
        )
        assert list(tileset) == ["zebra", "apple", "mango"]

    def test_comments_and_blank_lines_ignored(self) -> None:
        definition = """
        # land and water

        ocean: ocean

        # the coast
        grass: grass
        """
        tileset = parse_tileset_concise(definition)
        assert list(tileset) == ["ocean", "grass"]

    def test_whitespace_handling(self) -> None:
        """Extra whitespace around names and keys is ignored."""
        tileset = parse_tileset_concise("   road *  :   road   grass  road grass   ")
        assert tileset["road"].can_be_rotated is True
        assert tileset["road"].connection_keys == ("road", "grass", "road", "grass")

    def test_error_missing_colon(self) -> None:
        with pytest.raises(ValueError, match="line 1"):
            parse_tileset_concise("ocean ocean")

    def test_error_empty_name(self) -> None:
        with pytest.raises(ValueError, match="Empty tile name"):
            parse_tileset_concise(": ocean")

    def test_error_empty_sides(self) -> None:
        with pytest.raises(ValueError, match="Empty side definition"):
            parse_tileset_concise("ocean:")

    def test_error_wrong_key_count(self) -> None:
        with pytest.raises(ValueError, match="got 3"):
            parse_tileset_concise("bend: road road grass")

    def test_error_duplicate_name(self) -> None:
        """The rotation marker does not make a name distinct."""
        definition = """
        road: road
        road*: road grass road grass
        """
        with pytest.raises(ValueError, match="Duplicate tile name 'road'"):
            parse_tileset_concise(definition)

    def test_error_bad_weight(self) -> None:
        with pytest.raises(ValueError, match="Invalid weight"):
            parse_tileset_concise("ocean: ocean @lots")

    def test_error_negative_weight(self) -> None:
        with pytest.raises(ValueError, match="Negative weight"):
            parse_tileset_concise("ocean: ocean @-1")


class TestParseTilesetStandard:
    """Tests for the dict parser."""

    def test_dict_format(self) -> None:
        tileset = parse_tileset(
            {
                "ocean": "ocean",
                "beach*": "sand/ocean ocean ocean/sand sand @0.5",
            }
        )
        assert tileset["ocean"].connection_keys == ("ocean",) * 4
        beach = tileset["beach"]
        assert beach.can_be_rotated is True
        assert beach.weight == 0.5
        assert beach.connection_keys == ("sand/ocean", "ocean", "ocean/sand", "sand")

    def test_marker_only_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="Empty tile name"):
            parse_tileset({"*": "ocean"})

    def test_empty_definitions(self) -> None:
        assert parse_tileset({}) == {}
