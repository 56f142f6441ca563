"""
Tileset parsing utilities for tilewave.

Provides two parsing formats:
1. Dict format mapping tile names to side definitions
2. Concise multi-line format with one tile per line
"""

from __future__ import annotations

from tile_types import ConnectionKeys, TileSet, TileType

__all__ = ["parse_tileset", "parse_tileset_concise"]

NO_KEY = "_"
ROTATABLE_MARKER = "*"
WEIGHT_PREFIX = "@"


def _split_marker(name: str) -> tuple[str, bool]:
    """Strip the rotation marker from a tile name, reporting whether it was there."""
    name = name.strip()
    if name.endswith(ROTATABLE_MARKER):
        return name[: -len(ROTATABLE_MARKER)].strip(), True
    return name, False


def _parse_sides(name: str, definition: str) -> tuple[ConnectionKeys, float]:
    tokens = definition.split()
    weight = 1.0

    if tokens and tokens[-1].startswith(WEIGHT_PREFIX):
        weight_str = tokens.pop()[len(WEIGHT_PREFIX):]
        try:
            weight = float(weight_str)
        except ValueError:
            raise ValueError(
                f"Invalid weight '{weight_str}' for tile '{name}'\n"
                f"  Definition: \"{definition}\"\n"
                f"  Weights are written as '@' followed by a number (e.g., '@2.5')"
            ) from None
        if weight < 0:
            raise ValueError(f"Negative weight {weight} for tile '{name}'")

    if len(tokens) == 1:
        # Shorthand: same key on every side
        tokens = tokens * 4

    if len(tokens) != 4:
        raise ValueError(
            f"Invalid side definition for tile '{name}'\n"
            f"  Definition: \"{definition}\"\n"
            f"  Expected: 1 key (all sides) or 4 keys in order RIGHT TOP LEFT BOTTOM, "
            f"got {len(tokens)}\n"
            f"  Use '{NO_KEY}' for a side without a connection key"
        )

    right, top, left, bottom = (None if token == NO_KEY else token for token in tokens)
    return (right, top, left, bottom), weight


def parse_tileset(definitions: dict[str, str]) -> TileSet:
    """
    Parse tile type definitions from a compact string format.

    Format:
    - Dict key is the tile name; a trailing '*' marks the type as rotatable
      Examples: "grass" -> fixed, "road*" -> rotatable
    - Dict value lists connection keys separated by whitespace:
      * 4 keys in order RIGHT TOP LEFT BOTTOM, or 1 key used for all sides
      * '_' means no connection key on that side
      * Keys may contain '/' to describe a transition (e.g., "sand/water")
    - An optional trailing '@<number>' sets the tile weight (default 1)

    Example:
        {
            "ocean": "ocean",
            "beach*": "sand/ocean ocean ocean/sand sand @0.5",
        }
        Creates:
        - TileType "ocean": all sides "ocean", not rotatable
        - TileType "beach": rotatable, weight 0.5

    Args:
        definitions: Dict mapping tile name to side definition

    Returns:
        TileSet keyed by tile id (the name without the rotation marker)
    """
    tileset: TileSet = {}

    for raw_name, definition in definitions.items():
        name, can_be_rotated = _split_marker(raw_name)

        if not name:
            raise ValueError(f"Empty tile name in definition '{raw_name}': \"{definition}\"")

        if name in tileset:
            raise ValueError(
                f"Duplicate tile name '{name}'\n"
                f"  Tile names must be unique (the '{ROTATABLE_MARKER}' marker is not part of the name)"
            )

        connection_keys, weight = _parse_sides(name, definition)
        tileset[name] = TileType(
            id=name,
            name=name,
            connection_keys=connection_keys,
            can_be_rotated=can_be_rotated,
            weight=weight,
        )

    return tileset


def parse_tileset_concise(definition: str) -> TileSet:
    """
    Parse tile type definitions from a concise multi-line format.

    Format:
    - One tile per line: "name: sides"
    - Blank lines and lines starting with '#' are ignored
    - Names and sides follow the same rules as parse_tileset

    Example:
        \"\"\"
        # water and land
        ocean: ocean
        grass: grass
        coast*: grass/ocean ocean ocean/grass grass
        \"\"\"

    Args:
        definition: Multi-line string with one tile per line

    Returns:
        TileSet with parsed tile types, in line order

    Raises:
        ValueError: If a line is malformed or a name repeats
    """
    definitions: dict[str, str] = {}
    seen: dict[str, int] = {}  # name without marker -> line number
    lines = [line.strip() for line in definition.strip().split("\n")]

    for line_idx, line in enumerate(lines):
        if not line or line.startswith("#"):
            continue

        if ":" not in line:
            raise ValueError(
                f"Invalid tile definition on line {line_idx + 1}: '{line}'\n"
                f"  Expected format: 'name: sides'"
            )

        name, sides = (part.strip() for part in line.split(":", 1))

        if not name:
            raise ValueError(f"Empty tile name on line {line_idx + 1}: '{line}'")

        if not sides:
            raise ValueError(f"Empty side definition for '{name}' on line {line_idx + 1}")

        bare_name, _ = _split_marker(name)
        if bare_name in seen:
            raise ValueError(
                f"Duplicate tile name '{bare_name}'\n"
                f"  First defined on line {seen[bare_name]}, repeated on line {line_idx + 1}"
            )
        seen[bare_name] = line_idx + 1
        definitions[name] = sides

    return parse_tileset(definitions)
