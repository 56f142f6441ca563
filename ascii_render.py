"""
ASCII rendering for tilewave fields.

Draws a rectangular window of the unbounded field, two characters per cell:
- Resolved cells: first letter of the tile name plus a rotation arrow
- Unresolved cells: the number of remaining states
- Contradictions: "!!"
- Cells never materialized: "··"
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from tile_types import Coordinate, Tile, WaveField

logger = logging.getLogger(__name__)

CELL_WIDTH = 2
ROTATION_ARROWS = "→↑←↓"  # Indexed by rotation: where the tile's local RIGHT side points
ABSENT_GLYPH = "··"
CONTRADICTION_GLYPH = "!!"

Bounds = tuple[int, int, int, int]  # min_x, min_y, max_x, max_y (inclusive)


def field_bounds(field: WaveField, margin: int = 0) -> Bounds | None:
    """Bounding box of all materialized cells, grown by `margin`. None for an empty field."""
    if not field:
        return None
    xs = [position.x for position in field]
    ys = [position.y for position in field]
    return (min(xs) - margin, min(ys) - margin, max(xs) + margin, max(ys) + margin)


def cell_glyph(tile: Tile | None) -> str:
    """Uncoloured two-character representation of a cell."""
    if tile is None:
        return ABSENT_GLYPH
    if tile.is_contradiction:
        return CONTRADICTION_GLYPH
    if tile.is_resolved:
        state = tile.superstate[0]
        letter = state.tile_type.name[:1] or "?"
        arrow = ROTATION_ARROWS[state.rotation] if state.tile_type.can_be_rotated else " "
        return letter + arrow
    count = len(tile.superstate)
    return f"{count:>{CELL_WIDTH}}" if count < 10**CELL_WIDTH else "+" * CELL_WIDTH


def render_field(
    field: WaveField,
    bounds: Bounds | None = None,
    highlight_pos: Coordinate | None = None,
) -> str:
    """
    Render a window of the field as coloured text.

    Args:
        field: The wave field
        bounds: Window to draw (inclusive); defaults to the materialized cells
        highlight_pos: Optional cell drawn inverted (e.g., a cursor)

    Returns:
        Rendered ASCII string, one text line per grid row inside a box
    """
    if bounds is None:
        bounds = field_bounds(field) or (0, 0, 0, 0)
        if highlight_pos is not None:
            min_x, min_y, max_x, max_y = bounds
            bounds = (
                min(min_x, highlight_pos.x),
                min(min_y, highlight_pos.y),
                max(max_x, highlight_pos.x),
                max(max_y, highlight_pos.y),
            )
    min_x, min_y, max_x, max_y = bounds

    # Build color palette for tile types (red/white are reserved)
    colors: list[Callable[[str], str]] = [
        chalk.green,
        chalk.yellow,
        chalk.blue,
        chalk.magenta,
        chalk.cyan,
        chalk.greenBright,
        chalk.yellowBright,
        chalk.blueBright,
    ]
    type_ids = sorted(
        {tile.superstate[0].tile_type.id for tile in field.values() if tile.is_resolved}
    )
    type_colors: dict[str, Callable[[str], str]] = {
        type_id: colors[i % len(colors)] for i, type_id in enumerate(type_ids)
    }

    def colorize(tile: Tile | None, content: str) -> str:
        if tile is None:
            return content
        if tile.is_contradiction:
            return chalk.red(content)
        if tile.is_resolved:
            return type_colors[tile.superstate[0].tile_type.id](content)
        return chalk.white(content)

    inner_width = (max_x - min_x + 1) * CELL_WIDTH
    lines = ["┌" + "─" * inner_width + "┐"]

    for y in range(min_y, max_y + 1):
        line_parts = ["│"]
        for x in range(min_x, max_x + 1):
            position = Coordinate(x, y)
            tile = field.get(position)
            content = cell_glyph(tile)

            # Apply highlighting (white background)
            if position == highlight_pos:
                line_parts.append(chalk.bgWhite.black(content))
            else:
                line_parts.append(colorize(tile, content))
        line_parts.append("│")
        lines.append("".join(line_parts))

    lines.append("└" + "─" * inner_width + "┘")

    logger.debug("render_field: window %s, %d materialized cells", bounds, len(field))
    return "\n".join(lines)
