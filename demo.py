"""
Demonstration scripts for the tilewave generator.

Usage:
    python demo.py              # run every demo
    python demo.py coast 7      # generate with the 'coast' tileset and seed 7
"""

import logging
import random
import sys
from collections import Counter

from pyrsistent import pmap

from ascii_render import render_field
from tile_types import Coordinate, TileSet, TileState, WaveField
from tileset_parser import parse_tileset_concise
from wavefield import (
    collapse_one,
    delete_tile,
    find_contradictions,
    get_tile,
    set_tile_state,
    tile_type_weight,
)

# Side keys read counter-clockwise around each tile, so a tile's RIGHT side goes
# from its bottom-right corner to its top-right corner.
TILESETS = dict(
    basic="""
        ocean: ocean
        grass: grass
    """,
    coast="""
        ocean: ocean @3
        grass: grass @3
        coast*: grass/ocean ocean ocean/grass grass
        cape*: grass grass/ocean ocean/grass grass
        inlet*: grass/ocean ocean ocean ocean/grass
    """,
    roads="""
        field: grass
        road*: road grass road grass
        bend*: road road grass grass
        cross: road
    """,
)


def load_tileset(name: str) -> TileSet:
    return parse_tileset_concise(TILESETS[name])


def generate(tileset: TileSet, steps: int, seed: int | None = None, weighted: bool = False) -> WaveField:
    """Run `steps` rounds of collapse_one from an empty field."""
    rng = random.Random(seed)
    weight_fn = tile_type_weight if weighted else None
    field: WaveField = pmap()
    for _ in range(steps):
        field = collapse_one(field, tileset, weight_fn=weight_fn, rng=rng)
    return field


def forced_placement_demo() -> None:
    """Place a single tile and show how far the constraint spreads."""
    tileset = load_tileset("basic")
    ocean = TileState(tileset["ocean"])

    print("=" * 40)
    print("Forced placement: ocean at (0, 0)")
    print("=" * 40)
    field = set_tile_state(pmap(), Coordinate(0, 0), ocean, tileset)
    print(render_field(field, bounds=(-3, -3, 3, 3), highlight_pos=Coordinate(0, 0)))
    print(f"Materialized cells: {len(field)}")
    print()

    print("After deleting (0, 0):")
    field = delete_tile(field, Coordinate(0, 0))
    print(render_field(field, bounds=(-3, -3, 3, 3)))
    tile = get_tile(field, Coordinate(0, 0), tileset)
    assert tile is not None
    print(f"(0, 0) can be: {', '.join(state.tile_type.name for state in tile.superstate)}")


def generation_demo(name: str = "coast", steps: int = 60, seed: int | None = 1) -> None:
    """Grow a map one collapse at a time."""
    tileset = load_tileset(name)

    print("=" * 40)
    print(f"Generation: '{name}' tileset, {steps} steps, seed {seed}")
    print("=" * 40)
    field = generate(tileset, steps, seed, weighted=True)
    print(render_field(field))

    resolved = Counter(
        tile.superstate[0].tile_type.name for tile in field.values() if tile.is_resolved
    )
    print("Resolved: " + ", ".join(f"{count} {type_name}" for type_name, count in resolved.most_common()))

    contradictions = find_contradictions(field)
    if contradictions:
        print(f"✗ {len(contradictions)} contradictions")
    else:
        print("✓ No contradictions")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if len(sys.argv) > 1:
        generation_demo(sys.argv[1], seed=int(sys.argv[2]) if len(sys.argv) > 2 else None)
    else:
        forced_placement_demo()
        print()
        for tileset_name in TILESETS:
            generation_demo(tileset_name)
            print()
