"""
Wave function collapse over an unbounded, sparse tile field.

Every operation takes a WaveField snapshot and returns a new one. Snapshots are
persistent maps and are never mutated: an operation edits an evolver of its
input and publishes it with `persistent()`, so the result shares all untouched
structure with the input. An operation that changes nothing returns its input.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from typing import Callable, Iterable, Sequence

from pyrsistent import PMap

from tile_types import (
    ORIGIN,
    Coordinate,
    Direction,
    NullKeyPolicy,
    RuleSet,
    Tile,
    TileSet,
    TileState,
    WaveField,
    opposite,
)

logger = logging.getLogger(__name__)

# Type alias for the collapse weighting hook
WeightFn = Callable[[WaveField, Coordinate, TileState], float]


# =============================================================================
# Field Access
# =============================================================================


def get_default_superstate(tileset: TileSet) -> tuple[TileState, ...]:
    """
    Enumerate every state the catalog allows, in catalog order.

    Rotatable types contribute all four rotations, others only rotation 0.
    """
    states: list[TileState] = []
    for tile_type in tileset.values():
        rotations = range(4) if tile_type.can_be_rotated else range(1)
        states.extend(TileState(tile_type, rotation) for rotation in rotations)
    return tuple(states)


def get_tile(
    field: WaveField, position: Coordinate, tileset: TileSet | None = None
) -> Tile | None:
    """
    Get the tile at a position.

    Args:
        field: The wave field
        position: Cell to look up
        tileset: If given, an absent cell is synthesized as the default superstate

    Returns:
        The stored Tile, a synthesized default Tile, or None when absent and no
        tileset was supplied
    """
    tile = field.get(position)
    if tile is None and tileset is not None:
        return Tile(get_default_superstate(tileset))
    return tile


def find_contradictions(field: WaveField) -> list[Coordinate]:
    """Return the positions of all cells with no remaining states."""
    return [position for position, tile in field.items() if tile.is_contradiction]


def is_resolved(field: WaveField) -> bool:
    """True when no materialized cell has more than one remaining state."""
    return all(len(tile.superstate) <= 1 for tile in field.values())


# =============================================================================
# Connection Compatibility
# =============================================================================


def flip_key(key: str) -> str:
    """
    Reverse the '/'-separated segments of a connection key.

    Two tiles meeting face to face read the seam in opposite order, so
    "sand/water" on one side pairs with "water/sand" on the other.
    """
    return "/".join(reversed(key.split("/")))


def offered_keys(superstate: Iterable[TileState], direction: Direction) -> set[str | None]:
    """Collect the flipped keys a superstate presents toward a direction."""
    keys: set[str | None] = set()
    for state in superstate:
        key = state.key_toward(direction)
        keys.add(None if key is None else flip_key(key))
    return keys


def accepts(offered: set[str | None], key: str | None, rules: RuleSet) -> bool:
    """Check whether a neighbour side with the given key fits any offered key."""
    if rules.null_keys == NullKeyPolicy.WILDCARD:
        if key is None:
            return bool(offered)
        if None in offered:
            return True
    return key in offered


def filter_superstate(
    source: Sequence[TileState],
    neighbor: Sequence[TileState],
    direction: Direction,
    rules: RuleSet,
) -> tuple[TileState, ...]:
    """
    Narrow a neighbour's superstate to the states that connect to a source cell.

    Args:
        source: Superstate of the cell doing the constraining
        neighbor: Superstate of the cell lying in `direction` from the source
        direction: Global direction from source to neighbour
        rules: RuleSet selecting the null-key policy

    Returns:
        The compatible neighbour states, in their original order
    """
    offered = offered_keys(source, direction)
    back = opposite(direction)
    return tuple(state for state in neighbor if accepts(offered, state.key_toward(back), rules))


# =============================================================================
# Propagation
# =============================================================================


def propagate(
    field: WaveField,
    origin: Coordinate,
    tileset: TileSet,
    ignore_direction: Direction | None = None,
    rules: RuleSet | None = None,
) -> WaveField:
    """
    Propagate adjacency constraints outward from a changed cell.

    Breadth-first: each processed cell narrows its four neighbours, and any
    neighbour that actually shrank is queued in turn, skipping the edge it was
    just reconciled along. Work stops when nothing shrinks or when
    `rules.iteration_limit` cells have been processed; cells still queued at
    that point keep their dirty flag for a later pass.

    Args:
        field: The wave field
        origin: The cell whose change should be propagated
        tileset: Catalog used to synthesize absent cells
        ignore_direction: Direction from origin not to re-check
        rules: RuleSet governing the budget and null-key matching

    Returns:
        New WaveField with narrowed superstates (original field unchanged)
    """
    working = field.evolver()
    _propagate_in_place(working, origin, tileset, ignore_direction, rules or RuleSet())
    return working.persistent()


def _lookup(working: PMap._Evolver, position: Coordinate) -> Tile | None:
    return working[position] if position in working else None


def _propagate_in_place(
    working: PMap._Evolver,
    origin: Coordinate,
    tileset: TileSet,
    ignore_direction: Direction | None,
    rules: RuleSet,
) -> None:
    """Internal propagation over an evolver. Do not call on a published field."""
    default = get_default_superstate(tileset)

    # Insertion-ordered queue; the latest skip direction for a queued cell wins
    queue: deque[Coordinate] = deque()
    skips: dict[Coordinate, Direction | None] = {}

    def enqueue(position: Coordinate, skip: Direction | None) -> None:
        if position not in skips:
            queue.append(position)
        skips[position] = skip

    enqueue(origin, ignore_direction)
    iterations = 0

    while queue:
        if iterations >= rules.iteration_limit:
            logger.debug(
                "propagate: iteration limit %d reached from %s, %d cells left dirty",
                rules.iteration_limit,
                origin,
                len(queue),
            )
            return
        iterations += 1

        position = queue.popleft()
        skip = skips.pop(position)

        tile = _lookup(working, position)
        if tile is None:
            superstate = default
        else:
            superstate = tile.superstate
            if tile.dirty:
                working[position] = Tile(superstate, dirty=False)

        if not superstate:
            # A contradiction offers no keys and would empty every neighbour
            logger.debug("propagate: skipping contradictory tile at %s", position)
            continue

        for direction in Direction:
            if direction == skip:
                continue

            neighbor_position = position.neighbor(direction)
            neighbor = _lookup(working, neighbor_position)
            neighbor_states = default if neighbor is None else neighbor.superstate

            narrowed = filter_superstate(superstate, neighbor_states, direction, rules)
            if len(narrowed) == len(neighbor_states):
                continue

            working[neighbor_position] = Tile(narrowed, dirty=True)
            if not narrowed:
                logger.warning("Contradiction at (%d, %d)", neighbor_position.x, neighbor_position.y)
            enqueue(neighbor_position, opposite(direction))

    logger.debug("propagate: settled from %s after %d iterations", origin, iterations)


# =============================================================================
# Field Mutation
# =============================================================================


def _assert_valid_state(state: TileState, tileset: TileSet) -> None:
    tile_type = state.tile_type
    assert tileset.get(tile_type.id) == tile_type, (
        f"Tile type '{tile_type.id}' is not part of the current tileset"
    )
    assert 0 <= state.rotation < 4, f"Rotation {state.rotation} out of range"
    assert tile_type.can_be_rotated or state.rotation == 0, (
        f"Tile type '{tile_type.id}' cannot be rotated (rotation {state.rotation})"
    )


def set_tile_state(
    field: WaveField,
    position: Coordinate,
    state: TileState,
    tileset: TileSet,
    rules: RuleSet | None = None,
) -> WaveField:
    """
    Force a cell to a single state and propagate the consequences.

    Args:
        field: The wave field
        position: Cell to set
        state: The state to place; must reference a type in `tileset`
        tileset: The tile catalog
        rules: RuleSet governing propagation

    Returns:
        New WaveField, or `field` itself if the cell already held exactly `state`
    """
    _assert_valid_state(state, tileset)

    tile = get_tile(field, position, tileset)
    if tile is not None and tile.superstate == (state,):
        return field

    working = field.evolver()
    working[position] = Tile((state,), dirty=True)
    _propagate_in_place(working, position, tileset, None, rules or RuleSet())
    return working.persistent()


def delete_tile(field: WaveField, position: Coordinate) -> WaveField:
    """
    Forget a cell and mark its materialized neighbours dirty.

    The deleted cell reads as the default superstate again. No propagation
    happens here; callers re-validate with collapse or propagate when needed.
    """
    working = field.evolver()
    if position in working:
        working.remove(position)

    for direction in Direction:
        neighbor_position = position.neighbor(direction)
        neighbor = _lookup(working, neighbor_position)
        if neighbor is not None and not neighbor.dirty:
            working[neighbor_position] = Tile(neighbor.superstate, dirty=True)

    return working.persistent()


# =============================================================================
# Collapse
# =============================================================================


def constant_weight(field: WaveField, position: Coordinate, state: TileState) -> float:
    """Every state is equally likely."""
    return 1.0


def tile_type_weight(field: WaveField, position: Coordinate, state: TileState) -> float:
    """Weight states by their tile type's catalog frequency."""
    return state.tile_type.weight


def choose_weighted(
    weighted: Sequence[tuple[TileState, float]], rng: random.Random
) -> TileState | None:
    """
    Pick one state by prefix-sum sampling.

    Draws uniformly from [0, total) and returns the first state whose
    cumulative weight exceeds the draw, so zero-weight states are never picked.

    Returns:
        The chosen state, or None if the total weight is zero

    Raises:
        ValueError: If any weight is negative
    """
    for state, weight in weighted:
        if weight < 0:
            raise ValueError(f"Negative weight {weight} for {state}")

    total = sum(weight for _, weight in weighted)
    if total <= 0:
        return None

    draw = rng.random() * total
    cumulative = 0.0
    for state, weight in weighted:
        cumulative += weight
        if cumulative > draw:
            return state
    return None


def collapse(
    field: WaveField,
    position: Coordinate,
    tileset: TileSet,
    rules: RuleSet | None = None,
    weight_fn: WeightFn | None = None,
    rng: random.Random | None = None,
) -> WaveField:
    """
    Resolve one cell to a single state by weighted random choice.

    Dirty neighbours are re-propagated first so the choice is never made
    against stale information. The chosen state is then propagated outward
    in every direction. If no state gets chosen (the re-propagation already
    left fewer than two states, or every weight is zero) the re-propagated
    field is still returned, so the stale neighbours do not stay dirty.

    Args:
        field: The wave field
        position: Cell to resolve
        tileset: The tile catalog
        rules: RuleSet governing propagation
        weight_fn: Weighting hook (default: constant_weight)
        rng: Random source (default: a fresh unseeded Random)

    Returns:
        New WaveField, or `field` itself if nothing changed at all
    """
    if rules is None:
        rules = RuleSet()
    if weight_fn is None:
        weight_fn = constant_weight
    if rng is None:
        rng = random.Random()

    tile = get_tile(field, position, tileset)
    assert tile is not None
    if len(tile.superstate) < 2:
        return field

    working = field.evolver()
    for direction in Direction:
        neighbor_position = position.neighbor(direction)
        neighbor = _lookup(working, neighbor_position)
        if neighbor is not None and neighbor.dirty:
            _propagate_in_place(working, neighbor_position, tileset, None, rules)

    current = _lookup(working, position)
    superstate = tile.superstate if current is None else current.superstate
    if len(superstate) < 2:
        logger.debug("collapse: %s already narrowed to %d states", position, len(superstate))
        return working.persistent()

    snapshot = working.persistent()
    weighted = [(state, weight_fn(snapshot, position, state)) for state in superstate]
    chosen = choose_weighted(weighted, rng)
    if chosen is None:
        logger.debug("collapse: no weighted state to choose at %s", position)
        return snapshot

    working = snapshot.evolver()
    working[position] = Tile((chosen,), dirty=True)
    _propagate_in_place(working, position, tileset, None, rules)
    return working.persistent()


def _collapse_candidates(field: WaveField) -> list[Coordinate]:
    """
    Find the cells to collapse next, in a single pass.

    Dirty cells beat clean ones; among equals the fewest remaining states wins
    (minimum remaining values). All ties are returned.
    """
    best: tuple[bool, int] | None = None
    candidates: list[Coordinate] = []

    for position, tile in field.items():
        count = len(tile.superstate)
        if count < 2:
            continue
        rank = (not tile.dirty, count)
        if best is None or rank < best:
            best = rank
            candidates = [position]
        elif rank == best:
            candidates.append(position)

    return candidates


def collapse_one(
    field: WaveField,
    tileset: TileSet,
    rules: RuleSet | None = None,
    weight_fn: WeightFn | None = None,
    rng: random.Random | None = None,
) -> WaveField:
    """
    Advance generation by collapsing the most constrained cell.

    An empty field is seeded at the origin first. Returns the field without
    further change when no cell has more than one remaining state.
    """
    if rng is None:
        rng = random.Random()

    if not field and tileset:
        field = field.set(ORIGIN, Tile(get_default_superstate(tileset)))

    candidates = _collapse_candidates(field)
    if not candidates:
        return field

    position = rng.choice(candidates)
    logger.debug("collapse_one: %d candidates, picked %s", len(candidates), position)
    return collapse(field, position, tileset, rules, weight_fn, rng)
