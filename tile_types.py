"""
Shared type definitions for the tilewave system.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from pyrsistent import PMap


class Direction(Enum):
    """Cardinal direction, numbered counter-clockwise from the right."""

    RIGHT = 0  # Increasing x
    TOP = 1  # Decreasing y
    LEFT = 2  # Decreasing x
    BOTTOM = 3  # Increasing y


# Unit offsets in screen coordinates (y grows downward)
_OFFSETS = {
    Direction.RIGHT: (1, 0),
    Direction.TOP: (0, -1),
    Direction.LEFT: (-1, 0),
    Direction.BOTTOM: (0, 1),
}


def offset(direction: Direction) -> tuple[int, int]:
    """Return the (dx, dy) unit step for a direction."""
    return _OFFSETS[direction]


def opposite(direction: Direction) -> Direction:
    """Return the direction pointing the other way."""
    return Direction((direction.value + 2) % 4)


def rotate(direction: Direction, amount: int) -> Direction:
    """
    Rotate a direction by a number of quarter turns.

    Positive amounts turn counter-clockwise (RIGHT -> TOP). Negative amounts
    are fine: Python's modulo keeps the result in range.
    """
    return Direction((direction.value + amount) % 4)


# =============================================================================
# Field Types
# =============================================================================


@dataclass(frozen=True)
class Coordinate:
    """A cell position on the unbounded grid."""

    x: int
    y: int

    def neighbor(self, direction: Direction) -> Coordinate:
        dx, dy = offset(direction)
        return Coordinate(self.x + dx, self.y + dy)


ORIGIN = Coordinate(0, 0)

# One key per local side, indexed by Direction.value. None = no constraint.
ConnectionKeys = tuple[str | None, str | None, str | None, str | None]


@dataclass(frozen=True)
class TileType:
    """A catalog entry describing one kind of tile."""

    id: str
    name: str
    connection_keys: ConnectionKeys
    can_be_rotated: bool = False
    description: str = ""
    weight: float = 1.0  # Only consulted by tile_type_weight

    def key(self, side: Direction) -> str | None:
        """Connection key on a local (unrotated) side."""
        return self.connection_keys[side.value]


@dataclass(frozen=True)
class TileState:
    """One concrete configuration a cell may take: a tile type and a rotation."""

    tile_type: TileType
    rotation: int = 0

    def key_toward(self, direction: Direction) -> str | None:
        """
        Connection key this state presents in a global direction.

        A tile rotated once shows its local RIGHT side at the global TOP, so the
        global direction is counter-rotated to find the local side.
        """
        return self.tile_type.key(rotate(direction, -self.rotation))


@dataclass(frozen=True)
class Tile:
    """The content of one grid cell."""

    superstate: tuple[TileState, ...]
    dirty: bool = False  # Changed since neighbours were last checked against it

    @property
    def is_resolved(self) -> bool:
        return len(self.superstate) == 1

    @property
    def is_contradiction(self) -> bool:
        return len(self.superstate) == 0


# Persistent map: updates share structure with the snapshot they came from
WaveField: TypeAlias = "PMap[Coordinate, Tile]"
TileSet = dict[str, TileType]


# =============================================================================
# Rules
# =============================================================================


class NullKeyPolicy(Enum):
    """How a side without a connection key matches other sides."""

    STRICT = "strict"  # None matches only None
    WILDCARD = "wildcard"  # None matches anything


@dataclass(frozen=True)
class RuleSet:
    """Rules governing propagation behavior."""

    iteration_limit: int = 100
    null_keys: NullKeyPolicy = NullKeyPolicy.STRICT
