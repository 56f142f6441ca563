"""
Undo/redo over immutable wave field snapshots.
"""

from __future__ import annotations

from tile_types import WaveField


class History:
    """
    Linear history of field snapshots with a movable head.

    Snapshots are persistent maps stored by reference, so keeping every
    step costs only the structure each step changed.

    Usage:
        history = History(pmap())
        history.record(collapse_one(history.current, tileset))
        history.undo()
        history.redo()
    """

    def __init__(self, initial: WaveField) -> None:
        self._snapshots: list[WaveField] = [initial]
        self._head = 0

    @property
    def current(self) -> WaveField:
        return self._snapshots[self._head]

    def __len__(self) -> int:
        return len(self._snapshots)

    def record(self, field: WaveField) -> None:
        """
        Make `field` the current snapshot.

        Recording the current snapshot again does nothing. Recording after an
        undo discards the snapshots that could have been redone.
        """
        if field is self.current:
            return
        del self._snapshots[self._head + 1 :]
        self._snapshots.append(field)
        self._head = len(self._snapshots) - 1

    def can_undo(self) -> bool:
        return self._head > 0

    def can_redo(self) -> bool:
        return self._head < len(self._snapshots) - 1

    def undo(self) -> WaveField:
        if self.can_undo():
            self._head -= 1
        return self.current

    def redo(self) -> WaveField:
        if self.can_redo():
            self._head += 1
        return self.current
