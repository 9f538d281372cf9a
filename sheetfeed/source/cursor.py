from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum

"""Restartable cursor over a loaded record list.

State transitions: not_started -> iterating -> exhausted, and rewind() goes
back to iterating at position 0 from any state.
"""

__all__ = [
    "CursorState",
    "RecordCursor",
]


class CursorState(Enum):
    """Cursor lifecycle.

    - NOT_STARTED: no pass has begun yet
    - ITERATING: a pass is in progress
    - EXHAUSTED: next() ran past the last record
    """
    NOT_STARTED = "not_started"
    ITERATING = "iterating"
    EXHAUSTED = "exhausted"


class RecordCursor:
    """Position + state over an externally supplied record sequence.

    The cursor does not own the records; each call receives the current list so
    a reload between passes is picked up by the next rewind().
    """

    def __init__(self) -> None:
        self._position = 0
        self._state = CursorState.NOT_STARTED

    @property
    def position(self) -> int:
        return self._position

    @property
    def state(self) -> CursorState:
        return self._state

    def rewind(self) -> None:
        self._position = 0
        self._state = CursorState.ITERATING

    def advance(self, records: Sequence[Mapping[str, str]]) -> Mapping[str, str] | None:
        """Return the record at the current position and step forward.

        Returns None (and moves to EXHAUSTED) once the position reaches the end.
        """
        if self._state is CursorState.NOT_STARTED:
            self.rewind()
        elif self._state is CursorState.EXHAUSTED:
            return None
        if self._position >= len(records):
            self._state = CursorState.EXHAUSTED
            return None
        record = records[self._position]
        self._position += 1
        return record
