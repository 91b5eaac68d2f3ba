"""
history.py - Bounded undo history

HistoryManager keeps the ledger snapshots taken before each user action,
most recent first, and tracks whether an undo is in progress.

State machine:
    IDLE --undo()--> RESTORING --finish_restore()--> IDLE

While RESTORING, the owner of the ledger must not hand the state to the
persistence collaborator; the restored snapshot is persisted once, after
the restore has settled.
"""

from __future__ import annotations
from enum import Enum
from typing import List, Optional

from .core import LedgerState, HISTORY_LIMIT


class RestoreState(Enum):
    IDLE = "idle"
    RESTORING = "restoring"


class HistoryManager:
    """
    Most-recent-first stack of ledger snapshots, bounded to ``limit`` entries.

    Snapshots are stored by reference. This is safe because ledger
    transitions never mutate a state in place (see store.py).

    Example:
        history = HistoryManager()
        history.record(state)
        state = store.add_item(state, "2024-05-01", "BOX")
        previous = history.begin_restore()   # the state before add_item
        ...
        history.finish_restore()
    """

    def __init__(self, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.limit = limit
        self._snapshots: List[LedgerState] = []
        self._state = RestoreState.IDLE

    @property
    def state(self) -> RestoreState:
        return self._state

    @property
    def is_restoring(self) -> bool:
        return self._state is RestoreState.RESTORING

    @property
    def depth(self) -> int:
        """Number of snapshots available for undo."""
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return bool(self._snapshots)

    def peek(self) -> Optional[LedgerState]:
        """Return the snapshot undo() would restore, without removing it."""
        return self._snapshots[0] if self._snapshots else None

    def record(self, snapshot: LedgerState) -> None:
        """
        Push the state as it was before a user action.

        The oldest snapshot is dropped once more than ``limit`` are held.
        """
        self._snapshots.insert(0, snapshot)
        del self._snapshots[self.limit:]

    def begin_restore(self) -> Optional[LedgerState]:
        """
        Pop the most recent snapshot and enter RESTORING.

        Returns:
            The snapshot to load, or None (state stays IDLE) if the stack is empty
        """
        if not self._snapshots:
            return None
        snapshot = self._snapshots.pop(0)
        self._state = RestoreState.RESTORING
        return snapshot

    def finish_restore(self) -> None:
        self._state = RestoreState.IDLE

    def clear(self) -> None:
        """Drop all snapshots. The restore state is left as is."""
        self._snapshots.clear()
