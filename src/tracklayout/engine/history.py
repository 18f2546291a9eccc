"""
Undo/redo history over full project snapshots.

Works as a list of snapshots plus a cursor:

    snapshots: [initial, edit 1, edit 2, ...]
    undo: cursor -= 1, return snapshots[cursor]
    redo: cursor += 1, return snapshots[cursor]

Snapshots are immutable Projects, so storing references is enough.
"""
from __future__ import annotations

from typing import Generic, Optional, TypeVar
import logging

from tracklayout.config import HISTORY_CAPACITY

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HistoryManager(Generic[T]):
    """
    Bounded linear history.

    Args:
        capacity: Maximum number of stored snapshots (oldest are evicted).
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}.")
        self.capacity = capacity
        self._snapshots: list[T] = []
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> Optional[T]:
        if self._cursor < 0:
            return None
        return self._snapshots[self._cursor]

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def reset(self, snapshot: T) -> None:
        """Start a fresh history whose only entry is `snapshot`."""
        self._snapshots = [snapshot]
        self._cursor = 0
        logger.debug("History reset.")

    def record(self, snapshot: T) -> None:
        """
        Append a snapshot after the cursor. Any redo branch is discarded and
        the oldest snapshot is evicted when the capacity is exceeded.
        """
        # Drop the "future" left behind by earlier undos
        del self._snapshots[self._cursor + 1:]

        self._snapshots.append(snapshot)
        if len(self._snapshots) > self.capacity:
            del self._snapshots[0]
        self._cursor = len(self._snapshots) - 1
        logger.debug(f"History record: cursor={self._cursor}, length={len(self._snapshots)}")

    def undo(self) -> Optional[T]:
        """Step back. Returns the snapshot to restore, or None at the oldest entry."""
        if not self.can_undo():
            return None
        self._cursor -= 1
        logger.debug(f"Undo: cursor={self._cursor}")
        return self._snapshots[self._cursor]

    def redo(self) -> Optional[T]:
        """Step forward. Returns the snapshot to restore, or None at the newest entry."""
        if not self.can_redo():
            return None
        self._cursor += 1
        logger.debug(f"Redo: cursor={self._cursor}")
        return self._snapshots[self._cursor]
