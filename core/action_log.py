"""Action log with state-restoring undo and redo.

History and redo are plain stacks of LogEntry. Undo pops the newest entry and
applies its inverse; redo re-applies the entry and moves it back onto the
history. Recording a new action discards the redo stack.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, TYPE_CHECKING

from .actions import Action, LogEntry
from .exceptions import NothingToUndoError, NothingToRedoError

if TYPE_CHECKING:
    from .dashboard_state import DashboardState

logger = logging.getLogger(__name__)


class ActionLog:
    """Append-only history of recorded actions plus a redo stack."""

    def __init__(self) -> None:
        self._history: list[LogEntry] = []
        self._redo: list[LogEntry] = []

    def __len__(self) -> int:
        return len(self._history)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._history))

    @property
    def entries(self) -> list[LogEntry]:
        """History, oldest first."""
        return list(self._history)

    @property
    def redo_entries(self) -> list[LogEntry]:
        """Undone entries, the next one to redo last."""
        return list(self._redo)

    def can_undo(self) -> bool:
        return bool(self._history)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def latest(self) -> Optional[LogEntry]:
        return self._history[-1] if self._history else None

    def record(self, action: Action) -> LogEntry:
        """Append an already applied action and clear the redo stack."""
        entry = LogEntry(action=action)
        self._history.append(entry)
        self._redo.clear()
        logger.debug("Recorded %s (%s)", entry.entry_id, action.kind.value)
        return entry

    def undo(self, state: DashboardState) -> LogEntry:
        """Reverse the newest action.

        The log is only changed when the inverse applies cleanly; if it
        raises, the entry stays on the history.

        Raises:
            NothingToUndoError: If the history is empty.
            DashboardError: If the inverse cannot be applied to the state.
        """
        if not self._history:
            raise NothingToUndoError()
        entry = self._history[-1]
        entry.action.revert(state)
        self._history.pop()
        self._redo.append(entry)
        logger.info("Undid %s", entry.action.describe())
        return entry

    def redo(self, state: DashboardState) -> LogEntry:
        """Re-apply the most recently undone action.

        Raises:
            NothingToRedoError: If there is nothing to redo.
            DashboardError: If the action cannot be re-applied.
        """
        if not self._redo:
            raise NothingToRedoError()
        entry = self._redo[-1]
        entry.action.apply(state)
        self._redo.pop()
        self._history.append(entry)
        logger.info("Redid %s", entry.action.describe())
        return entry

    def clear(self) -> None:
        self._history.clear()
        self._redo.clear()
