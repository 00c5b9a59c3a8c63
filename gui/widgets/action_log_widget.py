"""Action log widget with undo and redo controls."""

from __future__ import annotations

from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame, QPushButton,
    QListWidget, QListWidgetItem
)
from PySide6.QtCore import Signal
from PySide6.QtGui import QFont, QBrush, QColor

from core.actions import ActionKind
from core.dashboard_state import DashboardState


KIND_COLORS = {
    ActionKind.BOOK_TICKET: QColor("#16A34A"),
    ActionKind.CANCEL_TICKET: QColor("#DC2626"),
    ActionKind.ENQUEUE_PASSENGER: QColor("#2563EB"),
    ActionKind.DEQUEUE_PASSENGER: QColor("#7C3AED"),
}


class ActionLogWidget(QFrame):
    """Newest-first list of recorded actions."""

    undo_requested = Signal()
    redo_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Raised)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        header = QHBoxLayout()
        title = QLabel("Action Log")
        title.setFont(QFont("Arial", 12, QFont.Weight.Bold))
        header.addWidget(title)
        header.addStretch()

        self._undo_button = QPushButton("Undo")
        self._undo_button.setShortcut("Ctrl+Z")
        self._undo_button.clicked.connect(self.undo_requested.emit)
        header.addWidget(self._undo_button)

        self._redo_button = QPushButton("Redo")
        self._redo_button.setShortcut("Ctrl+Y")
        self._redo_button.clicked.connect(self.redo_requested.emit)
        header.addWidget(self._redo_button)
        layout.addLayout(header)

        self._list = QListWidget()
        layout.addWidget(self._list, stretch=1)

    def set_state(self, state: DashboardState, can_edit: bool = True) -> None:
        """Refresh the list.

        Args:
            state: Current dashboard state.
            can_edit: False while a booking is in progress; undo and redo
                are only allowed during seat selection.
        """
        self._list.clear()
        for entry in reversed(state.action_log.entries):
            item = QListWidgetItem(
                f"{entry.timestamp:%H:%M:%S}  {entry.action.describe()}"
            )
            item.setForeground(QBrush(KIND_COLORS[entry.action.kind]))
            self._list.addItem(item)

        self._undo_button.setEnabled(can_edit and state.action_log.can_undo())
        self._redo_button.setEnabled(can_edit and state.action_log.can_redo())
