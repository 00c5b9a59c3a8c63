"""Intake and boarding queue widget."""

from __future__ import annotations

from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame, QLineEdit,
    QComboBox, QCheckBox, QPushButton, QListWidget, QListWidgetItem
)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont, QBrush

from core.constants import EXPOSED_PRIORITIES, WorkflowPhase
from core.dashboard_state import DashboardState
from engine.workflow import BookingWorkflow

from gui.constants import PRIORITY_COLORS, PRIORITY_LABELS


class QueueWidget(QFrame):
    """Passenger intake form plus the live boarding queue.

    Signals:
        enqueue_requested: (name, priority value, direct booking flag)
        board_requested: passenger id, or None for the head of the queue
        release_requested: send the passenger at the desk back to the queue
    """

    enqueue_requested = Signal(str, str, bool)
    board_requested = Signal(object)
    release_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Raised)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        title = QLabel("Passenger Intake")
        title.setFont(QFont("Arial", 12, QFont.Weight.Bold))
        layout.addWidget(title)

        # Intake form
        form = QHBoxLayout()
        self._name_edit = QLineEdit()
        self._name_edit.setPlaceholderText("Passenger name")
        self._name_edit.returnPressed.connect(self._on_add_clicked)
        form.addWidget(self._name_edit, stretch=1)

        self._priority_combo = QComboBox()
        for priority in EXPOSED_PRIORITIES:
            self._priority_combo.addItem(PRIORITY_LABELS[priority], priority.value)
        form.addWidget(self._priority_combo)

        self._direct_check = QCheckBox("Direct booking")
        form.addWidget(self._direct_check)

        add_button = QPushButton("Add")
        add_button.clicked.connect(self._on_add_clicked)
        form.addWidget(add_button)
        layout.addLayout(form)

        # Queue list
        self._count_label = QLabel("Waiting: 0")
        layout.addWidget(self._count_label)

        self._list = QListWidget()
        self._list.setAlternatingRowColors(True)
        self._list.itemDoubleClicked.connect(self._on_item_double_clicked)
        layout.addWidget(self._list, stretch=1)

        buttons = QHBoxLayout()
        self._board_next_button = QPushButton("Board Next")
        self._board_next_button.clicked.connect(lambda: self.board_requested.emit(None))
        buttons.addWidget(self._board_next_button)

        self._board_selected_button = QPushButton("Board Selected")
        self._board_selected_button.clicked.connect(self._on_board_selected_clicked)
        buttons.addWidget(self._board_selected_button)

        self._release_button = QPushButton("Return to Queue")
        self._release_button.clicked.connect(self.release_requested.emit)
        buttons.addWidget(self._release_button)
        buttons.addStretch()
        layout.addLayout(buttons)

    def set_state(self, state: DashboardState, workflow: BookingWorkflow) -> None:
        """Refresh the queue list and the desk buttons."""
        self._list.clear()
        for position, passenger in enumerate(state.queue, start=1):
            item = QListWidgetItem(
                f"{position}. {passenger.name}  ({PRIORITY_LABELS[passenger.priority]})"
            )
            item.setData(Qt.ItemDataRole.UserRole, passenger.passenger_id)
            item.setForeground(QBrush(PRIORITY_COLORS[passenger.priority]))
            self._list.addItem(item)

        self._count_label.setText(f"Waiting: {len(state.queue)}")
        desk_free = workflow.boarded_passenger is None
        can_board = bool(state.queue) and desk_free
        self._board_next_button.setEnabled(can_board)
        self._board_selected_button.setEnabled(can_board)
        self._release_button.setEnabled(
            not desk_free and workflow.phase == WorkflowPhase.SELECTING
        )

    def clear_form(self) -> None:
        self._name_edit.clear()
        self._priority_combo.setCurrentIndex(0)
        self._direct_check.setChecked(False)

    def _on_add_clicked(self) -> None:
        self.enqueue_requested.emit(
            self._name_edit.text(),
            self._priority_combo.currentData(),
            self._direct_check.isChecked(),
        )

    def _on_board_selected_clicked(self) -> None:
        item = self._list.currentItem()
        if item is not None:
            self.board_requested.emit(item.data(Qt.ItemDataRole.UserRole))

    def _on_item_double_clicked(self, item: QListWidgetItem) -> None:
        self.board_requested.emit(item.data(Qt.ItemDataRole.UserRole))
