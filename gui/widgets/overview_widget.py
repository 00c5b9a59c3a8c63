"""Overview widget summarizing the station at a glance."""

from __future__ import annotations

from typing import Any, Optional

from PySide6.QtWidgets import (
    QWidget, QHBoxLayout, QVBoxLayout, QLabel, QFrame, QGridLayout
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont, QColor

from core.constants import BusStatus, WorkflowPhase

from gui.constants import STATUS_COLORS


class PhaseIndicatorWidget(QFrame):
    """Widget showing the booking workflow phase."""

    PHASE_NAMES = {
        WorkflowPhase.SELECTING: "Selecting Seats",
        WorkflowPhase.DETAILING: "Entering Details",
        WorkflowPhase.FINALIZING: "Issuing Tickets",
    }

    PHASE_COLORS = {
        WorkflowPhase.SELECTING: QColor("#C8E6C9"),
        WorkflowPhase.DETAILING: QColor("#BBDEFB"),
        WorkflowPhase.FINALIZING: QColor("#FFE0B2"),
    }

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Raised)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)

        self._phase_label = QLabel()
        self._phase_label.setFont(QFont("Arial", 12, QFont.Weight.Bold))
        self._phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._phase_label)

        self._intake_label = QLabel()
        self._intake_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._intake_label)

        self.set_phase(WorkflowPhase.SELECTING, "")

    def set_phase(self, phase: WorkflowPhase, intake_name: str) -> None:
        self._phase_label.setText(self.PHASE_NAMES[phase])
        self.setStyleSheet(f"background-color: {self.PHASE_COLORS[phase].name()};")
        self._intake_label.setText(f"At desk: {intake_name}" if intake_name else "Desk free")


class OverviewWidget(QFrame):
    """Queue totals, active filter and per-bus occupancy."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Raised)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        top = QHBoxLayout()
        self._phase_indicator = PhaseIndicatorWidget()
        top.addWidget(self._phase_indicator)

        stats = QVBoxLayout()
        self._queue_label = QLabel()
        self._queue_label.setFont(QFont("Arial", 11))
        stats.addWidget(self._queue_label)
        self._filter_label = QLabel()
        stats.addWidget(self._filter_label)
        self._log_label = QLabel()
        stats.addWidget(self._log_label)
        top.addLayout(stats)
        top.addStretch()
        layout.addLayout(top)

        self._bus_grid = QGridLayout()
        self._bus_grid.setSpacing(8)
        for column, header in enumerate(["Bus", "Route", "Departs", "Status", "Occupied", "Tickets"]):
            label = QLabel(header)
            label.setFont(QFont("Arial", 10, QFont.Weight.Bold))
            self._bus_grid.addWidget(label, 0, column)
        layout.addLayout(self._bus_grid)
        layout.addStretch()

        self._bus_labels: list[QLabel] = []

    def set_summary(self, summary: dict[str, Any]) -> None:
        """Update from DashboardEngine.dashboard_summary()."""
        self._phase_indicator.set_phase(WorkflowPhase(summary["phase"]), summary["intake_name"])

        self._queue_label.setText(
            f"Waiting: {summary['queue_length']} "
            f"({summary['priority_waiting']} priority)"
        )
        station_filter = summary["filter"]
        self._filter_label.setText(f"Filter: {station_filter['pickup']} > {station_filter['drop_off']}")
        self._log_label.setText(f"Logged actions: {summary['log_size']}")

        for label in self._bus_labels:
            self._bus_grid.removeWidget(label)
            label.deleteLater()
        self._bus_labels.clear()

        for row, bus in enumerate(summary["buses"], start=1):
            status_color = STATUS_COLORS[BusStatus(bus["status"])].name()
            cells = [
                bus["id"],
                bus["route"],
                bus["departure_time"],
                f'<span style="color: {status_color};">{bus["status"]}</span>',
                f"{bus['occupied']}/{bus['capacity']}",
                str(bus["tickets"]),
            ]
            for column, text in enumerate(cells):
                label = QLabel(text)
                self._bus_grid.addWidget(label, row, column)
                self._bus_labels.append(label)
