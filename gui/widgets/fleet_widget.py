"""Fleet widget with the station filter and per-bus seat maps."""

from __future__ import annotations

from typing import Optional

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QFrame,
    QComboBox, QPushButton, QScrollArea
)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont

from core.config import DashboardConfig
from core.dashboard_state import DashboardState
from core.fleet import Bus
from engine.workflow import BookingWorkflow

from gui.constants import (
    STATUS_COLORS, SEAT_FREE_COLOR, SEAT_WINDOW_COLOR, SEAT_BOOKED_COLOR,
    SEAT_SELECTED_COLOR, SEAT_BORDER_COLOR, SEAT_BUTTON_SIZE, AISLE_WIDTH
)


class SeatButton(QPushButton):
    """A single seat on a bus card."""

    def __init__(self, bus_id: str, seat_index: int, is_window: bool, parent: Optional[QWidget] = None):
        super().__init__(str(seat_index + 1), parent)
        self.bus_id = bus_id
        self.seat_index = seat_index
        self.is_window = is_window
        self.setFixedSize(SEAT_BUTTON_SIZE, SEAT_BUTTON_SIZE)
        self.setCheckable(True)
        self.setToolTip(f"Seat {seat_index + 1} ({'window' if is_window else 'aisle'})")

    def set_status(self, booked: bool, selected: bool) -> None:
        if selected:
            background, text = SEAT_SELECTED_COLOR, "#FFFFFF"
        elif booked:
            background, text = SEAT_BOOKED_COLOR, "#64748B"
        elif self.is_window:
            background, text = SEAT_WINDOW_COLOR, "#0F172A"
        else:
            background, text = SEAT_FREE_COLOR, "#0F172A"

        self.setChecked(selected)
        self.setEnabled(selected or not booked)
        self.setStyleSheet(
            f"QPushButton {{ background-color: {background.name()}; color: {text}; "
            f"border: 1px solid {SEAT_BORDER_COLOR.name()}; border-radius: 4px; }}"
        )


class BusCard(QFrame):
    """Seat map and header for one bus.

    Seats are laid out in rows with an aisle between the second and third
    columns.
    """

    seat_clicked = Signal(str, int)  # bus_id, seat_index

    def __init__(self, bus: Bus, config: DashboardConfig, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.bus_id = bus.bus_id
        self.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Raised)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        title = QLabel(f"{bus.bus_id}  {bus.route}")
        title.setFont(QFont("Arial", 11, QFont.Weight.Bold))
        layout.addWidget(title)

        self._info_label = QLabel()
        layout.addWidget(self._info_label)

        grid = QGridLayout()
        grid.setSpacing(4)
        aisle_column = config.seats_per_row // 2
        grid.setColumnMinimumWidth(aisle_column, AISLE_WIDTH)

        self._buttons: list[SeatButton] = []
        for index, seat in enumerate(bus.seats):
            row, column = divmod(index, config.seats_per_row)
            if column >= aisle_column:
                column += 1
            button = SeatButton(bus.bus_id, index, seat.is_window)
            button.clicked.connect(
                lambda _checked=False, i=index: self.seat_clicked.emit(self.bus_id, i)
            )
            grid.addWidget(button, row, column)
            self._buttons.append(button)

        layout.addLayout(grid)
        layout.addStretch()

    def update_seats(self, state: DashboardState, workflow: BookingWorkflow) -> None:
        bus = state.get_bus(self.bus_id)
        selected = workflow.selected_seats if workflow.bus_id == self.bus_id else []

        for button in self._buttons:
            booked = not state.is_seat_available(self.bus_id, button.seat_index)
            button.set_status(booked, button.seat_index in selected)

        color = STATUS_COLORS[bus.status].name()
        self._info_label.setText(
            f"Departs {bus.departure_time}  |  "
            f'<span style="color: {color};">{bus.status.value}</span>  |  '
            f"Occupied {state.occupancy_count(self.bus_id)}/{bus.capacity}"
        )


class FleetWidget(QFrame):
    """Station filter, bus cards and the Book Selected button.

    Signals:
        filter_changed: (pickup, drop_off)
        seat_clicked: (bus_id, 0-based seat index)
        book_requested: emitted when Book Selected is clicked
    """

    filter_changed = Signal(str, str)
    seat_clicked = Signal(str, int)
    book_requested = Signal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._state: Optional[DashboardState] = None
        self._cards: dict[str, BusCard] = {}
        self._updating = False

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)

        # Filter row
        filter_row = QHBoxLayout()
        filter_row.addWidget(QLabel("From:"))
        self._pickup_combo = QComboBox()
        self._pickup_combo.currentTextChanged.connect(self._on_pickup_changed)
        filter_row.addWidget(self._pickup_combo)

        filter_row.addWidget(QLabel("To:"))
        self._drop_off_combo = QComboBox()
        self._drop_off_combo.currentTextChanged.connect(self._on_drop_off_changed)
        filter_row.addWidget(self._drop_off_combo)
        filter_row.addStretch()

        self._selection_label = QLabel("No seats selected")
        filter_row.addWidget(self._selection_label)

        self._book_button = QPushButton("Book Selected")
        self._book_button.setEnabled(False)
        self._book_button.clicked.connect(self.book_requested.emit)
        filter_row.addWidget(self._book_button)
        layout.addLayout(filter_row)

        # Bus cards
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        self._cards_container = QWidget()
        self._cards_layout = QHBoxLayout(self._cards_container)
        self._cards_layout.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        scroll.setWidget(self._cards_container)
        layout.addWidget(scroll, stretch=1)

    def set_state(self, state: DashboardState, workflow: BookingWorkflow) -> None:
        """Refresh filter combos and seat maps."""
        rebuild = self._state is None or self._state is not state
        self._state = state

        self._updating = True
        try:
            if rebuild:
                self._build_cards(state)
                self._pickup_combo.clear()
                self._pickup_combo.addItems(state.topology.origin_options())
            self._pickup_combo.setCurrentText(state.station_filter.pickup)
            self._fill_destinations(state.station_filter.pickup)
            self._drop_off_combo.setCurrentText(state.station_filter.drop_off)
        finally:
            self._updating = False

        for card in self._cards.values():
            card.update_seats(state, workflow)

        count = len(workflow.selected_seats)
        if count:
            self._selection_label.setText(f"{count} seat(s) on {workflow.bus_id}")
        else:
            self._selection_label.setText("No seats selected")
        self._book_button.setEnabled(count > 0)

    def _build_cards(self, state: DashboardState) -> None:
        for card in self._cards.values():
            self._cards_layout.removeWidget(card)
            card.deleteLater()
        self._cards.clear()

        for bus in state.buses:
            card = BusCard(bus, state.config)
            card.seat_clicked.connect(self.seat_clicked.emit)
            self._cards_layout.addWidget(card)
            self._cards[bus.bus_id] = card

    def _fill_destinations(self, origin: str) -> None:
        current = self._drop_off_combo.currentText()
        self._drop_off_combo.clear()
        if self._state is None or origin not in self._state.topology:
            return
        options = self._state.topology.destination_options(origin)
        self._drop_off_combo.addItems(options)
        if current in options:
            self._drop_off_combo.setCurrentText(current)

    def _on_pickup_changed(self, pickup: str) -> None:
        if self._updating or not pickup:
            return
        self._updating = True
        try:
            self._fill_destinations(pickup)
        finally:
            self._updating = False
        drop_off = self._drop_off_combo.currentText()
        if drop_off:
            self.filter_changed.emit(pickup, drop_off)

    def _on_drop_off_changed(self, drop_off: str) -> None:
        if self._updating or not drop_off:
            return
        self.filter_changed.emit(self._pickup_combo.currentText(), drop_off)
