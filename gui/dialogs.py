"""Dialog windows for the dashboard GUI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QFrame, QLineEdit,
    QComboBox, QPushButton, QGridLayout, QWidget, QScrollArea
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont

from core.fleet import Ticket
from core.passengers import Passenger
from core.topology import StationTopology
from engine.workflow import SeatDraft


@dataclass
class DraftEdit:
    """Values entered for one seat in the details dialog."""
    seat_index: int
    name: str
    pickup: str
    drop_off: str
    passenger_id: Optional[str]


class PassengerDetailsDialog(QDialog):
    """Collect a name and journey for every selected seat.

    Each row can be linked to a waiting passenger, which fills in the name
    and removes that passenger from the queue once the ticket is issued.
    """

    def __init__(
        self,
        bus_id: str,
        drafts: dict[int, SeatDraft],
        topology: StationTopology,
        waiting: list[Passenger],
        boarded: Optional[Passenger] = None,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)

        self.setWindowTitle(f"Passenger Details - {bus_id}")
        self.setModal(True)
        self.setMinimumWidth(720)

        self._topology = topology
        self._rows: list[tuple[int, QLineEdit, QComboBox, QComboBox, QComboBox]] = []

        candidates = ([boarded] if boarded is not None else []) + list(waiting)

        layout = QVBoxLayout(self)
        layout.setSpacing(12)

        title = QLabel(f"Enter details for {len(drafts)} seat(s) on {bus_id}")
        title.setFont(QFont("Arial", 12, QFont.Weight.Bold))
        layout.addWidget(title)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        container = QFrame()
        grid = QGridLayout(container)
        for column, header in enumerate(["Seat", "Passenger", "Name", "From", "To"]):
            label = QLabel(header)
            label.setFont(QFont("Arial", 10, QFont.Weight.Bold))
            grid.addWidget(label, 0, column)

        for row, (seat_index, draft) in enumerate(drafts.items(), start=1):
            grid.addWidget(QLabel(f"#{seat_index + 1}"), row, 0)

            link_combo = QComboBox()
            link_combo.addItem("(not queued)", None)
            for passenger in candidates:
                link_combo.addItem(f"{passenger.name} [{passenger.passenger_id}]", passenger.passenger_id)
            if draft.passenger_id is not None:
                link_index = link_combo.findData(draft.passenger_id)
                if link_index >= 0:
                    link_combo.setCurrentIndex(link_index)
            grid.addWidget(link_combo, row, 1)

            name_edit = QLineEdit(draft.name)
            name_edit.setPlaceholderText("Passenger name")
            grid.addWidget(name_edit, row, 2)

            link_combo.currentIndexChanged.connect(
                lambda _i, combo=link_combo, edit=name_edit, people=candidates:
                    self._on_link_changed(combo, edit, people)
            )

            pickup_combo = QComboBox()
            pickup_combo.addItems(topology.origin_options())
            pickup_combo.setCurrentText(draft.pickup)
            grid.addWidget(pickup_combo, row, 3)

            drop_off_combo = QComboBox()
            drop_off_combo.addItems(topology.destination_options(draft.pickup))
            drop_off_combo.setCurrentText(draft.drop_off)
            grid.addWidget(drop_off_combo, row, 4)

            pickup_combo.currentTextChanged.connect(
                lambda text, combo=drop_off_combo: self._on_pickup_changed(text, combo)
            )

            self._rows.append((seat_index, name_edit, link_combo, pickup_combo, drop_off_combo))

        scroll.setWidget(container)
        layout.addWidget(scroll, stretch=1)

        buttons = QHBoxLayout()
        buttons.addStretch()
        back_button = QPushButton("Back")
        back_button.clicked.connect(self.reject)
        buttons.addWidget(back_button)

        confirm_button = QPushButton("Confirm Booking")
        confirm_button.setDefault(True)
        confirm_button.clicked.connect(self.accept)
        buttons.addWidget(confirm_button)
        layout.addLayout(buttons)

    def _on_link_changed(self, combo: QComboBox, edit: QLineEdit, candidates: list[Passenger]) -> None:
        passenger_id = combo.currentData()
        for passenger in candidates:
            if passenger.passenger_id == passenger_id:
                edit.setText(passenger.name)
                return

    def _on_pickup_changed(self, pickup: str, drop_off_combo: QComboBox) -> None:
        if pickup not in self._topology:
            return
        current = drop_off_combo.currentText()
        options = self._topology.destination_options(pickup)
        drop_off_combo.clear()
        drop_off_combo.addItems(options)
        if current in options:
            drop_off_combo.setCurrentText(current)

    def get_edits(self) -> list[DraftEdit]:
        """Get the values entered for each seat, in selection order."""
        return [
            DraftEdit(
                seat_index=seat_index,
                name=name_edit.text(),
                pickup=pickup_combo.currentText(),
                drop_off=drop_off_combo.currentText(),
                passenger_id=link_combo.currentData(),
            )
            for seat_index, name_edit, link_combo, pickup_combo, drop_off_combo in self._rows
        ]


class TicketDialog(QDialog):
    """Show the tickets issued by a booking."""

    def __init__(self, tickets: list[Ticket], parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setWindowTitle("Tickets Issued")
        self.setModal(True)
        self.setMinimumWidth(420)

        layout = QVBoxLayout(self)
        layout.setSpacing(10)

        title = QLabel(f"{len(tickets)} ticket(s) issued")
        title.setFont(QFont("Arial", 14, QFont.Weight.Bold))
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title)

        for ticket in tickets:
            booking = ticket.booking
            card = QFrame()
            card.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Raised)
            card_layout = QVBoxLayout(card)

            ticket_label = QLabel(booking.ticket_id)
            ticket_label.setFont(QFont("Consolas", 12, QFont.Weight.Bold))
            card_layout.addWidget(ticket_label)

            seat_kind = "Window" if booking.is_window else "Aisle"
            card_layout.addWidget(QLabel(
                f"{booking.passenger_name}\n"
                f"{ticket.bus_id}  Seat {booking.seat_index} ({seat_kind})\n"
                f"{booking.pickup_station} > {booking.drop_off_station}"
            ))
            layout.addWidget(card)

        close_button = QPushButton("Close")
        close_button.clicked.connect(self.accept)
        layout.addWidget(close_button)
