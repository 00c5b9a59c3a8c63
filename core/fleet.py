"""Buses, seats and bookings (the seat ledger).

A seat can carry several bookings as long as their station segments do not
overlap, so one physical seat may be sold Peshawar Morr > I-9 and again
I-9 > Faizabad.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .config import DashboardConfig, DEFAULT_CONFIG
from .constants import BusStatus
from .exceptions import SeatUnavailableError, TicketNotFoundError
from .topology import StationTopology


@dataclass(frozen=True)
class Booking:
    """An issued ticket held by one seat.

    Attributes:
        passenger_name: Name printed on the ticket.
        pickup_station: Station where the passenger boards.
        drop_off_station: Station where the passenger leaves.
        ticket_id: Ticket identifier (e.g. METRO-00042).
        seat_index: 1-based seat number for display.
        is_window: Whether the seat is a window seat.
    """

    passenger_name: str
    pickup_station: str
    drop_off_station: str
    ticket_id: str
    seat_index: int
    is_window: bool

    def overlaps(self, topology: StationTopology, pickup: str, drop_off: str) -> bool:
        """Check whether this booking overlaps the given segment."""
        return topology.overlaps(
            self.pickup_station, self.drop_off_station, pickup, drop_off
        )


@dataclass(frozen=True)
class Ticket:
    """Issued ticket as shown to the passenger (a booking plus its bus)."""

    booking: Booking
    bus_id: str

    def to_dict(self) -> dict:
        return {
            "passenger_name": self.booking.passenger_name,
            "pickup_station": self.booking.pickup_station,
            "drop_off_station": self.booking.drop_off_station,
            "ticket_id": self.booking.ticket_id,
            "seat_index": self.booking.seat_index,
            "is_window": self.booking.is_window,
            "bus_id": self.bus_id,
        }


@dataclass
class Seat:
    """A single seat with its bookings.

    Attributes:
        is_window: Fixed at creation from the bus layout.
        bookings: Bookings on this seat, in issue order.
    """

    is_window: bool
    bookings: list[Booking] = field(default_factory=list)

    def is_free_for(self, topology: StationTopology, pickup: str, drop_off: str) -> bool:
        """Check that no booking overlaps the given segment."""
        return not any(b.overlaps(topology, pickup, drop_off) for b in self.bookings)

    def find_booking(self, ticket_id: str) -> Optional[Booking]:
        for booking in self.bookings:
            if booking.ticket_id == ticket_id:
                return booking
        return None


def create_empty_seats(capacity: int, config: DashboardConfig = DEFAULT_CONFIG) -> list[Seat]:
    """Create an unbooked seat array with window geometry applied.

    Args:
        capacity: Number of seats.
        config: Layout configuration (seats per row, window columns).

    Returns:
        List of ``capacity`` seats.
    """
    return [Seat(is_window=config.is_window(i)) for i in range(capacity)]


@dataclass
class Bus:
    """A scheduled bus and its seat ledger.

    Attributes:
        bus_id: Identifier such as BUS-101.
        route: Route description.
        departure_time: Display departure time.
        status: Schedule status.
        capacity: Number of seats (never changes).
        seats: Seat array of length ``capacity``.
    """

    bus_id: str
    route: str
    departure_time: str
    capacity: int
    status: BusStatus = BusStatus.SCHEDULED
    seats: list[Seat] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        bus_id: str,
        route: str,
        departure_time: str,
        capacity: int,
        status: BusStatus = BusStatus.SCHEDULED,
        config: DashboardConfig = DEFAULT_CONFIG,
    ) -> Bus:
        """Create a bus with an empty seat array."""
        if capacity <= 0:
            raise ValueError(f"Bus {bus_id} must have a positive capacity, got {capacity}")
        return cls(
            bus_id=bus_id,
            route=route,
            departure_time=departure_time,
            capacity=capacity,
            status=status,
            seats=create_empty_seats(capacity, config),
        )

    def get_seat(self, seat_index: int) -> Seat:
        """Get a seat by 0-based index.

        Raises:
            SeatUnavailableError: If the index is outside the bus.
        """
        if not 0 <= seat_index < self.capacity:
            raise SeatUnavailableError(
                f"Seat {seat_index} does not exist on {self.bus_id} "
                f"(capacity {self.capacity})"
            )
        return self.seats[seat_index]

    def is_seat_available(
        self,
        topology: StationTopology,
        seat_index: int,
        pickup: str,
        drop_off: str,
    ) -> bool:
        """Check whether a seat is free for the given segment."""
        return self.get_seat(seat_index).is_free_for(topology, pickup, drop_off)

    def available_seats(self, topology: StationTopology, pickup: str, drop_off: str) -> list[int]:
        """Indices of all seats free for the given segment."""
        return [
            idx for idx, seat in enumerate(self.seats)
            if seat.is_free_for(topology, pickup, drop_off)
        ]

    def add_booking(self, topology: StationTopology, seat_index: int, booking: Booking) -> None:
        """Append a booking to a seat.

        Raises:
            SeatUnavailableError: If the booking overlaps an existing one.
            InvalidStationError: If the booking has an invalid segment.
        """
        topology.validate_segment(booking.pickup_station, booking.drop_off_station)
        seat = self.get_seat(seat_index)
        if not seat.is_free_for(topology, booking.pickup_station, booking.drop_off_station):
            raise SeatUnavailableError(
                f"Seat {seat_index + 1} on {self.bus_id} is already booked between "
                f"{booking.pickup_station} and {booking.drop_off_station}"
            )
        seat.bookings.append(booking)

    def remove_booking(self, seat_index: int, ticket_id: str) -> Booking:
        """Remove a booking from a seat by ticket id.

        Raises:
            TicketNotFoundError: If the seat holds no such ticket.
        """
        seat = self.get_seat(seat_index)
        booking = seat.find_booking(ticket_id)
        if booking is None:
            raise TicketNotFoundError(
                f"Ticket {ticket_id} not found on seat {seat_index + 1} of {self.bus_id}"
            )
        seat.bookings.remove(booking)
        return booking

    def find_ticket(self, ticket_id: str) -> Optional[tuple[int, Booking]]:
        """Locate a ticket on this bus.

        Returns:
            Tuple of (0-based seat index, booking), or None.
        """
        for idx, seat in enumerate(self.seats):
            booking = seat.find_booking(ticket_id)
            if booking is not None:
                return idx, booking
        return None

    def occupancy_count(self, topology: StationTopology, pickup: str, drop_off: str) -> int:
        """Number of seats holding a booking that overlaps the segment.

        This is scoped to the segment, not an absolute seat count.
        """
        return sum(
            1 for seat in self.seats
            if not seat.is_free_for(topology, pickup, drop_off)
        )

    def total_bookings(self) -> int:
        return sum(len(seat.bookings) for seat in self.seats)

    def occupancy_matrix(self, topology: StationTopology) -> np.ndarray:
        """Boolean matrix of seat x hop occupancy.

        Returns:
            Array of shape ``(capacity, len(topology) - 1)`` where entry
            ``[s, h]`` is True when seat ``s`` is booked across hop ``h``.
        """
        matrix = np.zeros((self.capacity, len(topology) - 1), dtype=bool)
        for seat_idx, seat in enumerate(self.seats):
            for booking in seat.bookings:
                start, end = topology.segment_indices(
                    booking.pickup_station, booking.drop_off_station
                )
                matrix[seat_idx, start:end] = True
        return matrix
