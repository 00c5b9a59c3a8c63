"""Tests for buses, seats, bookings and ticket ids."""

import numpy as np
import pytest

from core.config import DashboardConfig, DEFAULT_CONFIG
from core.constants import BusStatus
from core.exceptions import InvalidStationError, SeatUnavailableError, TicketNotFoundError
from core.fleet import Booking, Bus, Ticket, create_empty_seats
from core.ticketing import TicketIdGenerator
from core.topology import StationTopology


@pytest.fixture
def topology() -> StationTopology:
    return StationTopology()


@pytest.fixture
def bus() -> Bus:
    return Bus.create("BUS-101", "Peshawar Morr - Faizabad", "08:00 AM", 20)


def booking(ticket_id: str, pickup: str, drop_off: str, seat_number: int = 1) -> Booking:
    return Booking(
        passenger_name="Ayesha",
        pickup_station=pickup,
        drop_off_station=drop_off,
        ticket_id=ticket_id,
        seat_index=seat_number,
        is_window=DEFAULT_CONFIG.is_window(seat_number - 1),
    )


# =============================================================================
# Seat geometry
# =============================================================================

class TestSeatGeometry:
    """Test window flags fixed at creation."""

    def test_window_columns(self):
        """Seat i is a window seat iff i % 4 is 0 or 3."""
        seats = create_empty_seats(20)
        for i, seat in enumerate(seats):
            assert seat.is_window == (i % 4 in (0, 3))

    def test_first_row(self):
        seats = create_empty_seats(4)
        assert [s.is_window for s in seats] == [True, False, False, True]

    def test_custom_layout(self):
        config = DashboardConfig(seats_per_row=3, window_columns=(0, 2))
        seats = create_empty_seats(6, config)
        assert [s.is_window for s in seats] == [True, False, True, True, False, True]

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            Bus.create("BUS-X", "Route", "10:00 AM", 0)

    def test_new_bus_is_empty(self, bus):
        assert bus.capacity == 20
        assert len(bus.seats) == 20
        assert bus.status == BusStatus.SCHEDULED
        assert bus.total_bookings() == 0


# =============================================================================
# Bookings
# =============================================================================

class TestBookings:
    """Test the overlap invariant on a seat."""

    def test_add_booking(self, bus, topology):
        bus.add_booking(topology, 0, booking("METRO-00001", "Peshawar Morr", "I-9"))
        assert bus.total_bookings() == 1
        assert not bus.is_seat_available(topology, 0, "British Homes", "I-8")

    def test_non_overlapping_bookings_share_a_seat(self, bus, topology):
        """Peshawar Morr > I-9 and I-9 > Faizabad fit on the same seat."""
        bus.add_booking(topology, 0, booking("METRO-00001", "Peshawar Morr", "I-9"))
        bus.add_booking(topology, 0, booking("METRO-00002", "I-9", "Faizabad"))
        assert len(bus.seats[0].bookings) == 2

    def test_overlapping_booking_rejected(self, bus, topology):
        bus.add_booking(topology, 0, booking("METRO-00001", "Peshawar Morr", "I-9"))
        with pytest.raises(SeatUnavailableError) as exc_info:
            bus.add_booking(topology, 0, booking("METRO-00002", "I/10 Stop", "Faizabad"))
        assert exc_info.value.code == "SEAT_UNAVAILABLE"
        assert len(bus.seats[0].bookings) == 1

    def test_invalid_segment_rejected(self, bus, topology):
        with pytest.raises(InvalidStationError):
            bus.add_booking(topology, 0, booking("METRO-00001", "I-9", "I-9"))

    def test_seat_out_of_range(self, bus, topology):
        with pytest.raises(SeatUnavailableError):
            bus.get_seat(20)
        with pytest.raises(SeatUnavailableError):
            bus.get_seat(-1)

    def test_remove_booking(self, bus, topology):
        bus.add_booking(topology, 3, booking("METRO-00001", "Peshawar Morr", "I-9", 4))
        removed = bus.remove_booking(3, "METRO-00001")
        assert removed.ticket_id == "METRO-00001"
        assert bus.total_bookings() == 0

    def test_remove_unknown_booking(self, bus):
        with pytest.raises(TicketNotFoundError):
            bus.remove_booking(0, "METRO-99999")

    def test_find_ticket(self, bus, topology):
        bus.add_booking(topology, 5, booking("METRO-00007", "I-9", "Faizabad", 6))
        seat_index, found = bus.find_ticket("METRO-00007")
        assert seat_index == 5
        assert found.pickup_station == "I-9"
        assert bus.find_ticket("METRO-00008") is None

    def test_ticket_to_dict(self):
        ticket = Ticket(booking=booking("METRO-00001", "Peshawar Morr", "I-9"), bus_id="BUS-101")
        data = ticket.to_dict()
        assert data["ticket_id"] == "METRO-00001"
        assert data["bus_id"] == "BUS-101"
        assert data["is_window"] is True


# =============================================================================
# Occupancy
# =============================================================================

class TestOccupancy:
    """Test filter-scoped occupancy and the occupancy matrix."""

    def test_occupancy_is_scoped_to_segment(self, bus, topology):
        bus.add_booking(topology, 0, booking("METRO-00001", "Peshawar Morr", "I-9"))
        bus.add_booking(topology, 1, booking("METRO-00002", "I-8", "Faizabad", 2))

        assert bus.occupancy_count(topology, "Peshawar Morr", "Faizabad") == 2
        assert bus.occupancy_count(topology, "Peshawar Morr", "I-9") == 1
        assert bus.occupancy_count(topology, "I-9", "I-8") == 0

    def test_available_seats(self, bus, topology):
        bus.add_booking(topology, 2, booking("METRO-00001", "Peshawar Morr", "I-9", 3))
        available = bus.available_seats(topology, "British Homes", "I/10 Stop")
        assert 2 not in available
        assert len(available) == 19

    def test_occupancy_matrix(self, bus, topology):
        bus.add_booking(topology, 0, booking("METRO-00001", "British Homes", "I-8"))
        matrix = bus.occupancy_matrix(topology)

        assert matrix.shape == (20, 5)
        assert matrix.dtype == np.bool_
        assert list(matrix[0]) == [False, True, True, True, False]
        assert not matrix[1:].any()

    def test_booked_then_removed_restores_availability(self, bus, topology):
        before = bus.available_seats(topology, "Peshawar Morr", "Faizabad")
        bus.add_booking(topology, 4, booking("METRO-00001", "I/10 Stop", "I-8", 5))
        bus.remove_booking(4, "METRO-00001")
        assert bus.available_seats(topology, "Peshawar Morr", "Faizabad") == before


# =============================================================================
# Ticket ids
# =============================================================================

class TestTicketIds:
    """Test monotonic ticket id generation."""

    def test_first_ids(self):
        generator = TicketIdGenerator()
        assert generator.next_id() == "METRO-00001"
        assert generator.next_id() == "METRO-00002"

    def test_peek_does_not_advance(self):
        generator = TicketIdGenerator()
        assert generator.peek() == "METRO-00001"
        assert generator.next_id() == "METRO-00001"

    def test_ids_are_unique(self):
        generator = TicketIdGenerator()
        ids = [generator.next_id() for _ in range(500)]
        assert len(set(ids)) == 500

    def test_from_config(self):
        generator = TicketIdGenerator.from_config(DashboardConfig(ticket_prefix="BRT", ticket_digits=3))
        assert generator.next_id() == "BRT-001"
