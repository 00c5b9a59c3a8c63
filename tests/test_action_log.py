"""Tests for recorded actions and state-restoring undo/redo."""

import pytest

from core.actions import (
    ActionKind,
    BookTicket,
    CancelTicket,
    DequeuePassenger,
    EnqueuePassenger,
    LogEntry,
)
from core.constants import Priority
from core.dashboard_state import DashboardState
from core.exceptions import NothingToRedoError, NothingToUndoError, TicketNotFoundError
from core.fleet import Booking, Bus
from core.passengers import Passenger
from core.topology import StationTopology


@pytest.fixture
def state() -> DashboardState:
    buses = [
        Bus.create("BUS-101", "Peshawar Morr - Faizabad", "08:00 AM", 8),
        Bus.create("BUS-102", "I/10 Express Hub", "09:30 AM", 4),
    ]
    return DashboardState.create_initial_state(StationTopology(), buses)


def make_booking(ticket_id: str = "METRO-00001", seat_number: int = 1) -> Booking:
    return Booking(
        passenger_name="Ali",
        pickup_station="Peshawar Morr",
        drop_off_station="I-9",
        ticket_id=ticket_id,
        seat_index=seat_number,
        is_window=True,
    )


def apply_and_record(state: DashboardState, action) -> LogEntry:
    action.apply(state)
    return state.action_log.record(action)


# =============================================================================
# Action variants
# =============================================================================

class TestActionVariants:
    """Each variant's revert is the inverse of its apply."""

    def test_kinds(self):
        passenger = Passenger("P0001", "Ali")
        assert BookTicket("BUS-101", 0, make_booking()).kind == ActionKind.BOOK_TICKET
        assert CancelTicket("BUS-101", 0, make_booking()).kind == ActionKind.CANCEL_TICKET
        assert EnqueuePassenger(passenger, 0).kind == ActionKind.ENQUEUE_PASSENGER
        assert DequeuePassenger(passenger, 0).kind == ActionKind.DEQUEUE_PASSENGER

    def test_book_ticket_round_trip(self, state):
        before = state.state_hash()
        action = BookTicket("BUS-101", 0, make_booking())

        action.apply(state)
        assert state.get_bus("BUS-101").total_bookings() == 1

        action.revert(state)
        assert state.state_hash() == before

    def test_book_ticket_restores_removed_passengers(self, state):
        ali = Passenger("P0001", "Ali")
        sara = Passenger("P0002", "Sara")
        state.queue.enqueue(ali)
        state.queue.enqueue(sara)
        before = state.state_hash()

        action = BookTicket("BUS-101", 0, make_booking(), removed_passengers=((0, ali),))
        action.apply(state)
        assert [p.name for p in state.queue] == ["Sara"]

        action.revert(state)
        assert state.state_hash() == before

    def test_cancel_ticket_round_trip(self, state):
        bus = state.get_bus("BUS-101")
        bus.add_booking(state.topology, 0, make_booking())
        before = state.state_hash()

        action = CancelTicket("BUS-101", 0, make_booking())
        action.apply(state)
        assert bus.total_bookings() == 0

        action.revert(state)
        assert state.state_hash() == before

    def test_enqueue_round_trip(self, state):
        state.queue.enqueue(Passenger("P0001", "Ali"))
        before = state.state_hash()
        sick = Passenger("P0002", "Sara", Priority.SICK)

        action = EnqueuePassenger(sick, state.queue.enqueue(sick))
        assert state.queue.peek() == sick

        action.revert(state)
        assert state.state_hash() == before

    def test_dequeue_round_trip(self, state):
        for i, name in enumerate(["Ali", "Sara", "Omar"], start=1):
            state.queue.enqueue(Passenger(f"P000{i}", name))
        before = state.state_hash()

        index, passenger = state.queue.dequeue("P0002")
        action = DequeuePassenger(passenger, index)
        action.revert(state)

        assert state.state_hash() == before

    def test_describe_and_to_dict(self):
        action = BookTicket("BUS-101", 0, make_booking())
        assert "METRO-00001" in action.describe()
        data = action.to_dict()
        assert data["type"] == "book_ticket"
        assert data["pickup"] == "Peshawar Morr"
        assert data["removed_passenger_ids"] == []

    def test_log_entry_to_dict(self):
        entry = LogEntry(action=EnqueuePassenger(Passenger("P0001", "Ali"), 0))
        data = entry.to_dict()
        assert len(data["id"]) == 9
        assert data["action"]["name"] == "Ali"


# =============================================================================
# Undo / redo
# =============================================================================

class TestUndoRedo:
    """Test the history and redo stacks."""

    def test_record_appends(self, state):
        entry = apply_and_record(state, EnqueuePassenger(Passenger("P0001", "Ali"), 0))
        assert state.action_log.entries == [entry]
        assert state.action_log.latest() is entry
        assert state.action_log.can_undo()
        assert not state.action_log.can_redo()

    def test_undo_on_empty_log(self, state):
        with pytest.raises(NothingToUndoError) as exc_info:
            state.action_log.undo(state)
        assert exc_info.value.code == "NOTHING_TO_UNDO"

    def test_redo_without_undo(self, state):
        with pytest.raises(NothingToRedoError):
            state.action_log.redo(state)

    def test_undo_restores_state(self, state):
        """Undo of the latest action restores the pre-action ledger and queue."""
        before = state.state_hash()
        apply_and_record(state, BookTicket("BUS-101", 0, make_booking()))

        entry = state.action_log.undo(state)

        assert isinstance(entry.action, BookTicket)
        assert state.state_hash() == before
        assert len(state.action_log) == 0

    def test_redo_reapplies(self, state):
        apply_and_record(state, BookTicket("BUS-101", 0, make_booking()))
        after = state.state_hash()

        state.action_log.undo(state)
        state.action_log.redo(state)

        assert state.state_hash() == after
        assert len(state.action_log) == 1
        assert not state.action_log.can_redo()

    def test_record_clears_redo(self, state):
        apply_and_record(state, BookTicket("BUS-101", 0, make_booking()))
        state.action_log.undo(state)
        assert state.action_log.can_redo()

        apply_and_record(state, EnqueuePassenger(Passenger("P0001", "Ali"), 0))
        assert not state.action_log.can_redo()

    def test_multiple_undos_walk_back(self, state):
        snapshots = [state.state_hash()]
        apply_and_record(state, EnqueuePassenger(Passenger("P0001", "Ali"), 0))
        snapshots.append(state.state_hash())
        apply_and_record(state, BookTicket("BUS-101", 0, make_booking()))
        snapshots.append(state.state_hash())
        apply_and_record(state, CancelTicket("BUS-101", 0, make_booking()))

        for expected in reversed(snapshots):
            state.action_log.undo(state)
            assert state.state_hash() == expected

    def test_failed_undo_leaves_log_unchanged(self, state):
        """If the inverse cannot apply, the entry stays on the history."""
        apply_and_record(state, BookTicket("BUS-101", 0, make_booking()))
        state.get_bus("BUS-101").remove_booking(0, "METRO-00001")

        with pytest.raises(TicketNotFoundError):
            state.action_log.undo(state)

        assert len(state.action_log) == 1
        assert not state.action_log.can_redo()

    def test_clear(self, state):
        apply_and_record(state, EnqueuePassenger(Passenger("P0001", "Ali"), 0))
        state.action_log.undo(state)
        state.action_log.clear()
        assert not state.action_log.can_undo()
        assert not state.action_log.can_redo()
