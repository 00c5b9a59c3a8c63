"""Main engine for the metro station dashboard.

The DashboardEngine is the single controller that owns the DashboardState.
It provides:
- reset(): load the fleet and start from an empty queue and log
- command methods (enqueue_passenger, select_seat, finalize_booking, ...)
  that return a CommandResult instead of raising for user errors
- query methods (occupancy_count, selectable_seats, dashboard_summary)

Every state change goes through a recorded action, so undo() and redo()
restore the seat ledger and queue, not just the log.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from core.config import DashboardConfig, DEFAULT_CONFIG
from core.constants import Priority, QueueMatch, WorkflowPhase
from core.dashboard_state import DashboardState
from core.exceptions import (
    DashboardError,
    EmptyInputError,
    PassengerNotFoundError,
    SeatUnavailableError,
    TicketNotFoundError,
)
from core.fleet import Booking, Bus, Ticket
from core.passengers import Passenger
from core.actions import BookTicket, CancelTicket, DequeuePassenger, EnqueuePassenger, LogEntry
from data.loader import FleetData, load_default_fleet

from .workflow import BookingWorkflow, SeatDraft

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of executing a dashboard command.

    Attributes:
        success: Whether the command was executed.
        value: Command-specific return value (passenger, tickets, ...).
        error: Description of the failure, if any.
        code: Stable failure code (EMPTY_INPUT, SEAT_UNAVAILABLE, ...).
        info: Additional information about the command.
    """

    success: bool
    value: Any = None
    error: Optional[str] = None
    code: Optional[str] = None
    info: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, value: Any = None, **info: Any) -> CommandResult:
        return cls(success=True, value=value, info=info)

    @classmethod
    def fail(cls, error: DashboardError) -> CommandResult:
        return cls(success=False, error=error.message, code=error.code)

    def __bool__(self) -> bool:
        return self.success


class DashboardEngine:
    """Controller for the station dashboard.

    Usage:
        engine = DashboardEngine()
        engine.reset()

        engine.enqueue_passenger("Ayesha", Priority.SICK)
        engine.board_passenger()
        engine.select_seat("BUS-101", 0)
        engine.start_booking()
        result = engine.finalize_booking()
        tickets = result.value
    """

    def __init__(self, config: Optional[DashboardConfig] = None):
        """Initialize the engine.

        Args:
            config: Dashboard configuration (layout, ticketing, queue matching).
        """
        self._config = config or DEFAULT_CONFIG
        self._state: Optional[DashboardState] = None
        self._workflow = BookingWorkflow()

    @property
    def state(self) -> DashboardState:
        """Get the current dashboard state.

        Raises:
            RuntimeError: If the dashboard has not been initialized.
        """
        if self._state is None:
            raise RuntimeError("Dashboard not initialized. Call reset() first.")
        return self._state

    @property
    def workflow(self) -> BookingWorkflow:
        return self._workflow

    @property
    def config(self) -> DashboardConfig:
        return self._config

    @property
    def phase(self) -> WorkflowPhase:
        return self._workflow.phase

    def is_initialized(self) -> bool:
        return self._state is not None

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    def reset(self, fleet: Optional[FleetData] = None) -> DashboardState:
        """Start a fresh dashboard.

        Args:
            fleet: Optional seed data. If None, the default fleet is loaded.

        Returns:
            The initial dashboard state.
        """
        fleet = fleet if fleet is not None else load_default_fleet(self._config)
        self._state = DashboardState.create_initial_state(
            fleet.topology, fleet.buses, self._config
        )
        self._workflow = BookingWorkflow()
        logger.info(
            "Dashboard reset with %d buses over %d stations",
            len(fleet.buses), len(fleet.topology),
        )
        return self._state

    # -------------------------------------------------------------------------
    # Command execution
    # -------------------------------------------------------------------------

    def _execute(self, command: str, func: Callable[[], CommandResult]) -> CommandResult:
        """Run a command, converting dashboard errors into a failed result."""
        try:
            return func()
        except DashboardError as e:
            logger.warning("%s rejected: %s (%s)", command, e.message, e.code)
            return CommandResult.fail(e)

    # -------------------------------------------------------------------------
    # Intake
    # -------------------------------------------------------------------------

    def enqueue_passenger(
        self,
        name: str,
        priority: Union[Priority, str] = Priority.NORMAL,
    ) -> CommandResult:
        """Add a passenger to the intake queue.

        Returns:
            Result whose value is the new Passenger; ``info["index"]`` is the
            queue position it was inserted at.
        """
        def run() -> CommandResult:
            clean_name = self._require_name(name)
            passenger = Passenger(
                passenger_id=self.state.next_passenger_id(),
                name=clean_name,
                priority=self._parse_priority(priority),
            )
            index = self.state.queue.enqueue(passenger)
            self.state.action_log.record(EnqueuePassenger(passenger=passenger, index=index))
            logger.info(
                "Queued %s (%s) at position %d",
                passenger.name, passenger.priority.value, index + 1,
            )
            return CommandResult.ok(passenger, index=index)

        return self._execute("enqueue_passenger", run)

    def direct_booking(self, name: str) -> CommandResult:
        """Take a name straight into seat selection, bypassing the queue.

        Fails with INTAKE_IN_PROGRESS while a boarded passenger is at the desk.
        """
        def run() -> CommandResult:
            clean_name = self._require_name(name)
            self._workflow.set_intake(clean_name)
            logger.info("Direct booking started for %s", clean_name)
            return CommandResult.ok(clean_name)

        return self._execute("direct_booking", run)

    def board_passenger(self, passenger_id: Optional[str] = None) -> CommandResult:
        """Call a passenger (or the head of the queue) to the booking desk.

        The passenger leaves the queue and becomes the in-flight intake, so
        the first seat of the next booking is pre-filled for them. Only one
        passenger can be at the desk; release_passenger() sends them back.

        Returns:
            Result whose value is the dequeued Passenger.
        """
        def run() -> CommandResult:
            self._workflow.require_phase(WorkflowPhase.SELECTING)
            self._workflow.require_free_desk()
            index, passenger = self.state.queue.dequeue(passenger_id)
            self.state.action_log.record(DequeuePassenger(passenger=passenger, index=index))
            self._workflow.set_intake(passenger.name, passenger, index)
            logger.info("Boarding %s from position %d", passenger.name, index + 1)
            return CommandResult.ok(passenger, index=index)

        return self._execute("board_passenger", run)

    def release_passenger(self) -> CommandResult:
        """Send the boarded passenger back to the queue position they left.

        Returns:
            Result whose value is the returned Passenger.
        """
        def run() -> CommandResult:
            index, passenger = self._workflow.release_intake()
            index = min(index, len(self.state.queue))
            self.state.queue.insert_at(index, passenger)
            self.state.action_log.record(
                EnqueuePassenger(passenger=passenger, index=index, returned=True)
            )
            logger.info("Returned %s to position %d", passenger.name, index + 1)
            return CommandResult.ok(passenger, index=index)

        return self._execute("release_passenger", run)

    def _require_name(self, name: Optional[str]) -> str:
        clean_name = (name or "").strip()
        if not clean_name:
            raise EmptyInputError("Passenger name must not be empty")
        return clean_name

    def _parse_priority(self, priority: Union[Priority, str]) -> Priority:
        if isinstance(priority, Priority):
            return priority
        try:
            return Priority(priority)
        except ValueError:
            raise DashboardError(
                f"Unknown priority {priority!r}. Valid priorities: {[p.value for p in Priority]}",
                code="INVALID_PRIORITY",
            ) from None

    # -------------------------------------------------------------------------
    # Filter and selection
    # -------------------------------------------------------------------------

    def set_filter(self, pickup: str, drop_off: str) -> CommandResult:
        """Change the active pickup/drop-off filter."""
        def run() -> CommandResult:
            self.state.set_filter(pickup, drop_off)
            logger.info("Filter set to %s > %s", pickup, drop_off)
            return CommandResult.ok(self.state.station_filter)

        return self._execute("set_filter", run)

    def select_seat(self, bus_id: str, seat_index: int) -> CommandResult:
        """Toggle a seat in the selection.

        Deselecting is always allowed. Selecting requires the seat to be free
        under the active filter.

        Returns:
            Result whose value is the selection (0-based indices) afterwards.
        """
        def run() -> CommandResult:
            self._workflow.require_phase(WorkflowPhase.SELECTING)
            bus = self.state.get_bus(bus_id)
            bus.get_seat(seat_index)
            deselecting = (
                self._workflow.bus_id == bus_id
                and seat_index in self._workflow.selected_seats
            )
            if not deselecting and not self.state.is_seat_available(bus_id, seat_index):
                raise SeatUnavailableError(
                    f"Seat {seat_index + 1} on {bus_id} is booked between "
                    f"{self.state.station_filter.pickup} and {self.state.station_filter.drop_off}"
                )
            selection = self._workflow.toggle_seat(bus_id, seat_index)
            logger.debug("Selection on %s is now %s", bus_id, selection)
            return CommandResult.ok(selection, bus_id=bus_id)

        return self._execute("select_seat", run)

    def clear_selection(self) -> CommandResult:
        def run() -> CommandResult:
            self._workflow.require_phase(WorkflowPhase.SELECTING)
            self._workflow.clear_selection()
            return CommandResult.ok([])

        return self._execute("clear_selection", run)

    # -------------------------------------------------------------------------
    # Booking workflow
    # -------------------------------------------------------------------------

    def start_booking(self) -> CommandResult:
        """Move the current selection into detail entry.

        Returns:
            Result whose value maps seat index to its SeatDraft.
        """
        def run() -> CommandResult:
            station_filter = self.state.station_filter
            drafts = self._workflow.start_details(station_filter.pickup, station_filter.drop_off)
            logger.info(
                "Collecting details for %d seat(s) on %s",
                len(drafts), self._workflow.bus_id,
            )
            return CommandResult.ok(drafts)

        return self._execute("start_booking", run)

    def update_seat_detail(
        self,
        seat_index: int,
        name: Optional[str] = None,
        pickup: Optional[str] = None,
        drop_off: Optional[str] = None,
        passenger_id: Optional[str] = None,
    ) -> CommandResult:
        """Edit the draft of one selected seat.

        Passing ``passenger_id`` links the draft to a queued passenger; their
        name is used unless ``name`` is also given.
        """
        def run() -> CommandResult:
            draft = self._workflow.get_draft(seat_index)
            new_pickup = pickup if pickup is not None else draft.pickup
            new_drop_off = drop_off if drop_off is not None else draft.drop_off
            self.state.topology.validate_segment(new_pickup, new_drop_off)

            new_name = draft.name
            new_passenger_id = draft.passenger_id
            if passenger_id is not None:
                passenger = self._lookup_passenger(passenger_id)
                new_passenger_id = passenger.passenger_id
                new_name = passenger.name
            if name is not None:
                new_name = name.strip()

            draft.name = new_name
            draft.pickup = new_pickup
            draft.drop_off = new_drop_off
            draft.passenger_id = new_passenger_id
            return CommandResult.ok(draft)

        return self._execute("update_seat_detail", run)

    def _lookup_passenger(self, passenger_id: str) -> Passenger:
        boarded = self._workflow.boarded_passenger
        if boarded is not None and boarded.passenger_id == passenger_id:
            return boarded
        passenger = self.state.queue.find(passenger_id)
        if passenger is None:
            raise PassengerNotFoundError(f"Passenger {passenger_id} is not waiting")
        return passenger

    def cancel_booking(self) -> CommandResult:
        """Abandon detail entry and go back to seat selection."""
        def run() -> CommandResult:
            self._workflow.cancel_details()
            return CommandResult.ok(list(self._workflow.selected_seats))

        return self._execute("cancel_booking", run)

    def finalize_booking(self) -> CommandResult:
        """Issue tickets for every drafted seat.

        All drafts are validated before anything is written, so a rejected
        finalize leaves the ledger, queue and log untouched and the workflow
        back in DETAILING.

        Returns:
            Result whose value is the list of issued Tickets.
        """
        def run() -> CommandResult:
            self._workflow.require_phase(WorkflowPhase.DETAILING)
            bus = self.state.get_bus(self._workflow.bus_id)
            drafts = self._workflow.begin_finalize()
            try:
                self._validate_drafts(bus, drafts)
            except DashboardError:
                self._workflow.abort_finalize()
                raise

            boarded = self._workflow.boarded_passenger
            tickets = [
                self._issue_ticket(bus, draft, boarded if i == 0 else None)
                for i, draft in enumerate(drafts)
            ]
            self._workflow.complete_finalize()
            logger.info(
                "Issued %d ticket(s) on %s: %s",
                len(tickets), bus.bus_id, ", ".join(t.booking.ticket_id for t in tickets),
            )
            return CommandResult.ok(tickets, bus_id=bus.bus_id)

        return self._execute("finalize_booking", run)

    def _validate_drafts(self, bus: Bus, drafts: list[SeatDraft]) -> None:
        topology = self.state.topology
        for draft in drafts:
            topology.validate_segment(draft.pickup, draft.drop_off)
            if not bus.is_seat_available(topology, draft.seat_index, draft.pickup, draft.drop_off):
                raise SeatUnavailableError(
                    f"Seat {draft.seat_index + 1} on {bus.bus_id} is already booked between "
                    f"{draft.pickup} and {draft.drop_off}"
                )

    def _issue_ticket(
        self, bus: Bus, draft: SeatDraft, boarded: Optional[Passenger] = None
    ) -> Ticket:
        seat = bus.get_seat(draft.seat_index)
        booking = Booking(
            passenger_name=draft.name or self._config.default_passenger_name,
            pickup_station=draft.pickup,
            drop_off_station=draft.drop_off,
            ticket_id=self.state.tickets.next_id(),
            seat_index=draft.seat_index + 1,
            is_window=seat.is_window,
        )
        bus.add_booking(self.state.topology, draft.seat_index, booking)

        if self._config.queue_match == QueueMatch.NAME:
            removed = self.state.queue.remove_by_names([draft.name])
        elif draft.passenger_id is not None:
            removed = self.state.queue.remove_by_ids([draft.passenger_id])
        else:
            removed = []

        self.state.action_log.record(
            BookTicket(
                bus_id=bus.bus_id,
                seat_index=draft.seat_index,
                booking=booking,
                removed_passengers=tuple(removed),
                boarded=boarded,
                boarded_index=self._workflow.boarded_index if boarded is not None else 0,
            )
        )
        return Ticket(booking=booking, bus_id=bus.bus_id)

    def cancel_ticket(self, ticket_id: str, bus_id: Optional[str] = None) -> CommandResult:
        """Remove an issued ticket from the ledger.

        Args:
            ticket_id: The ticket to cancel.
            bus_id: Optional bus to search; all buses are searched otherwise.

        Returns:
            Result whose value is the cancelled Ticket.
        """
        def run() -> CommandResult:
            buses = [self.state.get_bus(bus_id)] if bus_id is not None else self.state.buses
            for bus in buses:
                found = bus.find_ticket(ticket_id)
                if found is None:
                    continue
                seat_index, booking = found
                bus.remove_booking(seat_index, ticket_id)
                self.state.action_log.record(
                    CancelTicket(bus_id=bus.bus_id, seat_index=seat_index, booking=booking)
                )
                logger.info("Cancelled %s on %s", ticket_id, bus.bus_id)
                return CommandResult.ok(Ticket(booking=booking, bus_id=bus.bus_id))
            raise TicketNotFoundError(f"Ticket {ticket_id} not found")

        return self._execute("cancel_ticket", run)

    # -------------------------------------------------------------------------
    # Undo / redo
    # -------------------------------------------------------------------------

    def undo(self) -> CommandResult:
        """Reverse the most recent action.

        Returns:
            Result whose value is the undone LogEntry.
        """
        def run() -> CommandResult:
            self._workflow.require_phase(WorkflowPhase.SELECTING)
            entry = self.state.action_log.undo(self.state)
            self._sync_intake(entry, undone=True)
            return CommandResult.ok(entry)

        return self._execute("undo", run)

    def redo(self) -> CommandResult:
        """Re-apply the most recently undone action.

        Returns:
            Result whose value is the redone LogEntry.
        """
        def run() -> CommandResult:
            self._workflow.require_phase(WorkflowPhase.SELECTING)
            entry = self.state.action_log.redo(self.state)
            self._sync_intake(entry, undone=False)
            return CommandResult.ok(entry)

        return self._execute("redo", run)

    def _sync_intake(self, entry: LogEntry, undone: bool) -> None:
        """Keep the desk consistent with a queue change made by undo or redo.

        A passenger who is back in the queue or ticketed again leaves the
        desk. Any undo or redo that takes the boarded passenger out of the
        queue without seating them puts them back at the desk.
        """
        action = entry.action
        boarded = self._workflow.boarded_passenger
        if boarded is not None and (
            self.state.queue.find(boarded.passenger_id) is not None
            or (isinstance(action, BookTicket) and action.boarded == boarded and not undone)
        ):
            self._workflow.clear_intake()

        if isinstance(action, DequeuePassenger) and not undone:
            passenger, index = action.passenger, action.index
        elif isinstance(action, EnqueuePassenger) and action.returned and undone:
            passenger, index = action.passenger, action.index
        elif isinstance(action, BookTicket) and action.boarded is not None and undone:
            passenger, index = action.boarded, action.boarded_index
        else:
            return
        self._workflow.clear_intake()
        self._workflow.set_intake(passenger.name, passenger, index)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def occupancy_count(self, bus_id: str) -> int:
        """Seats on a bus booked somewhere inside the active filter.

        Raises:
            BusNotFoundError: If the bus is unknown.
        """
        return self.state.occupancy_count(bus_id)

    def selectable_seats(self, bus_id: str) -> list[int]:
        """0-based indices of seats free under the active filter."""
        station_filter = self.state.station_filter
        return self.state.get_bus(bus_id).available_seats(
            self.state.topology, station_filter.pickup, station_filter.drop_off
        )

    def queue(self) -> list[Passenger]:
        return self.state.queue.to_list()

    def log_entries(self) -> list[LogEntry]:
        return self.state.action_log.entries

    def tickets(self, bus_id: Optional[str] = None) -> list[Ticket]:
        """All issued tickets, optionally for one bus."""
        buses = [self.state.get_bus(bus_id)] if bus_id is not None else self.state.buses
        return [
            Ticket(booking=booking, bus_id=bus.bus_id)
            for bus in buses
            for seat in bus.seats
            for booking in seat.bookings
        ]

    def dashboard_summary(self) -> dict[str, Any]:
        """Get a summary of the dashboard for overview panels."""
        state = self.state
        return {
            "filter": {
                "pickup": state.station_filter.pickup,
                "drop_off": state.station_filter.drop_off,
            },
            "queue_length": len(state.queue),
            "priority_waiting": sum(1 for p in state.queue if p.is_priority),
            "buses": [
                {
                    "id": bus.bus_id,
                    "route": bus.route,
                    "departure_time": bus.departure_time,
                    "status": bus.status.value,
                    "capacity": bus.capacity,
                    "occupied": state.occupancy_count(bus.bus_id),
                    "tickets": bus.total_bookings(),
                }
                for bus in state.buses
            ],
            "log_size": len(state.action_log),
            "can_undo": state.action_log.can_undo(),
            "can_redo": state.action_log.can_redo(),
            "phase": self._workflow.phase.value,
            "intake_name": self._workflow.intake_name,
        }

    def __str__(self) -> str:
        """Return string representation of the engine."""
        if self._state is None:
            return "DashboardEngine(not initialized)"
        return f"DashboardEngine(phase={self._workflow.phase.value}, queue={len(self._state.queue)})"
