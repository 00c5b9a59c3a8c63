"""Core data models for the metro station dashboard."""

from .constants import (
    Priority,
    BusStatus,
    WorkflowPhase,
    QueueMatch,
    DEFAULT_STATIONS,
    EXPOSED_PRIORITIES,
    SEATS_PER_ROW,
    WINDOW_COLUMNS,
    TICKET_PREFIX,
    TICKET_DIGITS,
    DEFAULT_PASSENGER_NAME,
)

from .config import DashboardConfig, DEFAULT_CONFIG

from .exceptions import (
    DashboardError,
    EmptyInputError,
    NoSelectionError,
    PassengerNotFoundError,
    InvalidStationError,
    SeatUnavailableError,
    BusNotFoundError,
    TicketNotFoundError,
    InvalidPhaseError,
    NothingToUndoError,
    NothingToRedoError,
)

from .topology import StationTopology, SegmentIndices

from .passengers import Passenger, PassengerQueue

from .fleet import Booking, Ticket, Seat, Bus, create_empty_seats

from .ticketing import TicketIdGenerator

from .actions import (
    ActionKind,
    Action,
    BookTicket,
    CancelTicket,
    EnqueuePassenger,
    DequeuePassenger,
    LogEntry,
)

from .action_log import ActionLog

from .dashboard_state import StationFilter, DashboardState

__all__ = [
    # Constants
    "Priority",
    "BusStatus",
    "WorkflowPhase",
    "QueueMatch",
    "DEFAULT_STATIONS",
    "EXPOSED_PRIORITIES",
    "SEATS_PER_ROW",
    "WINDOW_COLUMNS",
    "TICKET_PREFIX",
    "TICKET_DIGITS",
    "DEFAULT_PASSENGER_NAME",
    # Config
    "DashboardConfig",
    "DEFAULT_CONFIG",
    # Exceptions
    "DashboardError",
    "EmptyInputError",
    "NoSelectionError",
    "PassengerNotFoundError",
    "InvalidStationError",
    "SeatUnavailableError",
    "BusNotFoundError",
    "TicketNotFoundError",
    "InvalidPhaseError",
    "NothingToUndoError",
    "NothingToRedoError",
    # Topology
    "StationTopology",
    "SegmentIndices",
    # Passengers
    "Passenger",
    "PassengerQueue",
    # Fleet
    "Booking",
    "Ticket",
    "Seat",
    "Bus",
    "create_empty_seats",
    # Ticketing
    "TicketIdGenerator",
    # Actions
    "ActionKind",
    "Action",
    "BookTicket",
    "CancelTicket",
    "EnqueuePassenger",
    "DequeuePassenger",
    "LogEntry",
    "ActionLog",
    # State
    "StationFilter",
    "DashboardState",
]
