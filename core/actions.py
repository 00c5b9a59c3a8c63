"""Recorded dashboard actions.

Each action is one variant of a closed sum type. A variant carries everything
needed to replay its mutation (``apply``) and to reverse it (``revert``), which
is what makes undo restore state instead of only trimming the log.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, TYPE_CHECKING
import uuid

from .fleet import Booking
from .passengers import Passenger

if TYPE_CHECKING:
    from .dashboard_state import DashboardState


class ActionKind(Enum):
    """Kinds of recorded actions."""

    BOOK_TICKET = "book_ticket"
    CANCEL_TICKET = "cancel_ticket"
    ENQUEUE_PASSENGER = "enqueue_passenger"
    DEQUEUE_PASSENGER = "dequeue_passenger"


class Action(ABC):
    """Base class for a reversible mutation of the dashboard state."""

    kind: ActionKind

    @abstractmethod
    def apply(self, state: DashboardState) -> None:
        """Perform the mutation on the state."""

    @abstractmethod
    def revert(self, state: DashboardState) -> None:
        """Reverse the mutation performed by ``apply``."""

    @abstractmethod
    def describe(self) -> str:
        """One-line human readable description."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize the action for display or debugging."""


@dataclass(frozen=True)
class BookTicket(Action):
    """A ticket issued for one seat.

    Attributes:
        bus_id: Bus the seat belongs to.
        seat_index: 0-based seat index.
        booking: The booking appended to the seat.
        removed_passengers: Queue entries dropped by this booking, as
            (index, passenger) pairs, so undo can put them back.
        boarded: The passenger served at the desk for this booking, and
            ``boarded_index`` the queue position they were called from.
    """

    bus_id: str
    seat_index: int
    booking: Booking
    removed_passengers: tuple[tuple[int, Passenger], ...] = ()
    boarded: Optional[Passenger] = None
    boarded_index: int = 0
    kind: ActionKind = field(default=ActionKind.BOOK_TICKET, init=False)

    @property
    def passenger_name(self) -> str:
        return self.booking.passenger_name

    @property
    def pickup(self) -> str:
        return self.booking.pickup_station

    @property
    def drop_off(self) -> str:
        return self.booking.drop_off_station

    def apply(self, state: DashboardState) -> None:
        state.get_bus(self.bus_id).add_booking(state.topology, self.seat_index, self.booking)
        state.queue.remove_by_ids(p.passenger_id for _, p in self.removed_passengers)

    def revert(self, state: DashboardState) -> None:
        state.get_bus(self.bus_id).remove_booking(self.seat_index, self.booking.ticket_id)
        state.queue.restore(self.removed_passengers)

    def describe(self) -> str:
        return (
            f"Booked {self.booking.ticket_id} for {self.passenger_name}: "
            f"{self.bus_id} seat {self.booking.seat_index}, {self.pickup} > {self.drop_off}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "bus_id": self.bus_id,
            "seat_index": self.seat_index,
            "passenger_name": self.passenger_name,
            "pickup": self.pickup,
            "drop_off": self.drop_off,
            "ticket_id": self.booking.ticket_id,
            "removed_passenger_ids": [p.passenger_id for _, p in self.removed_passengers],
        }


@dataclass(frozen=True)
class CancelTicket(Action):
    """A booking removed from a seat.

    Attributes:
        bus_id: Bus the seat belongs to.
        seat_index: 0-based seat index.
        booking: The booking that was removed.
    """

    bus_id: str
    seat_index: int
    booking: Booking
    kind: ActionKind = field(default=ActionKind.CANCEL_TICKET, init=False)

    @property
    def passenger_name(self) -> str:
        return self.booking.passenger_name

    def apply(self, state: DashboardState) -> None:
        state.get_bus(self.bus_id).remove_booking(self.seat_index, self.booking.ticket_id)

    def revert(self, state: DashboardState) -> None:
        state.get_bus(self.bus_id).add_booking(state.topology, self.seat_index, self.booking)

    def describe(self) -> str:
        return (
            f"Cancelled {self.booking.ticket_id} for {self.passenger_name}: "
            f"{self.bus_id} seat {self.booking.seat_index}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "bus_id": self.bus_id,
            "seat_index": self.seat_index,
            "passenger_name": self.passenger_name,
            "ticket_id": self.booking.ticket_id,
        }


@dataclass(frozen=True)
class EnqueuePassenger(Action):
    """A passenger added to the intake queue at ``index``.

    ``returned`` marks a boarded passenger sent back from the desk rather
    than a new arrival.
    """

    passenger: Passenger
    index: int
    returned: bool = False
    kind: ActionKind = field(default=ActionKind.ENQUEUE_PASSENGER, init=False)

    def apply(self, state: DashboardState) -> None:
        state.queue.insert_at(self.index, self.passenger)

    def revert(self, state: DashboardState) -> None:
        state.queue.remove(self.passenger.passenger_id)

    def describe(self) -> str:
        if self.returned:
            return f"Returned {self.passenger.name} to position {self.index + 1}"
        return (
            f"Queued {self.passenger.name} ({self.passenger.priority.value}) "
            f"at position {self.index + 1}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "passenger_id": self.passenger.passenger_id,
            "name": self.passenger.name,
            "priority": self.passenger.priority.value,
            "index": self.index,
            "returned": self.returned,
        }


@dataclass(frozen=True)
class DequeuePassenger(Action):
    """A passenger taken out of the intake queue from ``index``."""

    passenger: Passenger
    index: int
    kind: ActionKind = field(default=ActionKind.DEQUEUE_PASSENGER, init=False)

    def apply(self, state: DashboardState) -> None:
        state.queue.remove(self.passenger.passenger_id)

    def revert(self, state: DashboardState) -> None:
        state.queue.insert_at(self.index, self.passenger)

    def describe(self) -> str:
        return f"Called {self.passenger.name} from position {self.index + 1} for boarding"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "passenger_id": self.passenger.passenger_id,
            "name": self.passenger.name,
            "priority": self.passenger.priority.value,
            "index": self.index,
        }


@dataclass(frozen=True)
class LogEntry:
    """An action wrapped with its log id and timestamp."""

    action: Action
    entry_id: str = field(default_factory=lambda: uuid.uuid4().hex[:9])
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.entry_id,
            "timestamp": self.timestamp.isoformat(),
            "action": self.action.to_dict(),
        }
