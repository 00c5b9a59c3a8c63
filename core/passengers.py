"""Passengers and the intake queue.

The intake queue is a two-class partition: every non-normal passenger waits
ahead of every normal passenger, and each class keeps arrival order. It is
not a full priority heap: aged, wheelchair and sick passengers
do not reorder relative to each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .constants import Priority
from .exceptions import PassengerNotFoundError


@dataclass(frozen=True)
class Passenger:
    """A passenger waiting at the station.

    Attributes:
        passenger_id: Unique identifier assigned at intake.
        name: Free-text passenger name.
        priority: Priority class used for queue placement.
    """

    passenger_id: str
    name: str
    priority: Priority = Priority.NORMAL

    @property
    def is_priority(self) -> bool:
        """Whether the passenger jumps ahead of normal passengers."""
        return self.priority != Priority.NORMAL


class PassengerQueue:
    """Ordered list of waiting passengers with priority insertion."""

    def __init__(self, passengers: Optional[Iterable[Passenger]] = None) -> None:
        self._passengers: list[Passenger] = list(passengers or [])

    def __len__(self) -> int:
        return len(self._passengers)

    def __iter__(self) -> Iterator[Passenger]:
        return iter(list(self._passengers))

    def __bool__(self) -> bool:
        return bool(self._passengers)

    def to_list(self) -> list[Passenger]:
        """Snapshot of the queue, head first."""
        return list(self._passengers)

    def peek(self) -> Optional[Passenger]:
        """Return the head of the queue without removing it."""
        return self._passengers[0] if self._passengers else None

    def find(self, passenger_id: str) -> Optional[Passenger]:
        """Get a queued passenger by id, or None."""
        for passenger in self._passengers:
            if passenger.passenger_id == passenger_id:
                return passenger
        return None

    def position_of(self, passenger_id: str) -> int:
        """Index of a queued passenger.

        Raises:
            PassengerNotFoundError: If the passenger is not queued.
        """
        for idx, passenger in enumerate(self._passengers):
            if passenger.passenger_id == passenger_id:
                return idx
        raise PassengerNotFoundError(f"Passenger {passenger_id} is not in the queue")

    def insertion_index(self, passenger: Passenger) -> int:
        """Where ``enqueue`` would place the passenger."""
        if not passenger.is_priority:
            return len(self._passengers)
        for idx, queued in enumerate(self._passengers):
            if queued.priority == Priority.NORMAL:
                return idx
        return len(self._passengers)

    def enqueue(self, passenger: Passenger) -> int:
        """Add a passenger according to its priority class.

        Normal passengers go to the tail. Any other priority is inserted just
        before the first normal passenger, or at the tail if there is none.

        Returns:
            The index the passenger was inserted at.
        """
        index = self.insertion_index(passenger)
        self._passengers.insert(index, passenger)
        return index

    def dequeue(self, passenger_id: Optional[str] = None) -> tuple[int, Passenger]:
        """Remove a specific passenger, or the head when no id is given.

        Returns:
            Tuple of (former index, passenger).

        Raises:
            PassengerNotFoundError: If the queue is empty or the id is unknown.
        """
        if not self._passengers:
            raise PassengerNotFoundError("The intake queue is empty")
        index = 0 if passenger_id is None else self.position_of(passenger_id)
        return index, self._passengers.pop(index)

    def remove(self, passenger_id: str) -> Passenger:
        """Remove a passenger by id.

        Raises:
            PassengerNotFoundError: If the passenger is not queued.
        """
        return self._passengers.pop(self.position_of(passenger_id))

    def insert_at(self, index: int, passenger: Passenger) -> None:
        """Put a passenger back at an exact position (clamped to the queue)."""
        index = max(0, min(index, len(self._passengers)))
        self._passengers.insert(index, passenger)

    def remove_by_ids(self, passenger_ids: Iterable[str]) -> list[tuple[int, Passenger]]:
        """Remove every queued passenger whose id is listed.

        Returns:
            Removed entries as (original index, passenger), in queue order.
        """
        targets = set(passenger_ids)
        return self._remove_where(lambda p: p.passenger_id in targets)

    def remove_by_names(self, names: Iterable[str]) -> list[tuple[int, Passenger]]:
        """Remove every queued passenger whose name is listed.

        Duplicate names collide: all entries sharing a booked name are
        removed, whatever their id.

        Returns:
            Removed entries as (original index, passenger), in queue order.
        """
        targets = {name for name in names if name}
        return self._remove_where(lambda p: p.name in targets)

    def _remove_where(self, predicate) -> list[tuple[int, Passenger]]:
        removed = [(idx, p) for idx, p in enumerate(self._passengers) if predicate(p)]
        if removed:
            self._passengers = [p for p in self._passengers if not predicate(p)]
        return removed

    def restore(self, removed: Iterable[tuple[int, Passenger]]) -> None:
        """Re-insert entries returned by ``remove_by_ids``/``remove_by_names``."""
        for index, passenger in sorted(removed, key=lambda entry: entry[0]):
            self.insert_at(index, passenger)

    def __repr__(self) -> str:
        names = ", ".join(p.name for p in self._passengers)
        return f"PassengerQueue([{names}])"
