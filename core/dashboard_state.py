"""Dashboard state for the metro station.

DashboardState is the single source of truth for the dashboard: topology,
fleet and seat ledger, intake queue, action log, the active station filter
and the id generators. Only the controller mutates it.
"""

from __future__ import annotations

import copy
import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, Optional

from .action_log import ActionLog
from .config import DashboardConfig, DEFAULT_CONFIG
from .exceptions import BusNotFoundError
from .fleet import Bus
from .passengers import PassengerQueue
from .ticketing import TicketIdGenerator
from .topology import StationTopology


@dataclass
class StationFilter:
    """Active pickup/drop-off pair used for availability and occupancy."""

    pickup: str
    drop_off: str


@dataclass
class DashboardState:
    """The complete dashboard state.

    Attributes:
        topology: Ordered stations of the line.
        buses: Fleet in display order.
        queue: Waiting passengers.
        action_log: Recorded actions with undo/redo stacks.
        station_filter: Active segment for availability and occupancy.
        config: Layout, ticketing and queue matching configuration.
        tickets: Ticket id generator.
        next_passenger_number: Counter behind generated passenger ids.
    """

    topology: StationTopology
    buses: list[Bus]
    queue: PassengerQueue
    action_log: ActionLog
    station_filter: StationFilter
    config: DashboardConfig = DEFAULT_CONFIG
    tickets: TicketIdGenerator = field(default_factory=TicketIdGenerator)
    next_passenger_number: int = 1

    @classmethod
    def create_initial_state(
        cls,
        topology: StationTopology,
        buses: list[Bus],
        config: Optional[DashboardConfig] = None,
    ) -> DashboardState:
        """Create a fresh state with an empty queue and log.

        The filter starts at the full line (first to last station).

        Raises:
            ValueError: If bus ids are duplicated.
        """
        config = config or DEFAULT_CONFIG
        bus_ids = [bus.bus_id for bus in buses]
        if len(set(bus_ids)) != len(bus_ids):
            raise ValueError(f"Duplicate bus ids: {bus_ids}")

        return cls(
            topology=topology,
            buses=buses,
            queue=PassengerQueue(),
            action_log=ActionLog(),
            station_filter=StationFilter(topology.first, topology.last),
            config=config,
            tickets=TicketIdGenerator.from_config(config),
        )

    # -------------------------------------------------------------------------
    # Fleet access
    # -------------------------------------------------------------------------

    def get_bus(self, bus_id: str) -> Bus:
        """Get a bus by id.

        Raises:
            BusNotFoundError: If no bus has that id.
        """
        for bus in self.buses:
            if bus.bus_id == bus_id:
                return bus
        raise BusNotFoundError(f"Unknown bus: {bus_id}")

    def bus_ids(self) -> list[str]:
        return [bus.bus_id for bus in self.buses]

    def occupancy_count(self, bus_id: str) -> int:
        """Seats on a bus booked somewhere inside the active filter."""
        return self.get_bus(bus_id).occupancy_count(
            self.topology, self.station_filter.pickup, self.station_filter.drop_off
        )

    def is_seat_available(self, bus_id: str, seat_index: int) -> bool:
        """Whether a seat is free under the active filter."""
        return self.get_bus(bus_id).is_seat_available(
            self.topology,
            seat_index,
            self.station_filter.pickup,
            self.station_filter.drop_off,
        )

    def set_filter(self, pickup: str, drop_off: str) -> None:
        """Change the active filter.

        Raises:
            InvalidStationError: If the segment is invalid.
        """
        self.topology.validate_segment(pickup, drop_off)
        self.station_filter = StationFilter(pickup, drop_off)

    # -------------------------------------------------------------------------
    # Id generation
    # -------------------------------------------------------------------------

    def next_passenger_id(self) -> str:
        passenger_id = f"P{self.next_passenger_number:04d}"
        self.next_passenger_number += 1
        return passenger_id

    # -------------------------------------------------------------------------
    # Cloning and serialization
    # -------------------------------------------------------------------------

    def clone(self) -> DashboardState:
        """Create a deep copy of the state."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the state to a dictionary."""
        return {
            "stations": list(self.topology.stations),
            "filter": {
                "pickup": self.station_filter.pickup,
                "drop_off": self.station_filter.drop_off,
            },
            "queue": [
                {
                    "passenger_id": p.passenger_id,
                    "name": p.name,
                    "priority": p.priority.value,
                }
                for p in self.queue
            ],
            "buses": [
                {
                    "bus_id": bus.bus_id,
                    "route": bus.route,
                    "departure_time": bus.departure_time,
                    "status": bus.status.value,
                    "capacity": bus.capacity,
                    "seats": [
                        {
                            "is_window": seat.is_window,
                            "bookings": [
                                {
                                    "passenger_name": b.passenger_name,
                                    "pickup_station": b.pickup_station,
                                    "drop_off_station": b.drop_off_station,
                                    "ticket_id": b.ticket_id,
                                    "seat_index": b.seat_index,
                                    "is_window": b.is_window,
                                }
                                for b in seat.bookings
                            ],
                        }
                        for seat in bus.seats
                    ],
                }
                for bus in self.buses
            ],
            "log": [entry.to_dict() for entry in self.action_log],
        }

    def state_hash(self) -> str:
        """Hash of the ledger and queue (log timestamps excluded)."""
        data = self.to_dict()
        data.pop("log")
        state_json = json.dumps(data, sort_keys=True)
        return hashlib.sha256(state_json.encode()).hexdigest()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> list[str]:
        """Validate the state for consistency.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors: list[str] = []

        for bus in self.buses:
            if len(bus.seats) != bus.capacity:
                errors.append(
                    f"{bus.bus_id} has {len(bus.seats)} seats but capacity {bus.capacity}"
                )
            for seat_idx, seat in enumerate(bus.seats):
                if seat.is_window != self.config.is_window(seat_idx):
                    errors.append(f"{bus.bus_id} seat {seat_idx + 1} has wrong window flag")
                bookings = seat.bookings
                for i, a in enumerate(bookings):
                    if a.pickup_station not in self.topology or a.drop_off_station not in self.topology:
                        errors.append(f"{a.ticket_id} references an unknown station")
                        continue
                    for b in bookings[i + 1:]:
                        if b.pickup_station not in self.topology or b.drop_off_station not in self.topology:
                            continue
                        if a.overlaps(self.topology, b.pickup_station, b.drop_off_station):
                            errors.append(
                                f"{bus.bus_id} seat {seat_idx + 1}: {a.ticket_id} overlaps {b.ticket_id}"
                            )

        passenger_ids = [p.passenger_id for p in self.queue]
        if len(set(passenger_ids)) != len(passenger_ids):
            errors.append("Duplicate passenger ids in the queue")

        seen_priority_tail = False
        for passenger in self.queue:
            if not passenger.is_priority:
                seen_priority_tail = True
            elif seen_priority_tail:
                errors.append(f"Priority passenger {passenger.passenger_id} queued behind a normal one")

        return errors

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        lines = [
            f"DashboardState(filter={self.station_filter.pickup} > {self.station_filter.drop_off})",
            f"  Queue ({len(self.queue)}): " + ", ".join(p.name for p in self.queue),
            f"  Buses ({len(self.buses)}):",
        ]
        for bus in self.buses:
            lines.append(
                f"    {bus.bus_id}: {self.occupancy_count(bus.bus_id)}/{bus.capacity} occupied, "
                f"{bus.total_bookings()} tickets [{bus.status.value}]"
            )
        lines.append(f"  Log entries: {len(self.action_log)}")
        return "\n".join(lines)
