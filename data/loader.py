"""Fleet data loader for the metro station dashboard.

Loads and validates the station list and bus fleet from JSON files,
converting them into a StationTopology and Bus instances ready to seed a
DashboardState.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from core.config import DashboardConfig, DEFAULT_CONFIG
from core.constants import BusStatus
from core.fleet import Bus
from core.topology import StationTopology

logger = logging.getLogger(__name__)


def resource_path(relative_path: str) -> Path:
    """
    Get absolute path to a resource, works for dev and PyInstaller exe.
    """
    if hasattr(sys, "_MEIPASS"):
        return Path(sys._MEIPASS) / "data" / relative_path

    return Path(__file__).parent / relative_path


class FleetLoadError(Exception):
    """Raised when fleet loading or validation fails."""
    pass


@dataclass
class FleetData:
    """Loaded seed data.

    Attributes:
        topology: Ordered stations of the line.
        buses: Buses with empty seat ledgers, in file order.
    """

    topology: StationTopology
    buses: list[Bus]


class FleetLoader:
    """Loads and validates fleet data from JSON files."""

    REQUIRED_BUS_FIELDS = ["id", "route", "departure_time", "capacity"]

    def __init__(self, strict: bool = True, config: Optional[DashboardConfig] = None):
        """Initialize the loader.

        Args:
            strict: If True, every bus must be laid out in complete rows
                    of ``config.seats_per_row`` seats.
            config: Seat layout configuration used to build seat arrays.
        """
        self.strict = strict
        self.config = config or DEFAULT_CONFIG

    def load_from_file(self, file_path: str | Path) -> FleetData:
        """Load fleet data from a JSON file.

        Raises:
            FleetLoadError: If the file cannot be read, parsed or validated.
        """
        path = Path(file_path)

        if not path.exists():
            raise FleetLoadError(f"Fleet file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise FleetLoadError(f"Invalid JSON in fleet file: {e}")
        except IOError as e:
            raise FleetLoadError(f"Error reading fleet file: {e}")

        fleet = self.load_from_dict(data)
        logger.info(
            "Loaded %d stations and %d buses from %s",
            len(fleet.topology), len(fleet.buses), path,
        )
        return fleet

    def load_from_dict(self, data: dict[str, Any]) -> FleetData:
        """Load fleet data from a dictionary with 'stations' and 'buses' keys.

        Raises:
            FleetLoadError: If validation fails.
        """
        self._validate_structure(data)

        try:
            topology = StationTopology.from_names(data["stations"])
        except ValueError as e:
            raise FleetLoadError(f"Invalid station list: {e}")

        buses: list[Bus] = []
        bus_ids: set[str] = set()
        for bus_data in data["buses"]:
            bus = self._create_bus(bus_data)
            if bus.bus_id in bus_ids:
                raise FleetLoadError(f"Duplicate bus ID: {bus.bus_id}")
            bus_ids.add(bus.bus_id)
            buses.append(bus)

        return FleetData(topology=topology, buses=buses)

    def _validate_structure(self, data: dict[str, Any]) -> None:
        """Validate the basic structure of the fleet data."""
        if not isinstance(data, dict):
            raise FleetLoadError("Fleet data must be a dictionary")

        if "stations" not in data:
            raise FleetLoadError("Fleet data missing 'stations' key")

        if "buses" not in data:
            raise FleetLoadError("Fleet data missing 'buses' key")

        if not isinstance(data["stations"], list):
            raise FleetLoadError("'stations' must be a list")

        if not isinstance(data["buses"], list):
            raise FleetLoadError("'buses' must be a list")

        if not all(isinstance(name, str) and name.strip() for name in data["stations"]):
            raise FleetLoadError("Station names must be non-empty strings")

        if len(data["buses"]) == 0:
            raise FleetLoadError("Fleet must have at least one bus")

    def _create_bus(self, bus_data: dict[str, Any]) -> Bus:
        """Create a Bus from a bus data dictionary."""
        for field_name in self.REQUIRED_BUS_FIELDS:
            if field_name not in bus_data:
                raise FleetLoadError(f"Bus missing required field: {field_name}")

        bus_id = bus_data["id"]
        capacity = bus_data["capacity"]
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity <= 0:
            raise FleetLoadError(f"Invalid capacity for {bus_id}: {capacity!r}")

        if self.strict and capacity % self.config.seats_per_row != 0:
            raise FleetLoadError(
                f"{bus_id} capacity {capacity} is not a whole number of "
                f"{self.config.seats_per_row}-seat rows"
            )

        status_str = bus_data.get("status", BusStatus.SCHEDULED.value)
        try:
            status = BusStatus(status_str)
        except ValueError:
            raise FleetLoadError(
                f"Invalid status '{status_str}' for {bus_id}. "
                f"Valid statuses: {[s.value for s in BusStatus]}"
            )

        return Bus.create(
            bus_id=bus_id,
            route=bus_data["route"],
            departure_time=bus_data["departure_time"],
            capacity=capacity,
            status=status,
            config=self.config,
        )


def load_fleet(
    file_path: str | Path,
    strict: bool = True,
    config: Optional[DashboardConfig] = None,
) -> FleetData:
    """Convenience function to load fleet data from a file."""
    loader = FleetLoader(strict=strict, config=config)
    return loader.load_from_file(file_path)


def load_default_fleet(config: Optional[DashboardConfig] = None) -> FleetData:
    """Load the default station line and its three buses.

    Raises:
        FleetLoadError: If the default fleet file is missing or invalid.
    """
    default_path = resource_path("default_fleet.json")
    return load_fleet(default_path, strict=True, config=config)


def get_fleet_stats(fleet: FleetData) -> dict[str, Any]:
    """Get statistics about loaded fleet data."""
    window_seats = sum(
        1 for bus in fleet.buses for seat in bus.seats if seat.is_window
    )
    total_seats = sum(bus.capacity for bus in fleet.buses)
    return {
        "num_stations": len(fleet.topology),
        "num_buses": len(fleet.buses),
        "total_seats": total_seats,
        "window_seats": window_seats,
        "aisle_seats": total_seats - window_seats,
    }
