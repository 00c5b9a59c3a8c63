"""Tests for the fleet loader and integration with the dashboard state."""

import json
import tempfile
from pathlib import Path

import pytest

from data.loader import (
    FleetLoader,
    FleetLoadError,
    load_fleet,
    load_default_fleet,
    get_fleet_stats,
)
from core.config import DashboardConfig
from core.constants import BusStatus
from core.dashboard_state import DashboardState


def fleet_dict(**bus_overrides) -> dict:
    bus = {
        "id": "BUS-1",
        "route": "A - C",
        "departure_time": "07:00 AM",
        "capacity": 8,
    }
    bus.update(bus_overrides)
    return {"stations": ["A", "B", "C"], "buses": [bus]}


# =============================================================================
# FleetLoader Tests
# =============================================================================

class TestFleetLoader:
    """Test FleetLoader class."""

    def test_load_minimal_fleet(self):
        """Should load a single bus with its seat array."""
        fleet = FleetLoader().load_from_dict(fleet_dict())

        assert list(fleet.topology.stations) == ["A", "B", "C"]
        assert len(fleet.buses) == 1
        bus = fleet.buses[0]
        assert bus.capacity == 8
        assert len(bus.seats) == 8
        assert bus.status == BusStatus.SCHEDULED

    def test_status_parsed(self):
        fleet = FleetLoader().load_from_dict(fleet_dict(status="Departed"))
        assert fleet.buses[0].status == BusStatus.DEPARTED

    def test_invalid_status(self):
        with pytest.raises(FleetLoadError, match="Invalid status"):
            FleetLoader().load_from_dict(fleet_dict(status="Parked"))

    @pytest.mark.parametrize("field", ["id", "route", "departure_time", "capacity"])
    def test_missing_bus_field(self, field):
        data = fleet_dict()
        del data["buses"][0][field]
        with pytest.raises(FleetLoadError, match=field):
            FleetLoader().load_from_dict(data)

    @pytest.mark.parametrize("capacity", [0, -4, "8", True])
    def test_invalid_capacity(self, capacity):
        with pytest.raises(FleetLoadError):
            FleetLoader().load_from_dict(fleet_dict(capacity=capacity))

    def test_strict_requires_full_rows(self):
        with pytest.raises(FleetLoadError, match="rows"):
            FleetLoader(strict=True).load_from_dict(fleet_dict(capacity=10))

    def test_non_strict_allows_partial_row(self):
        fleet = FleetLoader(strict=False).load_from_dict(fleet_dict(capacity=10))
        assert fleet.buses[0].capacity == 10

    def test_custom_row_width(self):
        config = DashboardConfig(seats_per_row=5, window_columns=(0, 4))
        fleet = FleetLoader(config=config).load_from_dict(fleet_dict(capacity=10))
        assert [s.is_window for s in fleet.buses[0].seats[:5]] == [True, False, False, False, True]

    def test_duplicate_bus_ids(self):
        data = fleet_dict()
        data["buses"].append(dict(data["buses"][0]))
        with pytest.raises(FleetLoadError, match="Duplicate"):
            FleetLoader().load_from_dict(data)

    def test_duplicate_stations(self):
        data = fleet_dict()
        data["stations"] = ["A", "B", "A"]
        with pytest.raises(FleetLoadError, match="station"):
            FleetLoader().load_from_dict(data)

    @pytest.mark.parametrize("data", [
        [],
        {"buses": []},
        {"stations": ["A", "B"]},
        {"stations": "A,B", "buses": []},
        {"stations": ["A", "B"], "buses": []},
        {"stations": ["A", ""], "buses": [{}]},
    ])
    def test_invalid_structure(self, data):
        with pytest.raises(FleetLoadError):
            FleetLoader().load_from_dict(data)


# =============================================================================
# File loading
# =============================================================================

class TestFileLoading:
    """Test loading from disk."""

    def test_load_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "fleet.json"
            path.write_text(json.dumps(fleet_dict()), encoding="utf-8")
            fleet = load_fleet(path)
        assert fleet.buses[0].bus_id == "BUS-1"

    def test_missing_file(self):
        with pytest.raises(FleetLoadError, match="not found"):
            load_fleet("/nonexistent/fleet.json")

    def test_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "fleet.json"
            path.write_text("{not json", encoding="utf-8")
            with pytest.raises(FleetLoadError, match="Invalid JSON"):
                load_fleet(path)


# =============================================================================
# Default fleet
# =============================================================================

class TestDefaultFleet:
    """Test the bundled fleet."""

    def test_default_fleet(self):
        fleet = load_default_fleet()
        assert list(fleet.topology.stations) == [
            "Peshawar Morr", "British Homes", "I/10 Stop", "I-9", "I-8", "Faizabad",
        ]
        assert [(b.bus_id, b.capacity) for b in fleet.buses] == [
            ("BUS-101", 20), ("BUS-102", 24), ("BUS-103", 16),
        ]
        assert all(b.status == BusStatus.SCHEDULED for b in fleet.buses)

    def test_default_fleet_stats(self):
        stats = get_fleet_stats(load_default_fleet())
        assert stats == {
            "num_stations": 6,
            "num_buses": 3,
            "total_seats": 60,
            "window_seats": 30,
            "aisle_seats": 30,
        }

    def test_default_fleet_seeds_valid_state(self):
        fleet = load_default_fleet()
        state = DashboardState.create_initial_state(fleet.topology, fleet.buses)
        assert state.validate() == []
        assert all(state.occupancy_count(bus_id) == 0 for bus_id in state.bus_ids())
