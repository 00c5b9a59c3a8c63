"""Tests for seat ledger visualization.

These tests verify:
1. Hop load aggregation over the fleet
2. The per-bus seat x hop chart
3. The line load graph
"""

import tempfile
from pathlib import Path

import pytest
import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for testing
import matplotlib.pyplot as plt

from data.ledger_vis import LedgerVisualizer, visualize_bus, visualize_line_load
from engine.dashboard_engine import DashboardEngine


@pytest.fixture
def booked_engine() -> DashboardEngine:
    """Engine with two bookings on BUS-101 and one on BUS-102."""
    engine = DashboardEngine()
    engine.reset()

    engine.set_filter("Peshawar Morr", "I-9")
    for bus_id, seat in [("BUS-101", 0), ("BUS-101", 1), ("BUS-102", 5)]:
        engine.select_seat(bus_id, seat)
        engine.start_booking()
        engine.finalize_booking()
    return engine


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


class TestLedgerVisualizer:
    """Test LedgerVisualizer class."""

    def test_hop_load(self, booked_engine):
        visualizer = LedgerVisualizer(booked_engine.state)
        assert list(visualizer.hop_load()) == [3, 3, 3, 0, 0]

    def test_hop_load_empty(self):
        engine = DashboardEngine()
        engine.reset()
        assert LedgerVisualizer(engine.state).hop_load().sum() == 0

    def test_line_graph(self, booked_engine):
        G = LedgerVisualizer(booked_engine.state)._build_line_graph()
        assert G.number_of_nodes() == 6
        assert G.number_of_edges() == 5
        assert G.nodes[0]["name"] == "Peshawar Morr"
        assert G.edges[2, 3]["load"] == 3
        assert G.edges[4, 5]["load"] == 0

    def test_visualize_bus(self, booked_engine):
        fig = LedgerVisualizer(booked_engine.state).visualize_bus("BUS-101", show=False)
        assert fig is not None
        assert "BUS-101" in fig.axes[0].get_title()

    def test_visualize_bus_without_filter(self, booked_engine):
        fig = LedgerVisualizer(booked_engine.state).visualize_bus(
            "BUS-103", show_filter=False, show=False
        )
        assert fig is not None

    def test_visualize_line_load(self, booked_engine):
        fig = LedgerVisualizer(booked_engine.state).visualize_line_load(show=False)
        assert fig is not None


class TestConvenienceFunctions:
    """Test module-level helpers."""

    def test_save_bus_chart(self, booked_engine):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bus.png"
            visualize_bus(booked_engine.state, "BUS-101", save_path=path, show=False)
            assert path.exists()
            assert path.stat().st_size > 0

    def test_save_line_load(self, booked_engine):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "line.png"
            visualize_line_load(booked_engine.state, save_path=path, show=False)
            assert path.exists()
