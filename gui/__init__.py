"""GUI package for the metro station dashboard.

This package provides a PySide6 based desktop interface for the station desk.
It implements the DashboardRenderer interface from the driver module.

Main components:
- MainWindow: The main application window (Overview, Queue, Ticketing, Log tabs)
- QueueWidget: Passenger intake form and boarding queue
- FleetWidget: Station filter and per-bus seat maps
- ActionLogWidget: Recorded actions with undo and redo
- OverviewWidget: Queue totals and bus occupancy
- GUIRenderer: Implementation of DashboardRenderer for the GUI
- DashboardController: Integrates the dashboard engine with the GUI event loop

Usage:
    python -m gui
"""

from gui.main_window import MainWindow
from gui.widgets import QueueWidget, FleetWidget, ActionLogWidget, OverviewWidget
from gui.gui_renderer import GUIRenderer
from gui.dashboard_controller import DashboardController
from gui.app import DashboardApp, main

__all__ = [
    "MainWindow",
    "QueueWidget",
    "FleetWidget",
    "ActionLogWidget",
    "OverviewWidget",
    "GUIRenderer",
    "DashboardController",
    "DashboardApp",
    "main",
]
