"""Data loading and visualization utilities for the station dashboard."""

from .loader import (
    FleetData,
    FleetLoader,
    FleetLoadError,
    load_fleet,
    load_default_fleet,
    get_fleet_stats,
)

from .ledger_vis import (
    LedgerVisualizer,
    visualize_bus,
    visualize_line_load,
)

__all__ = [
    # Loader
    "FleetData",
    "FleetLoader",
    "FleetLoadError",
    "load_fleet",
    "load_default_fleet",
    "get_fleet_stats",
    # Visualization
    "LedgerVisualizer",
    "visualize_bus",
    "visualize_line_load",
]
