"""Widget components for the dashboard GUI."""

from .queue_widget import QueueWidget
from .fleet_widget import FleetWidget, BusCard, SeatButton
from .action_log_widget import ActionLogWidget
from .overview_widget import OverviewWidget, PhaseIndicatorWidget

__all__ = [
    "QueueWidget",
    "FleetWidget",
    "BusCard",
    "SeatButton",
    "ActionLogWidget",
    "OverviewWidget",
    "PhaseIndicatorWidget",
]
