"""Engine for the metro station dashboard.

This module provides the dashboard logic including:
- Booking workflow state machine (selecting, detailing, finalizing)
- Dashboard engine with command methods returning explicit results
- Interactive CLI driver
"""

from .workflow import (
    BookingWorkflow,
    SeatDraft,
    WorkflowTransitionResult,
    WORKFLOW_TRANSITIONS,
)

from .dashboard_engine import (
    DashboardEngine,
    CommandResult,
)

__all__ = [
    # Workflow
    "BookingWorkflow",
    "SeatDraft",
    "WorkflowTransitionResult",
    "WORKFLOW_TRANSITIONS",
    # Engine
    "DashboardEngine",
    "CommandResult",
]
