"""Booking workflow state machine.

A booking attempt moves through three phases:
- SELECTING: seats are toggled on one bus under the active filter
- DETAILING: a draft (name, pickup, drop-off) is edited for every selected seat
- FINALIZING: drafts are turned into tickets, then the workflow returns to
  SELECTING with all transient state cleared

Cancelling detail entry goes from DETAILING back to SELECTING and keeps the
seat selection. The workflow only tracks transient booking state; the seat
ledger and queue live in DashboardState and are mutated by the engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.constants import WorkflowPhase
from core.exceptions import (
    IntakeInProgressError,
    InvalidPhaseError,
    NoSelectionError,
    PassengerNotFoundError,
)
from core.passengers import Passenger

logger = logging.getLogger(__name__)


# Valid workflow transitions
WORKFLOW_TRANSITIONS: dict[WorkflowPhase, list[WorkflowPhase]] = {
    WorkflowPhase.SELECTING: [WorkflowPhase.DETAILING],
    WorkflowPhase.DETAILING: [WorkflowPhase.FINALIZING, WorkflowPhase.SELECTING],
    WorkflowPhase.FINALIZING: [WorkflowPhase.SELECTING],
}


@dataclass
class SeatDraft:
    """Passenger details being entered for one selected seat.

    Attributes:
        seat_index: 0-based seat index on the active bus.
        name: Passenger name (may be blank until finalized).
        pickup: Pickup station.
        drop_off: Drop-off station.
        passenger_id: Queued/boarded passenger this draft books, if known.
    """

    seat_index: int
    name: str
    pickup: str
    drop_off: str
    passenger_id: Optional[str] = None


@dataclass
class WorkflowTransitionResult:
    """Result of a workflow transition attempt.

    Attributes:
        success: Whether the transition was successful.
        new_phase: The new phase if successful, None otherwise.
        reason: Description of why the transition failed (if it did).
    """

    success: bool
    new_phase: Optional[WorkflowPhase]
    reason: Optional[str] = None


class BookingWorkflow:
    """Selection and detail state for the current booking attempt."""

    def __init__(self) -> None:
        self._phase = WorkflowPhase.SELECTING
        self.bus_id: Optional[str] = None
        self.selected_seats: list[int] = []
        self.drafts: dict[int, SeatDraft] = {}
        # In-flight intake: a name typed for direct booking or a boarded passenger
        self.intake_name: str = ""
        self.boarded_passenger: Optional[Passenger] = None
        self.boarded_index: int = 0

    @property
    def phase(self) -> WorkflowPhase:
        return self._phase

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def get_valid_transitions(self) -> list[WorkflowPhase]:
        return WORKFLOW_TRANSITIONS.get(self._phase, [])

    def can_transition_to(self, target_phase: WorkflowPhase) -> bool:
        return target_phase in self.get_valid_transitions()

    def transition_to(self, target_phase: WorkflowPhase) -> WorkflowTransitionResult:
        """Attempt to move to a new phase."""
        if not self.can_transition_to(target_phase):
            valid = self.get_valid_transitions()
            return WorkflowTransitionResult(
                success=False,
                new_phase=None,
                reason=f"Cannot transition from {self._phase.value} to {target_phase.value}. "
                f"Valid transitions: {[p.value for p in valid]}",
            )

        logger.debug("Workflow %s -> %s", self._phase.value, target_phase.value)
        self._phase = target_phase
        return WorkflowTransitionResult(success=True, new_phase=target_phase)

    def require_phase(self, phase: WorkflowPhase) -> None:
        """Raise InvalidPhaseError unless the workflow is in ``phase``."""
        if self._phase != phase:
            raise InvalidPhaseError(
                f"Expected {phase.value} phase, workflow is {self._phase.value}"
            )

    def _transition_or_raise(self, target_phase: WorkflowPhase) -> None:
        result = self.transition_to(target_phase)
        if not result.success:
            raise InvalidPhaseError(result.reason)

    # -------------------------------------------------------------------------
    # Intake
    # -------------------------------------------------------------------------

    def set_intake(
        self,
        name: str,
        passenger: Optional[Passenger] = None,
        index: int = 0,
    ) -> None:
        """Route a name (and optionally a boarded passenger) into booking.

        A boarded passenger is held at the desk until their booking is
        finalized or they are released, so a second one cannot replace them.

        Args:
            name: Name pre-filled on the first seat draft.
            passenger: The passenger taken off the queue, if any.
            index: Queue position the passenger was taken from.

        Raises:
            IntakeInProgressError: If another passenger is already boarded.
        """
        self.require_phase(WorkflowPhase.SELECTING)
        self.require_free_desk()
        self.intake_name = name
        self.boarded_passenger = passenger
        self.boarded_index = index
        self.clear_selection()

    def require_free_desk(self) -> None:
        """Raise IntakeInProgressError while a boarded passenger is at the desk."""
        if self.boarded_passenger is not None:
            raise IntakeInProgressError(
                f"{self.boarded_passenger.name} is already at the desk; "
                "finish their booking or release them first"
            )

    def release_intake(self) -> tuple[int, Passenger]:
        """Free the desk and return the boarded passenger with their old position.

        Raises:
            PassengerNotFoundError: If nobody is boarded.
        """
        self.require_phase(WorkflowPhase.SELECTING)
        passenger = self.boarded_passenger
        if passenger is None:
            raise PassengerNotFoundError("No passenger is at the desk")
        index = self.boarded_index
        self.clear_intake()
        return index, passenger

    def clear_intake(self) -> None:
        self.intake_name = ""
        self.boarded_passenger = None
        self.boarded_index = 0

    # -------------------------------------------------------------------------
    # Selecting
    # -------------------------------------------------------------------------

    def toggle_seat(self, bus_id: str, seat_index: int) -> list[int]:
        """Toggle a seat in the selection.

        Selecting a seat on a different bus replaces the selection with that
        single seat, since a selection belongs to exactly one bus.

        Returns:
            The selection after the toggle.
        """
        self.require_phase(WorkflowPhase.SELECTING)
        if self.bus_id is not None and self.bus_id != bus_id:
            self.selected_seats = [seat_index]
        elif seat_index in self.selected_seats:
            self.selected_seats = [i for i in self.selected_seats if i != seat_index]
        else:
            self.selected_seats = self.selected_seats + [seat_index]
        self.bus_id = bus_id
        return list(self.selected_seats)

    def clear_selection(self) -> None:
        self.bus_id = None
        self.selected_seats = []
        self.drafts = {}

    # -------------------------------------------------------------------------
    # Detailing
    # -------------------------------------------------------------------------

    def start_details(self, pickup: str, drop_off: str) -> dict[int, SeatDraft]:
        """Create one draft per selected seat and enter DETAILING.

        Drafts default to the active filter segment; the first seat gets the
        in-flight intake name and boarded passenger, if any.

        Raises:
            NoSelectionError: If no seat is selected.
            InvalidPhaseError: If not in SELECTING.
        """
        self.require_phase(WorkflowPhase.SELECTING)
        if not self.selected_seats:
            raise NoSelectionError()

        drafts: dict[int, SeatDraft] = {}
        for position, seat_index in enumerate(self.selected_seats):
            first = position == 0
            drafts[seat_index] = SeatDraft(
                seat_index=seat_index,
                name=self.intake_name if first else "",
                pickup=pickup,
                drop_off=drop_off,
                passenger_id=(
                    self.boarded_passenger.passenger_id
                    if first and self.boarded_passenger is not None
                    else None
                ),
            )
        self.drafts = drafts
        self._transition_or_raise(WorkflowPhase.DETAILING)
        return dict(drafts)

    def get_draft(self, seat_index: int) -> SeatDraft:
        self.require_phase(WorkflowPhase.DETAILING)
        if seat_index not in self.drafts:
            raise NoSelectionError(f"Seat {seat_index + 1} is not part of this booking")
        return self.drafts[seat_index]

    def cancel_details(self) -> None:
        """Leave DETAILING, keeping the seat selection."""
        self._transition_or_raise(WorkflowPhase.SELECTING)
        self.drafts = {}

    # -------------------------------------------------------------------------
    # Finalizing
    # -------------------------------------------------------------------------

    def begin_finalize(self) -> list[SeatDraft]:
        """Enter FINALIZING and return drafts in selection order."""
        self._transition_or_raise(WorkflowPhase.FINALIZING)
        return [self.drafts[i] for i in self.selected_seats]

    def abort_finalize(self) -> None:
        """Return to DETAILING after a failed finalize, drafts intact."""
        if self._phase == WorkflowPhase.FINALIZING:
            self._phase = WorkflowPhase.DETAILING

    def complete_finalize(self) -> None:
        """Clear every piece of transient state and return to SELECTING."""
        self._transition_or_raise(WorkflowPhase.SELECTING)
        self.clear_selection()
        self.clear_intake()

    def reset(self) -> None:
        self._phase = WorkflowPhase.SELECTING
        self.clear_selection()
        self.clear_intake()

    def __str__(self) -> str:
        return (
            f"BookingWorkflow(phase={self._phase.value}, bus={self.bus_id}, "
            f"seats={[i + 1 for i in self.selected_seats]})"
        )
