"""GUI renderer implementing the DashboardRenderer interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from core.dashboard_state import DashboardState
from core.fleet import Ticket
from engine.driver import DashboardRenderer
from engine.workflow import BookingWorkflow

if TYPE_CHECKING:
    from gui.main_window import MainWindow


class GUIRenderer(DashboardRenderer):
    """GUI implementation of DashboardRenderer.

    This class adapts the abstract DashboardRenderer interface to the GUI
    widgets. It delegates rendering to the MainWindow and its child widgets.
    """

    def __init__(self, main_window: MainWindow, summary_provider: Callable[[], dict[str, Any]]):
        """Initialize the GUI renderer.

        Args:
            main_window: The main application window.
            summary_provider: Returns the current dashboard summary for the
                overview tab.
        """
        self._window = main_window
        self._summary_provider = summary_provider

    def render_state(self, state: DashboardState, workflow: BookingWorkflow) -> None:
        """Render the full dashboard state."""
        self._window.set_state(state, workflow, self._summary_provider())

    def render_queue(self, state: DashboardState) -> None:
        """Handled by render_state() updating QueueWidget."""
        pass

    def render_seat_map(self, state: DashboardState, workflow: BookingWorkflow, bus_id: str) -> None:
        """Show the ticketing tab; the seat maps are refreshed by render_state()."""
        self._window.show_ticketing()

    def render_log(self, state: DashboardState) -> None:
        """Handled by render_state() updating ActionLogWidget."""
        pass

    def render_tickets(self, tickets: list[Ticket]) -> None:
        """Show the issued tickets in a dialog."""
        from gui.dialogs import TicketDialog
        for ticket in tickets:
            self._window.add_message(
                f"Issued {ticket.booking.ticket_id} to {ticket.booking.passenger_name} "
                f"({ticket.bus_id} seat {ticket.booking.seat_index})"
            )
        dialog = TicketDialog(tickets, self._window)
        dialog.exec()

    def render_message(self, message: str) -> None:
        self._window.add_message(message)

    def render_error(self, error: str) -> None:
        self._window.add_error(error)
