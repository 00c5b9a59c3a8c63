"""Dashboard controller for integrating the dashboard engine with the GUI."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QDialog

from core.config import DashboardConfig
from data.loader import FleetData
from engine.dashboard_engine import CommandResult, DashboardEngine

from gui.main_window import MainWindow
from gui.gui_renderer import GUIRenderer
from gui.dialogs import PassengerDetailsDialog

logger = logging.getLogger(__name__)


class DashboardController(QObject):
    """Controller that routes GUI input to the DashboardEngine.

    This class orchestrates:
    - Intake and boarding from the queue tab
    - Filter changes and seat toggles from the ticketing tab
    - The details dialog and ticket issue
    - Undo and redo from the log tab

    Unlike the CLI driver which blocks for input, this controller
    uses Qt's event loop and signals for asynchronous operation.
    """

    dashboard_reset = Signal()
    tickets_issued = Signal(list)

    def __init__(
        self,
        main_window: MainWindow,
        config: Optional[DashboardConfig] = None,
        fleet: Optional[FleetData] = None,
    ):
        super().__init__()

        self._window = main_window
        self._engine = DashboardEngine(config)
        self._renderer = GUIRenderer(main_window, self._engine.dashboard_summary)
        self._fleet = fleet

        main_window.queue_widget.enqueue_requested.connect(self._on_enqueue_requested)
        main_window.queue_widget.board_requested.connect(self._on_board_requested)
        main_window.queue_widget.release_requested.connect(self._on_release_requested)
        main_window.fleet_widget.filter_changed.connect(self._on_filter_changed)
        main_window.fleet_widget.seat_clicked.connect(self._on_seat_clicked)
        main_window.fleet_widget.book_requested.connect(self._on_book_requested)
        main_window.log_widget.undo_requested.connect(self._on_undo_requested)
        main_window.log_widget.redo_requested.connect(self._on_redo_requested)
        main_window.set_reset_callback(self.reset)
        main_window.set_chart_callback(self.show_line_load)

    @property
    def engine(self) -> DashboardEngine:
        return self._engine

    def reset(self) -> None:
        """Start a fresh dashboard from the configured fleet."""
        self._engine.reset(self._fleet)
        self._renderer.render_message("Dashboard ready")
        self._refresh()
        self.dashboard_reset.emit()

    def _refresh(self) -> None:
        self._renderer.render_state(self._engine.state, self._engine.workflow)

    def _report(self, result: CommandResult, message: str = "") -> bool:
        """Render the outcome of a command and refresh the display."""
        if result:
            if message:
                self._renderer.render_message(message)
        else:
            self._renderer.render_error(result.error or "Command failed")
        self._refresh()
        return result.success

    # -------------------------------------------------------------------------
    # Intake
    # -------------------------------------------------------------------------

    def _on_enqueue_requested(self, name: str, priority: str, direct: bool) -> None:
        if direct:
            result = self._engine.direct_booking(name)
            if self._report(result, f"Direct booking for {result.value}. Select seats."):
                self._window.queue_widget.clear_form()
                self._renderer.render_seat_map(self._engine.state, self._engine.workflow, "")
            return

        result = self._engine.enqueue_passenger(name, priority)
        if result:
            passenger = result.value
            message = f"Queued {passenger.name} at position {result.info['index'] + 1}"
        else:
            message = ""
        if self._report(result, message):
            self._window.queue_widget.clear_form()

    def _on_board_requested(self, passenger_id: Optional[str]) -> None:
        result = self._engine.board_passenger(passenger_id)
        message = f"{result.value.name} called to the desk. Select seats." if result else ""
        if self._report(result, message):
            self._renderer.render_seat_map(self._engine.state, self._engine.workflow, "")

    def _on_release_requested(self) -> None:
        result = self._engine.release_passenger()
        message = (
            f"{result.value.name} returned to position {result.info['index'] + 1}"
            if result else ""
        )
        self._report(result, message)

    # -------------------------------------------------------------------------
    # Ticketing
    # -------------------------------------------------------------------------

    def _on_filter_changed(self, pickup: str, drop_off: str) -> None:
        self._report(self._engine.set_filter(pickup, drop_off))

    def _on_seat_clicked(self, bus_id: str, seat_index: int) -> None:
        self._report(self._engine.select_seat(bus_id, seat_index))

    def _on_book_requested(self) -> None:
        result = self._engine.start_booking()
        if not self._report(result):
            return

        workflow = self._engine.workflow
        dialog = PassengerDetailsDialog(
            workflow.bus_id,
            result.value,
            self._engine.state.topology,
            self._engine.queue(),
            workflow.boarded_passenger,
            self._window,
        )
        if dialog.exec() != QDialog.DialogCode.Accepted:
            self._report(self._engine.cancel_booking(), "Booking cancelled")
            return

        for edit in dialog.get_edits():
            update = self._engine.update_seat_detail(
                edit.seat_index,
                name=edit.name,
                pickup=edit.pickup,
                drop_off=edit.drop_off,
                passenger_id=edit.passenger_id,
            )
            if not update:
                self._fail_booking(update)
                return

        finalized = self._engine.finalize_booking()
        if not finalized:
            self._fail_booking(finalized)
            return

        tickets = finalized.value
        self._refresh()
        self._renderer.render_tickets(tickets)
        self.tickets_issued.emit(tickets)

    def _fail_booking(self, result: CommandResult) -> None:
        logger.info("Booking aborted: %s", result.error)
        self._engine.cancel_booking()
        self._refresh()
        self._window.show_error("Booking Failed", result.error or "Booking failed")

    # -------------------------------------------------------------------------
    # Log
    # -------------------------------------------------------------------------

    def _on_undo_requested(self) -> None:
        result = self._engine.undo()
        message = f"Undid: {result.value.action.describe()}" if result else ""
        self._report(result, message)

    def _on_redo_requested(self) -> None:
        result = self._engine.redo()
        message = f"Redid: {result.value.action.describe()}" if result else ""
        self._report(result, message)

    def show_line_load(self) -> None:
        """Open the fleet-wide line load chart."""
        from data.ledger_vis import visualize_line_load
        visualize_line_load(self._engine.state, show=True)
