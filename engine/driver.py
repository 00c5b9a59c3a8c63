"""Interactive CLI driver for the metro station dashboard.

This module provides a text-based front end over the DashboardEngine.
It is also the reference for how the desktop front end talks to the engine:
- DashboardRenderer handles all display logic (the GUI swaps in its own)
- DashboardDriver parses commands and calls the engine

Usage:
    python -m engine.driver [--fleet PATH] [--no-color] [--log-level LEVEL]
"""

from __future__ import annotations

import argparse
import logging
import re
import shlex
import sys
from abc import ABC, abstractmethod
from typing import Callable, Optional, TextIO

from core.constants import EXPOSED_PRIORITIES, Priority, QueueMatch
from core.config import DashboardConfig
from core.dashboard_state import DashboardState
from core.fleet import Ticket
from data.loader import FleetLoadError, load_fleet

from engine.dashboard_engine import CommandResult, DashboardEngine
from engine.workflow import BookingWorkflow


# =============================================================================
# Display Formatters (GUI-ready abstraction)
# =============================================================================

class DashboardRenderer(ABC):
    """Abstract base class for rendering dashboard state."""

    @abstractmethod
    def render_state(self, state: DashboardState, workflow: BookingWorkflow) -> None:
        """Render the overview (filter, queue, fleet)."""
        pass

    @abstractmethod
    def render_queue(self, state: DashboardState) -> None:
        """Render the intake queue."""
        pass

    @abstractmethod
    def render_seat_map(self, state: DashboardState, workflow: BookingWorkflow, bus_id: str) -> None:
        """Render the seat map of one bus under the active filter."""
        pass

    @abstractmethod
    def render_log(self, state: DashboardState) -> None:
        """Render the action log."""
        pass

    @abstractmethod
    def render_tickets(self, tickets: list[Ticket]) -> None:
        """Render issued tickets."""
        pass

    @abstractmethod
    def render_message(self, message: str) -> None:
        """Render a message to the user."""
        pass

    @abstractmethod
    def render_error(self, error: str) -> None:
        """Render an error message."""
        pass


class TextRenderer(DashboardRenderer):
    """CLI text-based renderer for the dashboard."""

    H_LINE = "─"
    V_LINE = "│"
    TL_CORNER = "┌"
    TR_CORNER = "┐"
    BL_CORNER = "└"
    BR_CORNER = "┘"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    PRIORITY_COLORS = {
        Priority.NORMAL: "",
        Priority.AGED: YELLOW,
        Priority.WHEELCHAIR: CYAN,
        Priority.SICK: RED,
    }

    def __init__(self, use_colors: bool = True, out: Optional[TextIO] = None):
        """Initialize the renderer.

        Args:
            use_colors: Whether to use ANSI color codes.
            out: Stream to write to (defaults to stdout).
        """
        self.use_colors = use_colors
        self.out = out or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self.use_colors and color:
            return f"{color}{text}{self.RESET}"
        return text

    def _strip_ansi(self, text: str) -> str:
        return re.sub(r"\033\[[0-9;]*m", "", text)

    def _box(self, title: str, content: list[str], width: int = 64) -> str:
        """Create a box around content."""
        lines = []
        title_space = max(width - len(title) - 4, 0)
        lines.append(f"{self.TL_CORNER}{self.H_LINE}{self.H_LINE} {title} {self.H_LINE * title_space}{self.TR_CORNER}")
        for line in content:
            padding = max(width - len(self._strip_ansi(line)) - 2, 0)
            lines.append(f"{self.V_LINE} {line}{' ' * padding}{self.V_LINE}")
        lines.append(f"{self.BL_CORNER}{self.H_LINE * width}{self.BR_CORNER}")
        return "\n".join(lines)

    def render_state(self, state: DashboardState, workflow: BookingWorkflow) -> None:
        station_filter = state.station_filter
        content = [
            f"Filter: {self._color(station_filter.pickup, self.BOLD)} > "
            f"{self._color(station_filter.drop_off, self.BOLD)}",
            f"Waiting: {len(state.queue)}   Log entries: {len(state.action_log)}",
            f"Booking phase: {workflow.phase.value}"
            + (f"   Intake: {workflow.intake_name}" if workflow.intake_name else ""),
            "",
        ]
        for bus in state.buses:
            occupied = state.occupancy_count(bus.bus_id)
            marker = "*" if workflow.bus_id == bus.bus_id else " "
            content.append(
                f"{marker}{bus.bus_id}  {bus.departure_time:>8}  {occupied:>2}/{bus.capacity:<2} "
                f"occupied  {bus.route} [{bus.status.value}]"
            )
        self._print(self._box("Station Overview", content))

    def render_queue(self, state: DashboardState) -> None:
        if not state.queue:
            self._print(self._box("Boarding Queue", [self._color("(empty)", self.DIM)]))
            return
        content = []
        for position, passenger in enumerate(state.queue, start=1):
            priority = self._color(
                passenger.priority.value, self.PRIORITY_COLORS[passenger.priority]
            )
            content.append(f"{position:>2}. {passenger.passenger_id}  {passenger.name}  [{priority}]")
        self._print(self._box("Boarding Queue", content))

    def render_seat_map(self, state: DashboardState, workflow: BookingWorkflow, bus_id: str) -> None:
        bus = state.get_bus(bus_id)
        per_row = state.config.seats_per_row
        aisle_after = per_row // 2
        selected = set(workflow.selected_seats) if workflow.bus_id == bus_id else set()

        content = [
            f"{bus.route} - departs {bus.departure_time}",
            f"[nn] free  ({self._color('nn', self.RED)}) booked in filter  "
            f"<{self._color('nn', self.GREEN)}> selected  W = window",
            "",
        ]
        for row_start in range(0, bus.capacity, per_row):
            cells = []
            for idx in range(row_start, min(row_start + per_row, bus.capacity)):
                label = f"{idx + 1:02d}"
                if idx in selected:
                    cell = f"<{self._color(label, self.GREEN)}>"
                elif not state.is_seat_available(bus_id, idx):
                    cell = f"({self._color(label, self.RED)})"
                else:
                    cell = f"[{label}]"
                cell += "W" if bus.seats[idx].is_window else " "
                cells.append(cell)
                if idx - row_start == aisle_after - 1:
                    cells.append("  ")
            content.append(" ".join(cells))
        content.append("")
        content.append(f"Occupied under filter: {state.occupancy_count(bus_id)}/{bus.capacity}")
        self._print(self._box(f"Seat Map {bus_id}", content))

    def render_log(self, state: DashboardState) -> None:
        entries = state.action_log.entries
        if not entries:
            self._print(self._box("System Log", [self._color("(no actions yet)", self.DIM)]))
            return
        content = [
            f"{entry.timestamp:%H:%M:%S}  {entry.action.describe()}"
            for entry in reversed(entries)
        ]
        redo = state.action_log.redo_entries
        if redo:
            content.append(self._color(f"{len(redo)} action(s) can be redone", self.DIM))
        self._print(self._box("System Log", content, width=90))

    def render_tickets(self, tickets: list[Ticket]) -> None:
        for ticket in tickets:
            booking = ticket.booking
            seat_kind = "Window" if booking.is_window else "Aisle"
            self._print(self._box(
                booking.ticket_id,
                [
                    f"Passenger: {self._color(booking.passenger_name, self.BOLD)}",
                    f"From:      {booking.pickup_station}",
                    f"To:        {booking.drop_off_station}",
                    f"Bus:       {ticket.bus_id}   Seat {booking.seat_index} ({seat_kind})",
                ],
                width=48,
            ))

    def render_message(self, message: str) -> None:
        self._print(message)

    def render_error(self, error: str) -> None:
        self._print(self._color(f"Error: {error}", self.RED))


# =============================================================================
# Driver
# =============================================================================

HELP_TEXT = """\
Intake
  add NAME [PRIORITY]        queue a passenger (normal, aged, sick)
  direct NAME                book a name without queueing
  board [PASSENGER_ID]       call the head (or a given passenger) to booking
  release                    send the passenger at the desk back to the queue
Seats
  stations                   list stations with their numbers
  filter FROM TO             set the active segment (names or numbers)
  map BUS                    show the seat map of a bus
  seat BUS N                 toggle seat N (1-based) on BUS
  clear                      clear the seat selection
Booking
  book                       enter passenger details for the selection
  detail N [name=..] [from=..] [to=..] [passenger=ID]
  back                       leave detail entry
  confirm                    issue the tickets
  cancel TICKET_ID           cancel an issued ticket
History
  undo | redo | log
Views
  show | queue | tickets [BUS] | chart BUS [PATH]
  help | quit"""


class DashboardDriver:
    """Reads commands and forwards them to the DashboardEngine.

    The driver is thin: it parses arguments, calls one engine
    command and renders the CommandResult.
    """

    def __init__(
        self,
        engine: Optional[DashboardEngine] = None,
        renderer: Optional[DashboardRenderer] = None,
        input_func: Callable[[str], str] = input,
    ):
        self.engine = engine or DashboardEngine()
        self.renderer = renderer or TextRenderer()
        self._input = input_func
        self._running = False
        self._commands: dict[str, Callable[[list[str]], None]] = {
            "help": self._cmd_help,
            "add": self._cmd_add,
            "direct": self._cmd_direct,
            "board": self._cmd_board,
            "release": self._cmd_release,
            "stations": self._cmd_stations,
            "filter": self._cmd_filter,
            "map": self._cmd_map,
            "seat": self._cmd_seat,
            "clear": self._cmd_clear,
            "book": self._cmd_book,
            "detail": self._cmd_detail,
            "back": self._cmd_back,
            "confirm": self._cmd_confirm,
            "cancel": self._cmd_cancel,
            "undo": self._cmd_undo,
            "redo": self._cmd_redo,
            "log": self._cmd_log,
            "show": self._cmd_show,
            "queue": self._cmd_queue,
            "tickets": self._cmd_tickets,
            "chart": self._cmd_chart,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }

    @property
    def state(self) -> DashboardState:
        return self.engine.state

    def run(self) -> None:
        """Run the read-eval loop until quit or end of input."""
        if not self.engine.is_initialized():
            self.engine.reset()
        self._running = True
        self.renderer.render_state(self.state, self.engine.workflow)
        self.renderer.render_message("Type 'help' for commands.")

        while self._running:
            try:
                line = self._input(f"[{self.engine.phase.value}]> ")
            except EOFError:
                break
            self.execute(line)

    def execute(self, line: str) -> None:
        """Parse and execute one command line."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.renderer.render_error(f"Could not parse command: {e}")
            return
        if not parts:
            return

        command, args = parts[0].lower(), parts[1:]
        handler = self._commands.get(command)
        if handler is None:
            self.renderer.render_error(f"Unknown command '{command}'. Type 'help'.")
            return
        try:
            handler(args)
        except (IndexError, ValueError):
            self.renderer.render_error(f"Bad arguments for '{command}'. Type 'help'.")

    def _report(self, result: CommandResult, message: str = "") -> bool:
        """Render a failed result, or an optional success message."""
        if not result.success:
            self.renderer.render_error(f"{result.error} [{result.code}]")
            return False
        if message:
            self.renderer.render_message(message)
        return True

    def _station(self, token: str) -> str:
        """Resolve a station given by name or 1-based number."""
        if token.isdigit():
            stations = self.state.topology.stations
            number = int(token)
            if 1 <= number <= len(stations):
                return stations[number - 1]
        return token

    # -------------------------------------------------------------------------
    # Command handlers
    # -------------------------------------------------------------------------

    def _cmd_help(self, args: list[str]) -> None:
        self.renderer.render_message(HELP_TEXT)

    def _cmd_add(self, args: list[str]) -> None:
        name = args[0] if args else ""
        priority = args[1].lower() if len(args) > 1 else Priority.NORMAL.value
        if priority not in [p.value for p in EXPOSED_PRIORITIES]:
            self.renderer.render_error(
                f"Priority must be one of {[p.value for p in EXPOSED_PRIORITIES]}"
            )
            return
        result = self.engine.enqueue_passenger(name, priority)
        if self._report(result):
            self.renderer.render_message(
                f"Queued {result.value.name} as {result.value.passenger_id} "
                f"at position {result.info['index'] + 1}"
            )

    def _cmd_direct(self, args: list[str]) -> None:
        result = self.engine.direct_booking(" ".join(args))
        self._report(result, f"Select seats for {result.value}" if result else "")

    def _cmd_board(self, args: list[str]) -> None:
        result = self.engine.board_passenger(args[0] if args else None)
        if self._report(result):
            self.renderer.render_message(f"Now booking for {result.value.name}")

    def _cmd_release(self, args: list[str]) -> None:
        result = self.engine.release_passenger()
        self._report(
            result,
            f"Returned {result.value.name} to position {result.info['index'] + 1}" if result else "",
        )

    def _cmd_stations(self, args: list[str]) -> None:
        for number, name in enumerate(self.state.topology.stations, start=1):
            self.renderer.render_message(f"{number}. {name}")

    def _cmd_filter(self, args: list[str]) -> None:
        result = self.engine.set_filter(self._station(args[0]), self._station(args[1]))
        if self._report(result):
            self.renderer.render_state(self.state, self.engine.workflow)

    def _cmd_map(self, args: list[str]) -> None:
        bus_id = args[0] if args else (self.engine.workflow.bus_id or self.state.buses[0].bus_id)
        if bus_id not in self.state.bus_ids():
            self.renderer.render_error(f"Unknown bus: {bus_id}")
            return
        self.renderer.render_seat_map(self.state, self.engine.workflow, bus_id)

    def _cmd_seat(self, args: list[str]) -> None:
        bus_id, seat_number = args[0], int(args[1])
        result = self.engine.select_seat(bus_id, seat_number - 1)
        if self._report(result):
            selection = ", ".join(str(i + 1) for i in result.value) or "none"
            self.renderer.render_message(f"Selected on {bus_id}: {selection}")

    def _cmd_clear(self, args: list[str]) -> None:
        self._report(self.engine.clear_selection(), "Selection cleared")

    def _cmd_book(self, args: list[str]) -> None:
        result = self.engine.start_booking()
        if self._report(result):
            for seat_index, draft in result.value.items():
                self.renderer.render_message(
                    f"Seat {seat_index + 1}: name={draft.name or '-'} "
                    f"from={draft.pickup} to={draft.drop_off}"
                )
            self.renderer.render_message("Edit with 'detail', then 'confirm'.")

    def _cmd_detail(self, args: list[str]) -> None:
        seat_number = int(args[0])
        fields: dict[str, str] = {}
        for token in args[1:]:
            key, _, value = token.partition("=")
            fields[key.lower()] = value
        result = self.engine.update_seat_detail(
            seat_number - 1,
            name=fields.get("name"),
            pickup=self._station(fields["from"]) if "from" in fields else None,
            drop_off=self._station(fields["to"]) if "to" in fields else None,
            passenger_id=fields.get("passenger"),
        )
        if self._report(result):
            draft = result.value
            self.renderer.render_message(
                f"Seat {seat_number}: name={draft.name or '-'} from={draft.pickup} to={draft.drop_off}"
            )

    def _cmd_back(self, args: list[str]) -> None:
        self._report(self.engine.cancel_booking(), "Back to seat selection")

    def _cmd_confirm(self, args: list[str]) -> None:
        result = self.engine.finalize_booking()
        if self._report(result):
            self.renderer.render_tickets(result.value)

    def _cmd_cancel(self, args: list[str]) -> None:
        result = self.engine.cancel_ticket(args[0])
        self._report(result, f"Cancelled {args[0]}" if result else "")

    def _cmd_undo(self, args: list[str]) -> None:
        result = self.engine.undo()
        self._report(result, f"Undone: {result.value.action.describe()}" if result else "")

    def _cmd_redo(self, args: list[str]) -> None:
        result = self.engine.redo()
        self._report(result, f"Redone: {result.value.action.describe()}" if result else "")

    def _cmd_log(self, args: list[str]) -> None:
        self.renderer.render_log(self.state)

    def _cmd_show(self, args: list[str]) -> None:
        self.renderer.render_state(self.state, self.engine.workflow)

    def _cmd_queue(self, args: list[str]) -> None:
        self.renderer.render_queue(self.state)

    def _cmd_tickets(self, args: list[str]) -> None:
        bus_id = args[0] if args else None
        if bus_id is not None and bus_id not in self.state.bus_ids():
            self.renderer.render_error(f"Unknown bus: {bus_id}")
            return
        tickets = self.engine.tickets(bus_id)
        if not tickets:
            self.renderer.render_message("No tickets issued")
            return
        self.renderer.render_tickets(tickets)

    def _cmd_chart(self, args: list[str]) -> None:
        import matplotlib.pyplot as plt

        from data.ledger_vis import visualize_bus

        bus_id = args[0]
        if bus_id not in self.state.bus_ids():
            self.renderer.render_error(f"Unknown bus: {bus_id}")
            return
        save_path = args[1] if len(args) > 1 else f"{bus_id.lower()}_ledger.png"
        try:
            fig = visualize_bus(self.state, bus_id, save_path=save_path, show=False)
        except OSError as e:
            self.renderer.render_error(f"Could not save chart to {save_path}: {e}")
            return
        plt.close(fig)
        self.renderer.render_message(f"Saved seat ledger chart to {save_path}")

    def _cmd_quit(self, args: list[str]) -> None:
        self._running = False


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Metro station dashboard - interactive CLI",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--fleet", type=str, default=None,
                        help="Fleet JSON file (default: bundled fleet)")
    parser.add_argument("--no-color", action="store_true",
                        help="Disable ANSI colors")
    parser.add_argument("--match-by-name", action="store_true",
                        help="Remove queued passengers by name when booking (legacy)")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI driver."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = DashboardConfig(
        queue_match=QueueMatch.NAME if args.match_by_name else QueueMatch.ID
    )
    engine = DashboardEngine(config=config)
    try:
        fleet = load_fleet(args.fleet, config=config) if args.fleet else None
    except FleetLoadError as e:
        print(f"Could not load fleet: {e}", file=sys.stderr)
        return 1
    engine.reset(fleet)

    print("=" * 60)
    print("METRO STATION DASHBOARD".center(60))
    print("=" * 60)

    driver = DashboardDriver(engine=engine, renderer=TextRenderer(use_colors=not args.no_color))
    try:
        driver.run()
    except KeyboardInterrupt:
        print("\nGoodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
