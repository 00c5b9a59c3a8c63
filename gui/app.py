"""Main entry point for the dashboard GUI application."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from PySide6.QtWidgets import QApplication

from core.config import DashboardConfig
from core.constants import QueueMatch
from data.loader import FleetData, FleetLoadError, load_fleet

from gui.main_window import MainWindow
from gui.dashboard_controller import DashboardController


class DashboardApp:
    """Main application class for the dashboard GUI."""

    def __init__(self, config: Optional[DashboardConfig] = None, fleet: Optional[FleetData] = None):
        self._config = config
        self._fleet = fleet
        self._app: Optional[QApplication] = None
        self._window: Optional[MainWindow] = None
        self._controller: Optional[DashboardController] = None

    def run(self) -> int:
        """Run the application.

        Returns:
            Exit code (0 for success).
        """
        self._app = QApplication(sys.argv)
        self._app.setApplicationName("Metro Dashboard")
        self._app.setApplicationDisplayName("Metro Station Dashboard")
        self._app.setStyle("Fusion")

        self._window = MainWindow()
        self._controller = DashboardController(self._window, self._config, self._fleet)
        self._controller.reset()

        self._window.show()

        return self._app.exec()


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Metro station dashboard (desktop)")
    parser.add_argument("--fleet", help="Path to a fleet JSON file")
    parser.add_argument(
        "--match-by-name",
        action="store_true",
        help="Remove queued passengers by name when their ticket is issued",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = DashboardConfig(
        queue_match=QueueMatch.NAME if args.match_by_name else QueueMatch.ID
    )
    try:
        fleet = load_fleet(args.fleet, config=config) if args.fleet else None
    except FleetLoadError as e:
        print(f"Could not load fleet: {e}", file=sys.stderr)
        return 1

    app = DashboardApp(config, fleet)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
