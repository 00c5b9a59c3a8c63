"""Main window for the dashboard GUI application."""

from __future__ import annotations

from typing import Any, Callable, Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QSplitter, QFrame, QLabel,
    QStatusBar, QMessageBox, QTextEdit, QTabWidget
)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont, QAction, QCloseEvent

from core.constants import WorkflowPhase
from core.dashboard_state import DashboardState
from engine.workflow import BookingWorkflow

from gui.widgets import QueueWidget, FleetWidget, ActionLogWidget, OverviewWidget
from gui.constants import DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT


class MessageLogWidget(QFrame):
    """Widget for displaying desk messages and errors."""

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Sunken)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)

        title = QLabel("Messages")
        title.setFont(QFont("Arial", 10, QFont.Weight.Bold))
        layout.addWidget(title)

        self._text = QTextEdit()
        self._text.setReadOnly(True)
        self._text.setFont(QFont("Consolas", 9))
        self._text.setMaximumHeight(120)
        layout.addWidget(self._text)

    def add_message(self, message: str, is_error: bool = False) -> None:
        """Add a message to the log."""
        if is_error:
            self._text.append(f'<span style="color: red;">{message}</span>')
        else:
            self._text.append(message)
        scrollbar = self._text.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())

    def clear(self) -> None:
        self._text.clear()


class MainWindow(QMainWindow):
    """Main application window for the station dashboard.

    The window only displays state and forwards user input as signals; the
    DashboardController decides what each input does.

    Signals:
        state_updated: Emitted after the display has been refreshed
    """

    state_updated = Signal(object)  # DashboardState

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._state: Optional[DashboardState] = None
        self._workflow: Optional[BookingWorkflow] = None
        self._summary: Optional[dict[str, Any]] = None
        self._reset_callback: Optional[Callable[[], None]] = None
        self._chart_callback: Optional[Callable[[], None]] = None

        self.setWindowTitle("Metro Station Dashboard")
        self.setMinimumSize(1000, 700)
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)

        self._setup_menu()
        self._setup_ui()
        self._setup_statusbar()

    @property
    def queue_widget(self) -> QueueWidget:
        return self._queue_widget

    @property
    def fleet_widget(self) -> FleetWidget:
        return self._fleet_widget

    @property
    def log_widget(self) -> ActionLogWidget:
        return self._log_widget

    def _setup_menu(self) -> None:
        """Setup the menu bar."""
        menubar = self.menuBar()

        station_menu = menubar.addMenu("Station")

        reset_action = QAction("Reset Dashboard", self)
        reset_action.setShortcut("Ctrl+N")
        reset_action.triggered.connect(self._on_reset)
        station_menu.addAction(reset_action)

        station_menu.addSeparator()

        quit_action = QAction("Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        station_menu.addAction(quit_action)

        view_menu = menubar.addMenu("View")

        refresh_action = QAction("Refresh", self)
        refresh_action.setShortcut("F5")
        refresh_action.triggered.connect(self._refresh_display)
        view_menu.addAction(refresh_action)

        chart_action = QAction("Line Load Chart", self)
        chart_action.triggered.connect(self._on_chart)
        view_menu.addAction(chart_action)

        help_menu = menubar.addMenu("Help")

        about_action = QAction("About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

    def _setup_ui(self) -> None:
        """Setup the tabbed layout with the message log underneath."""
        central = QWidget()
        self.setCentralWidget(central)

        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(8, 8, 8, 8)
        main_layout.setSpacing(8)

        splitter = QSplitter(Qt.Orientation.Vertical)

        self._tabs = QTabWidget()
        self._overview_widget = OverviewWidget()
        self._queue_widget = QueueWidget()
        self._fleet_widget = FleetWidget()
        self._log_widget = ActionLogWidget()
        self._tabs.addTab(self._overview_widget, "Overview")
        self._tabs.addTab(self._queue_widget, "Queue")
        self._tabs.addTab(self._fleet_widget, "Ticketing")
        self._tabs.addTab(self._log_widget, "Log")
        splitter.addWidget(self._tabs)

        self._message_log = MessageLogWidget()
        splitter.addWidget(self._message_log)
        splitter.setSizes([650, 150])

        main_layout.addWidget(splitter, stretch=1)

    def _setup_statusbar(self) -> None:
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)
        self._statusbar.showMessage("Ready")

    def set_state(
        self,
        state: DashboardState,
        workflow: BookingWorkflow,
        summary: dict[str, Any],
    ) -> None:
        """Update every tab with the current dashboard state."""
        self._state = state
        self._workflow = workflow
        self._summary = summary

        self._overview_widget.set_summary(summary)
        self._queue_widget.set_state(state, workflow)
        self._fleet_widget.set_state(state, workflow)
        self._log_widget.set_state(state, can_edit=workflow.phase == WorkflowPhase.SELECTING)

        station_filter = state.station_filter
        intake = f" | At desk: {workflow.intake_name}" if workflow.intake_name else ""
        self._statusbar.showMessage(
            f"{station_filter.pickup} > {station_filter.drop_off} | "
            f"Waiting: {len(state.queue)}{intake}"
        )

        self.state_updated.emit(state)

    def show_ticketing(self) -> None:
        self._tabs.setCurrentWidget(self._fleet_widget)

    def add_message(self, message: str) -> None:
        self._message_log.add_message(message)

    def add_error(self, error: str) -> None:
        self._message_log.add_message(error, is_error=True)

    def show_error(self, title: str, error: str) -> None:
        """Log an error and show it in a message box."""
        self.add_error(error)
        QMessageBox.warning(self, title, error)

    def set_reset_callback(self, callback: Callable[[], None]) -> None:
        self._reset_callback = callback

    def set_chart_callback(self, callback: Callable[[], None]) -> None:
        self._chart_callback = callback

    def _on_reset(self) -> None:
        reply = QMessageBox.question(
            self,
            "Reset Dashboard",
            "Discard the queue, all tickets and the action log?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )
        if reply == QMessageBox.StandardButton.Yes and self._reset_callback:
            self._message_log.clear()
            self._reset_callback()

    def _on_chart(self) -> None:
        if self._chart_callback:
            self._chart_callback()

    def _refresh_display(self) -> None:
        if self._state is not None and self._workflow is not None and self._summary is not None:
            self.set_state(self._state, self._workflow, self._summary)

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About Metro Station Dashboard",
            "Metro Station Dashboard\n\n"
            "Priority boarding queue and segment seat booking for a metro bus line.\n\n"
            "Built with Python and PySide6."
        )

    def closeEvent(self, event: QCloseEvent) -> None:
        """Handle window close."""
        reply = QMessageBox.question(
            self,
            "Quit",
            "Are you sure you want to quit?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No
        )

        if reply == QMessageBox.StandardButton.Yes:
            event.accept()
        else:
            event.ignore()
