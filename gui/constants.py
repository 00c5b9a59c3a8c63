"""Constants and color schemes for the dashboard GUI."""

from PySide6.QtGui import QColor

from core.constants import Priority, BusStatus


# Priority badge colors
PRIORITY_COLORS = {
    Priority.NORMAL: QColor("#64748B"),      # Slate
    Priority.AGED: QColor("#D97706"),        # Amber
    Priority.WHEELCHAIR: QColor("#0284C7"),  # Sky
    Priority.SICK: QColor("#DC2626"),        # Red
}

PRIORITY_LABELS = {
    Priority.NORMAL: "Normal",
    Priority.AGED: "Aged",
    Priority.WHEELCHAIR: "Wheelchair",
    Priority.SICK: "Sick",
}

# Bus status colors
STATUS_COLORS = {
    BusStatus.SCHEDULED: QColor("#16A34A"),
    BusStatus.DEPARTED: QColor("#64748B"),
    BusStatus.CANCELLED: QColor("#DC2626"),
}

# Seat button colors
SEAT_FREE_COLOR = QColor("#FFFFFF")
SEAT_WINDOW_COLOR = QColor("#E0F2FE")   # Light blue tint for window seats
SEAT_BOOKED_COLOR = QColor("#CBD5E1")   # Gray, booked inside the filter
SEAT_SELECTED_COLOR = QColor("#4F46E5")  # Indigo
SEAT_BORDER_COLOR = QColor("#94A3B8")

# UI dimensions
SEAT_BUTTON_SIZE = 36
AISLE_WIDTH = 18

# Window dimensions
DEFAULT_WINDOW_WIDTH = 1280
DEFAULT_WINDOW_HEIGHT = 820

# Fonts
TITLE_FONT_SIZE = 14
LABEL_FONT_SIZE = 11
SMALL_FONT_SIZE = 9
