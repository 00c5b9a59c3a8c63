"""Configuration for the dashboard core.

Runtime knobs live in frozen dataclasses so a configuration can be shared
between the controller, the front ends and the tests without being mutated.
"""

from dataclasses import dataclass

from .constants import (
    QueueMatch,
    SEATS_PER_ROW,
    WINDOW_COLUMNS,
    TICKET_PREFIX,
    TICKET_DIGITS,
    DEFAULT_PASSENGER_NAME,
)


@dataclass(frozen=True)
class DashboardConfig:
    """Configuration for seat geometry, ticketing and queue matching.

    Attributes:
        seats_per_row: Number of seats in one row of a bus.
        window_columns: Column indices (within a row) that are window seats.
        ticket_prefix: Prefix of issued ticket ids.
        ticket_digits: Zero-padded width of the numeric ticket part.
        default_passenger_name: Name used when a seat draft has no name.
        queue_match: How finalized bookings remove queued passengers.
    """

    seats_per_row: int = SEATS_PER_ROW
    window_columns: tuple[int, ...] = WINDOW_COLUMNS
    ticket_prefix: str = TICKET_PREFIX
    ticket_digits: int = TICKET_DIGITS
    default_passenger_name: str = DEFAULT_PASSENGER_NAME
    queue_match: QueueMatch = QueueMatch.ID

    def is_window(self, seat_index: int) -> bool:
        """Check whether a 0-based seat index is a window seat."""
        return seat_index % self.seats_per_row in self.window_columns


DEFAULT_CONFIG = DashboardConfig()
