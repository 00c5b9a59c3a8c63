"""Constants and enums for the metro station dashboard."""

from enum import Enum


class Priority(Enum):
    """Passenger priority classes used by the intake queue."""

    NORMAL = "normal"
    AGED = "aged"
    WHEELCHAIR = "wheelchair"
    SICK = "sick"


class BusStatus(Enum):
    """Schedule status of a bus."""

    SCHEDULED = "Scheduled"
    DEPARTED = "Departed"
    CANCELLED = "Cancelled"


class WorkflowPhase(Enum):
    """Phases of a single booking attempt."""

    SELECTING = "selecting"
    DETAILING = "detailing"
    FINALIZING = "finalizing"


class QueueMatch(Enum):
    """How a finalized booking is matched against queued passengers."""

    ID = "id"
    NAME = "name"  # Legacy behaviour: every queued entry with a booked name


# Default station topology, in travel order
DEFAULT_STATIONS = [
    "Peshawar Morr",
    "British Homes",
    "I/10 Stop",
    "I-9",
    "I-8",
    "Faizabad",
]

# Priorities offered by the intake controls (wheelchair is core-only)
EXPOSED_PRIORITIES = [Priority.NORMAL, Priority.AGED, Priority.SICK]

# Seat layout
SEATS_PER_ROW = 4
WINDOW_COLUMNS = (0, 3)

# Tickets
TICKET_PREFIX = "METRO"
TICKET_DIGITS = 5
DEFAULT_PASSENGER_NAME = "Unknown Passenger"
