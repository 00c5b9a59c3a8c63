"""Exception hierarchy for the dashboard core.

Every error carries a stable ``code`` so front ends can branch on the kind of
failure without parsing messages.
"""


class DashboardError(Exception):
    """Base class for recoverable dashboard errors."""

    def __init__(self, message: str, code: str = "DASHBOARD_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class EmptyInputError(DashboardError):
    def __init__(self, message: str = "Input must not be empty"):
        super().__init__(message, code="EMPTY_INPUT")


class NoSelectionError(DashboardError):
    def __init__(self, message: str = "No seats selected"):
        super().__init__(message, code="NO_SELECTION")


class PassengerNotFoundError(DashboardError):
    def __init__(self, message: str = "Passenger not found"):
        super().__init__(message, code="PASSENGER_NOT_FOUND")


class InvalidStationError(DashboardError):
    def __init__(self, message: str = "Invalid station"):
        super().__init__(message, code="INVALID_STATION")


class SeatUnavailableError(DashboardError):
    def __init__(self, message: str = "Seat is unavailable"):
        super().__init__(message, code="SEAT_UNAVAILABLE")


class BusNotFoundError(DashboardError):
    def __init__(self, message: str = "Bus not found"):
        super().__init__(message, code="BUS_NOT_FOUND")


class TicketNotFoundError(DashboardError):
    def __init__(self, message: str = "Ticket not found"):
        super().__init__(message, code="TICKET_NOT_FOUND")


class InvalidPhaseError(DashboardError):
    def __init__(self, message: str = "Command not allowed in the current phase"):
        super().__init__(message, code="INVALID_PHASE")


class NothingToUndoError(DashboardError):
    def __init__(self, message: str = "Nothing to undo"):
        super().__init__(message, code="NOTHING_TO_UNDO")


class NothingToRedoError(DashboardError):
    def __init__(self, message: str = "Nothing to redo"):
        super().__init__(message, code="NOTHING_TO_REDO")


class IntakeInProgressError(DashboardError):
    def __init__(self, message: str):
        super().__init__(message, code="INTAKE_IN_PROGRESS")
