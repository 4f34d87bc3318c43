"""
Domain-specific exception hierarchy for the availability engine.
"""


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class InvalidRequestError(AvailabilityError, ValueError):
    """Raised when a request is rejected before any calendar is queried."""


class CalendarGatewayError(AvailabilityError):
    """Raised when calendar data cannot be fetched or parsed."""


class CalendarNotFoundError(CalendarGatewayError):
    """Raised when a participant has no primary calendar to query."""

    def __init__(self, participant_id: str) -> None:
        super().__init__(f"No primary calendar for participant '{participant_id}'.")
        self.participant_id = participant_id
