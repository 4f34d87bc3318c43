"""
Service layer helpers that orchestrate the calendar gateway and domain logic.
"""

from .availability_service import AvailabilityResult, AvailabilityService
from .busy_time_aggregator import (
    BusyTimeAggregator,
    BusyTimeReport,
    FetchStatus,
    ParticipantFetch,
)
from .calendar_gateway import CalendarGateway
from .conflict_checker import ConflictChecker

__all__ = [
    "AvailabilityResult",
    "AvailabilityService",
    "BusyTimeAggregator",
    "BusyTimeReport",
    "CalendarGateway",
    "ConflictChecker",
    "FetchStatus",
    "ParticipantFetch",
]
