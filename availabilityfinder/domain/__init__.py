"""
Domain layer - Pure business logic without external dependencies.
"""

from .default_slots import DefaultSlotGenerator
from .exceptions import (
    AvailabilityError,
    CalendarGatewayError,
    CalendarNotFoundError,
    InvalidRequestError,
)
from .free_slot_finder import FreeSlotFinder
from .interval_merger import IntervalMerger
from .models import (
    AvailabilityRequest,
    BusyInterval,
    CalendarEvent,
    ConflictResult,
    FreeSlot,
    Preferences,
    RankedSlot,
    TimeOfDay,
    TimeRange,
    WorkingHours,
)
from .slot_ranker import SlotRanker

__all__ = [
    "AvailabilityError",
    "AvailabilityRequest",
    "BusyInterval",
    "CalendarEvent",
    "CalendarGatewayError",
    "CalendarNotFoundError",
    "ConflictResult",
    "DefaultSlotGenerator",
    "FreeSlot",
    "FreeSlotFinder",
    "IntervalMerger",
    "InvalidRequestError",
    "Preferences",
    "RankedSlot",
    "SlotRanker",
    "TimeOfDay",
    "TimeRange",
    "WorkingHours",
]
