"""
availabilityfinder - find shared free time across several calendars.
"""

from .config import EngineConfig
from .domain.models import AvailabilityRequest, Preferences, TimeOfDay
from .services.availability_service import AvailabilityResult, AvailabilityService

__version__ = "0.1.0"

__all__ = [
    "AvailabilityRequest",
    "AvailabilityResult",
    "AvailabilityService",
    "EngineConfig",
    "Preferences",
    "TimeOfDay",
]
