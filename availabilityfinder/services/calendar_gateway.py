"""
The calendar provider contract consumed by the availability services.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from pendulum import DateTime

from ..domain.models import BusyInterval, CalendarEvent


class CalendarGateway(Protocol):
    """
    Protocol describing the calendar provider behaviour needed by the services.

    Implementations raise on authentication or network failure; callers
    decide how to degrade.
    """

    async def is_connected(self, participant_id: str) -> bool:
        """Return whether the participant has linked a calendar."""

    async def get_primary_calendar_id(self, participant_id: str) -> Optional[str]:
        """Return the participant's primary calendar id, if one is stored."""

    async def get_busy_intervals(
        self,
        participant_id: str,
        calendar_id: str,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[BusyInterval]:
        """Return the busy intervals of one calendar inside the window."""

    async def get_events(
        self,
        participant_id: str,
        calendar_id: str,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[CalendarEvent]:
        """Return the events of one calendar overlapping the window."""
