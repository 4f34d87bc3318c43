"""
Single-participant conflict check for an explicit time window.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import date
from typing import Tuple

import pendulum
from pendulum import DateTime

from ..domain.exceptions import InvalidRequestError
from ..domain.models import ConflictResult, TimeRange
from .calendar_gateway import CalendarGateway

logger = logging.getLogger(__name__)

PRIMARY_CALENDAR_ALIAS = "primary"

_TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_time_of_day(value: str) -> Tuple[int, int]:
    """
    Parse a 24-hour ``HH:MM`` string.

    Raises:
        InvalidRequestError: If the value is not a valid time of day
    """
    match = _TIME_OF_DAY_PATTERN.match(value or "")
    if not match:
        raise InvalidRequestError(f"Time must be in HH:MM format, got {value!r}")
    return int(match.group(1)), int(match.group(2))


class ConflictChecker:
    """
    Reports the calendar events overlapping a participant's proposed slot.

    The check is advisory and fails open: a participant without a calendar,
    or a provider error, yields "no conflicts" rather than an error.
    """

    def __init__(
        self,
        calendar_gateway: CalendarGateway,
        timezone: str = "UTC",
        fetch_timeout_seconds: float | None = None,
    ) -> None:
        self._calendar_gateway = calendar_gateway
        self._timezone = timezone
        self._fetch_timeout_seconds = fetch_timeout_seconds

    def build_range(self, day: date, start_time: str, end_time: str) -> TimeRange:
        """
        Combine a calendar day and two ``HH:MM`` strings into a datetime range.

        Raises:
            InvalidRequestError: On malformed times or when start is not before end
        """
        start_hour, start_minute = parse_time_of_day(start_time)
        end_hour, end_minute = parse_time_of_day(end_time)

        if (start_hour, start_minute) >= (end_hour, end_minute):
            raise InvalidRequestError(
                f"Start time {start_time} must be before end time {end_time}"
            )

        return TimeRange(
            start=self._at(day, start_hour, start_minute),
            end=self._at(day, end_hour, end_minute),
        )

    async def check(
        self,
        participant_id: str,
        day: date,
        start_time: str,
        end_time: str,
    ) -> ConflictResult:
        """
        Check a participant's calendar for events overlapping the slot.

        Args:
            participant_id: Participant whose calendar is checked
            day: Calendar day of the proposed slot
            start_time: Slot start as ``HH:MM``
            end_time: Slot end as ``HH:MM``

        Returns:
            ConflictResult listing the overlapping events verbatim
        """
        time_range = self.build_range(day, start_time, end_time)

        try:
            query = self._query_events(participant_id, time_range)
            if self._fetch_timeout_seconds is not None:
                return await asyncio.wait_for(query, timeout=self._fetch_timeout_seconds)
            return await query

        except Exception as exc:
            logger.warning(
                "Conflict check failed for participant %s, reporting no conflicts: %s",
                participant_id,
                exc,
            )
            return ConflictResult.no_conflicts()

    async def _query_events(
        self,
        participant_id: str,
        time_range: TimeRange,
    ) -> ConflictResult:
        if not await self._calendar_gateway.is_connected(participant_id):
            return ConflictResult.no_conflicts()

        calendar_id = (
            await self._calendar_gateway.get_primary_calendar_id(participant_id)
            or PRIMARY_CALENDAR_ALIAS
        )

        events = await self._calendar_gateway.get_events(
            participant_id,
            calendar_id,
            time_range.start,
            time_range.end,
        )

        return ConflictResult.from_events(events)

    def _at(self, day: date, hour: int, minute: int) -> DateTime:
        return pendulum.datetime(
            day.year, day.month, day.day, hour, minute, tz=self._timezone
        )
