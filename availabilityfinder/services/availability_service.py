"""
Application service for finding shared meeting slots.

The service coordinates fetching busy times through the calendar gateway and
delegates merging, slot finding and ranking to the domain layer. Depending on
a protocol keeps the provider swappable and the service easy to test.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Mapping, Tuple

from pendulum import DateTime

from ..config import EngineConfig
from ..domain.default_slots import DefaultSlotGenerator
from ..domain.free_slot_finder import FreeSlotFinder
from ..domain.interval_merger import IntervalMerger
from ..domain.models import (
    AvailabilityRequest,
    ConflictResult,
    FreeSlot,
    Preferences,
    RankedSlot,
    TimeRange,
)
from ..domain.slot_ranker import SlotRanker
from .busy_time_aggregator import BusyTimeAggregator, BusyTimeReport
from .calendar_gateway import CalendarGateway
from .conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AvailabilityResult:
    """Best slots found for a request, with how much calendar data backed them."""
    slots: Tuple[RankedSlot, ...]
    participants_requested: int
    participants_with_calendar_data: int
    window: TimeRange
    fetch_report: BusyTimeReport

    @property
    def used_fallback(self) -> bool:
        """True when the slots are canonical suggestions, not real free time."""
        return self.participants_with_calendar_data == 0


class AvailabilityService:
    """
    Orchestrates busy-time retrieval and slot calculation.

    Flow: aggregate -> merge -> find free slots -> rank. When nobody has
    calendar data, canonical default slots are ranked instead.
    """

    def __init__(
        self,
        calendar_gateway: CalendarGateway,
        config: EngineConfig | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        working_hours = self.config.get_working_hours()

        self._aggregator = BusyTimeAggregator(
            calendar_gateway,
            fetch_timeout_seconds=self.config.fetch_timeout_seconds,
        )
        self._merger = IntervalMerger()
        self._finder = FreeSlotFinder(working_hours=working_hours)
        self._ranker = SlotRanker(max_results=self.config.max_results)
        self._default_slots = DefaultSlotGenerator(working_hours=working_hours)
        self._conflict_checker = ConflictChecker(
            calendar_gateway,
            timezone=self.config.timezone,
            fetch_timeout_seconds=self.config.fetch_timeout_seconds,
        )

    def build_request(
        self,
        participant_ids: Iterable[str],
        window_start: DateTime,
        window_end: DateTime,
        min_duration_minutes: int | None = None,
        preferences: Preferences | Mapping[str, Any] | None = None,
    ) -> AvailabilityRequest:
        """
        Build a validated request, filling in configured defaults.

        ``preferences`` may be a loose mapping as received from a client.

        Raises:
            InvalidRequestError: If the request is invalid
        """
        if not isinstance(preferences, Preferences):
            preferences = Preferences.from_mapping(preferences)

        return AvailabilityRequest(
            participant_ids=(
                participant_ids if isinstance(participant_ids, str) else tuple(participant_ids)
            ),
            window_start=window_start,
            window_end=window_end,
            min_duration_minutes=(
                self.config.default_min_duration_minutes
                if min_duration_minutes is None
                else min_duration_minutes
            ),
            preferences=preferences,
        )

    async def find_availability(self, request: AvailabilityRequest) -> AvailabilityResult:
        """
        Find the best common free slots for every participant in the request.

        Participants whose calendar cannot be read are left out of the merge;
        the returned fetch report says who they were.
        """
        window = request.window
        report = await self._aggregator.collect(request.participant_ids, window)

        if report.participants_with_data == 0:
            logger.info(
                "No calendar data for any of %d participant(s), offering default slots",
                len(request.participant_ids),
            )
            candidates = self._default_slots.generate(window, request.min_duration_minutes)
        else:
            candidates = self.calculate_free_slots(
                busy_intervals=report.busy_intervals,
                window=window,
                min_duration_minutes=request.min_duration_minutes,
            )

        slots = self._ranker.top(candidates, request.preferences)

        return AvailabilityResult(
            slots=tuple(slots),
            participants_requested=len(request.participant_ids),
            participants_with_calendar_data=report.participants_with_data,
            window=window,
            fetch_report=report,
        )

    def calculate_free_slots(
        self,
        *,
        busy_intervals: List[TimeRange],
        window: TimeRange,
        min_duration_minutes: int,
    ) -> List[FreeSlot]:
        """Merge pooled busy time and compute the free slots around it."""
        timeline = self._merger.merge(busy_intervals)
        return self._finder.find_free_slots(
            busy_timeline=timeline,
            window=window,
            min_duration_minutes=min_duration_minutes,
        )

    async def check_conflicts(
        self,
        participant_id: str,
        day: date,
        start_time: str,
        end_time: str,
    ) -> ConflictResult:
        """Report calendar events overlapping ``start_time``-``end_time`` on ``day``."""
        return await self._conflict_checker.check(participant_id, day, start_time, end_time)
