"""
Concurrent collection of busy time from every participant's calendar.

Each participant is fetched independently: a failure, a timeout or a missing
primary calendar only removes that participant from the merge and is recorded
in the returned report.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from ..domain.exceptions import CalendarNotFoundError
from ..domain.models import BusyInterval, TimeRange
from .calendar_gateway import CalendarGateway

logger = logging.getLogger(__name__)


class FetchStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOT_CONNECTED = "not_connected"


@dataclass(frozen=True)
class ParticipantFetch:
    """Outcome of fetching one participant's busy time."""
    participant_id: str
    status: FetchStatus
    busy_intervals: Tuple[BusyInterval, ...] = ()
    error: Optional[str] = None


@dataclass(frozen=True)
class BusyTimeReport:
    """Per-participant outcomes, in request order."""
    fetches: Tuple[ParticipantFetch, ...] = ()

    def _ids_with(self, status: FetchStatus) -> List[str]:
        return [f.participant_id for f in self.fetches if f.status is status]

    @property
    def succeeded(self) -> List[str]:
        return self._ids_with(FetchStatus.SUCCEEDED)

    @property
    def failed(self) -> List[str]:
        return self._ids_with(FetchStatus.FAILED)

    @property
    def not_connected(self) -> List[str]:
        return self._ids_with(FetchStatus.NOT_CONNECTED)

    @property
    def participants_with_data(self) -> int:
        return len(self.succeeded)

    @property
    def busy_intervals(self) -> List[BusyInterval]:
        """All busy intervals of the successful participants, pooled."""
        return [
            interval
            for fetch in self.fetches
            if fetch.status is FetchStatus.SUCCEEDED
            for interval in fetch.busy_intervals
        ]


class BusyTimeAggregator:
    """
    Fetches busy intervals for many participants at once.

    No retries are attempted; cancelling the caller cancels pending fetches.
    """

    def __init__(
        self,
        calendar_gateway: CalendarGateway,
        fetch_timeout_seconds: float | None = None,
    ) -> None:
        self._calendar_gateway = calendar_gateway
        self._fetch_timeout_seconds = fetch_timeout_seconds

    async def collect(
        self,
        participant_ids: Sequence[str],
        window: TimeRange,
    ) -> BusyTimeReport:
        """
        Fetch every participant's busy time concurrently.

        Args:
            participant_ids: Participants to query
            window: Time window to fetch busy time for

        Returns:
            BusyTimeReport with one entry per participant
        """
        fetches = await asyncio.gather(
            *(self._fetch_participant(pid, window) for pid in participant_ids)
        )
        report = BusyTimeReport(fetches=tuple(fetches))

        logger.debug(
            "Busy time collected: %d succeeded, %d failed, %d not connected",
            len(report.succeeded),
            len(report.failed),
            len(report.not_connected),
        )
        return report

    async def _fetch_participant(
        self,
        participant_id: str,
        window: TimeRange,
    ) -> ParticipantFetch:
        try:
            fetch = self._query_gateway(participant_id, window)
            if self._fetch_timeout_seconds is not None:
                return await asyncio.wait_for(fetch, timeout=self._fetch_timeout_seconds)
            return await fetch

        except asyncio.TimeoutError:
            logger.warning(
                "Timed out after %ss fetching busy times for participant %s",
                self._fetch_timeout_seconds,
                participant_id,
            )
            return ParticipantFetch(
                participant_id=participant_id,
                status=FetchStatus.FAILED,
                error=f"timed out after {self._fetch_timeout_seconds}s",
            )

        except Exception as exc:
            logger.warning(
                "Could not fetch busy times for participant %s: %s",
                participant_id,
                exc,
            )
            return ParticipantFetch(
                participant_id=participant_id,
                status=FetchStatus.FAILED,
                error=str(exc) or type(exc).__name__,
            )

    async def _query_gateway(
        self,
        participant_id: str,
        window: TimeRange,
    ) -> ParticipantFetch:
        if not await self._calendar_gateway.is_connected(participant_id):
            return ParticipantFetch(
                participant_id=participant_id,
                status=FetchStatus.NOT_CONNECTED,
            )

        calendar_id = await self._calendar_gateway.get_primary_calendar_id(participant_id)
        if not calendar_id:
            raise CalendarNotFoundError(participant_id)

        busy = await self._calendar_gateway.get_busy_intervals(
            participant_id,
            calendar_id,
            window.start,
            window.end,
        )

        return ParticipantFetch(
            participant_id=participant_id,
            status=FetchStatus.SUCCEEDED,
            busy_intervals=tuple(busy),
        )
