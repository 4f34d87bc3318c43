"""
In-memory calendar gateway for tests and local runs without a provider.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from pendulum import DateTime

from ..domain.exceptions import CalendarGatewayError
from ..domain.models import BusyInterval, CalendarEvent


@dataclass
class CalendarAccount:
    """A participant's linked calendar as the fake provider sees it."""
    participant_id: str
    connected: bool = True
    primary_calendar_id: Optional[str] = "primary"
    events: List[CalendarEvent] = field(default_factory=list)


class InMemoryCalendarGateway:
    """
    Gateway that serves calendar data from memory.

    Busy intervals are derived from the stored events. Participants listed in
    ``failing`` raise ``CalendarGatewayError`` on every data call, which
    mimics an expired token or a network outage.
    """

    def __init__(
        self,
        accounts: Iterable[CalendarAccount] = (),
        failing: Iterable[str] = (),
    ) -> None:
        self._accounts: Dict[str, CalendarAccount] = {
            account.participant_id: account for account in accounts
        }
        self._failing = set(failing)
        self.calls: List[tuple] = []

    def add_account(self, account: CalendarAccount) -> None:
        self._accounts[account.participant_id] = account

    def fail_for(self, participant_id: str) -> None:
        self._failing.add(participant_id)

    async def is_connected(self, participant_id: str) -> bool:
        self.calls.append(("is_connected", participant_id))
        account = self._accounts.get(participant_id)
        return bool(account and account.connected)

    async def get_primary_calendar_id(self, participant_id: str) -> Optional[str]:
        self.calls.append(("get_primary_calendar_id", participant_id))
        account = self._accounts.get(participant_id)
        return account.primary_calendar_id if account else None

    async def get_busy_intervals(
        self,
        participant_id: str,
        calendar_id: str,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[BusyInterval]:
        self.calls.append(("get_busy_intervals", participant_id))
        return [
            BusyInterval(start=event.start, end=event.end)
            for event in self._events_in_window(participant_id, calendar_id, window_start, window_end)
            if event.start < event.end
        ]

    async def get_events(
        self,
        participant_id: str,
        calendar_id: str,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[CalendarEvent]:
        self.calls.append(("get_events", participant_id))
        return self._events_in_window(participant_id, calendar_id, window_start, window_end)

    def _events_in_window(
        self,
        participant_id: str,
        calendar_id: str,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[CalendarEvent]:
        if participant_id in self._failing:
            raise CalendarGatewayError(
                f"Failed to fetch calendar data for participant '{participant_id}'"
            )

        account = self._accounts.get(participant_id)
        if account is None or not account.connected:
            raise CalendarGatewayError(f"Participant '{participant_id}' has no linked calendar")

        if calendar_id not in (account.primary_calendar_id, "primary"):
            raise CalendarGatewayError(f"Unknown calendar '{calendar_id}'")

        # Keep events that overlap the requested window
        events = [
            event for event in account.events
            if event.start < window_end and event.end > window_start
        ]
        return sorted(events, key=lambda e: e.start)
