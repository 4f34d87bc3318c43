"""
Domain models for busy time, free slots and availability requests.
"""

from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import Any, FrozenSet, Iterator, List, Mapping, Optional, Tuple

from pendulum import DateTime

from .exceptions import InvalidRequestError

MIN_DURATION_MINUTES = 15
WEEKEND_DAYS = frozenset({5, 6})  # Saturday, Sunday


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() // 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def intersect(self, other: "TimeRange") -> "TimeRange | None":
        """
        Calculate the intersection of two time ranges.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        start = max(self.start, other.start)
        end = min(self.end, other.end)

        return TimeRange(start=start, end=end)

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class BusyInterval(TimeRange):
    """A time range during which a participant is known to be unavailable."""


@dataclass(frozen=True)
class FreeSlot(TimeRange):
    """
    A candidate meeting range inside one day's working hours that overlaps
    no busy interval.
    """


@dataclass(frozen=True)
class RankedSlot(FreeSlot):
    """A free slot with its preference score and the reasons behind it."""
    score: int = 0
    reasons: Tuple[str, ...] = ()


@dataclass
class WorkingHours:
    """
    Configuration for working hours.

    All datetimes are interpreted in a single reference timezone.
    """
    start_time: time = time(9, 0)
    end_time: time = time(21, 0)
    exclude_weekdays: List[int] = field(default_factory=list)  # 0=Monday, 6=Sunday
    timezone: str = "UTC"

    def __post_init__(self):
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Working hours must end after they start, got {self.start_time}-{self.end_time}"
            )

    def is_working_day(self, dt: DateTime) -> bool:
        """Check if a given datetime falls on a working day."""
        return dt.in_timezone(self.timezone).day_of_week not in self.exclude_weekdays

    def get_working_hours_for_day(self, date: DateTime) -> TimeRange | None:
        """
        Get the working hours range for a specific day.
        Returns None if it's not a working day.
        """
        if not self.is_working_day(date):
            return None

        day = date.in_timezone(self.timezone)
        start = day.set(
            hour=self.start_time.hour,
            minute=self.start_time.minute,
            second=0,
            microsecond=0
        )
        end = day.set(
            hour=self.end_time.hour,
            minute=self.end_time.minute,
            second=0,
            microsecond=0
        )

        return TimeRange(start=start, end=end)

    def iter_days(self, window: TimeRange) -> Iterator[DateTime]:
        """Yield the start of every calendar day the window touches."""
        day = window.start.in_timezone(self.timezone).start_of("day")
        while day < window.end:
            yield day
            day = day.add(days=1)


class TimeOfDay(str, Enum):
    """Coarse parts of the day a participant may prefer to meet in."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NONE = "none"

    @property
    def hours(self) -> Tuple[int, int] | None:
        """Start-hour window ``[from, to)`` for this part of the day."""
        return _TIME_OF_DAY_HOURS.get(self)


_TIME_OF_DAY_HOURS = {
    TimeOfDay.MORNING: (9, 12),
    TimeOfDay.AFTERNOON: (12, 17),
    TimeOfDay.EVENING: (17, 21),
}

_PREFERENCE_ALIASES = {
    "preferredTimeOfDay": "preferred_time_of_day",
    "preferWeekends": "prefer_weekends",
    "avoidEarlyMorning": "avoid_early_morning",
    "avoidLateNight": "avoid_late_night",
    "preferredDaysOfWeek": "preferred_days_of_week",
    "preferredDays": "preferred_days_of_week",
}


def sunday_based_weekday(dt: DateTime) -> int:
    """Day of week counted from Sunday (0) to Saturday (6)."""
    return (dt.day_of_week + 1) % 7


def _as_day_set(value: Any) -> FrozenSet[Any]:
    if not isinstance(value, (str, bytes)):
        try:
            return frozenset(value)
        except TypeError:
            pass
    raise InvalidRequestError(
        f"preferred_days_of_week must be a collection of days, got {value!r}"
    )


@dataclass(frozen=True)
class Preferences:
    """
    Soft scheduling preferences used to rank free slots.

    ``preferred_days_of_week`` counts from Sunday: 0=Sunday ... 6=Saturday,
    as calendar clients send it. See ``sunday_based_weekday``.
    """
    preferred_time_of_day: TimeOfDay = TimeOfDay.NONE
    prefer_weekends: bool = False
    avoid_early_morning: bool = True
    avoid_late_night: bool = True
    preferred_days_of_week: FrozenSet[int] = frozenset()

    def __post_init__(self):
        try:
            time_of_day = TimeOfDay(self.preferred_time_of_day)
        except ValueError as exc:
            raise InvalidRequestError(
                f"Unknown time of day: {self.preferred_time_of_day!r}"
            ) from exc
        object.__setattr__(self, "preferred_time_of_day", time_of_day)

        days = _as_day_set(self.preferred_days_of_week)
        invalid_days = sorted(
            (day for day in days
             if isinstance(day, bool) or not isinstance(day, int) or day not in range(7)),
            key=repr,
        )
        if invalid_days:
            raise InvalidRequestError(
                f"preferred_days_of_week must be whole numbers between 0 and 6, got {invalid_days}"
            )
        object.__setattr__(self, "preferred_days_of_week", days)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Preferences":
        """
        Build preferences from a loose mapping (camelCase or snake_case keys).

        Missing or null entries take their documented defaults.

        Raises:
            InvalidRequestError: On unknown keys or badly typed values
        """
        if not data:
            return cls()

        resolved = {}
        for key, value in data.items():
            name = _PREFERENCE_ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise InvalidRequestError(f"Unknown preference: '{key}'")
            if value is None:
                continue
            if name in ("prefer_weekends", "avoid_early_morning", "avoid_late_night") \
                    and not isinstance(value, bool):
                raise InvalidRequestError(f"Preference '{key}' must be a boolean")
            resolved[name] = value

        return cls(**resolved)


@dataclass(frozen=True)
class AvailabilityRequest:
    """
    A request to find shared free time.

    Validation happens on construction so a bad request never reaches a
    calendar provider.
    """
    participant_ids: Tuple[str, ...]
    window_start: DateTime
    window_end: DateTime
    min_duration_minutes: int = 60
    preferences: Preferences = field(default_factory=Preferences)

    def __post_init__(self):
        if isinstance(self.participant_ids, str):
            raise InvalidRequestError(
                f"participant_ids must be a collection of ids, got {self.participant_ids!r}"
            )
        # Preserve order while removing duplicates
        participants = tuple(dict.fromkeys(self.participant_ids))
        if not participants:
            raise InvalidRequestError("No participants provided.")
        object.__setattr__(self, "participant_ids", participants)

        if self.window_start >= self.window_end:
            raise InvalidRequestError(
                f"Window start {self.window_start} must be before window end {self.window_end}"
            )
        if self.min_duration_minutes < MIN_DURATION_MINUTES:
            raise InvalidRequestError(
                f"min_duration_minutes must be at least {MIN_DURATION_MINUTES}, "
                f"got {self.min_duration_minutes}"
            )
        if self.preferences is None:
            object.__setattr__(self, "preferences", Preferences())

    @property
    def window(self) -> TimeRange:
        return TimeRange(start=self.window_start, end=self.window_end)


@dataclass(frozen=True)
class CalendarEvent:
    """An event as reported by a calendar provider."""
    start: DateTime
    end: DateTime
    id: Optional[str] = None
    label: Optional[str] = None


@dataclass(frozen=True)
class ConflictResult:
    """Outcome of a single-participant conflict check."""
    has_conflict: bool
    conflicts: Tuple[CalendarEvent, ...] = ()

    @classmethod
    def no_conflicts(cls) -> "ConflictResult":
        return cls(has_conflict=False)

    @classmethod
    def from_events(cls, events: List[CalendarEvent]) -> "ConflictResult":
        conflicts = tuple(events)
        return cls(has_conflict=bool(conflicts), conflicts=conflicts)
