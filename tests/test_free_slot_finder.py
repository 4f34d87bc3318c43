"""
Tests for the free slot finder.
"""

from datetime import time

import pendulum

from availabilityfinder.domain.free_slot_finder import FreeSlotFinder
from availabilityfinder.domain.interval_merger import IntervalMerger
from availabilityfinder.domain.models import BusyInterval, TimeRange, WorkingHours

TZ = "Europe/Berlin"


def _at(value: str):
    return pendulum.parse(value, tz=TZ)


def _busy(start: str, end: str) -> BusyInterval:
    return BusyInterval(start=_at(start), end=_at(end))


def _window(start: str, end: str) -> TimeRange:
    return TimeRange(start=_at(start), end=_at(end))


def _spans(slots):
    return [(slot.start, slot.end) for slot in slots]


def _finder(**kwargs) -> FreeSlotFinder:
    return FreeSlotFinder(working_hours=WorkingHours(timezone=TZ, **kwargs))


class TestFreeSlotFinder:
    """Tests for FreeSlotFinder."""

    def test_no_busy_times_yields_full_working_day(self):
        slots = _finder().find_free_slots(
            busy_timeline=[],
            window=_window("2024-11-25 00:00", "2024-11-25 23:59"),
            min_duration_minutes=30,
        )

        assert _spans(slots) == [(_at("2024-11-25 09:00"), _at("2024-11-25 21:00"))]
        assert slots[0].duration_minutes() == 720

    def test_gap_around_single_busy_interval(self):
        """One busy hour at noon splits the working day in two."""
        slots = _finder().find_free_slots(
            busy_timeline=[_busy("2024-11-25 12:00", "2024-11-25 13:00")],
            window=_window("2024-11-25 09:00", "2024-11-25 21:00"),
            min_duration_minutes=60,
        )

        assert _spans(slots) == [
            (_at("2024-11-25 09:00"), _at("2024-11-25 12:00")),
            (_at("2024-11-25 13:00"), _at("2024-11-25 21:00")),
        ]

    def test_fully_busy_first_day(self):
        """A day busy for all its working hours yields nothing; the next day is free."""
        slots = _finder().find_free_slots(
            busy_timeline=[_busy("2024-11-25 09:00", "2024-11-25 21:00")],
            window=_window("2024-11-25 00:00", "2024-11-26 23:59"),
            min_duration_minutes=60,
        )

        assert _spans(slots) == [(_at("2024-11-26 09:00"), _at("2024-11-26 21:00"))]

    def test_busy_interval_crossing_midnight(self):
        """Busy time running into the next morning pushes that day's first slot back."""
        slots = _finder().find_free_slots(
            busy_timeline=[_busy("2024-11-25 19:00", "2024-11-26 10:00")],
            window=_window("2024-11-25 00:00", "2024-11-26 23:59"),
            min_duration_minutes=60,
        )

        assert _spans(slots) == [
            (_at("2024-11-25 09:00"), _at("2024-11-25 19:00")),
            (_at("2024-11-26 10:00"), _at("2024-11-26 21:00")),
        ]

    def test_busy_interval_covering_several_days(self):
        slots = _finder().find_free_slots(
            busy_timeline=[_busy("2024-11-25 15:00", "2024-11-27 11:00")],
            window=_window("2024-11-25 00:00", "2024-11-28 00:00"),
            min_duration_minutes=60,
        )

        assert _spans(slots) == [
            (_at("2024-11-25 09:00"), _at("2024-11-25 15:00")),
            (_at("2024-11-27 11:00"), _at("2024-11-27 21:00")),
        ]

    def test_gap_shorter_than_minimum_is_dropped(self):
        """A 90 minute gap is not offered for a two hour meeting."""
        busy = [
            _busy("2024-11-25 09:00", "2024-11-25 12:00"),
            _busy("2024-11-25 13:30", "2024-11-25 21:00"),
        ]
        window = _window("2024-11-25 00:00", "2024-11-25 23:59")

        assert _finder().find_free_slots(busy, window, min_duration_minutes=120) == []

        slots = _finder().find_free_slots(busy, window, min_duration_minutes=90)
        assert _spans(slots) == [(_at("2024-11-25 12:00"), _at("2024-11-25 13:30"))]

    def test_window_clips_working_hours(self):
        """Slots never start before the window opens or end after it closes."""
        slots = _finder().find_free_slots(
            busy_timeline=[_busy("2024-11-25 16:00", "2024-11-25 17:00")],
            window=_window("2024-11-25 15:30", "2024-11-26 11:00"),
            min_duration_minutes=30,
        )

        assert _spans(slots) == [
            (_at("2024-11-25 15:30"), _at("2024-11-25 16:00")),
            (_at("2024-11-25 17:00"), _at("2024-11-25 21:00")),
            (_at("2024-11-26 09:00"), _at("2024-11-26 11:00")),
        ]

    def test_window_outside_working_hours_yields_nothing(self):
        slots = _finder().find_free_slots(
            busy_timeline=[],
            window=_window("2024-11-25 21:30", "2024-11-26 08:30"),
            min_duration_minutes=15,
        )

        assert slots == []

    def test_busy_outside_window_is_ignored(self):
        slots = _finder().find_free_slots(
            busy_timeline=[
                _busy("2024-11-24 10:00", "2024-11-24 12:00"),
                _busy("2024-11-26 10:00", "2024-11-26 12:00"),
            ],
            window=_window("2024-11-25 00:00", "2024-11-25 23:59"),
            min_duration_minutes=30,
        )

        assert _spans(slots) == [(_at("2024-11-25 09:00"), _at("2024-11-25 21:00"))]

    def test_excluded_weekdays_are_skipped(self):
        """Search from Friday to Monday with the weekend excluded."""
        slots = _finder(exclude_weekdays=[5, 6]).find_free_slots(
            busy_timeline=[],
            window=_window("2024-11-22 00:00", "2024-11-25 23:59"),
            min_duration_minutes=30,
        )

        assert [slot.start.day_of_week for slot in slots] == [4, 0]

    def test_custom_working_hours(self):
        finder = FreeSlotFinder(
            working_hours=WorkingHours(start_time=time(7, 0), end_time=time(10, 0), timezone=TZ)
        )

        slots = finder.find_free_slots(
            busy_timeline=[_busy("2024-11-25 08:00", "2024-11-25 08:30")],
            window=_window("2024-11-25 00:00", "2024-11-25 23:59"),
            min_duration_minutes=30,
        )

        assert _spans(slots) == [
            (_at("2024-11-25 07:00"), _at("2024-11-25 08:00")),
            (_at("2024-11-25 08:30"), _at("2024-11-25 10:00")),
        ]

    def test_slots_are_reported_in_reference_timezone(self):
        """Busy time given in UTC is placed on the reference timezone's clock."""
        busy = BusyInterval(
            start=pendulum.datetime(2024, 11, 25, 11, tz="UTC"),
            end=pendulum.datetime(2024, 11, 25, 12, tz="UTC"),
        )

        slots = _finder().find_free_slots(
            busy_timeline=[busy],
            window=_window("2024-11-25 00:00", "2024-11-25 23:59"),
            min_duration_minutes=60,
        )

        assert [slot.start.hour for slot in slots] == [9, 13]
        assert all(slot.start.timezone_name == TZ for slot in slots)

    def test_free_slots_never_overlap_busy_time(self):
        """Every slot lies inside one working day and outside every busy interval."""
        timeline = IntervalMerger().merge([
            _busy("2024-11-25 08:00", "2024-11-25 09:30"),
            _busy("2024-11-25 11:00", "2024-11-25 11:45"),
            _busy("2024-11-25 11:30", "2024-11-25 12:15"),
            _busy("2024-11-25 20:00", "2024-11-26 09:45"),
            _busy("2024-11-26 13:00", "2024-11-26 13:20"),
            _busy("2024-11-27 09:00", "2024-11-27 21:00"),
        ])

        slots = _finder().find_free_slots(
            busy_timeline=timeline,
            window=_window("2024-11-25 00:00", "2024-11-28 00:00"),
            min_duration_minutes=15,
        )

        assert slots
        for slot in slots:
            assert slot.start.date() == slot.end.date()
            assert slot.start.hour >= 9
            assert slot.end <= slot.start.set(hour=21, minute=0)
            assert slot.duration_minutes() >= 15
            assert not any(slot.overlaps(busy) for busy in timeline)
        assert slots == sorted(slots, key=lambda s: s.start)
