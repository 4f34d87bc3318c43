"""
Fallback slot suggestions for when no participant has calendar data.
"""

import logging
from datetime import time
from typing import List, Tuple

from .models import FreeSlot, TimeRange, WorkingHours

logger = logging.getLogger(__name__)

# Morning, afternoon and evening offers
CANONICAL_WINDOWS: Tuple[Tuple[time, time], ...] = (
    (time(10, 0), time(12, 0)),
    (time(14, 0), time(17, 0)),
    (time(18, 0), time(20, 0)),
)


class DefaultSlotGenerator:
    """
    Produces canonical candidate slots for every day of a window.

    The offers do not reflect anyone's real calendar; callers learn this from
    ``participants_with_calendar_data == 0`` on the result.
    """

    def __init__(self, working_hours: WorkingHours):
        self.working_hours = working_hours

    @staticmethod
    def longest_window_minutes() -> int:
        return max(
            (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
            for start, end in CANONICAL_WINDOWS
        )

    def generate(self, window: TimeRange, min_duration_minutes: int) -> List[FreeSlot]:
        """
        Generate the canonical slots, clipped to the window.

        Slots shorter than the minimum duration are dropped, so a minimum
        above the longest canonical window yields no slots at all.
        """
        if min_duration_minutes > self.longest_window_minutes():
            logger.warning(
                "No default slots can satisfy a %d minute minimum (longest offer is %d minutes)",
                min_duration_minutes,
                self.longest_window_minutes(),
            )
            return []

        slots: List[FreeSlot] = []

        for day in self.working_hours.iter_days(window):
            if not self.working_hours.is_working_day(day):
                continue

            for start_time, end_time in CANONICAL_WINDOWS:
                candidate = TimeRange(
                    start=day.set(hour=start_time.hour, minute=start_time.minute),
                    end=day.set(hour=end_time.hour, minute=end_time.minute),
                )
                clipped = candidate.intersect(window)

                if clipped and clipped.duration_minutes() >= min_duration_minutes:
                    tz = self.working_hours.timezone
                    slots.append(FreeSlot(
                        start=clipped.start.in_timezone(tz),
                        end=clipped.end.in_timezone(tz),
                    ))

        return slots
