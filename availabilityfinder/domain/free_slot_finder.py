"""
Core business logic for turning a merged busy timeline into free slots.

Pure domain logic: no calendar access, no I/O.
"""

import logging
from typing import List, Sequence

from pendulum import DateTime

from .models import BusyInterval, FreeSlot, TimeRange, WorkingHours

logger = logging.getLogger(__name__)


class FreeSlotFinder:
    """
    Finds the free time left between busy intervals inside working hours.

    Algorithm:
    1. Build one working-hours block per calendar day of the window
    2. Clip each block to the window
    3. Walk a cursor through the busy intervals intersecting the block,
       emitting each gap before a busy interval
    4. Drop gaps shorter than the minimum duration

    Every day restarts the cursor at that day's working start, so busy
    intervals crossing midnight or covering whole days need no special case.
    """

    def __init__(self, working_hours: WorkingHours):
        self.working_hours = working_hours

    def find_free_slots(
        self,
        busy_timeline: Sequence[BusyInterval],
        window: TimeRange,
        min_duration_minutes: int
    ) -> List[FreeSlot]:
        """
        Find all free slots in the window.

        Args:
            busy_timeline: Merged busy intervals, sorted by start
            window: The requested search window
            min_duration_minutes: Minimum duration for a slot to be kept

        Returns:
            Chronological list of FreeSlot objects
        """
        slots: List[FreeSlot] = []
        first_relevant = 0

        for block in self._get_working_blocks(window):
            # Busy intervals are sorted and disjoint, so ends are sorted too
            while (
                first_relevant < len(busy_timeline)
                and busy_timeline[first_relevant].end <= block.start
            ):
                first_relevant += 1

            for gap in self._free_gaps_in_block(block, busy_timeline, first_relevant):
                if gap.duration_minutes() >= min_duration_minutes:
                    slots.append(gap)

        logger.debug(
            "Found %d free slot(s) of at least %d minutes in %s",
            len(slots),
            min_duration_minutes,
            window,
        )
        return slots

    def _get_working_blocks(self, window: TimeRange) -> List[TimeRange]:
        """
        Generate all working hour blocks within the window, one per working day.
        """
        blocks: List[TimeRange] = []

        for day in self.working_hours.iter_days(window):
            working_hours = self.working_hours.get_working_hours_for_day(day)

            if working_hours:
                clipped = working_hours.intersect(window)
                if clipped:
                    blocks.append(clipped)

        return blocks

    def _free_gaps_in_block(
        self,
        block: TimeRange,
        busy_timeline: Sequence[BusyInterval],
        first_relevant: int
    ) -> List[FreeSlot]:
        """
        Subtract busy times from a working block, yielding free slots.

        Example:
        Working: 09:00 - 21:00
        Busy: [10:00-11:00, 14:00-15:00]
        Result: [09:00-10:00, 11:00-14:00, 15:00-21:00]
        """
        gaps: List[FreeSlot] = []
        cursor = block.start

        for busy in busy_timeline[first_relevant:]:
            if busy.start >= block.end:
                break

            if cursor < busy.start:
                gaps.append(self._slot(cursor, busy.start))

            cursor = max(cursor, busy.end)
            if cursor >= block.end:
                break

        if cursor < block.end:
            gaps.append(self._slot(cursor, block.end))

        return gaps

    def _slot(self, start: DateTime, end: DateTime) -> FreeSlot:
        tz = self.working_hours.timezone
        return FreeSlot(start=start.in_timezone(tz), end=end.in_timezone(tz))
