"""
Merging of busy intervals pooled from several participants.
"""

from typing import Iterable, List

from .models import BusyInterval, TimeRange


class IntervalMerger:
    """
    Collapses overlapping busy intervals into a sorted, non-overlapping timeline.

    Intervals are treated as closed: one that starts exactly where another
    ends is merged with it, so no zero-length gap is left at the boundary.

    Example:
    Busy: [09:30-11:00, 09:00-10:00, 11:00-12:00, 14:00-15:00]
    Result: [09:00-12:00, 14:00-15:00]
    """

    def merge(self, intervals: Iterable[TimeRange]) -> List[BusyInterval]:
        """
        Merge a multiset of busy intervals.

        Args:
            intervals: Busy ranges in any order, possibly overlapping

        Returns:
            Busy intervals sorted by start, pairwise disjoint and not touching
        """
        sorted_ranges = sorted(intervals, key=lambda r: (r.start, r.end))

        if not sorted_ranges:
            return []

        first = sorted_ranges[0]
        merged: List[BusyInterval] = [BusyInterval(start=first.start, end=first.end)]

        for current in sorted_ranges[1:]:
            last = merged[-1]

            if current.start <= last.end:
                # Nested ranges leave the end untouched
                if current.end > last.end:
                    merged[-1] = BusyInterval(start=last.start, end=current.end)
            else:
                merged.append(BusyInterval(start=current.start, end=current.end))

        return merged
