"""
Preference scoring for candidate free slots.
"""

from typing import Iterable, List

from .models import (
    WEEKEND_DAYS,
    FreeSlot,
    Preferences,
    RankedSlot,
    TimeOfDay,
    sunday_based_weekday,
)

BASE_SCORE = 50
DEFAULT_MAX_RESULTS = 5

PREFERRED_TIME_BONUS = 20
PRIME_AFTERNOON_BONUS = 10
EARLY_MORNING_PENALTY = 30
LATE_NIGHT_PENALTY = 30
WEEKEND_BONUS = 15
WEEKDAY_BONUS = 5
PREFERRED_DAY_BONUS = 15
EXTENDED_DURATION_BONUS = 10

PRIME_AFTERNOON_HOURS = (14, 18)
EARLY_MORNING_BEFORE_HOUR = 9
LATE_NIGHT_FROM_HOUR = 21
EXTENDED_DURATION_MINUTES = 180

_TIME_OF_DAY_REASONS = {
    TimeOfDay.MORNING: "Morning time (preferred)",
    TimeOfDay.AFTERNOON: "Afternoon time (preferred)",
    TimeOfDay.EVENING: "Evening time (preferred)",
}


class SlotRanker:
    """
    Scores free slots against soft preferences and orders them best first.

    The score is a pure function of the slot and the preferences; the
    reasons list records every term that applied, in evaluation order.
    """

    def __init__(self, max_results: int = DEFAULT_MAX_RESULTS):
        if max_results < 1:
            raise ValueError(f"max_results must be positive, got {max_results}")
        self.max_results = max_results

    def score_slot(self, slot: FreeSlot, preferences: Preferences) -> RankedSlot:
        """Score a single slot."""
        score = BASE_SCORE
        reasons: List[str] = []

        hour = slot.start.hour
        is_weekend = slot.start.day_of_week in WEEKEND_DAYS

        preferred_hours = preferences.preferred_time_of_day.hours
        if preferred_hours and preferred_hours[0] <= hour < preferred_hours[1]:
            score += PREFERRED_TIME_BONUS
            reasons.append(_TIME_OF_DAY_REASONS[preferences.preferred_time_of_day])

        if (
            preferences.preferred_time_of_day is TimeOfDay.NONE
            and PRIME_AFTERNOON_HOURS[0] <= hour < PRIME_AFTERNOON_HOURS[1]
        ):
            score += PRIME_AFTERNOON_BONUS
            reasons.append("Prime afternoon time")

        if preferences.avoid_early_morning and hour < EARLY_MORNING_BEFORE_HOUR:
            score -= EARLY_MORNING_PENALTY
            reasons.append("Early morning (less convenient)")

        if preferences.avoid_late_night and hour >= LATE_NIGHT_FROM_HOUR:
            score -= LATE_NIGHT_PENALTY
            reasons.append("Late evening (less convenient)")

        if preferences.prefer_weekends and is_weekend:
            score += WEEKEND_BONUS
            reasons.append("Weekend (preferred)")
        elif not preferences.prefer_weekends and not is_weekend:
            score += WEEKDAY_BONUS
            reasons.append("Weekday")

        if sunday_based_weekday(slot.start) in preferences.preferred_days_of_week:
            score += PREFERRED_DAY_BONUS
            reasons.append("Preferred day")

        if slot.duration_minutes() >= EXTENDED_DURATION_MINUTES:
            score += EXTENDED_DURATION_BONUS
            reasons.append("Extended availability")

        return RankedSlot(
            start=slot.start,
            end=slot.end,
            score=score,
            reasons=tuple(reasons),
        )

    def rank(self, slots: Iterable[FreeSlot], preferences: Preferences) -> List[RankedSlot]:
        """
        Score every slot and sort by score descending.

        Ties go to the earlier slot.
        """
        ranked = [self.score_slot(slot, preferences) for slot in slots]
        return sorted(ranked, key=lambda s: (-s.score, s.start))

    def top(self, slots: Iterable[FreeSlot], preferences: Preferences) -> List[RankedSlot]:
        """Return at most ``max_results`` of the best ranked slots."""
        return self.rank(slots, preferences)[:self.max_results]
