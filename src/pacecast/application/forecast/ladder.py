"""
Ladder simulation: how long an item takes to climb to mastery when every
review is done at the first window after it unlocks.
"""

from datetime import datetime, timedelta, timezone

from pacecast.domain.constants import MASTERY_STAGE, SRS_INTERVAL_HOURS

from .window_scheduler import WindowScheduler


def _add_elapsed(instant: datetime, delta: timedelta) -> datetime:
    """Add real elapsed time; plain `+` on a zoned datetime moves the wall clock instead."""
    if instant.tzinfo is None:
        return instant + delta
    return (instant.astimezone(timezone.utc) + delta).astimezone(instant.tzinfo)


def _elapsed_days(start: datetime, end: datetime) -> float:
    if start.tzinfo is not None and end.tzinfo is not None:
        start, end = start.astimezone(timezone.utc), end.astimezone(timezone.utc)
    return (end - start).total_seconds() / 86400.0


class LadderSimulator:
    """Replays the fixed SRS intervals through a WindowScheduler."""

    def __init__(
        self,
        scheduler: WindowScheduler | None = None,
        intervals_hours: tuple[int, ...] = SRS_INTERVAL_HOURS,
        mastery_stage: int = MASTERY_STAGE,
    ):
        if len(intervals_hours) < mastery_stage:
            raise ValueError(
                f"need {mastery_stage} intervals to reach mastery, got {len(intervals_hours)}"
            )
        self.scheduler = scheduler or WindowScheduler()
        self.intervals_hours = intervals_hours
        self.mastery_stage = mastery_stage

    def simulate_to_mastery(self, from_instant: datetime, from_stage: int) -> datetime:
        """
        Return the instant an item at `from_stage`, last reviewed at
        `from_instant`, reaches mastery.

        Takes exactly `mastery_stage - from_stage` window snaps; an item already
        at or past mastery returns `from_instant` unchanged.
        """
        review_at = from_instant
        stage = max(0, from_stage)
        while stage < self.mastery_stage:
            available_at = _add_elapsed(review_at, timedelta(hours=self.intervals_hours[stage]))
            review_at = self.scheduler.next_window(available_at)
            stage += 1
        return review_at

    def simulate_level_critical_path(self, lesson_time: datetime) -> float:
        """
        Days one level takes on a perfect window schedule.

        A foundational item learned at `lesson_time` climbs to mastery, which
        unlocks the dependent items; one of those then climbs to mastery.
        """
        foundational_done = self.simulate_to_mastery(lesson_time, 0)
        dependent_done = self.simulate_to_mastery(foundational_done, 0)
        return _elapsed_days(lesson_time, dependent_done)
