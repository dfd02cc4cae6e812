"""
Pace calculator for summarizing per-level durations.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable

from pacecast.domain.constants import (
    FAST_PERCENTILE,
    MIN_COMPLETED_LEVELS,
    RECENT_WINDOW,
    SLOW_PERCENTILE,
)
from pacecast.domain.forecast.models import LevelAttempt, PaceStatistics

from .run_segmentation import RunSegmentationPolicy, StartDatePolicy


class PaceCalculator:
    """
    Derives PaceStatistics from a learner's level attempts.

    Stateless and side-effect free. The run segmentation policy is
    swappable without touching the statistics.
    """

    def __init__(self, policy: RunSegmentationPolicy | None = None):
        self.policy = policy or StartDatePolicy()

    def compute_stats(
        self, attempts: Iterable[LevelAttempt], current_level: int
    ) -> PaceStatistics | None:
        """
        Summarize completed levels of the current run.

        Returns:
            PaceStatistics, or None when fewer than two levels of the current
            run have been completed.
        """
        completed = self._completed_in_run(attempts, current_level)
        if len(completed) < MIN_COMPLETED_LEVELS:
            return None

        durations = [a.duration_days for a in completed]
        ordered = sorted(durations)
        n = len(ordered)

        # Floor-index ranks, no interpolation: index 0 is the minimum, n - 1 the maximum.
        # fast is sorted[floor(0.25 n)], so [5, 7, 7, 9, 20] gives 7, not 5.
        median = ordered[n // 2]
        fast = ordered[int(n * FAST_PERCENTILE)]
        slow = ordered[int(n * SLOW_PERCENTILE)]

        recent = durations[-RECENT_WINDOW:]

        return PaceStatistics(
            average=sum(durations) / n,
            median=median,
            fast=fast,
            slow=slow,
            recent=sum(recent) / len(recent),
            durations=tuple(durations),
            sorted_durations=tuple(ordered),
            completed=tuple(completed),
        )

    def _completed_in_run(
        self, attempts: Iterable[LevelAttempt], current_level: int
    ) -> list[LevelAttempt]:
        run = self.policy.current_run(attempts)
        done = [a for a in run if a.is_completed and a.level < current_level]
        return sorted(done, key=lambda a: a.level)
