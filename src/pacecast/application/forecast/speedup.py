"""
Speedup decomposition: how many days per level are lost to missed review
windows and how many to wrong answers.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable
from datetime import datetime

from pacecast.domain.constants import (
    AVG_MISTAKE_COST_HOURS,
    BLEND_FACTOR,
    CEILING_LEVEL,
    EST_REVIEWS_PER_LEVEL,
    LEECH_THRESHOLD,
)
from pacecast.domain.forecast.models import (
    PaceStatistics,
    ReviewOutcomeCounters,
    SpeedupDecomposition,
)

from .ladder import LadderSimulator
from .level_forecast import forecast, levels_remaining


class SpeedupCalculator:
    """
    Compares actual pace against the simulated window-schedule pace and
    against review accuracy.

    Tunables:
        avg_mistake_cost_hours: Delay one wrong answer adds to an item.
        est_reviews_per_level: Reviews on the critical path of one level.
        blend_factor: Share of the smaller lever still gained when both
            levers are pulled together. Window savings partly subsume
            mistake savings, so the two are not simply added.
        leech_threshold: Cumulative wrong answers that make an item a leech.
    """

    def __init__(
        self,
        simulator: LadderSimulator | None = None,
        avg_mistake_cost_hours: float = AVG_MISTAKE_COST_HOURS,
        est_reviews_per_level: int = EST_REVIEWS_PER_LEVEL,
        blend_factor: float = BLEND_FACTOR,
        leech_threshold: int = LEECH_THRESHOLD,
    ):
        self.simulator = simulator or LadderSimulator()
        self.avg_mistake_cost_hours = avg_mistake_cost_hours
        self.est_reviews_per_level = est_reviews_per_level
        self.blend_factor = blend_factor
        self.leech_threshold = leech_threshold

    def ideal_pace(self, now: datetime) -> float:
        """Simulated days per level when the first lesson is done at the next window."""
        first_lesson = self.simulator.scheduler.next_window(now)
        return self.simulator.simulate_level_critical_path(first_lesson)

    def decompose(
        self,
        stats: PaceStatistics,
        outcomes: Iterable[ReviewOutcomeCounters],
        current_level: int,
        now: datetime,
        ceiling_level: int = CEILING_LEVEL,
    ) -> SpeedupDecomposition:
        outcomes = list(outcomes)
        correct = sum(o.total_correct for o in outcomes)
        incorrect = sum(o.total_incorrect for o in outcomes)
        total = correct + incorrect

        ideal = self.ideal_pace(now)
        window_lost = max(0.0, stats.median - ideal)
        mistake_lost = self._mistake_days_per_level(incorrect, total)
        per_level_saving = self._blend(window_lost, mistake_lost)

        remaining = levels_remaining(current_level, ceiling_level)
        # Never slower than the current pace, never faster than the ideal schedule
        optimized_pace = min(stats.median, max(ideal, stats.median - per_level_saving))

        return SpeedupDecomposition(
            ideal_pace_days=ideal,
            current_pace_days=stats.median,
            window_lost_per_level=window_lost,
            mistake_lost_per_level=mistake_lost,
            combined_saving_days=remaining * per_level_saving,
            accuracy=self._accuracy(correct, total),
            total_answers=total,
            total_incorrect=incorrect,
            leech_count=sum(1 for o in outcomes if o.is_leech(self.leech_threshold)),
            levels_remaining=remaining,
            current_pace_date=forecast(stats.median, remaining, now),
            windows_only_date=forecast(ideal, remaining, now),
            optimized_date=forecast(optimized_pace, remaining, now),
        )

    def _accuracy(self, correct: int, total: int) -> float:
        """Percent correct; 100 when nothing has been answered yet."""
        if total == 0:
            return 100.0
        return correct / total * 100

    def _mistake_days_per_level(self, incorrect: int, total: int) -> float:
        """
        Extra days per level from wrong answers.

        Each wrong answer on a critical-path review costs roughly one average
        interval before the item is seen again.
        """
        if total == 0:
            return 0.0
        incorrect_rate = incorrect / total
        extra_hours = incorrect_rate * self.est_reviews_per_level * self.avg_mistake_cost_hours
        return extra_hours / 24

    def _blend(self, window_lost: float, mistake_lost: float) -> float:
        big = max(window_lost, mistake_lost)
        small = min(window_lost, mistake_lost)
        return big + small * self.blend_factor
