"""
Domain models for pace forecasting.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pacecast.domain.constants import LEECH_THRESHOLD


class ItemType(str, Enum):
    """
    Gating category of a review item.

    Dependent items unlock only once their foundational items reach mastery.
    Items of any other category never gate a level-up.
    """

    FOUNDATIONAL = "foundational"
    DEPENDENT = "dependent"
    OTHER = "other"

    @property
    def is_gating(self) -> bool:
        return self is not ItemType.OTHER


class PaceScenario(str, Enum):
    """Named pace figures a forecast can be evaluated against."""

    FAST = "fast"
    MEDIAN = "median"
    AVERAGE = "average"
    RECENT = "recent"
    SLOW = "slow"


@dataclass(frozen=True)
class LevelAttempt:
    """
    One pass through one level.

    Attributes:
        level: Level number (1-based).
        started_at: When the attempt began.
        passed_at: When the level was passed, None while in progress.
        abandoned_at: When the attempt was abandoned by a reset, if ever.
    """

    level: int
    started_at: datetime
    passed_at: datetime | None = None
    abandoned_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.passed_at is not None and self.abandoned_at is None

    @property
    def duration_days(self) -> float | None:
        if self.passed_at is None:
            return None
        return (self.passed_at - self.started_at).total_seconds() / 86400.0


@dataclass(frozen=True)
class ReviewItemState:
    """
    Current ladder position of one item.

    Attributes:
        item_type: Gating category.
        stage: Ladder index below mastery (0 = Apprentice 1).
        started_at: When the item entered the ladder; None if not yet started.
        available_at: When the next review unlocks; None means already available.
        mastered_at: When the item crossed the mastery threshold, if it has.
        item_id: Source identifier, for diagnostics only.
    """

    item_type: ItemType
    stage: int
    started_at: datetime | None = None
    available_at: datetime | None = None
    mastered_at: datetime | None = None
    item_id: int | None = None


@dataclass(frozen=True)
class ReviewOutcomeCounters:
    """Cumulative correct/incorrect tallies for one item's two question facets."""

    meaning_correct: int = 0
    meaning_incorrect: int = 0
    reading_correct: int = 0
    reading_incorrect: int = 0
    item_id: int | None = None

    @property
    def total_correct(self) -> int:
        return self.meaning_correct + self.reading_correct

    @property
    def total_incorrect(self) -> int:
        return self.meaning_incorrect + self.reading_incorrect

    @property
    def total_answers(self) -> int:
        return self.total_correct + self.total_incorrect

    def is_leech(self, threshold: int = LEECH_THRESHOLD) -> bool:
        return self.total_incorrect >= threshold


@dataclass(frozen=True)
class PaceStatistics:
    """
    Summary of per-level durations (in days) over the current run.

    `durations` is in level order; `sorted_durations` ascending.
    """

    average: float
    median: float
    fast: float  # 25th percentile
    slow: float  # 75th percentile
    recent: float  # Mean of the last few levels
    durations: tuple[float, ...]
    sorted_durations: tuple[float, ...]
    completed: tuple[LevelAttempt, ...]

    def pace_for(self, scenario: PaceScenario) -> float:
        return {
            PaceScenario.FAST: self.fast,
            PaceScenario.MEDIAN: self.median,
            PaceScenario.AVERAGE: self.average,
            PaceScenario.RECENT: self.recent,
            PaceScenario.SLOW: self.slow,
        }[scenario]


@dataclass(frozen=True)
class SimulatedItem:
    """A blocking item paired with the instant it is simulated to reach mastery."""

    item: ReviewItemState
    mastery_at: datetime


@dataclass(frozen=True)
class StageCount:
    stage: int
    count: int
    label: str


@dataclass(frozen=True)
class NextLevelForecast:
    """
    Near-term estimate of when the current level is passed.

    `critical_item` is the slowest blocking item; it explains the estimate
    but does not drive it.
    """

    level_up_at: datetime
    blocking_count: int
    critical_item: SimulatedItem | None = None
    stage_breakdown: tuple[StageCount, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SpeedupDecomposition:
    """
    Attribution of lost days per level to missed windows and to mistakes.

    All day figures are per level unless the name says otherwise.
    """

    ideal_pace_days: float
    current_pace_days: float
    window_lost_per_level: float
    mistake_lost_per_level: float
    combined_saving_days: float  # Across all remaining levels
    accuracy: float  # Percent
    total_answers: int
    total_incorrect: int
    leech_count: int
    levels_remaining: int
    current_pace_date: datetime
    windows_only_date: datetime
    optimized_date: datetime
