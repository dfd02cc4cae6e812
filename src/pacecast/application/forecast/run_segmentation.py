"""
Run segmentation: pick out the attempts belonging to the learner's current
pass through the ladder.

A learner who resets keeps the abandoned attempts in their history. Two
policies exist for deciding which attempts make up "the current run"; both
return a level-ordered list with one attempt per level.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Literal

from pacecast.domain.constants import RUN_RESET_MAX_LEVEL
from pacecast.domain.forecast.models import LevelAttempt

RunPolicyName = Literal["start-date", "latest-per-level"]


def _latest_per_level(attempts: Iterable[LevelAttempt]) -> list[LevelAttempt]:
    latest: dict[int, LevelAttempt] = {}
    for attempt in attempts:
        current = latest.get(attempt.level)
        if current is None or attempt.started_at > current.started_at:
            latest[attempt.level] = attempt
    return [latest[level] for level in sorted(latest)]


class RunSegmentationPolicy(ABC):
    """Strategy for isolating the current run from a full attempt history."""

    @abstractmethod
    def current_run(self, attempts: Iterable[LevelAttempt]) -> list[LevelAttempt]:
        pass


class StartDatePolicy(RunSegmentationPolicy):
    """
    Detect resets chronologically.

    Walking attempts by start date, an attempt at a level no higher than the
    previous one, and no higher than `reset_max_level`, marks a new run. The
    current run is everything started at or after the last marker.
    """

    def __init__(self, reset_max_level: int = RUN_RESET_MAX_LEVEL):
        self.reset_max_level = reset_max_level

    def current_run(self, attempts: Iterable[LevelAttempt]) -> list[LevelAttempt]:
        ordered = sorted(attempts, key=lambda a: a.started_at)
        if not ordered:
            return []

        run_start = ordered[0].started_at
        prev_level = 0
        for attempt in ordered:
            if attempt.level <= prev_level and attempt.level <= self.reset_max_level:
                run_start = attempt.started_at
            prev_level = attempt.level

        # A reset above the threshold can still repeat a level inside the run
        return _latest_per_level(a for a in ordered if a.started_at >= run_start)


class LatestAttemptPolicy(RunSegmentationPolicy):
    """Keep only the most recently started attempt for each level."""

    def current_run(self, attempts: Iterable[LevelAttempt]) -> list[LevelAttempt]:
        return _latest_per_level(attempts)


def get_run_policy(name: RunPolicyName) -> RunSegmentationPolicy:
    if name == "start-date":
        return StartDatePolicy()
    if name == "latest-per-level":
        return LatestAttemptPolicy()
    raise ValueError(f"Unknown run policy: {name}")
