# Domain Forecast Package
from .models import (
    ItemType,
    LevelAttempt,
    NextLevelForecast,
    PaceScenario,
    PaceStatistics,
    ReviewItemState,
    ReviewOutcomeCounters,
    SimulatedItem,
    SpeedupDecomposition,
    StageCount,
)
from .ports import ProgressRepository

__all__ = [
    "ItemType",
    "LevelAttempt",
    "NextLevelForecast",
    "PaceScenario",
    "PaceStatistics",
    "ReviewItemState",
    "ReviewOutcomeCounters",
    "SimulatedItem",
    "SpeedupDecomposition",
    "StageCount",
    "ProgressRepository",
]
