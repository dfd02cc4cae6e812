"""Projection of the ceiling-level date from a pace figure."""

from datetime import datetime, timedelta

from pacecast.domain.constants import CEILING_LEVEL
from pacecast.domain.forecast.models import PaceScenario, PaceStatistics


def levels_remaining(current_level: int, ceiling_level: int = CEILING_LEVEL) -> int:
    """Levels left to pass, never negative."""
    return max(0, ceiling_level - current_level)


def forecast(pace_days: float, remaining: int, from_instant: datetime) -> datetime:
    """Date the ladder is finished if every remaining level takes `pace_days`."""
    return from_instant + timedelta(days=max(0, remaining) * pace_days)


def forecast_scenarios(
    stats: PaceStatistics, remaining: int, from_instant: datetime
) -> dict[PaceScenario, datetime]:
    """Evaluate every named pace scenario against one statistics snapshot."""
    return {
        scenario: forecast(stats.pace_for(scenario), remaining, from_instant)
        for scenario in PaceScenario
    }
