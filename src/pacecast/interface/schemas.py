"""
Serializable views of a ForecastSession, shared by the JSON CLI output and
the HTTP API.
"""

from dataclasses import asdict
from datetime import datetime

from pydantic import BaseModel

from pacecast.application.forecast.session import ForecastSession
from pacecast.domain.forecast.models import (
    NextLevelForecast,
    PaceScenario,
    PaceStatistics,
    SpeedupDecomposition,
)


class PaceStatsModel(BaseModel):
    average: float
    median: float
    fast: float
    slow: float
    recent: float
    completed_levels: int
    durations: list[float]

    @classmethod
    def from_stats(cls, stats: PaceStatistics) -> "PaceStatsModel":
        return cls(
            average=stats.average,
            median=stats.median,
            fast=stats.fast,
            slow=stats.slow,
            recent=stats.recent,
            completed_levels=len(stats.completed),
            durations=list(stats.durations),
        )


class StageCountModel(BaseModel):
    stage: int
    count: int
    label: str


class CriticalItemModel(BaseModel):
    item_id: int | None
    item_type: str
    stage: int
    mastery_at: datetime


class NextLevelModel(BaseModel):
    level_up_at: datetime
    blocking_count: int
    critical_item: CriticalItemModel | None = None
    stage_breakdown: list[StageCountModel] = []

    @classmethod
    def from_forecast(cls, nl: NextLevelForecast) -> "NextLevelModel":
        critical = None
        if nl.critical_item is not None:
            critical = CriticalItemModel(
                item_id=nl.critical_item.item.item_id,
                item_type=nl.critical_item.item.item_type.value,
                stage=nl.critical_item.item.stage,
                mastery_at=nl.critical_item.mastery_at,
            )
        return cls(
            level_up_at=nl.level_up_at,
            blocking_count=nl.blocking_count,
            critical_item=critical,
            stage_breakdown=[
                StageCountModel(stage=s.stage, count=s.count, label=s.label)
                for s in nl.stage_breakdown
            ],
        )


class SpeedupModel(BaseModel):
    ideal_pace_days: float
    current_pace_days: float
    window_lost_per_level: float
    mistake_lost_per_level: float
    combined_saving_days: float
    accuracy: float
    total_answers: int
    total_incorrect: int
    leech_count: int
    levels_remaining: int
    current_pace_date: datetime
    windows_only_date: datetime
    optimized_date: datetime

    @classmethod
    def from_decomposition(cls, sd: SpeedupDecomposition) -> "SpeedupModel":
        return cls(**asdict(sd))


class ForecastResponse(BaseModel):
    current_level: int
    ceiling_level: int
    levels_remaining: int
    computed_at: datetime
    is_demo: bool
    active_pace: PaceScenario
    active_pace_days: float | None = None
    predicted_date: datetime | None = None
    scenarios: dict[PaceScenario, datetime] = {}
    stats: PaceStatsModel | None = None
    next_level: NextLevelModel | None = None
    speedup: SpeedupModel | None = None
    message: str | None = None

    @classmethod
    def from_session(cls, session: ForecastSession) -> "ForecastResponse":
        message = None
        if not session.has_history:
            message = "Need at least 2 completed level progressions to predict. Keep going!"

        return cls(
            current_level=session.current_level,
            ceiling_level=session.ceiling_level,
            levels_remaining=session.levels_remaining,
            computed_at=session.computed_at,
            is_demo=session.is_demo,
            active_pace=session.active_pace,
            active_pace_days=session.active_pace_days,
            predicted_date=session.active_forecast(),
            scenarios=dict(session.scenario_dates),
            stats=PaceStatsModel.from_stats(session.stats) if session.stats else None,
            next_level=(
                NextLevelModel.from_forecast(session.next_level) if session.next_level else None
            ),
            speedup=(
                SpeedupModel.from_decomposition(session.speedup) if session.speedup else None
            ),
            message=message,
        )
