"""
Forecast session: the computed results for one learner, plus the pace
scenario they are currently looking at.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from pacecast.domain.forecast.models import (
    NextLevelForecast,
    PaceScenario,
    PaceStatistics,
    SpeedupDecomposition,
)

from .level_forecast import forecast, forecast_scenarios, levels_remaining


@dataclass
class ForecastSession:
    """
    Results of one forecast run.

    `stats` is None when the current run has too little history; everything
    derived from it is then None as well. `next_level` and `speedup` are None
    when the source returned no item states or no review outcomes.
    """

    current_level: int
    ceiling_level: int
    computed_at: datetime
    stats: PaceStatistics | None = None
    next_level: NextLevelForecast | None = None
    speedup: SpeedupDecomposition | None = None
    active_pace: PaceScenario = PaceScenario.MEDIAN
    is_demo: bool = False
    scenario_dates: dict[PaceScenario, datetime] = field(default_factory=dict)

    def __post_init__(self):
        if self.stats is not None and not self.scenario_dates:
            self.scenario_dates = forecast_scenarios(
                self.stats, self.levels_remaining, self.computed_at
            )

    @property
    def has_history(self) -> bool:
        return self.stats is not None

    @property
    def levels_remaining(self) -> int:
        return levels_remaining(self.current_level, self.ceiling_level)

    @property
    def active_pace_days(self) -> float | None:
        if self.stats is None:
            return None
        return self.stats.pace_for(self.active_pace)

    def select_pace(self, scenario: PaceScenario | str) -> None:
        self.active_pace = PaceScenario(scenario)

    def active_forecast(self, now: datetime | None = None) -> datetime | None:
        """Completion date under the selected scenario, from `now` or the computation time."""
        if self.stats is None:
            return None
        if now is None:
            return self.scenario_dates[self.active_pace]
        return forecast(self.stats.pace_for(self.active_pace), self.levels_remaining, now)

    def reset(self) -> "ForecastSession":
        """Fresh session for the same learner with nothing computed."""
        return replace(
            self,
            stats=None,
            next_level=None,
            speedup=None,
            active_pace=PaceScenario.MEDIAN,
            scenario_dates={},
        )
