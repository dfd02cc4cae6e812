"""
Forecast Service — Application layer orchestrator.

Coordinates fetching progress records from the repository and running the
pace, next-level and speedup computations over them.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from pacecast.domain.constants import CEILING_LEVEL
from pacecast.domain.forecast.models import PaceScenario
from pacecast.domain.forecast.ports import ProgressRepository

from .next_level import NextLevelForecaster
from .pace_calculator import PaceCalculator
from .session import ForecastSession
from .speedup import SpeedupCalculator

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ForecastService:
    """
    Application service producing a ForecastSession for one learner.

    Follows Dependency Inversion: depends on the ProgressRepository
    abstraction, not concrete adapter implementations. Data source errors
    propagate unchanged; nothing is computed until every fetch succeeded.
    """

    def __init__(
        self,
        repo: ProgressRepository,
        pace_calculator: PaceCalculator | None = None,
        next_level_forecaster: NextLevelForecaster | None = None,
        speedup_calculator: SpeedupCalculator | None = None,
        clock: Clock = utc_now,
        ceiling_level: int = CEILING_LEVEL,
        is_demo: bool = False,
    ):
        """
        Args:
            repo: The repository (port) for fetching progress records.
            pace_calculator: Optional custom calculator; uses default if not provided.
            next_level_forecaster: Optional custom forecaster.
            speedup_calculator: Optional custom decomposition.
            clock: Source of the current instant.
            ceiling_level: Top level of the curriculum.
            is_demo: Marks sessions built from synthetic data.
        """
        self._repo = repo
        self._pace = pace_calculator or PaceCalculator()
        self._next_level = next_level_forecaster or NextLevelForecaster()
        self._speedup = speedup_calculator or SpeedupCalculator()
        self._clock = clock
        self.ceiling_level = ceiling_level
        self.is_demo = is_demo

    async def build_session(
        self, pace: PaceScenario = PaceScenario.MEDIAN
    ) -> ForecastSession:
        """
        Fetch everything, then compute.

        Returns:
            ForecastSession; its `stats` is None when the current run has
            fewer than two completed levels.
        """
        current_level = await self._repo.get_current_level()
        attempts = await self._repo.get_level_attempts()
        outcomes = await self._repo.get_review_outcomes(list(range(1, current_level + 1)))
        item_states = await self._repo.get_review_item_states([current_level])
        logger.info(
            f"Fetched {len(attempts)} level attempts, {len(outcomes)} outcome counters, "
            f"{len(item_states)} item states (level {current_level})"
        )

        now = self._clock()
        stats = self._pace.compute_stats(attempts, current_level)
        if stats is None:
            logger.info("Not enough completed levels in the current run to forecast")

        next_level = None
        if item_states:
            next_level = self._next_level.forecast_next_level_up(item_states, now)

        speedup = None
        if stats is not None and outcomes:
            speedup = self._speedup.decompose(
                stats, outcomes, current_level, now, ceiling_level=self.ceiling_level
            )

        session = ForecastSession(
            current_level=current_level,
            ceiling_level=self.ceiling_level,
            computed_at=now,
            stats=stats,
            next_level=next_level,
            speedup=speedup,
            is_demo=self.is_demo,
        )
        session.select_pace(pace)
        return session

    async def close(self) -> None:
        await self._repo.close()
