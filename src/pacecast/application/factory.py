"""
Forecast Service Factory
Centralizes the logic for selecting the data source and wiring the engine
from configuration.
"""

import logging
from datetime import datetime

from pacecast.application.config import AppConfig
from pacecast.application.forecast import (
    ForecastService,
    LadderSimulator,
    NextLevelForecaster,
    PaceCalculator,
    SpeedupCalculator,
    WindowScheduler,
    get_run_policy,
)
from pacecast.application.forecast.service import Clock
from pacecast.domain.exceptions import UnauthorizedError
from pacecast.domain.forecast.ports import ProgressRepository
from pacecast.infrastructure.adapters.synthetic import SyntheticRepository
from pacecast.infrastructure.adapters.wanikani import WaniKaniRepository

logger = logging.getLogger(__name__)


def get_clock(config: AppConfig) -> Clock:
    """Current instant in the learner's timezone, so review windows use local hours."""
    tz = config.zone
    return lambda: datetime.now(tz)


def get_progress_repository(config: AppConfig, clock: Clock | None = None) -> ProgressRepository:
    """
    Returns the appropriate ProgressRepository implementation based on config.
    """
    if config.demo:
        logger.info(f"Using synthetic demo data (seed={config.demo_seed})")
        return SyntheticRepository(seed=config.demo_seed, clock=clock or get_clock(config))

    if not config.api_token:
        raise UnauthorizedError(
            "No API token configured. Pass --token or set PACECAST_API_TOKEN."
        )

    return WaniKaniRepository(
        token=config.api_token,
        url=config.api_url,
        revision=config.api_revision,
        timeout=config.request_timeout,
    )


def get_forecast_service(config: AppConfig, clock: Clock | None = None) -> ForecastService:
    """
    Builds a ForecastService with every tunable taken from config.
    """
    clock = clock or get_clock(config)
    simulator = LadderSimulator(WindowScheduler(config.review_windows))

    return ForecastService(
        repo=get_progress_repository(config, clock),
        pace_calculator=PaceCalculator(get_run_policy(config.run_policy)),
        next_level_forecaster=NextLevelForecaster(simulator),
        speedup_calculator=SpeedupCalculator(
            simulator,
            avg_mistake_cost_hours=config.avg_mistake_cost_hours,
            est_reviews_per_level=config.est_reviews_per_level,
            blend_factor=config.blend_factor,
            leech_threshold=config.leech_threshold,
        ),
        clock=clock,
        ceiling_level=config.ceiling_level,
        is_demo=config.demo,
    )
