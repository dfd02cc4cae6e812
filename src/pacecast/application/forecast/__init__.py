# Application Forecast Package
from .ladder import LadderSimulator
from .level_forecast import forecast, forecast_scenarios, levels_remaining
from .next_level import NextLevelForecaster
from .pace_calculator import PaceCalculator
from .run_segmentation import (
    LatestAttemptPolicy,
    RunSegmentationPolicy,
    StartDatePolicy,
    get_run_policy,
)
from .service import ForecastService
from .session import ForecastSession
from .speedup import SpeedupCalculator
from .window_scheduler import WindowScheduler

__all__ = [
    "WindowScheduler",
    "LadderSimulator",
    "RunSegmentationPolicy",
    "StartDatePolicy",
    "LatestAttemptPolicy",
    "get_run_policy",
    "PaceCalculator",
    "forecast",
    "forecast_scenarios",
    "levels_remaining",
    "NextLevelForecaster",
    "SpeedupCalculator",
    "ForecastSession",
    "ForecastService",
]
