import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ValidationError

from pacecast.consts import VERSION
from pacecast.domain.exceptions import (
    PacecastError,
    SourceUnavailableError,
    UnauthorizedError,
)
from pacecast.domain.forecast.models import PaceScenario
from pacecast.interface.schemas import ForecastResponse

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("pacecast.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"pacecast server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("pacecast server shutting down...")


app = FastAPI(
    title="pacecast",
    description="Level-ladder completion forecasts.",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


# Request model for forecast parameters (subset of AppConfig settings)
class ForecastRequest(BaseModel):
    # If None, use defaults/config file.
    token: str | None = None
    demo: bool | None = None
    demo_seed: int | None = None
    pace: PaceScenario = PaceScenario.MEDIAN
    timezone: str | None = None
    review_windows: list[int] | None = None
    ceiling_level: int | None = None
    run_policy: str | None = None


@app.post("/forecast", response_model=ForecastResponse)
async def create_forecast(req: ForecastRequest):
    """
    Fetch a learner's progress and compute every forecast.
    """
    from pacecast.application.config import resolve_config
    from pacecast.application.factory import get_forecast_service

    logger.info(f"Forecast requested via API (demo={req.demo}, pace={req.pace.value})")

    overrides = {
        "api_token": req.token,
        "demo": req.demo,
        "demo_seed": req.demo_seed,
        "timezone": req.timezone,
        "review_windows": req.review_windows,
        "ceiling_level": req.ceiling_level,
        "run_policy": req.run_policy,
    }

    try:
        config = resolve_config(overrides)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    try:
        service = get_forecast_service(config)
        try:
            session = await service.build_session(req.pace)
        finally:
            await service.close()
    except UnauthorizedError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    except SourceUnavailableError as e:
        logger.error(f"Data source failed: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e
    except PacecastError as e:
        logger.error(f"Forecast failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    return ForecastResponse.from_session(session)
