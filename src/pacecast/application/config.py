from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from pacecast.application.forecast.run_segmentation import RunPolicyName
from pacecast.domain import constants


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/pacecast/config.toml",
        Path.home() / ".pacecast.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for pacecast.
    Supports loading from:
    1. Environment variables (PACECAST_*)
    2. Config file (~/.config/pacecast/config.toml)
    3. Manual overrides (CLI / API request)
    """

    model_config = SettingsConfigDict(
        env_prefix="PACECAST_",
        extra="ignore",
    )

    # Data source
    api_token: str | None = None
    api_url: str = constants.API_URL
    api_revision: str = constants.API_REVISION
    request_timeout: float = constants.REQUEST_TIMEOUT

    # Schedule
    review_windows: list[int] = Field(default_factory=lambda: list(constants.DEFAULT_REVIEW_WINDOWS))
    timezone: str | None = None  # IANA name; None means UTC

    # Forecast model
    ceiling_level: int = constants.CEILING_LEVEL
    run_policy: RunPolicyName = "start-date"
    blend_factor: float = constants.BLEND_FACTOR
    avg_mistake_cost_hours: float = constants.AVG_MISTAKE_COST_HOURS
    est_reviews_per_level: int = constants.EST_REVIEWS_PER_LEVEL
    leech_threshold: int = constants.LEECH_THRESHOLD

    # Demo
    demo: bool = False
    demo_seed: int = constants.DEMO_SEED

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Find the first existing file
        toml_file = None
        for f in config_files():
            if f.exists():
                toml_file = f
                break

        # Earlier sources win: CLI overrides, then env, then the file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("review_windows")
    @classmethod
    def check_review_windows(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("at least one review window is required")
        for hour in v:
            if not 0 <= hour <= 23:
                raise ValueError(f"review window hour out of range: {hour}")
        return sorted(set(v))

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str | None) -> str | None:
        if v is None:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {v}") from e
        return v

    @field_validator("blend_factor")
    @classmethod
    def check_blend_factor(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("blend_factor must be between 0 and 1")
        return v

    @property
    def zone(self) -> tzinfo:
        return ZoneInfo(self.timezone) if self.timezone else timezone.utc


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/pacecast/config.toml (if exists)
    3. Environment variables (PACECAST_*)
    4. cli_overrides (passed from Typer or the API), minus None values
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
