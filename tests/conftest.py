from datetime import datetime, timedelta, timezone

import pytest

from pacecast.domain.forecast.models import LevelAttempt

# Monday
DAY1 = datetime(2024, 3, 4, tzinfo=timezone.utc)


@pytest.fixture
def at():
    """Instant on day `day` (1-based, day 1 = Monday 2024-03-04) in UTC."""

    def _at(day: int, hour: int = 0, minute: int = 0) -> datetime:
        return DAY1 + timedelta(days=day - 1, hours=hour, minutes=minute)

    return _at


@pytest.fixture
def make_run():
    """
    Builds a single run: level i takes durations[i-1] days, back to back,
    followed by an in-progress attempt at the next level.
    """

    def _make(durations, start=datetime(2023, 1, 1, tzinfo=timezone.utc), in_progress=True):
        attempts = []
        started = start
        for level, days in enumerate(durations, start=1):
            passed = started + timedelta(days=days)
            attempts.append(LevelAttempt(level=level, started_at=started, passed_at=passed))
            started = passed
        if in_progress:
            attempts.append(LevelAttempt(level=len(durations) + 1, started_at=started))
        return attempts

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir and clears PACECAST_* env."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config/logs
    monkeypatch.setenv("HOME", str(home))
    for var in ("PACECAST_API_TOKEN", "PACECAST_DEMO", "PACECAST_TIMEZONE"):
        monkeypatch.delenv(var, raising=False)
    return home
