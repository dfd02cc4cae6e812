from datetime import timedelta

import pytest

from pacecast.application.forecast.pace_calculator import PaceCalculator
from pacecast.application.forecast.session import ForecastSession
from pacecast.domain.forecast.models import PaceScenario


@pytest.fixture
def session(at, make_run):
    stats = PaceCalculator().compute_stats(make_run([4, 6, 8, 10, 12]), current_level=6)
    return ForecastSession(current_level=6, ceiling_level=60, computed_at=at(1), stats=stats)


def test_scenario_dates_computed_once(session, at):
    assert set(session.scenario_dates) == set(PaceScenario)
    assert session.scenario_dates[PaceScenario.MEDIAN] == at(1) + timedelta(days=54 * 8)


def test_select_pace_changes_active_forecast(session, at):
    assert session.active_pace is PaceScenario.MEDIAN
    median_date = session.active_forecast()

    session.select_pace("slow")

    assert session.active_pace is PaceScenario.SLOW
    assert session.active_pace_days == pytest.approx(10)
    assert session.active_forecast() > median_date
    assert session.active_forecast() == session.scenario_dates[PaceScenario.SLOW]


def test_select_unknown_pace_rejected(session):
    with pytest.raises(ValueError):
        session.select_pace("glacial")
    assert session.active_pace is PaceScenario.MEDIAN


def test_active_forecast_from_another_instant(session, at):
    later = at(11)
    assert session.active_forecast(later) == session.active_forecast() + timedelta(days=10)


def test_session_without_history(at):
    empty = ForecastSession(current_level=1, ceiling_level=60, computed_at=at(1))

    assert not empty.has_history
    assert empty.scenario_dates == {}
    assert empty.active_forecast() is None
    assert empty.active_pace_days is None
    assert empty.levels_remaining == 59


def test_reset_clears_results(session):
    session.select_pace(PaceScenario.FAST)

    fresh = session.reset()

    assert fresh.stats is None
    assert fresh.next_level is None
    assert fresh.speedup is None
    assert fresh.scenario_dates == {}
    assert fresh.active_pace is PaceScenario.MEDIAN
    assert fresh.current_level == session.current_level
    # Original untouched
    assert session.stats is not None
