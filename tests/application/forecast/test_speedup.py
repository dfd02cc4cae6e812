from datetime import timedelta

import pytest

from pacecast.application.forecast.ladder import LadderSimulator
from pacecast.application.forecast.speedup import SpeedupCalculator
from pacecast.application.forecast.window_scheduler import WindowScheduler
from pacecast.domain.forecast.models import PaceStatistics, ReviewOutcomeCounters


def make_stats(median):
    return PaceStatistics(
        average=median,
        median=median,
        fast=median,
        slow=median,
        recent=median,
        durations=(median, median),
        sorted_durations=(median, median),
        completed=(),
    )


@pytest.fixture
def calculator():
    return SpeedupCalculator(LadderSimulator(WindowScheduler((9, 18))))


@pytest.fixture
def now(at):
    return at(1, 10)


@pytest.fixture
def ninety_percent():
    return [
        ReviewOutcomeCounters(
            meaning_correct=45, meaning_incorrect=5, reading_correct=45, reading_incorrect=5
        )
    ]


def test_ideal_pace_starts_at_next_window(calculator, now):
    # First lesson Monday 18:00; foundational mastered Friday 18:00, dependent Tuesday 18:00
    assert calculator.ideal_pace(now) == pytest.approx(8.0)


def test_decompose_both_levers(calculator, now, ninety_percent):
    result = calculator.decompose(make_stats(14.0), ninety_percent, current_level=32, now=now)

    mistake = 0.1 * 100 * 20.5 / 24
    assert result.ideal_pace_days == pytest.approx(8.0)
    assert result.current_pace_days == pytest.approx(14.0)
    assert result.window_lost_per_level == pytest.approx(6.0)
    assert result.mistake_lost_per_level == pytest.approx(mistake)
    # The larger lever counts fully, the smaller at the blend factor
    assert result.combined_saving_days == pytest.approx(28 * (mistake + 6.0 * 0.4))
    assert result.accuracy == pytest.approx(90.0)
    assert result.total_answers == 100
    assert result.total_incorrect == 10
    assert result.levels_remaining == 28


def test_decompose_dates(calculator, now, ninety_percent):
    result = calculator.decompose(make_stats(14.0), ninety_percent, current_level=32, now=now)

    assert result.current_pace_date == now + timedelta(days=28 * 14)
    assert result.windows_only_date == now + timedelta(days=28 * 8)
    # Optimized pace cannot beat the ideal schedule
    assert result.optimized_date == result.windows_only_date
    assert result.optimized_date <= result.current_pace_date


def test_optimized_pace_between_ideal_and_current(now):
    calc = SpeedupCalculator(
        LadderSimulator(WindowScheduler((9, 18))), est_reviews_per_level=10, blend_factor=0.0
    )
    outcomes = [ReviewOutcomeCounters(meaning_correct=80, meaning_incorrect=20)]

    result = calc.decompose(make_stats(20.0), outcomes, current_level=50, now=now)

    # window lost 12 dominates; mistake lost 0.2 * 10 * 20.5 / 24 adds nothing at blend 0
    assert result.combined_saving_days == pytest.approx(10 * 12.0)
    assert result.optimized_date == now + timedelta(days=10 * 8.0)


def test_no_answers_means_full_accuracy_and_no_mistake_cost(calculator, now):
    result = calculator.decompose(make_stats(10.0), [], current_level=10, now=now)

    assert result.accuracy == 100.0
    assert result.mistake_lost_per_level == 0.0
    assert result.total_answers == 0
    assert result.combined_saving_days == pytest.approx(50 * 2.0)


def test_faster_than_ideal_loses_nothing_to_windows(calculator, now):
    perfect = [ReviewOutcomeCounters(meaning_correct=10, reading_correct=10)]

    result = calculator.decompose(make_stats(6.5), perfect, current_level=20, now=now)

    assert result.window_lost_per_level == 0.0
    assert result.combined_saving_days == 0.0
    assert result.optimized_date == result.current_pace_date


def test_leech_count_uses_threshold(now):
    outcomes = [
        ReviewOutcomeCounters(meaning_incorrect=2, reading_incorrect=2),
        ReviewOutcomeCounters(meaning_incorrect=3),
        ReviewOutcomeCounters(reading_incorrect=9, reading_correct=1),
    ]

    default = SpeedupCalculator().decompose(make_stats(10.0), outcomes, 5, now)
    strict = SpeedupCalculator(leech_threshold=3).decompose(make_stats(10.0), outcomes, 5, now)

    assert default.leech_count == 2
    assert strict.leech_count == 3


def test_at_ceiling_nothing_left_to_save(calculator, now, ninety_percent):
    result = calculator.decompose(make_stats(14.0), ninety_percent, current_level=60, now=now)

    assert result.levels_remaining == 0
    assert result.combined_saving_days == 0.0
    assert result.current_pace_date == now
    assert result.optimized_date == now


def test_custom_ceiling(calculator, now, ninety_percent):
    result = calculator.decompose(
        make_stats(14.0), ninety_percent, current_level=8, now=now, ceiling_level=10
    )
    assert result.levels_remaining == 2


@pytest.mark.parametrize("median", [3.0, 8.0, 9.5, 30.0])
@pytest.mark.parametrize("wrong", [0, 1, 50])
def test_decomposition_never_negative(calculator, now, median, wrong):
    outcomes = [ReviewOutcomeCounters(meaning_correct=50, meaning_incorrect=wrong)]

    result = calculator.decompose(make_stats(median), outcomes, current_level=40, now=now)

    assert result.window_lost_per_level >= 0
    assert result.mistake_lost_per_level >= 0
    assert result.combined_saving_days >= 0
    assert now <= result.optimized_date <= result.current_pace_date
    assert result.windows_only_date <= result.optimized_date or median < result.ideal_pace_days
