"""Tests for CLI commands: help, forecast, next-level, speedup, config and server."""

import json
import logging
from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pacecast.interface.cli import app

runner = CliRunner()

# Monday morning
FIXED_NOW = datetime(2024, 3, 4, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    with patch("pacecast.application.factory.get_clock", return_value=lambda: FIXED_NOW):
        yield FIXED_NOW


# --- Help ---


def test_cli_help():
    """Test that help text is displayed correctly."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "pacecast: Forecast when you will reach the top level." in result.stdout
    assert "forecast" in result.stdout
    assert "next-level" in result.stdout
    assert "speedup" in result.stdout
    assert "config" in result.stdout


# --- Forecast ---


def test_forecast_demo(mock_home, fixed_clock):
    result = runner.invoke(app, ["forecast", "--demo"])

    assert result.exit_code == 0
    assert "Showing demo data" in result.stdout
    assert "Current level: 32" in result.stdout
    assert "Level 60 (Median):" in result.stdout
    assert "28 levels remaining" in result.stdout
    assert "Scenarios:" in result.stdout
    assert "Level 33 unlocks:" in result.stdout
    assert "Your road to Level 60" in result.stdout


def test_forecast_json(mock_home, fixed_clock):
    result = runner.invoke(app, ["forecast", "--demo", "--json", "--pace", "slow"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["current_level"] == 32
    assert data["is_demo"] is True
    assert data["active_pace"] == "slow"
    assert set(data["scenarios"]) == {"fast", "median", "average", "recent", "slow"}
    assert data["predicted_date"] == data["scenarios"]["slow"]
    assert data["stats"]["completed_levels"] == 31
    assert data["next_level"]["blocking_count"] == 12
    assert data["message"] is None


def test_forecast_seed_is_reproducible(mock_home, fixed_clock):
    first = runner.invoke(app, ["forecast", "--demo", "--json", "--seed", "5"])
    second = runner.invoke(app, ["forecast", "--demo", "--json", "--seed", "5"])
    other = runner.invoke(app, ["forecast", "--demo", "--json", "--seed", "6"])

    assert first.stdout == second.stdout
    assert json.loads(first.stdout)["stats"] != json.loads(other.stdout)["stats"]


def test_forecast_invalid_pace(mock_home):
    result = runner.invoke(app, ["forecast", "--demo", "--pace", "turbo"])
    assert result.exit_code == 2


def test_forecast_without_token_is_unauthorized(mock_home):
    result = runner.invoke(app, ["forecast"])

    assert result.exit_code == 1
    assert "Unauthorized: No API token configured" in result.stdout


def test_forecast_invalid_timezone(mock_home):
    result = runner.invoke(app, ["forecast", "--demo", "--timezone", "Nowhere/Land"])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.stdout


def test_forecast_demo_from_env(mock_home, monkeypatch, fixed_clock):
    monkeypatch.setenv("PACECAST_DEMO", "true")

    result = runner.invoke(app, ["forecast", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["is_demo"] is True


# --- Next level / speedup ---


def test_next_level_demo(mock_home, fixed_clock):
    result = runner.invoke(app, ["next-level", "--demo"])

    assert result.exit_code == 0
    assert "Level 33 unlocks:" in result.stdout
    assert "Items still blocking level-up: 12" in result.stdout
    assert "Based on review windows: 9am & 6pm" in result.stdout


def test_speedup_demo(mock_home, fixed_clock):
    result = runner.invoke(app, ["speedup", "--demo"])

    assert result.exit_code == 0
    assert "Your road to Level 60" in result.stdout
    assert "Lever 1" in result.stdout
    assert "Lever 2" in result.stdout
    assert "Accuracy:" in result.stdout


def test_speedup_json(mock_home, fixed_clock):
    result = runner.invoke(app, ["speedup", "--demo", "--json"])

    data = json.loads(result.stdout)
    speedup = data["speedup"]
    assert speedup["levels_remaining"] == 28
    assert 0 <= speedup["accuracy"] <= 100
    assert speedup["optimized_date"] <= speedup["current_pace_date"]


# --- Config ---


def test_config_show_masks_token(mock_home, monkeypatch):
    monkeypatch.setenv("PACECAST_API_TOKEN", "very-secret")

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0
    output_data = json.loads(result.stdout)
    assert output_data["api_token"] == "***"
    assert output_data["review_windows"] == [9, 18]
    assert "very-secret" not in result.stdout
    assert "log_dir" not in output_data


# --- Verbosity ---


@pytest.mark.parametrize(
    "flags, level",
    [([], logging.WARNING), (["-v"], logging.INFO), (["-vv"], logging.DEBUG)],
)
def test_verbose_flag_sets_log_level(mock_home, flags, level):
    result = runner.invoke(app, [*flags, "config", "show"])

    assert result.exit_code == 0
    assert logging.getLogger("pacecast").level == level


# --- Server ---


@patch("uvicorn.run")
def test_server_command(mock_run):
    """Test server command starts uvicorn."""
    result = runner.invoke(app, ["server", "--port", "9000"])

    assert result.exit_code == 0
    mock_run.assert_called_once_with(
        "pacecast.server:app", host="127.0.0.1", port=9000, reload=False
    )
