"""pacecast CLI — forecast commands, config and server."""

import asyncio
import json
import logging
import sys
from typing import Annotated, Any

import typer

from pacecast.application.config import AppConfig, resolve_config
from pacecast.application.forecast.session import ForecastSession
from pacecast.domain.exceptions import PacecastError, UnauthorizedError
from pacecast.domain.forecast.models import PaceScenario
from pacecast.interface.formatting import (
    PACE_LABELS,
    fmt_date,
    fmt_datetime,
    fmt_days,
    fmt_hour,
    rel_days,
)
from pacecast.interface.schemas import ForecastResponse

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="pacecast: Forecast when you will reach the top level.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage pacecast configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}

# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

DemoOpt = Annotated[bool, typer.Option("--demo", help="Use synthetic demo data.")]
TokenOpt = Annotated[
    str | None, typer.Option("--token", help="API token. Defaults to PACECAST_API_TOKEN.")
]
JsonOpt = Annotated[bool, typer.Option("--json", help="Output as JSON.")]
SeedOpt = Annotated[int | None, typer.Option("--seed", help="Seed for demo data.")]
TimezoneOpt = Annotated[
    str | None, typer.Option("--timezone", help="IANA timezone of your review windows.")
]


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for pacecast."""
    logging.getLogger("pacecast").setLevel(VERBOSITY_LEVELS.get(verbose, logging.DEBUG))


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    try:
        return resolve_config(overrides)
    except ValueError as e:
        typer.secho(f"Invalid configuration: {e}", fg="red")
        raise typer.Exit(2) from e


def _load_session(config: AppConfig, pace: PaceScenario) -> ForecastSession:
    from pacecast.application.factory import get_forecast_service

    async def run() -> ForecastSession:
        service = get_forecast_service(config)
        try:
            return await service.build_session(pace)
        finally:
            await service.close()

    try:
        return asyncio.run(run())
    except UnauthorizedError as e:
        typer.secho(f"Unauthorized: {e}", fg="red")
        raise typer.Exit(1) from e
    except PacecastError as e:
        logger.debug("Forecast failed", exc_info=True)
        typer.secho(f"Error: {e}", fg="red")
        raise typer.Exit(1) from e


def _echo_json(session: ForecastSession) -> None:
    typer.echo(ForecastResponse.from_session(session).model_dump_json(indent=2))


def _window_labels(config: AppConfig) -> str:
    return " & ".join(fmt_hour(h) for h in config.review_windows)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def forecast(
    demo: DemoOpt = False,
    token: TokenOpt = None,
    pace: Annotated[
        PaceScenario, typer.Option("--pace", help="Pace scenario for the headline date.")
    ] = PaceScenario.MEDIAN,
    json_output: JsonOpt = False,
    seed: SeedOpt = None,
    timezone: TimezoneOpt = None,
):
    """[bold green]Forecast[/bold green] the date you reach the top level."""
    config = _resolve_with_overrides(
        demo=demo or None,
        api_token=token,
        demo_seed=seed,
        timezone=timezone,
    )
    session = _load_session(config, pace)

    if json_output:
        _echo_json(session)
        return

    if session.is_demo:
        typer.secho("Showing demo data — pass --token for actual predictions", fg="yellow")

    if not session.has_history:
        typer.secho(
            "Need at least 2 completed level progressions to predict. Keep going! 頑張って！",
            fg="yellow",
        )
        return

    stats = session.stats
    now = session.computed_at
    typer.echo(
        f"Current level: {session.current_level}   Levels passed: {len(stats.completed)}   "
        f"Median: {fmt_days(stats.median)}/level   Recent (5 lvls): {fmt_days(stats.recent)}/level"
    )

    predicted = session.active_forecast()
    typer.secho(
        f"\nLevel {session.ceiling_level} ({PACE_LABELS[session.active_pace]}): "
        f"{fmt_date(predicted)}",
        bold=True,
    )
    typer.echo(
        f"  {rel_days(predicted, now)} · {fmt_days(session.active_pace_days)}/level · "
        f"{session.levels_remaining} levels remaining"
    )

    typer.echo("\nScenarios:")
    for scenario, when in session.scenario_dates.items():
        marker = "*" if scenario is session.active_pace else " "
        typer.echo(
            f" {marker} {PACE_LABELS[scenario]:<9} {fmt_days(stats.pace_for(scenario)):>5}/level  "
            f"{fmt_date(when)}  ({rel_days(when, now)})"
        )

    if session.next_level:
        typer.echo("")
        _print_next_level(session, config)
    if session.speedup:
        typer.echo("")
        _print_speedup(session, config)


@app.command("next-level")
def next_level(
    demo: DemoOpt = False,
    token: TokenOpt = None,
    json_output: JsonOpt = False,
    seed: SeedOpt = None,
    timezone: TimezoneOpt = None,
):
    """Predict when the current level unlocks the next one."""
    config = _resolve_with_overrides(
        demo=demo or None,
        api_token=token,
        demo_seed=seed,
        timezone=timezone,
    )
    session = _load_session(config, PaceScenario.MEDIAN)

    if json_output:
        _echo_json(session)
        return

    if session.next_level is None:
        typer.secho("No started items on the current level.", fg="yellow")
        return
    _print_next_level(session, config)


@app.command()
def speedup(
    demo: DemoOpt = False,
    token: TokenOpt = None,
    json_output: JsonOpt = False,
    seed: SeedOpt = None,
    timezone: TimezoneOpt = None,
):
    """Show how much faster you could go by hitting every window and every answer."""
    config = _resolve_with_overrides(
        demo=demo or None,
        api_token=token,
        demo_seed=seed,
        timezone=timezone,
    )
    session = _load_session(config, PaceScenario.MEDIAN)

    if json_output:
        _echo_json(session)
        return

    if session.speedup is None:
        typer.secho(
            "Not enough history or review data for a speedup analysis yet.", fg="yellow"
        )
        return
    _print_speedup(session, config)


def _print_next_level(session: ForecastSession, config: AppConfig) -> None:
    nl = session.next_level
    now = session.computed_at
    until = max(0.0, (nl.level_up_at - now).total_seconds() / 86400)

    typer.secho(
        f"Level {session.current_level + 1} unlocks: {fmt_datetime(nl.level_up_at)} "
        f"({fmt_days(until)} from now)",
        bold=True,
    )
    color = "red" if nl.blocking_count > 20 else "yellow" if nl.blocking_count > 5 else "green"
    typer.echo("  Items still blocking level-up: ", nl=False)
    typer.secho(str(nl.blocking_count), fg=color)
    if nl.stage_breakdown:
        breakdown = ", ".join(f"{s.label}: {s.count}" for s in nl.stage_breakdown)
        typer.echo(f"  By SRS stage: {breakdown}")
    if nl.critical_item:
        typer.echo(f"  Slowest item reaches mastery: {fmt_datetime(nl.critical_item.mastery_at)}")
    typer.echo(f"  Based on review windows: {_window_labels(config)}")


def _print_speedup(session: ForecastSession, config: AppConfig) -> None:
    sd = session.speedup
    now = session.computed_at

    typer.secho(f"Your road to Level {session.ceiling_level}", bold=True)
    rows = [
        ("At your current pace", sd.current_pace_date, f"{fmt_days(sd.current_pace_days)}/level"),
        (
            f"{_window_labels(config)} windows only",
            sd.windows_only_date,
            f"{fmt_days(sd.ideal_pace_days)}/level (simulated)",
        ),
        ("Windows + perfect accuracy", sd.optimized_date, "both levers"),
    ]
    for label, when, detail in rows:
        typer.echo(f"  {label:<28} {fmt_date(when):<20} {rel_days(when, now):<16} {detail}")

    typer.echo("\nLever 1 — Hit every review window")
    typer.echo(f"  Days lost per level to missed windows: {fmt_days(sd.window_lost_per_level)}")
    typer.echo(
        f"  Across {sd.levels_remaining} remaining levels: "
        f"{fmt_days(sd.window_lost_per_level * sd.levels_remaining)}"
    )

    typer.echo("\nLever 2 — Get reviews right")
    acc_color = "green" if sd.accuracy >= 90 else "yellow" if sd.accuracy >= 75 else "red"
    typer.echo("  Accuracy: ", nl=False)
    typer.secho(f"{sd.accuracy:.1f}%", fg=acc_color)
    typer.echo(f"  Reviews: {sd.total_answers:,}  Incorrect: {sd.total_incorrect:,}")
    typer.echo(f"  Days lost per level to mistakes: {fmt_days(sd.mistake_lost_per_level)}")
    typer.echo(f"  Leeches (items missed 4+ times): {sd.leech_count}")

    typer.echo(f"\nCombined saving if both levers are pulled: {fmt_days(sd.combined_saving_days)}")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def server(
    host: Annotated[str, typer.Option(help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port to listen on.")] = 8777,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes.")] = False,
):
    """Run the forecast HTTP API."""
    import uvicorn

    uvicorn.run("pacecast.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = _resolve_with_overrides()
    d = config.model_dump()
    if d.get("api_token"):
        d["api_token"] = "***"
    typer.echo(json.dumps(d, indent=2))