"""Human-readable rendering of dates and day counts for the CLI."""

from datetime import datetime

from pacecast.domain.forecast.models import PaceScenario

PACE_LABELS = {
    PaceScenario.FAST: "Fast 25%",
    PaceScenario.MEDIAN: "Median",
    PaceScenario.AVERAGE: "Average",
    PaceScenario.RECENT: "Recent 5",
    PaceScenario.SLOW: "Slow 75%",
}


def fmt_days(days: float) -> str:
    """`5h` under a day, `1.5d` under two days, whole days after that."""
    if days < 1:
        return f"{round(days * 24)}h"
    if days < 2:
        return f"{days:.1f}d"
    return f"{round(days)}d"


def rel_days(when: datetime, now: datetime) -> str:
    diff = round((when - now).total_seconds() / 86400)
    if diff <= 0:
        return "in the past"
    if diff < 30:
        return f"{diff}d from now"
    if diff < 365:
        return f"~{round(diff / 30)}mo from now"
    return f"~{diff / 365:.1f}yr from now"


def fmt_date(when: datetime) -> str:
    return f"{when:%B} {when.day}, {when.year}"


def fmt_datetime(when: datetime) -> str:
    hour = when.hour % 12 or 12
    suffix = "am" if when.hour < 12 else "pm"
    return f"{when:%a %b} {when.day}, {hour}:{when.minute:02d}{suffix}"


def fmt_hour(hour: int) -> str:
    return f"{hour % 12 or 12}{'am' if hour < 12 else 'pm'}"
