"""
Review window scheduling.

Reviews are only done at a few fixed clock hours per day. The scheduler
snaps the moment an item becomes reviewable to the next such window.
"""

from datetime import datetime, timedelta

from pacecast.domain.constants import DEFAULT_REVIEW_WINDOWS, WINDOW_SEARCH_DAYS


class WindowScheduler:
    """
    Maps an eligible-at instant to the next daily review window.

    Window hours are wall-clock hours in the timezone of the instant passed
    in, so callers decide the learner's local time by choosing the tzinfo.
    Stateless and side-effect free.
    """

    def __init__(
        self,
        hours: tuple[int, ...] | list[int] = DEFAULT_REVIEW_WINDOWS,
        search_days: int = WINDOW_SEARCH_DAYS,
    ):
        if not hours:
            raise ValueError("at least one review window is required")
        for h in hours:
            if not 0 <= h <= 23:
                raise ValueError(f"review window hour out of range: {h}")
        self.hours = tuple(sorted(set(hours)))
        self.search_days = search_days

    def next_window(self, eligible_at: datetime) -> datetime:
        """
        Return the first window strictly after `eligible_at`.

        Falls back to `eligible_at` itself if nothing is found within
        `search_days`, which cannot happen with at least one window a day.
        """
        for day_offset in range(self.search_days + 1):
            day = eligible_at + timedelta(days=day_offset)
            for hour in self.hours:
                candidate = day.replace(hour=hour, minute=0, second=0, microsecond=0)
                if candidate > eligible_at:
                    return candidate
        return eligible_at
