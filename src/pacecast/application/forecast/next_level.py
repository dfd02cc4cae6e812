"""
Next level-up prediction from the items still blocking the current level.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from pacecast.domain.constants import LEVEL_UP_STRAGGLER_SHARE, STAGE_LABELS
from pacecast.domain.forecast.models import (
    ItemType,
    NextLevelForecast,
    ReviewItemState,
    SimulatedItem,
    StageCount,
)

from .ladder import LadderSimulator

logger = logging.getLogger(__name__)


class NextLevelForecaster:
    """
    Simulates every blocking item to mastery and applies the level-up rule:
    a share (90%) of dependent items must reach mastery, or, when only
    foundational items are left, all of them.
    """

    def __init__(self, simulator: LadderSimulator | None = None):
        self.simulator = simulator or LadderSimulator()

    def forecast_next_level_up(
        self, item_states: Iterable[ReviewItemState], now: datetime
    ) -> NextLevelForecast:
        blocking = self.blocking_items(item_states)

        if not blocking:
            return NextLevelForecast(
                level_up_at=self.simulator.scheduler.next_window(now),
                blocking_count=0,
            )

        simulated = [self._simulate(item, now) for item in blocking]
        dependent = sorted(
            (s for s in simulated if s.item.item_type is ItemType.DEPENDENT),
            key=lambda s: s.mastery_at,
        )
        critical = max(simulated, key=lambda s: s.mastery_at)

        if dependent:
            level_up_at = self._share_reached(dependent).mastery_at
        else:
            level_up_at = critical.mastery_at

        logger.debug(
            f"{len(blocking)} blocking items, {len(dependent)} dependent, "
            f"level-up at {level_up_at.isoformat()}"
        )

        return NextLevelForecast(
            level_up_at=level_up_at,
            blocking_count=len(blocking),
            critical_item=critical,
            stage_breakdown=self._stage_breakdown(blocking),
        )

    def blocking_items(self, item_states: Iterable[ReviewItemState]) -> list[ReviewItemState]:
        """Started, gating items that have not yet reached mastery."""
        mastery = self.simulator.mastery_stage
        return [
            item
            for item in item_states
            if item.item_type.is_gating
            and item.mastered_at is None
            and item.stage < mastery
            and item.started_at is not None
        ]

    def _simulate(self, item: ReviewItemState, now: datetime) -> SimulatedItem:
        start_from = now
        if item.available_at is not None and item.available_at > now:
            start_from = item.available_at
            if now.tzinfo is not None:
                # Windows are wall-clock hours in the zone `now` is expressed in
                start_from = start_from.astimezone(now.tzinfo)
        return SimulatedItem(
            item=item,
            mastery_at=self.simulator.simulate_to_mastery(start_from, item.stage),
        )

    def _share_reached(self, ordered: list[SimulatedItem]) -> SimulatedItem:
        """Item at which all but the allowed stragglers of `ordered` (ascending) have mastered."""
        allowed_stragglers = int(len(ordered) * LEVEL_UP_STRAGGLER_SHARE)
        return ordered[max(0, len(ordered) - 1 - allowed_stragglers)]

    def _stage_breakdown(self, blocking: list[ReviewItemState]) -> tuple[StageCount, ...]:
        breakdown = []
        for stage in range(self.simulator.mastery_stage):
            count = sum(1 for item in blocking if item.stage == stage)
            if count:
                label = STAGE_LABELS[stage] if stage < len(STAGE_LABELS) else f"Stage {stage}"
                breakdown.append(StageCount(stage=stage, count=count, label=label))
        return tuple(breakdown)
