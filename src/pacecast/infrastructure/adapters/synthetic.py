"""
Synthetic Repository — demo data generator.

Produces the same record shapes as the HTTP adapter so the whole pipeline
can run offline. Every collection draws from its own seeded generator.
"""

import random
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from pacecast.domain.constants import (
    DEMO_BLOCKING_ITEMS,
    DEMO_CURRENT_LEVEL,
    DEMO_OUTCOME_ITEMS,
    DEMO_SEED,
    MASTERY_STAGE,
)
from pacecast.domain.forecast.models import (
    ItemType,
    LevelAttempt,
    ReviewItemState,
    ReviewOutcomeCounters,
)
from pacecast.domain.forecast.ports import ProgressRepository

DEMO_START = datetime(2023, 1, 15, tzinfo=timezone.utc)

# Two foundational items for every five dependent ones
DEMO_TYPE_CYCLE = (ItemType.FOUNDATIONAL,) * 2 + (ItemType.DEPENDENT,) * 5


class SyntheticRepository(ProgressRepository):
    """
    Seeded stand-in for a real learner.

    The same seed and clock always yield the same records. Levels get slower
    as the learner climbs, mimicking a real history.
    """

    def __init__(
        self,
        seed: int = DEMO_SEED,
        clock: Callable[[], datetime] | None = None,
        current_level: int = DEMO_CURRENT_LEVEL,
    ):
        self.seed = seed
        self.current_level = current_level
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._attempts: list[LevelAttempt] | None = None
        self._outcomes: list[ReviewOutcomeCounters] | None = None
        self._items: list[ReviewItemState] | None = None

    async def get_current_level(self) -> int:
        return self.current_level

    async def get_level_attempts(self) -> list[LevelAttempt]:
        if self._attempts is None:
            self._attempts = self._generate_attempts()
        return list(self._attempts)

    async def get_review_item_states(self, levels: list[int]) -> list[ReviewItemState]:
        if self.current_level not in levels:
            return []
        if self._items is None:
            self._items = self._generate_items()
        return list(self._items)

    async def get_review_outcomes(self, levels: list[int]) -> list[ReviewOutcomeCounters]:
        if self._outcomes is None:
            self._outcomes = self._generate_outcomes()
        return list(self._outcomes)

    def _rng(self, collection: str) -> random.Random:
        """Independent stream per collection, so fetch order does not matter."""
        return random.Random(f"{self.seed}:{collection}")

    def _level_days(self, level: int, rng: random.Random) -> float:
        if level <= 10:
            return 7 + rng.random() * 4
        if level <= 20:
            return 9 + rng.random() * 6
        return 12 + rng.random() * 10

    def _generate_attempts(self) -> list[LevelAttempt]:
        rng = self._rng("attempts")
        attempts = []
        started = DEMO_START
        for level in range(1, self.current_level + 1):
            passed = started + timedelta(days=self._level_days(level, rng))
            attempts.append(
                LevelAttempt(
                    level=level,
                    started_at=started,
                    passed_at=passed if level < self.current_level else None,
                )
            )
            started = passed
        return attempts

    def _generate_outcomes(self) -> list[ReviewOutcomeCounters]:
        rng = self._rng("outcomes")
        outcomes = []
        for item_id in range(1, DEMO_OUTCOME_ITEMS + 1):
            wrong = rng.randrange(6)
            outcomes.append(
                ReviewOutcomeCounters(
                    meaning_correct=5 + rng.randrange(15),
                    meaning_incorrect=wrong // 2,
                    reading_correct=5 + rng.randrange(15),
                    reading_incorrect=wrong - wrong // 2,
                    item_id=item_id,
                )
            )
        return outcomes

    def _generate_items(self) -> list[ReviewItemState]:
        rng = self._rng("items")
        now = self._clock()
        items = []
        for i in range(DEMO_BLOCKING_ITEMS):
            hours_ago = rng.random() * 20
            available_in = rng.random() * 30 - 10
            items.append(
                ReviewItemState(
                    item_type=DEMO_TYPE_CYCLE[i % len(DEMO_TYPE_CYCLE)],
                    stage=rng.randrange(MASTERY_STAGE),
                    started_at=now - timedelta(hours=hours_ago),
                    available_at=now + timedelta(hours=available_in),
                    item_id=i + 1,
                )
            )
        return items
