"""
Ports (interfaces) for progress data retrieval.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import LevelAttempt, ReviewItemState, ReviewOutcomeCounters


class ProgressRepository(ABC):
    """
    Port for fetching a learner's progress records.

    Every method returns a complete collection or raises
    SourceUnavailableError / UnauthorizedError.

    Implementations:
        - WaniKaniRepository: Paginated HTTP API client.
        - SyntheticRepository: Seeded demo data generator.
    """

    @abstractmethod
    async def get_current_level(self) -> int:
        """Return the learner's current level."""
        pass

    @abstractmethod
    async def get_level_attempts(self) -> list[LevelAttempt]:
        """
        Fetch every level attempt, including abandoned ones from earlier runs.

        Returns:
            List of LevelAttempt objects in no particular order.
        """
        pass

    @abstractmethod
    async def get_review_item_states(self, levels: list[int]) -> list[ReviewItemState]:
        """
        Fetch ladder positions of started items on the given levels.

        Args:
            levels: Level numbers to include.
        """
        pass

    @abstractmethod
    async def get_review_outcomes(self, levels: list[int]) -> list[ReviewOutcomeCounters]:
        """
        Fetch correct/incorrect tallies for items on the given levels.

        Args:
            levels: Level numbers to include.
        """
        pass

    async def close(self) -> None:
        """Release any open connections. No-op by default."""
        return None
