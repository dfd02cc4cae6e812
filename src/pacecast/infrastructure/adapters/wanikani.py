"""
WaniKani Repository — Infrastructure adapter for the WaniKani v2 REST API.

Implements ProgressRepository by following paginated collection endpoints
until exhausted and mapping the resources to domain models.
"""

import logging
from datetime import datetime
from typing import Any

import httpx

from pacecast.domain.constants import API_REVISION, API_URL, REQUEST_TIMEOUT
from pacecast.domain.exceptions import (
    MalformedRecordError,
    SourceUnavailableError,
    UnauthorizedError,
)
from pacecast.domain.forecast.models import (
    ItemType,
    LevelAttempt,
    ReviewItemState,
    ReviewOutcomeCounters,
)
from pacecast.domain.forecast.ports import ProgressRepository

logger = logging.getLogger(__name__)

SUBJECT_TYPES = {
    "radical": ItemType.FOUNDATIONAL,
    "kanji": ItemType.DEPENDENT,
}


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _levels_param(levels: list[int]) -> str:
    return ",".join(str(level) for level in levels)


class WaniKaniRepository(ProgressRepository):
    """Fetches progress records from the WaniKani API with a personal access token."""

    def __init__(
        self,
        token: str,
        url: str = API_URL,
        revision: str = API_REVISION,
        timeout: float = REQUEST_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.url = url.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Wanikani-Revision": revision,
        }
        self.timeout = timeout
        self._client = client
        self._user: dict[str, Any] | None = None

    async def get_current_level(self) -> int:
        user = await self._get_user()
        try:
            return int(user["current_level"])
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedRecordError(f"user resource has no current_level: {user}") from e

    async def get_level_attempts(self) -> list[LevelAttempt]:
        resources = await self._get_collection("level_progressions")
        return [self._to_level_attempt(r) for r in resources]

    async def get_review_item_states(self, levels: list[int]) -> list[ReviewItemState]:
        resources = await self._get_collection(
            "assignments", {"levels": _levels_param(levels), "started": "true"}
        )
        return [self._to_item_state(r) for r in resources]

    async def get_review_outcomes(self, levels: list[int]) -> list[ReviewOutcomeCounters]:
        resources = await self._get_collection(
            "review_statistics", {"levels": _levels_param(levels)}
        )
        return [self._to_outcome(r) for r in resources]

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def _get_user(self) -> dict[str, Any]:
        if self._user is None:
            body = await self._get_json(f"{self.url}/user")
            self._user = body.get("data") or {}
        return self._user

    async def _get_collection(
        self, endpoint: str, params: dict[str, str] | None = None
    ) -> list[dict[str, Any]]:
        """Follow `pages.next_url` until exhausted and return every resource's data."""
        url: str | None = f"{self.url}/{endpoint}"
        resources: list[dict[str, Any]] = []
        pages = 0

        while url:
            # next_url already carries the query string
            body = await self._get_json(url, params if pages == 0 else None)
            resources.extend(item.get("data", {}) for item in body.get("data") or [])
            url = (body.get("pages") or {}).get("next_url")
            pages += 1

        logger.debug(f"Fetched {len(resources)} {endpoint} over {pages} page(s)")
        return resources

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)

        try:
            resp = await self._client.get(url, headers=self.headers, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise SourceUnavailableError(f"Could not reach {url}: {e}") from e

        if resp.status_code == 401:
            raise UnauthorizedError(
                "Invalid API key — check wanikani.com/settings/personal_access_tokens"
            )
        if resp.status_code >= 400:
            raise SourceUnavailableError(f"API error {resp.status_code}", resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise SourceUnavailableError(f"Invalid JSON from {url}") from e

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def _to_level_attempt(self, data: dict[str, Any]) -> LevelAttempt:
        started_at = parse_timestamp(data.get("started_at"))
        if started_at is None or "level" not in data:
            raise MalformedRecordError(f"level progression missing level or started_at: {data}")
        return LevelAttempt(
            level=int(data["level"]),
            started_at=started_at,
            passed_at=parse_timestamp(data.get("passed_at")),
            abandoned_at=parse_timestamp(data.get("abandoned_at")),
        )

    def _to_item_state(self, data: dict[str, Any]) -> ReviewItemState:
        # API srs_stage 1 is Apprentice 1, which is ladder stage 0
        srs_stage = int(data.get("srs_stage") or 0)
        return ReviewItemState(
            item_type=SUBJECT_TYPES.get(data.get("subject_type", ""), ItemType.OTHER),
            stage=max(0, srs_stage - 1),
            started_at=parse_timestamp(data.get("started_at")),
            available_at=parse_timestamp(data.get("available_at")),
            mastered_at=parse_timestamp(data.get("passed_at") or data.get("burned_at")),
            item_id=data.get("subject_id"),
        )

    def _to_outcome(self, data: dict[str, Any]) -> ReviewOutcomeCounters:
        return ReviewOutcomeCounters(
            meaning_correct=int(data.get("meaning_correct", 0)),
            meaning_incorrect=int(data.get("meaning_incorrect", 0)),
            reading_correct=int(data.get("reading_correct", 0)),
            reading_incorrect=int(data.get("reading_incorrect", 0)),
            item_id=data.get("subject_id"),
        )
