"""HTTP client for the leaderboard service."""

from __future__ import annotations

import logging

import httpx

from snake_arcade.scoreboard import DEFAULT_TOP_LIMIT, LeaderboardEntry

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
SCORES_PATH = "/api/scores"


class HttpScoreBoard:
    """``ScoreBoard`` implementation talking to the score REST API.

    Pass an existing :class:`httpx.AsyncClient` to share a connection pool
    or to inject a test transport; otherwise one is created and owned here.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = 5.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(
            base_url=base_url, timeout=timeout,
        )

    async def submit(self, player: str, score: int) -> LeaderboardEntry:
        resp = await self._client.post(
            SCORES_PATH, json={"player": player, "score": score},
        )
        resp.raise_for_status()
        return LeaderboardEntry.from_dict(resp.json())

    async def top_scores(
        self, limit: int = DEFAULT_TOP_LIMIT,
    ) -> list[LeaderboardEntry]:
        resp = await self._client.get(SCORES_PATH, params={"limit": limit})
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, list):
            raise ValueError("Leaderboard response must be a JSON list.")
        return [LeaderboardEntry.from_dict(item) for item in data]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpScoreBoard:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
