"""Leaderboard records and the score-board port."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_TOP_LIMIT = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LeaderboardEntry:
    """One submitted score."""

    player: str
    score: int
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        return {
            "player": self.player,
            "score": self.score,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> LeaderboardEntry:
        created = raw.get("created_at") or raw.get("createdAt")
        return cls(
            player=str(raw["player"]),
            score=int(raw["score"]),
            created_at=(
                datetime.fromisoformat(created.replace("Z", "+00:00"))
                if created else _utcnow()
            ),
        )


class ScoreBoard(Protocol):
    """Record store of submitted scores, queried for the top entries."""

    async def submit(self, player: str, score: int) -> LeaderboardEntry: ...

    async def top_scores(
        self, limit: int = DEFAULT_TOP_LIMIT,
    ) -> list[LeaderboardEntry]: ...


class InMemoryScoreBoard:
    """Process-local score board.

    Every submission is kept; :meth:`top_scores` orders by score descending
    and keeps submission order among equal scores.
    """

    def __init__(self) -> None:
        self._entries: list[LeaderboardEntry] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    async def submit(self, player: str, score: int) -> LeaderboardEntry:
        if score < 0:
            raise ValueError("score must be non-negative.")
        entry = LeaderboardEntry(player=player, score=score)
        async with self._lock:
            self._entries.append(entry)
        logger.info("Recorded score %d for '%s'.", score, player)
        return entry

    async def top_scores(
        self, limit: int = DEFAULT_TOP_LIMIT,
    ) -> list[LeaderboardEntry]:
        if limit < 1:
            return []
        async with self._lock:
            ranked = sorted(self._entries, key=lambda e: e.score, reverse=True)
        return ranked[:limit]
