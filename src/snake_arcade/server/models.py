"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from snake_arcade.scoreboard import LeaderboardEntry


class ScoreSubmitRequest(BaseModel):
    """Request body for POST /api/scores."""

    player: str = Field(min_length=1, max_length=32)
    score: int = Field(ge=0)


class ScoreEntry(BaseModel):
    """A stored leaderboard entry."""

    player: str
    score: int
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: LeaderboardEntry) -> ScoreEntry:
        return cls(
            player=entry.player,
            score=entry.score,
            created_at=entry.created_at,
        )
