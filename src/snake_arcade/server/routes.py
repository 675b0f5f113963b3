"""REST API route handlers for the leaderboard."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request

from snake_arcade.scoreboard import DEFAULT_TOP_LIMIT, ScoreBoard
from snake_arcade.server.models import ScoreEntry, ScoreSubmitRequest

router = APIRouter(prefix="/api/scores", tags=["scores"])


def _get_board(request: Request) -> ScoreBoard:
    return request.app.state.score_board


@router.post("", status_code=201)
async def submit_score(body: ScoreSubmitRequest, request: Request) -> ScoreEntry:
    """Store a finished game's score."""
    try:
        entry = await _get_board(request).submit(body.player, body.score)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return ScoreEntry.from_entry(entry)


@router.get("")
async def top_scores(
    request: Request,
    limit: int = Query(default=DEFAULT_TOP_LIMIT, ge=1, le=100),
) -> list[ScoreEntry]:
    """List the highest scores, best first."""
    entries = await _get_board(request).top_scores(limit)
    return [ScoreEntry.from_entry(e) for e in entries]
