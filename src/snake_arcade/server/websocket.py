"""WebSocket handler hosting one game session per connection."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Callable

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snake_arcade.leaderboard import LeaderboardFeed
from snake_arcade.scoreboard import LeaderboardEntry
from snake_arcade.session import (
    GameSnapshot,
    ScoreSubmission,
    Session,
    SessionEvent,
)
from snake_arcade.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_DIRECTION_MAP: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def _leaderboard_message(entries: list[LeaderboardEntry]) -> dict:
    return {"type": "leaderboard", "entries": [e.to_dict() for e in entries]}


def _dispatch(session: Session, msg: dict) -> None:
    """Apply one client message to the session; unknown input is ignored."""
    direction_str = msg.get("direction")
    if isinstance(direction_str, str):
        direction = _DIRECTION_MAP.get(direction_str.lower())
        if direction is not None:
            session.request_direction(direction)
        return

    key = msg.get("key")
    if isinstance(key, str):
        session.handle_key(key)
        return

    action = msg.get("action")
    if not isinstance(action, str):
        return

    handlers: dict[str, Callable[[], object]] = {
        "select_speed": lambda: session.select_speed(msg.get("speed", "")),
        "confirm": session.confirm,
        "pause": session.toggle_pause,
        "reset": session.reset,
        "set_player": lambda: session.set_player(str(msg.get("player", ""))),
    }
    handler = handlers.get(action)
    if handler is not None:
        handler()


async def _pump(websocket: WebSocket, outbox: asyncio.Queue) -> None:
    """Forward queued messages to the client in order."""
    while True:
        msg = await outbox.get()
        try:
            await websocket.send_text(json.dumps(msg, separators=(",", ":")))
        except Exception:
            logger.warning("Failed sending to client; stopping sender.")
            return


@ws_router.websocket("/play")
async def play(websocket: WebSocket, player: str = "") -> None:
    """Player WebSocket: send inputs, receive a snapshot after every change."""
    state = websocket.app.state
    feed: LeaderboardFeed = state.leaderboard
    await websocket.accept()

    session = Session(
        config=state.game_config,
        high_scores=state.high_scores,
        player=player.strip()[:32] or None,
    )
    outbox: asyncio.Queue[dict] = asyncio.Queue()

    def on_snapshot(snap: GameSnapshot) -> None:
        outbox.put_nowait({"type": "state", "state": snap.to_dict()})

    def on_event(
        event: SessionEvent,
        snap: GameSnapshot,
        submission: ScoreSubmission | None,
    ) -> None:
        msg: dict = {"type": "event", "event": event.value}
        if event is SessionEvent.GAME_OVER:
            msg.update(
                score=snap.score, high_score=snap.high_score, won=snap.won,
            )
        outbox.put_nowait(msg)

    session.subscribe(on_snapshot)
    for event in SessionEvent:
        session.add_listener(event, on_event)
    feed.attach(session)
    remove_feed_listener = feed.on_update(
        lambda entries: outbox.put_nowait(_leaderboard_message(entries)),
    )

    logger.info("Player '%s' connected.", session.player)
    outbox.put_nowait({"type": "state", "state": session.snapshot().to_dict()})
    outbox.put_nowait(_leaderboard_message(feed.entries))
    sender = asyncio.create_task(_pump(websocket, outbox))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue
            _dispatch(session, msg)
    except WebSocketDisconnect:
        logger.info("Player '%s' disconnected.", session.player)
    finally:
        session.close()
        remove_feed_listener()
        sender.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sender
