"""FastAPI application factory."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from snake_arcade.config import GameConfig
from snake_arcade.highscore import (
    HighScoreStore,
    InMemoryHighScoreStore,
    JsonFileHighScoreStore,
)
from snake_arcade.leaderboard import LeaderboardFeed
from snake_arcade.scoreboard import InMemoryScoreBoard, ScoreBoard
from snake_arcade.server.routes import router
from snake_arcade.server.websocket import ws_router

logger = logging.getLogger(__name__)

CONFIG_ENV = "SNAKE_ARCADE_CONFIG"
HIGH_SCORE_ENV = "SNAKE_ARCADE_HIGH_SCORE_PATH"


@asynccontextmanager
async def _lifespan(app: FastAPI):
    await app.state.leaderboard.refresh_now()
    yield
    await app.state.leaderboard.drain()


def create_app(
    config: GameConfig | None = None,
    score_board: ScoreBoard | None = None,
    high_scores: HighScoreStore | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Without an explicit *config* the file named by ``SNAKE_ARCADE_CONFIG`` is
    loaded, if set. The high score is kept in the file named by
    ``SNAKE_ARCADE_HIGH_SCORE_PATH`` or the config's *high_score_path*, and in
    memory when neither is set.
    """
    if config is None:
        config_path = os.environ.get(CONFIG_ENV)
        config = GameConfig.load(config_path) if config_path else GameConfig()
    app = FastAPI(
        title="Snake Arcade API", version="0.1.0", lifespan=_lifespan,
    )
    app.state.game_config = config
    app.state.score_board = (
        score_board if score_board is not None else InMemoryScoreBoard()
    )
    app.state.high_scores = (
        high_scores if high_scores is not None
        else _high_score_store(app.state.game_config)
    )
    app.state.leaderboard = LeaderboardFeed(
        app.state.score_board, limit=app.state.game_config.leaderboard_limit,
    )
    app.include_router(router)
    app.include_router(ws_router)
    return app


def _high_score_store(config: GameConfig) -> HighScoreStore:
    path = os.environ.get(HIGH_SCORE_ENV) or config.high_score_path
    if not path:
        return InMemoryHighScoreStore()
    logger.info("Keeping high score in %s", path)
    return JsonFileHighScoreStore(path)
