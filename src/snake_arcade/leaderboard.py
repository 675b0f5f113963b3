"""Fire-and-forget leaderboard submission and refresh."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from snake_arcade.scoreboard import DEFAULT_TOP_LIMIT, LeaderboardEntry, ScoreBoard
from snake_arcade.session import (
    GameSnapshot,
    ScoreSubmission,
    Session,
    SessionEvent,
)

logger = logging.getLogger(__name__)


class LeaderboardFeed:
    """Keeps a read-only copy of the top scores for display.

    Submissions and refreshes run as detached tasks on the running loop so
    gameplay never waits on them. Failures are logged and dropped; on a
    failed refresh :attr:`entries` keeps its last successful value.
    """

    def __init__(
        self, board: ScoreBoard, limit: int = DEFAULT_TOP_LIMIT,
    ) -> None:
        self.board = board
        self.limit = limit
        self.entries: list[LeaderboardEntry] = []
        self._tasks: set[asyncio.Task] = set()
        self._on_update: list[Callable[[list[LeaderboardEntry]], None]] = []

    def on_update(
        self, callback: Callable[[list[LeaderboardEntry]], None],
    ) -> Callable[[], None]:
        """Call *callback* after each successful refresh.

        Returns a function that removes the callback.
        """
        self._on_update.append(callback)

        def remove() -> None:
            if callback in self._on_update:
                self._on_update.remove(callback)

        return remove

    def attach(self, session: Session) -> None:
        """Submit every finished game of *session*."""
        session.add_listener(SessionEvent.GAME_OVER, self._on_game_over)

    def submit(self, submission: ScoreSubmission) -> asyncio.Task:
        """Schedule a submission followed by a refresh."""
        return self._spawn(self._submit_and_refresh(submission))

    def refresh(self) -> asyncio.Task:
        """Schedule a refresh of :attr:`entries`."""
        return self._spawn(self.refresh_now())

    async def refresh_now(self) -> list[LeaderboardEntry]:
        try:
            entries = await self.board.top_scores(self.limit)
        except Exception:
            logger.warning("Leaderboard refresh failed.", exc_info=True)
            return self.entries
        self.entries = list(entries)
        for callback in list(self._on_update):
            try:
                callback(self.entries)
            except Exception:
                logger.exception("Leaderboard update callback failed.")
        return self.entries

    async def drain(self) -> None:
        """Wait for all pending submissions and refreshes."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_game_over(
        self,
        event: SessionEvent,
        snapshot: GameSnapshot,
        submission: ScoreSubmission | None,
    ) -> None:
        if submission is not None:
            self.submit(submission)

    async def _submit_and_refresh(self, submission: ScoreSubmission) -> None:
        try:
            await self.board.submit(submission.player, submission.score)
        except Exception:
            logger.warning(
                "Score submission failed for '%s' (%d).",
                submission.player, submission.score,
                exc_info=True,
            )
        await self.refresh_now()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
