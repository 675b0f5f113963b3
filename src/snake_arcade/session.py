"""Session lifecycle: speed selection, play, pause, game over and reset."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from snake_arcade.config import GameConfig, SpeedSetting
from snake_arcade.engine import GameEngine, TickOutcome
from snake_arcade.grid import Cell, Grid
from snake_arcade.highscore import HighScoreStore
from snake_arcade.scheduler import AsyncioScheduler, RepeatingTask, Scheduler
from snake_arcade.snake import Direction

logger = logging.getLogger(__name__)


class SessionPhase(str, enum.Enum):
    """Phases of a single-player session."""

    SELECT_SPEED = "select_speed"
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class SessionEvent(str, enum.Enum):
    """Side effects emitted for sound, feedback and score submission."""

    FOOD_CONSUMED = "food_consumed"
    GAME_OVER = "game_over"


# Keyboard names as reported by browsers, plus WASD.
KEY_BINDINGS: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}
PAUSE_KEYS = frozenset({" ", "Space", "p"})
CONFIRM_KEYS = frozenset({"Enter"})
MAX_PLAYER_NAME = 32


@dataclass(frozen=True)
class ScoreSubmission:
    """A finished game's score, ready for the leaderboard collaborator."""

    player: str
    score: int


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of the session for renderers."""

    phase: SessionPhase
    speed: SpeedSetting
    tick_period_ms: int
    board_size: int
    snake: tuple[Cell, ...]
    food: Cell | None
    direction: Direction
    score: int
    high_score: int
    tick: int
    won: bool
    player: str

    def cells(self) -> np.ndarray:
        """Render the board as a NumPy matrix of ``CellType`` codes."""
        return Grid(self.board_size).render(self.snake, self.food)

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "speed": self.speed.value,
            "tick_period_ms": self.tick_period_ms,
            "board_size": self.board_size,
            "snake": [list(c) for c in self.snake],
            "food": list(self.food) if self.food is not None else None,
            "direction": self.direction.name,
            "score": self.score,
            "high_score": self.high_score,
            "tick": self.tick,
            "won": self.won,
            "player": self.player,
            "cells": self.cells().tolist(),
        }


SnapshotCallback = Callable[[GameSnapshot], None]
EventCallback = Callable[
    [SessionEvent, GameSnapshot, ScoreSubmission | None], None,
]


class Session:
    """Single authoritative game session.

    Hosts call the input entry points (:meth:`select_speed`, :meth:`confirm`,
    :meth:`toggle_pause`, :meth:`request_direction`, :meth:`reset`) and
    subscribe to snapshots and events. Inputs that do not apply to the
    current phase are ignored. At most one repeating tick task is scheduled
    at any time; every phase change cancels it first.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        high_scores: HighScoreStore | None = None,
        scheduler: Scheduler | None = None,
        engine: GameEngine | None = None,
        player: str | None = None,
    ) -> None:
        self.engine = engine if engine is not None else GameEngine(
            config, high_scores=high_scores,
        )
        self.config = self.engine.config
        self.scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self.phase = SessionPhase.SELECT_SPEED
        self.speed = self.config.default_speed
        self.player = (player or self.config.default_player)[:MAX_PLAYER_NAME]
        self._task: RepeatingTask | None = None
        self._subscribers: list[SnapshotCallback] = []
        self._listeners: dict[SessionEvent, list[EventCallback]] = {
            event: [] for event in SessionEvent
        }

    # --- observation ---

    @property
    def tick_period_ms(self) -> int:
        return self.config.tick_period_ms(self.speed)

    def snapshot(self) -> GameSnapshot:
        engine = self.engine
        return GameSnapshot(
            phase=self.phase,
            speed=self.speed,
            tick_period_ms=self.tick_period_ms,
            board_size=engine.grid.board_size,
            snake=engine.snake.cells,
            food=engine.food,
            direction=engine.direction,
            score=engine.score,
            high_score=engine.high_score,
            tick=engine.tick,
            won=engine.won,
            player=self.player,
        )

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """Receive a snapshot after every tick and transition.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def add_listener(self, event: SessionEvent, callback: EventCallback) -> None:
        self._listeners[event].append(callback)

    # --- input entry points ---

    def select_speed(self, speed: SpeedSetting | str) -> bool:
        if self.phase not in (SessionPhase.SELECT_SPEED, SessionPhase.READY):
            return False
        try:
            if not isinstance(speed, SpeedSetting):
                speed = SpeedSetting(speed.lower())
        except (AttributeError, ValueError):
            return False
        self.speed = speed
        return self._transition(SessionPhase.READY)

    def confirm(self) -> bool:
        if self.phase is not SessionPhase.READY:
            return False
        return self._transition(SessionPhase.RUNNING)

    def toggle_pause(self) -> bool:
        if self.phase is SessionPhase.RUNNING:
            return self._transition(SessionPhase.PAUSED)
        if self.phase is SessionPhase.PAUSED:
            return self._transition(SessionPhase.RUNNING)
        return False

    def request_direction(self, direction: Direction | str) -> bool:
        if self.phase is not SessionPhase.RUNNING:
            return False
        if isinstance(direction, str):
            try:
                direction = Direction[direction.upper()]
            except KeyError:
                return False
        return self.engine.request_direction(direction)

    def reset(self) -> bool:
        if self.phase is not SessionPhase.GAME_OVER:
            return False
        self.engine.reset()
        self._transition(SessionPhase.SELECT_SPEED)
        return True

    def handle_key(self, key: str) -> bool:
        """Map a keyboard key name onto the matching entry point."""
        if key in PAUSE_KEYS:
            return self.toggle_pause()
        if key in CONFIRM_KEYS:
            return self.confirm()
        direction = KEY_BINDINGS.get(key)
        if direction is None:
            return False
        return self.request_direction(direction)

    def set_player(self, name: str) -> None:
        name = name.strip()[:MAX_PLAYER_NAME]
        if name:
            self.player = name

    def close(self) -> None:
        """Cancel any scheduled tick."""
        self._cancel_task()

    # --- loop ---

    def tick(self) -> TickOutcome:
        """Run one engine step; invoked by the scheduled task."""
        if self.phase is not SessionPhase.RUNNING:
            return TickOutcome.IDLE

        outcome = self.engine.step()
        if outcome in (TickOutcome.COLLIDED, TickOutcome.WON):
            self._transition(SessionPhase.GAME_OVER)
            submission = ScoreSubmission(self.player, self.engine.score)
            self._emit(SessionEvent.GAME_OVER, submission)
            return outcome

        if outcome is TickOutcome.ATE:
            self._emit(SessionEvent.FOOD_CONSUMED)
        self._publish()
        return outcome

    def _transition(self, phase: SessionPhase) -> bool:
        """Enter *phase*; the phase is unchanged if ticks cannot be scheduled."""
        self._cancel_task()
        if phase is SessionPhase.RUNNING:
            try:
                self._task = self.scheduler.schedule_repeating(
                    self.tick_period_ms, self.tick,
                )
            except Exception:
                logger.exception(
                    "Could not schedule ticks; staying %s.", self.phase.value,
                )
                return False
        previous, self.phase = self.phase, phase
        logger.debug("Session phase %s -> %s.", previous.value, phase.value)
        self._publish()
        return True

    def _cancel_task(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _publish(self) -> None:
        snap = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snap)
            except Exception:
                logger.exception("Snapshot subscriber failed.")

    def _emit(
        self, event: SessionEvent, submission: ScoreSubmission | None = None,
    ) -> None:
        snap = self.snapshot()
        for callback in list(self._listeners[event]):
            try:
                callback(event, snap, submission)
            except Exception:
                logger.exception("Listener for %s failed.", event.value)
