"""Step-based game engine composing grid, snake, food and input logic."""

from __future__ import annotations

import enum
import logging

import numpy as np

from snake_arcade.config import GameConfig
from snake_arcade.direction import DirectionController
from snake_arcade.food import FoodPlacer
from snake_arcade.grid import Cell, Grid
from snake_arcade.highscore import HighScoreStore, InMemoryHighScoreStore
from snake_arcade.snake import Direction, Snake

logger = logging.getLogger(__name__)


class TickOutcome(enum.Enum):
    """What a single call to :meth:`GameEngine.step` did."""

    IDLE = "idle"
    MOVED = "moved"
    ATE = "ate"
    COLLIDED = "collided"
    WON = "won"


class GameEngine:
    """Single-snake, step-based game engine.

    The engine owns the grid, snake, food placer and direction controller.
    Each call to :meth:`step` advances the game by one tick. The high score
    is read from *high_scores* on creation and again when a game ends, so
    engines sharing a store never lower it; the store outlives :meth:`reset`.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        high_scores: HighScoreStore | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.grid = Grid(self.config.board_size)
        self.rng = rng if rng is not None else np.random.default_rng(
            self.config.seed,
        )
        self.food_placer = FoodPlacer(self.grid, rng=self.rng)
        self.high_scores = (
            high_scores if high_scores is not None else InMemoryHighScoreStore()
        )
        self.high_score = self._load_high_score()
        self.reset()

    def reset(self) -> None:
        """Reinitialise snake, food, direction and score."""
        self.snake = Snake(self.config.initial_snake)
        self.food: Cell | None = self.config.initial_food
        self.controller = DirectionController(self.config.initial_direction)
        self.score = 0
        self.tick = 0
        self.game_over = False
        self.won = False

    @property
    def direction(self) -> Direction:
        return self.controller.current

    def request_direction(self, direction: Direction) -> bool:
        """Buffer a direction change for the next step."""
        return self.controller.request(direction)

    def step(self) -> TickOutcome:
        """Advance the game by one tick."""
        if self.game_over:
            return TickOutcome.IDLE

        direction = self.controller.commit()
        new_head = direction.offset(self.snake.head)
        grow = new_head == self.food

        if not self.grid.in_bounds(new_head) or self.snake.collides_with_self(
            new_head, grow,
        ):
            self._finish(won=False)
            return TickOutcome.COLLIDED

        self.snake.advance(new_head, grow)
        self.tick += 1
        if not grow:
            return TickOutcome.MOVED

        self.score += 1
        if len(self.snake) >= self.grid.capacity:
            # Nowhere left to place food: the board is won.
            self.food = None
            self._finish(won=True)
            return TickOutcome.WON

        self.food = self.food_placer.place(self.snake.cells)
        return TickOutcome.ATE

    def _finish(self, won: bool) -> None:
        """End the game and record a new high score if one was set."""
        self.game_over = True
        self.won = won
        logger.info(
            "Game over at tick %d with score %d (won=%s).",
            self.tick, self.score, won,
        )
        # The store may be shared, so compare against its current value.
        best = max(self.high_score, self._load_high_score())
        if self.score <= best:
            self.high_score = best
        else:
            self.high_score = self.score
            try:
                self.high_scores.set(self.score)
            except Exception:
                logger.exception("Failed to persist high score %d.", self.score)

    def _load_high_score(self) -> int:
        try:
            return max(int(self.high_scores.get()), 0)
        except Exception:
            logger.exception("Failed to load high score; starting from 0.")
            return 0
