"""Snake Arcade — single-player snake engine with a leaderboard."""

from snake_arcade.config import GameConfig, SpeedConfig, SpeedSetting
from snake_arcade.direction import DirectionController
from snake_arcade.engine import GameEngine, TickOutcome
from snake_arcade.food import BoardFullError, FoodPlacer
from snake_arcade.grid import Grid
from snake_arcade.session import GameSnapshot, Session, SessionEvent, SessionPhase
from snake_arcade.snake import Direction, Snake

__all__ = [
    "BoardFullError",
    "Direction",
    "DirectionController",
    "FoodPlacer",
    "GameConfig",
    "GameEngine",
    "GameSnapshot",
    "Grid",
    "Session",
    "SessionEvent",
    "SessionPhase",
    "Snake",
    "SpeedConfig",
    "SpeedSetting",
    "TickOutcome",
]
