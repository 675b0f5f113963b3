"""Game configuration and speed presets."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from snake_arcade.grid import Cell
from snake_arcade.snake import Direction

logger = logging.getLogger(__name__)


class SpeedSetting(str, enum.Enum):
    """Selectable game speeds; periods are looked up in :class:`SpeedConfig`."""

    SLOW = "slow"
    MEDIUM = "medium"
    FAST = "fast"


@dataclass(frozen=True)
class SpeedConfig:
    """Tick period in milliseconds for each speed setting."""

    slow_ms: int = 200
    medium_ms: int = 130
    fast_ms: int = 80

    def __post_init__(self) -> None:
        for name in ("slow_ms", "medium_ms", "fast_ms"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive.")

    def period_ms(self, speed: SpeedSetting) -> int:
        return getattr(self, f"{speed.value}_ms")


@dataclass(frozen=True)
class GameConfig:
    """Board layout and starting state for a single-player session.

    Supports JSON serialization so a host can ship its own presets. When
    *high_score_path* is set the server keeps the high score in that file.
    """

    board_size: int = 15
    initial_snake: tuple[Cell, ...] = ((7, 7),)
    initial_food: Cell = (5, 5)
    initial_direction: Direction = Direction.RIGHT
    default_speed: SpeedSetting = SpeedSetting.MEDIUM
    speeds: SpeedConfig = field(default_factory=SpeedConfig)
    default_player: str = "Guest"
    leaderboard_limit: int = 10
    seed: int | None = None
    high_score_path: str | None = None

    def __post_init__(self) -> None:
        if self.board_size < 4:
            raise ValueError("board_size must be at least 4.")
        if not self.initial_snake:
            raise ValueError("initial_snake must contain at least one cell.")
        if len(set(self.initial_snake)) != len(self.initial_snake):
            raise ValueError("initial_snake must not overlap itself.")
        for cell in (*self.initial_snake, self.initial_food):
            if not all(0 <= v < self.board_size for v in cell):
                raise ValueError(f"Cell {cell} lies outside the board.")
        if self.initial_food in self.initial_snake:
            raise ValueError("initial_food must not lie on the snake.")
        if self.leaderboard_limit < 1:
            raise ValueError("leaderboard_limit must be at least 1.")

    def tick_period_ms(self, speed: SpeedSetting) -> int:
        """Tick period for *speed* in milliseconds."""
        return self.speeds.period_ms(speed)

    def to_dict(self) -> dict:
        """Serialize to a plain, JSON-compatible dict."""
        d = asdict(self)
        d["initial_snake"] = [list(c) for c in self.initial_snake]
        d["initial_food"] = list(self.initial_food)
        d["initial_direction"] = self.initial_direction.name
        d["default_speed"] = self.default_speed.value
        return d

    @classmethod
    def from_dict(cls, raw: dict) -> GameConfig:
        data = dict(raw)
        if "initial_snake" in data:
            data["initial_snake"] = tuple(
                tuple(c) for c in data["initial_snake"]
            )
        if "initial_food" in data:
            data["initial_food"] = tuple(data["initial_food"])
        if "initial_direction" in data:
            data["initial_direction"] = Direction[data["initial_direction"]]
        if "default_speed" in data:
            data["default_speed"] = SpeedSetting(data["default_speed"])
        if "speeds" in data:
            data["speeds"] = SpeedConfig(**data["speeds"])
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
