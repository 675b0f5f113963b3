"""Persistent high-score storage."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class HighScoreStore(Protocol):
    """Single-value store read when a game starts or ends, written on new records."""

    def get(self) -> int: ...

    def set(self, value: int) -> None: ...


class InMemoryHighScoreStore:
    """Process-local store; also the default when no store is injected."""

    def __init__(self, value: int = 0) -> None:
        self.value = value
        self.writes: list[int] = []

    def get(self) -> int:
        return self.value

    def set(self, value: int) -> None:
        self.value = value
        self.writes.append(value)


class JsonFileHighScoreStore:
    """Keeps the high score in a small JSON document on disk.

    A missing or unreadable file reads as zero.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def get(self) -> int:
        if not self.path.exists():
            return 0
        try:
            raw = json.loads(self.path.read_text())
            return max(int(raw.get("high_score", 0)), 0)
        except (OSError, ValueError, TypeError, AttributeError):
            logger.warning("Ignoring unreadable high score file %s.", self.path)
            return 0

    def set(self, value: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"high_score": int(value)}))
        logger.info("High score %d written to %s", value, self.path)
