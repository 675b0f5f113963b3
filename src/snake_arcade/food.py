"""Food placement logic."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from snake_arcade.grid import Cell, Grid

logger = logging.getLogger(__name__)


class BoardFullError(RuntimeError):
    """Raised when food is requested but every cell is occupied."""


class FoodPlacer:
    """Places food on unoccupied cells by rejection sampling.

    Uses a NumPy RNG so placement is reproducible when seeded.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()

    def place(self, occupied: Collection[Cell]) -> Cell:
        """Draw uniform random cells until one is not in *occupied*."""
        blocked = set(occupied)
        taken = sum(1 for cell in blocked if self.grid.in_bounds(cell))
        if taken >= self.grid.capacity:
            raise BoardFullError("No free cell left for food placement.")

        size = self.grid.board_size
        attempts = 0
        while True:
            attempts += 1
            row, col = self.rng.integers(0, size, size=2).tolist()
            if (row, col) not in blocked:
                logger.debug(
                    "Food placed at (%d, %d) after %d draw(s).",
                    row, col, attempts,
                )
                return row, col
