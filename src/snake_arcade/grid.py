"""Grid representation for the snake game."""

from __future__ import annotations

import enum
from collections.abc import Iterable

import numpy as np

Cell = tuple[int, int]

_MIN_BOARD_SIZE = 4


class CellType(enum.IntEnum):
    """Integer codes stored in a rendered grid matrix."""

    EMPTY = 0
    BODY = 1
    HEAD = 2
    FOOD = 3


class Grid:
    """Fixed-size square board.

    Coordinates use (row, col) ordering consistent with NumPy indexing.
    The grid holds no game state of its own; occupancy lives in the snake
    and the food cell, and :meth:`render` paints them for renderers.
    """

    def __init__(self, board_size: int = 15) -> None:
        if board_size < _MIN_BOARD_SIZE:
            raise ValueError(
                f"Board size must be at least {_MIN_BOARD_SIZE}.",
            )
        self.board_size = board_size

    @property
    def capacity(self) -> int:
        """Total number of cells on the board."""
        return self.board_size * self.board_size

    def in_bounds(self, cell: Cell) -> bool:
        """Check whether a coordinate lies within the grid."""
        row, col = cell
        return 0 <= row < self.board_size and 0 <= col < self.board_size

    def render(
        self, snake: Iterable[Cell], food: Cell | None = None,
    ) -> np.ndarray:
        """Paint snake and food into an ``int8`` matrix of :class:`CellType`."""
        cells = np.zeros((self.board_size, self.board_size), dtype=np.int8)
        if food is not None and self.in_bounds(food):
            cells[food] = CellType.FOOD
        for i, seg in enumerate(snake):
            if self.in_bounds(seg):
                cells[seg] = CellType.HEAD if i == 0 else CellType.BODY
        return cells
