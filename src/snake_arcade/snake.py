"""Snake body representation and movement."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Iterable

from snake_arcade.grid import Cell


class Direction(enum.Enum):
    """Cardinal movement directions with (row_delta, col_delta) values."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def opposite(self) -> Direction:
        """The direction that would cause an instant 180° reversal."""
        return _OPPOSITES[self]

    def offset(self, cell: Cell) -> Cell:
        """Return *cell* moved one step in this direction."""
        dr, dc = self.value
        return cell[0] + dr, cell[1] + dc


_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of (row, col) body segments.

    The head is ``body[0]``; the tail is ``body[-1]``.
    """

    def __init__(self, segments: Iterable[Cell]) -> None:
        self.body: deque[Cell] = deque(
            (int(r), int(c)) for r, c in segments
        )
        if not self.body:
            raise ValueError("Snake length must be at least 1.")

    @property
    def head(self) -> Cell:
        """Return the head coordinate."""
        return self.body[0]

    @property
    def cells(self) -> tuple[Cell, ...]:
        return tuple(self.body)

    def __len__(self) -> int:
        return len(self.body)

    def advance(self, new_head: Cell, grow: bool = False) -> tuple[Cell, ...]:
        """Move the head to *new_head*, keeping the tail only when growing.

        Returns the updated body, head first.
        """
        self.body.appendleft(new_head)
        if not grow:
            self.body.pop()
        return self.cells

    def collides_with_self(self, cell: Cell, grow: bool = False) -> bool:
        """Check *cell* against the body segments that remain after a move.

        The head is skipped, and so is the tail unless the snake is about to
        grow, since it vacates its cell on the same tick.
        """
        segments = list(self.body)[1:]
        if not grow and segments:
            segments.pop()
        return cell in segments

    def occupies(self, cell: Cell) -> bool:
        """Check whether the snake occupies a given cell."""
        return cell in self.body
