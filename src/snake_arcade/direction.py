"""Buffered direction input with reversal guard."""

from __future__ import annotations

from snake_arcade.snake import Direction


class DirectionController:
    """Holds the committed heading and the latest accepted request.

    Requests are validated against the committed direction, not the pending
    one, so a tick can never apply the reverse of the previous tick's heading.
    Between ticks the last valid request wins.
    """

    def __init__(self, initial: Direction = Direction.RIGHT) -> None:
        self.current = initial
        self.pending = initial

    def request(self, candidate: Direction) -> bool:
        """Buffer *candidate* for the next tick. Returns False on reversal."""
        if candidate is self.current.opposite:
            return False
        self.pending = candidate
        return True

    def commit(self) -> Direction:
        """Apply the buffered direction; called once at the start of a tick."""
        self.current = self.pending
        return self.current
