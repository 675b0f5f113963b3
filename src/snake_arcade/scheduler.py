"""Cancellable repeating tasks for driving game ticks."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class RepeatingTask(Protocol):
    """Handle to a scheduled repeating callback."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule_repeating(
        self, period_ms: int, callback: Callable[[], None],
    ) -> RepeatingTask: ...


class AsyncioRepeatingTask:
    """Calls *callback* every *period_ms* on the running event loop.

    The callback is synchronous and runs to completion before the next sleep
    starts, so two ticks of the same task never overlap.
    """

    def __init__(
        self,
        period_ms: int,
        callback: Callable[[], None],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if period_ms <= 0:
            raise ValueError("period_ms must be positive.")
        self.period_ms = period_ms
        self._callback = callback
        loop = loop if loop is not None else asyncio.get_running_loop()
        self._task = loop.create_task(self._run())

    @property
    def active(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        if not self._task.done():
            self._task.cancel()

    async def _run(self) -> None:
        interval = self.period_ms / 1000.0
        try:
            while True:
                await asyncio.sleep(interval)
                self._callback()
        except asyncio.CancelledError:
            logger.debug("Repeating task (%d ms) cancelled.", self.period_ms)
        except Exception:
            logger.exception("Tick callback failed; repeating task stopped.")


class AsyncioScheduler:
    """Scheduler backed by the asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule_repeating(
        self, period_ms: int, callback: Callable[[], None],
    ) -> AsyncioRepeatingTask:
        return AsyncioRepeatingTask(period_ms, callback, loop=self._loop)
