"""Shared fixtures and test doubles."""

from __future__ import annotations

import pytest

from snake_arcade.config import GameConfig
from snake_arcade.highscore import InMemoryHighScoreStore
from snake_arcade.session import Session


class ManualTask:
    def __init__(self, period_ms, callback):
        self.period_ms = period_ms
        self.callback = callback
        self.active = True

    def cancel(self):
        self.active = False


class ManualScheduler:
    """Records scheduled tasks; ticks only fire when the test says so."""

    def __init__(self):
        self.tasks: list[ManualTask] = []

    def schedule_repeating(self, period_ms, callback):
        task = ManualTask(period_ms, callback)
        self.tasks.append(task)
        return task

    @property
    def active_tasks(self) -> list[ManualTask]:
        return [t for t in self.tasks if t.active]

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            for task in self.active_tasks:
                task.callback()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def high_scores():
    return InMemoryHighScoreStore()


@pytest.fixture()
def make_session(scheduler, high_scores):
    def _make(**config_kwargs) -> Session:
        config = GameConfig(seed=0, **config_kwargs)
        return Session(config, high_scores=high_scores, scheduler=scheduler)

    return _make
