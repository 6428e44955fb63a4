from __future__ import annotations

import pytest

from task_tracker.persistence import PersistenceAdapter
from task_tracker.storage import InMemoryStorage
from task_tracker.store import TaskStore
from task_tracker.tracker import TaskTracker


class FixedClock:
    """Deterministic millisecond clock; the time only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1) -> None:
        self.now += ms


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def persistence(storage: InMemoryStorage) -> PersistenceAdapter:
    return PersistenceAdapter(storage)


@pytest.fixture()
def store(clock: FixedClock) -> TaskStore:
    return TaskStore(clock=clock)


@pytest.fixture()
def tracker(persistence: PersistenceAdapter, clock: FixedClock) -> TaskTracker:
    return TaskTracker(persistence, clock=clock)
