from __future__ import annotations

import pytest

from leaderboard.models import ScoreEntry
from leaderboard.storage.errors import StoreError
from leaderboard.storage.memory import MemoryStore


class StepClock:
    """Deterministic millisecond clock: each call advances by ``step``."""

    def __init__(self, start: int = 1_000, step: int = 1):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


class FlakyStore(MemoryStore):
    """Memory store whose next ``insert_batch`` calls can be made to fail."""

    def __init__(self, entries=()):
        super().__init__(entries)
        self.fail_next = 0
        self.batches: list[list[ScoreEntry]] = []

    def insert_batch(self, entries) -> None:
        batch = list(entries)
        if self.fail_next:
            self.fail_next -= 1
            raise StoreError("database is locked")
        super().insert_batch(batch)
        self.batches.append(batch)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store():
    s = FlakyStore()
    s.init()
    return s
