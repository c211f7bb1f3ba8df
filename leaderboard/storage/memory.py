"""In-process store, used when SQLite persistence is disabled."""

from __future__ import annotations

from typing import Iterable

from leaderboard.models import ScoreEntry
from leaderboard.storage.errors import StoreError


class MemoryStore:
    def __init__(self, entries: Iterable[ScoreEntry] = ()):
        self._rows: list[ScoreEntry] | None = None
        self._initial = list(entries)

    def init(self) -> None:
        if self._rows is None:
            self._rows = list(self._initial)

    def close(self) -> None:
        # Rows outlive close() so a restarted cache can reseed from them.
        pass

    def _require_rows(self) -> list[ScoreEntry]:
        if self._rows is None:
            raise StoreError("memory store is not initialized")
        return self._rows

    def load_all(self) -> list[ScoreEntry]:
        rows = list(self._require_rows())
        rows.sort(key=lambda e: e.sort_key)
        return rows

    def insert_batch(self, entries: Iterable[ScoreEntry]) -> None:
        rows = self._require_rows()
        # Build the batch first so a failing iterable leaves no partial rows.
        batch = list(entries)
        rows.extend(batch)

    def count(self) -> int:
        return len(self._require_rows())

    def rows(self) -> list[ScoreEntry]:
        """Rows in insertion order."""
        return list(self._require_rows())
