"""SQLite persistence for score entries (append-only)."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Iterable

from leaderboard.models import ScoreEntry
from leaderboard.storage.errors import StoreError

logger = logging.getLogger(__name__)


class SqliteStore:
    def __init__(self, path: str):
        self.path = path
        self.conn: sqlite3.Connection | None = None

    def init(self) -> None:
        """Open the database and create the scores table if it is missing."""
        if self.path != ":memory:":
            resolved = Path(self.path).expanduser()
            resolved.parent.mkdir(parents=True, exist_ok=True)
            self.path = str(resolved)
        try:
            # The checkpoint task writes from an executor thread.
            self.conn = sqlite3.connect(self.path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            with self.conn:
                self.conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS scores (
                      id INTEGER PRIMARY KEY AUTOINCREMENT,
                      name TEXT,
                      score INTEGER,
                      timestamp INTEGER
                    )
                    """
                )
        except sqlite3.Error as e:
            self.close()
            raise StoreError(f"failed to open score database at {self.path}: {e}") from e
        logger.info("Score database ready at %s", self.path)

    def close(self) -> None:
        if self.conn:
            try:
                self.conn.close()
            except sqlite3.Error:
                logger.warning("Error while closing %s", self.path, exc_info=True)
            finally:
                self.conn = None

    def _require_conn(self) -> sqlite3.Connection:
        if self.conn is None:
            raise StoreError("score database is not open")
        return self.conn

    def load_all(self) -> list[ScoreEntry]:
        conn = self._require_conn()
        try:
            cur = conn.execute("SELECT name, score, timestamp FROM scores ORDER BY score DESC, timestamp DESC")
            return [ScoreEntry.from_row(row) for row in cur.fetchall()]
        except sqlite3.Error as e:
            raise StoreError(f"failed to load scores: {e}") from e

    def insert_batch(self, entries: Iterable[ScoreEntry]) -> None:
        conn = self._require_conn()
        rows = [{"name": e.name, "score": e.score, "timestamp": e.timestamp} for e in entries]
        try:
            # `with conn` commits on success and rolls the whole batch back on error.
            with conn:
                conn.executemany(
                    "INSERT INTO scores (name, score, timestamp) VALUES (:name, :score, :timestamp)",
                    rows,
                )
        except sqlite3.Error as e:
            raise StoreError(f"failed to insert {len(rows)} scores: {e}") from e

    def count(self) -> int:
        conn = self._require_conn()
        try:
            return int(conn.execute("SELECT COUNT(*) FROM scores").fetchone()[0])
        except sqlite3.Error as e:
            raise StoreError(f"failed to count scores: {e}") from e
