"""Write-behind ranked score cache.

Writes land in memory and return immediately. A background task drains the
pending buffer into the durable store every ``checkpoint_interval`` seconds,
and ``stop()`` performs a final drain before shutdown.
"""

from __future__ import annotations

import asyncio
import bisect
import logging
import threading
import time
from typing import Any, Callable, Protocol

from leaderboard.models import ScoreEntry

logger = logging.getLogger(__name__)


class DurableStore(Protocol):
    def load_all(self) -> list[ScoreEntry]: ...

    def insert_batch(self, entries: list[ScoreEntry]) -> None: ...


def now_ms() -> int:
    return int(time.time() * 1000)


def _sort_key(entry: ScoreEntry) -> tuple[int, int]:
    return entry.sort_key


class ScoreCache:
    """Ranked view of the best scores plus a buffer of not-yet-persisted entries.

    ``_lock`` guards both ``_ranked`` and ``_pending``. ``_flush_lock`` keeps
    checkpoints from overlapping so batches reach the store in submission order.
    Entries evicted by the cap stay in ``_pending`` until they are flushed.
    """

    def __init__(
        self,
        store: DurableStore,
        *,
        max_entries: int | None = 1000,
        checkpoint_interval: float = 10.0,
        page_size: int = 10,
        clock: Callable[[], int] = now_ms,
    ):
        self.store = store
        self.max_entries = max_entries
        self.checkpoint_interval = float(checkpoint_interval)
        self.page_size = int(page_size)
        self._clock = clock

        self._lock = threading.Lock()
        self._flush_lock = threading.Lock()

        loaded = sorted(store.load_all(), key=_sort_key)
        self._last_ts = max((e.timestamp for e in loaded), default=0)
        if max_entries is not None:
            del loaded[max_entries:]
        self._ranked: list[ScoreEntry] = loaded
        self._pending: list[ScoreEntry] = []

        self._flushed = 0
        self._dropped = 0
        self._checkpoint_failures = 0
        self._last_checkpoint_at: float | None = None

        self._task: asyncio.Task | None = None
        logger.info("Score cache seeded with %d entries", len(self._ranked))

    def __len__(self) -> int:
        with self._lock:
            return len(self._ranked)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def submit(self, name: str, score: int) -> ScoreEntry:
        with self._lock:
            # Never step behind an already issued or seeded timestamp.
            ts = max(self._clock(), self._last_ts)
            self._last_ts = ts
            entry = ScoreEntry(name=name, score=int(score), timestamp=ts)
            self._pending.append(entry)
            # insort_left puts the new entry ahead of equal keys: most recent first.
            bisect.insort_left(self._ranked, entry, key=_sort_key)
            if self.max_entries is not None and len(self._ranked) > self.max_entries:
                del self._ranked[self.max_entries :]
        return entry

    def top_n(self, limit: int | None = None) -> list[ScoreEntry]:
        if limit is None:
            limit = self.page_size
        with self._lock:
            limit = max(0, min(int(limit), len(self._ranked)))
            return self._ranked[:limit]

    def checkpoint(self) -> int:
        """Flush pending entries as one batch. Returns the number of rows written."""
        with self._flush_lock:
            with self._lock:
                if not self._pending:
                    return 0
                batch, self._pending = self._pending, []

            logger.info("Saving %d new scores to DB...", len(batch))
            try:
                self.store.insert_batch(batch)
            except Exception:
                # The batch is not retried; later checkpoints only see newer entries.
                self._checkpoint_failures += 1
                self._dropped += len(batch)
                logger.exception("Checkpoint failed, dropped %d scores", len(batch))
                return 0

            self._flushed += len(batch)
            self._last_checkpoint_at = time.time()
            return len(batch)

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._checkpoint_loop())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        # Final drain runs inline so it completes before the process exits.
        self.checkpoint()

    async def _checkpoint_loop(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            await asyncio.sleep(self.checkpoint_interval)
            try:
                await loop.run_in_executor(None, self.checkpoint)
            except Exception:
                logger.exception("Checkpoint task error")

    def stats(self) -> dict[str, Any]:
        with self._lock:
            ranked = len(self._ranked)
            pending = len(self._pending)
        return {
            "ranked": ranked,
            "pending": pending,
            "flushed": self._flushed,
            "dropped": self._dropped,
            "checkpointFailures": self._checkpoint_failures,
            "lastCheckpointAt": self._last_checkpoint_at,
        }
