"""Per-client quotas (token bucket)."""

from __future__ import annotations

import time


class TokenBucket:
    def __init__(self, rate_per_sec: float, burst: float):
        self.rate = float(rate_per_sec)
        self.capacity = float(burst)
        self.tokens = float(burst)
        self.last = time.perf_counter()

    def refill(self, now: float) -> None:
        dt = now - self.last
        self.last = now
        self.tokens = min(self.capacity, self.tokens + dt * self.rate)

    def allow(self, cost: float = 1.0) -> bool:
        self.refill(time.perf_counter())
        if self.tokens >= cost:
            self.tokens -= cost
            return True
        return False


class RateLimiter:
    """One bucket per client key; full buckets are pruned once the table grows."""

    def __init__(self, rate_per_sec: float, burst: float, max_clients: int = 10_000):
        self.rate = float(rate_per_sec)
        self.burst = float(burst)
        self.max_clients = int(max_clients)
        self._buckets: dict[str, TokenBucket] = {}

    def __len__(self) -> int:
        return len(self._buckets)

    def allow(self, key: str, cost: float = 1.0) -> bool:
        bucket = self._buckets.get(key)
        if bucket is None:
            if len(self._buckets) >= self.max_clients:
                self.prune()
            bucket = TokenBucket(self.rate, self.burst)
            self._buckets[key] = bucket
        return bucket.allow(cost)

    def prune(self) -> None:
        now = time.perf_counter()
        for key in list(self._buckets):
            bucket = self._buckets[key]
            bucket.refill(now)
            if bucket.tokens >= bucket.capacity:
                del self._buckets[key]
