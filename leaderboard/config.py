"""Service settings, overridable from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class LeaderboardConfig:
    # Network
    host: str = "0.0.0.0"
    port: int = 3212
    cors_allow_all: bool = True
    cors_allowed_origins: list[str] = field(default_factory=list)

    # Persistence
    sqlite_enabled: bool = True
    sqlite_path: str = "scores.db"
    checkpoint_interval_sec: float = 10.0

    # Cache. A cap of 0 keeps every entry in memory.
    max_cached_entries: int = 1000
    default_page_size: int = 10
    api_page_size: int = 100

    # Submission sanity checks
    name_max_len: int = 12
    score_min: int = 0
    score_max: int = 200
    submit_rate_per_sec: float = 1.0
    submit_burst: float = 5.0

    log_level: str = "INFO"

    @property
    def cache_cap(self) -> int | None:
        return self.max_cached_entries if self.max_cached_entries > 0 else None

    @staticmethod
    def _parse_bool(v: str | None, default: bool) -> bool:
        if v is None:
            return default
        return v.strip().lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _parse_int(v: str | None, default: int) -> int:
        if v is None:
            return default
        try:
            return int(v)
        except ValueError:
            return default

    @staticmethod
    def _parse_float(v: str | None, default: float) -> float:
        if v is None:
            return default
        try:
            return float(v)
        except ValueError:
            return default

    @classmethod
    def from_env(cls) -> "LeaderboardConfig":
        cfg = cls()
        env = os.environ
        cfg.host = env.get("LEADERBOARD_HOST", cfg.host)
        cfg.port = cls._parse_int(env.get("LEADERBOARD_PORT"), cfg.port)
        cfg.cors_allow_all = cls._parse_bool(env.get("LEADERBOARD_CORS_ALLOW_ALL"), cfg.cors_allow_all)
        origins = env.get("LEADERBOARD_CORS_ORIGINS")
        if origins:
            cfg.cors_allowed_origins = [o.strip() for o in origins.split(",") if o.strip()]

        cfg.sqlite_enabled = cls._parse_bool(env.get("LEADERBOARD_SQLITE"), cfg.sqlite_enabled)
        cfg.sqlite_path = env.get("LEADERBOARD_DB_PATH", cfg.sqlite_path)
        cfg.checkpoint_interval_sec = cls._parse_float(
            env.get("LEADERBOARD_CHECKPOINT_SEC"), cfg.checkpoint_interval_sec
        )

        cfg.max_cached_entries = cls._parse_int(env.get("LEADERBOARD_MAX_ENTRIES"), cfg.max_cached_entries)
        cfg.default_page_size = cls._parse_int(env.get("LEADERBOARD_PAGE_SIZE"), cfg.default_page_size)

        cfg.submit_rate_per_sec = cls._parse_float(env.get("LEADERBOARD_SUBMIT_RATE"), cfg.submit_rate_per_sec)
        cfg.submit_burst = cls._parse_float(env.get("LEADERBOARD_SUBMIT_BURST"), cfg.submit_burst)

        cfg.log_level = env.get("LEADERBOARD_LOG_LEVEL", cfg.log_level).upper()
        return cfg
