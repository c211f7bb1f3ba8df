from __future__ import annotations

from leaderboard.config import LeaderboardConfig


def test_defaults():
    cfg = LeaderboardConfig()
    assert cfg.checkpoint_interval_sec == 10.0
    assert cfg.cache_cap == 1000
    assert cfg.default_page_size == 10
    assert cfg.api_page_size == 100


def test_from_env(monkeypatch):
    monkeypatch.setenv("LEADERBOARD_PORT", "9000")
    monkeypatch.setenv("LEADERBOARD_DB_PATH", "/tmp/x.db")
    monkeypatch.setenv("LEADERBOARD_CHECKPOINT_SEC", "2.5")
    monkeypatch.setenv("LEADERBOARD_MAX_ENTRIES", "0")
    monkeypatch.setenv("LEADERBOARD_SQLITE", "off")
    monkeypatch.setenv("LEADERBOARD_CORS_ORIGINS", "https://a.example, ,https://b.example")
    monkeypatch.setenv("LEADERBOARD_LOG_LEVEL", "debug")
    cfg = LeaderboardConfig.from_env()

    assert cfg.port == 9000
    assert cfg.sqlite_path == "/tmp/x.db"
    assert cfg.checkpoint_interval_sec == 2.5
    assert cfg.cache_cap is None
    assert cfg.sqlite_enabled is False
    assert cfg.cors_allowed_origins == ["https://a.example", "https://b.example"]
    assert cfg.log_level == "DEBUG"


def test_unparseable_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("LEADERBOARD_PORT", "http")
    monkeypatch.setenv("LEADERBOARD_CHECKPOINT_SEC", "soon")
    cfg = LeaderboardConfig.from_env()
    assert cfg.port == 3212
    assert cfg.checkpoint_interval_sec == 10.0
