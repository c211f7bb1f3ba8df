"""HTTP entrypoint for the leaderboard service."""

from __future__ import annotations

import logging
import time
from typing import Any

from aiohttp import web

from leaderboard.cache import ScoreCache
from leaderboard.config import LeaderboardConfig
from leaderboard.net.rate_limit import RateLimiter
from leaderboard.storage.errors import StoreError
from leaderboard.storage.memory import MemoryStore
from leaderboard.storage.sqlite import SqliteStore
from leaderboard.validation import ValidationError, parse_submission

logger = logging.getLogger(__name__)


class LeaderboardService:
    def __init__(self, config: LeaderboardConfig, store=None):
        self.config = config
        self.start_time = time.time()

        if store is None:
            store = SqliteStore(config.sqlite_path) if config.sqlite_enabled else MemoryStore()
        self.store = store
        self.cache: ScoreCache | None = None
        self.limiter = RateLimiter(config.submit_rate_per_sec, config.submit_burst)

    async def start(self) -> None:
        # Any StoreError here is fatal: the app must not serve without its seed.
        self.store.init()
        self.cache = ScoreCache(
            self.store,
            max_entries=self.config.cache_cap,
            checkpoint_interval=self.config.checkpoint_interval_sec,
            page_size=self.config.default_page_size,
        )
        await self.cache.start()

    async def stop(self) -> None:
        if self.cache is not None:
            await self.cache.stop()
        self.store.close()

    def health_payload(self) -> dict[str, Any]:
        stats = self.cache.stats() if self.cache is not None else {}
        return {"ok": True, "uptimeSec": time.time() - self.start_time, **stats}


def _cors_headers(config: LeaderboardConfig, origin: str | None) -> dict[str, str]:
    if not origin:
        return {}
    if config.cors_allow_all or origin in config.cors_allowed_origins:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


@web.middleware
async def cors_middleware(request: web.Request, handler):
    config = request.app["config"]
    origin = request.headers.get("Origin")
    if request.method == "OPTIONS":
        headers = {
            **_cors_headers(config, origin),
            "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
            "Access-Control-Max-Age": "86400",
        }
        return web.Response(status=204, headers=headers)

    try:
        resp = await handler(request)
    except web.HTTPException as e:
        e.headers.update(_cors_headers(config, origin))
        raise
    resp.headers.update(_cors_headers(config, origin))
    return resp


def _parse_limit(raw: str | None, default: int, cap: int) -> int:
    if raw is None:
        return default
    try:
        limit = int(raw)
    except ValueError:
        raise web.HTTPBadRequest(text="Invalid limit")
    return max(0, min(limit, cap))


def create_app(config: LeaderboardConfig, store=None) -> web.Application:
    app = web.Application(middlewares=[cors_middleware])
    svc = LeaderboardService(config, store=store)

    app["config"] = config
    app["svc"] = svc

    async def on_startup(_: web.Application):
        await svc.start()

    async def on_cleanup(_: web.Application):
        await svc.stop()

    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)

    async def health(_: web.Request):
        return web.json_response(svc.health_payload())

    async def get_scores(request: web.Request):
        limit = _parse_limit(request.query.get("limit"), config.api_page_size, config.api_page_size)
        return web.json_response([e.to_dict() for e in svc.cache.top_n(limit)])

    async def post_score(request: web.Request):
        client = request.remote or "unknown"
        if not svc.limiter.allow(client):
            raise web.HTTPTooManyRequests(text="Too Many Requests")

        try:
            body = await request.json()
        except ValueError:
            raise web.HTTPBadRequest(text="Invalid JSON")

        try:
            name, score = parse_submission(
                body, max_len=config.name_max_len, lo=config.score_min, hi=config.score_max
            )
        except ValidationError as e:
            raise web.HTTPBadRequest(text=str(e))

        svc.cache.submit(name, score)
        return web.json_response({"success": True})

    async def preflight(_: web.Request):
        return web.Response(status=204)

    app.router.add_get("/health", health)
    app.router.add_get("/api/scores", get_scores)
    app.router.add_post("/api/score", post_score)
    app.router.add_route("OPTIONS", "/{tail:.*}", preflight)

    return app


def main() -> None:
    config = LeaderboardConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    app = create_app(config)
    logger.info("Leaderboard server starting on http://%s:%d", config.host, config.port)
    try:
        web.run_app(app, host=config.host, port=config.port)
    except StoreError as e:
        logger.error("Startup failed: %s", e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
