"""Liveness probe and Prometheus exposition.

``/health`` reports the database and, when rate limiting is backed by Redis,
the Redis connection. Results are memoised for a few seconds so load
balancers polling aggressively do not hammer the pool.
"""

import secrets
import time
from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from redis import asyncio as aioredis
from sqlalchemy import text

from src.eventgate.core.config import get_settings
from src.eventgate.core.db import get_session

HEALTH_CACHE_TTL = 10  # seconds


@dataclass
class _Snapshot:
    report: dict[str, Any] = field(default_factory=dict)
    taken_at: float = 0.0

    def fresh(self, now: float) -> bool:
        return bool(self.report) and now - self.taken_at < HEALTH_CACHE_TTL


_snapshot = _Snapshot()


def reset_health_cache() -> None:
    global _snapshot
    _snapshot = _Snapshot()


def _http_status(report: dict[str, Any]) -> int:
    if report["status"] == "healthy":
        return status.HTTP_200_OK
    return status.HTTP_503_SERVICE_UNAVAILABLE


async def _check_redis(redis_url: str) -> None:
    client = aioredis.from_url(redis_url)
    try:
        await client.ping()
    finally:
        await client.aclose()


async def _probe_database() -> str:
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        return f"unhealthy: {e!s}"
    return "healthy"


async def _probe_redis() -> str:
    redis_url = get_settings().redis_url
    if not redis_url:
        return "not_configured"
    try:
        await _check_redis(redis_url)
    except Exception as e:
        return f"unhealthy: {e!s}"
    return "healthy"


async def collect_health() -> dict[str, Any]:
    """Probe every dependency and fold the results into one status."""
    database = await _probe_database()
    redis_state = await _probe_redis()

    if database != "healthy":
        overall = "unhealthy"
    elif redis_state.startswith("unhealthy"):
        # Redis only backs rate limiting
        overall = "degraded"
    else:
        overall = "healthy"

    return {
        "status": overall,
        "database": database,
        "redis": redis_state,
        "cached": False,
        "timestamp": time.time(),
    }


def setup_health_endpoint(app: FastAPI) -> None:
    @app.get("/health", tags=["health"])
    async def health() -> JSONResponse:
        global _snapshot

        now = time.time()
        if _snapshot.fresh(now):
            report = {
                **_snapshot.report,
                "cached": True,
                "cache_age_seconds": round(now - _snapshot.taken_at, 1),
            }
            return JSONResponse(content=report, status_code=_http_status(report))

        report = await collect_health()
        _snapshot = _Snapshot(report=report, taken_at=now)
        return JSONResponse(content=report, status_code=_http_status(report))


def _metrics_key_guard(expected: str):
    header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def guard(api_key: str | None = Depends(header)) -> None:
        if api_key is None or not secrets.compare_digest(api_key, expected):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    return guard


def setup_metrics(app: FastAPI) -> None:
    """Expose ``/metrics``; guarded by ``X-Metrics-Key`` when METRICS_API_KEY is set."""
    metrics_key = get_settings().metrics_api_key
    instrumentator = Instrumentator().instrument(app)
    dependencies = [Depends(_metrics_key_guard(metrics_key))] if metrics_key else None
    instrumentator.expose(app, endpoint="/metrics", dependencies=dependencies)
