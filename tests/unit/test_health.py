"""Tests for the health endpoint (src/eventgate/core/health.py)."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.eventgate.core import health

pytestmark = pytest.mark.unit


def _session_factory(session: AsyncMock):
    @asynccontextmanager
    async def _get_session():
        yield session

    return _get_session


@pytest.fixture(autouse=True)
def _reset_cache():
    health.reset_health_cache()
    yield
    health.reset_health_cache()


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    health.setup_health_endpoint(app)
    return TestClient(app)


def test_healthy_database(client):
    session = AsyncMock()
    with patch.object(health, "get_session", _session_factory(session)):
        response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "healthy"
    assert body["redis"] == "not_configured"
    session.execute.assert_awaited_once()


def test_database_down_is_unhealthy(client):
    session = AsyncMock()
    session.execute.side_effect = ConnectionError("refused")
    with patch.object(health, "get_session", _session_factory(session)):
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["database"].startswith("unhealthy")


def test_redis_down_is_degraded(client):
    settings = MagicMock(redis_url="redis://localhost:6390/0")
    with (
        patch.object(health, "get_session", _session_factory(AsyncMock())),
        patch.object(health, "get_settings", return_value=settings),
        patch.object(health, "_check_redis", AsyncMock(side_effect=ConnectionError("down"))),
    ):
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"


def test_result_is_cached(client):
    session = AsyncMock()
    with patch.object(health, "get_session", _session_factory(session)):
        first = client.get("/health")
        second = client.get("/health")

    assert first.json()["cached"] is False
    assert second.json()["cached"] is True
    session.execute.assert_awaited_once()
