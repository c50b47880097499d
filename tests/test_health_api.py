"""Health API endpoint tests.

Tests for: root, health, liveness, cache check.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import AsyncClient

from app.services.cache import CacheService

pytestmark = pytest.mark.asyncio


def _cache(available: bool, healthy: bool = True) -> MagicMock:
    mock = MagicMock(spec=CacheService)
    mock.is_available = available
    mock.check_health = AsyncMock(return_value=healthy)
    return mock


def _llm_settings(configured: bool) -> MagicMock:
    settings = MagicMock()
    settings.llm_provider = "groq"
    settings.groq_api_key = "gsk-test" if configured else ""
    settings.app_version = "1.0.0"
    return settings


@pytest.fixture
def healthy_cache():
    with patch("app.api.routes.health.get_cache_service", return_value=_cache(True)):
        yield


# =============================================================================
# Smoke tests (parametrized)
# =============================================================================


@pytest.mark.parametrize("endpoint", ["/", "/health", "/health/live", "/health/cache"])
async def test_health_endpoints_respond(client: AsyncClient, endpoint: str):
    resp = await client.get(endpoint)
    assert resp.status_code == 200


# =============================================================================
# Root
# =============================================================================


async def test_root_status_and_version(client: AsyncClient):
    resp = await client.get("/")
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["name"] == "UniHandle Insights"
    assert "version" in data


# =============================================================================
# Health
# =============================================================================


async def test_health_response_structure(client: AsyncClient):
    resp = await client.get("/health")
    data = resp.json()
    assert {"status", "services", "version", "timestamp"} <= set(data)
    assert {"cache", "llm"} <= set(data["services"])


async def test_health_all_good(client: AsyncClient, healthy_cache):
    with patch("app.api.routes.health.get_settings", return_value=_llm_settings(True)):
        resp = await client.get("/health")
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["services"]["cache"]["status"] == "healthy"
    assert data["services"]["llm"]["details"]["configured"] is True


async def test_health_cache_down_is_degraded(client: AsyncClient):
    with patch("app.api.routes.health.get_cache_service", return_value=_cache(True, healthy=False)), \
         patch("app.api.routes.health.get_settings", return_value=_llm_settings(True)):
        resp = await client.get("/health")
    data = resp.json()
    assert data["status"] == "degraded"
    assert data["services"]["cache"]["status"] == "degraded"


async def test_health_missing_llm_key_is_unhealthy(client: AsyncClient, healthy_cache):
    with patch("app.api.routes.health.get_settings", return_value=_llm_settings(False)):
        resp = await client.get("/health")
    data = resp.json()
    assert resp.status_code == 200
    assert data["status"] == "unhealthy"
    assert data["services"]["llm"]["status"] == "unhealthy"


# =============================================================================
# Liveness
# =============================================================================


async def test_liveness_ok(client: AsyncClient):
    resp = await client.get("/health/live")
    assert resp.json()["status"] == "ok"


# =============================================================================
# Cache Check
# =============================================================================


async def test_cache_check_not_configured(client: AsyncClient):
    with patch("app.api.routes.health.get_cache_service", return_value=_cache(False)):
        resp = await client.get("/health/cache")
    data = resp.json()
    assert data["service"] == "cache"
    assert data["provider"] == "not configured"
    assert data["status"] == "degraded"


async def test_cache_check_healthy(client: AsyncClient, healthy_cache):
    resp = await client.get("/health/cache")
    data = resp.json()
    assert data["status"] == "healthy"
    assert "latency_ms" in data
