"""Test configuration and fixtures.

Provides isolated test fixtures for:
- HTTP client with dependency overrides
- Mock services for unit testing
"""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.services.cache import CacheService
from app.services.insights import InsightOrchestrator, get_insight_orchestrator
from app.services.llm import LLMService
from app.services.rate_limit import RateLimitService, get_rate_limit_service
from app.services.reddit import RedditFetcher


# =============================================================================
# Mock Service Fixtures
# =============================================================================

@pytest.fixture
def mock_cache_service() -> MagicMock:
    """Create a mock cache service that always misses."""
    mock = MagicMock(spec=CacheService)
    mock.is_available = False
    mock.get_response = AsyncMock(return_value=None)
    mock.set_response = AsyncMock(return_value=False)
    return mock


@pytest.fixture
def mock_fetcher() -> MagicMock:
    """Create a mock Reddit fetcher returning no evidence."""
    mock = MagicMock(spec=RedditFetcher)
    mock.fetch_light_snippets = AsyncMock(return_value=[])
    mock.search_thread_details = AsyncMock(return_value=[])
    mock.search_threads = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def mock_llm_service() -> MagicMock:
    """Create a mock LLM service that returns an empty JSON object."""
    mock = MagicMock(spec=LLMService)
    mock.complete = AsyncMock(return_value="{}")
    mock.describe = MagicMock(return_value={"provider": "groq", "model": "openai/gpt-oss-120b"})
    return mock


@pytest.fixture
def orchestrator(
    mock_cache_service: MagicMock,
    mock_fetcher: MagicMock,
    mock_llm_service: MagicMock,
) -> InsightOrchestrator:
    """Orchestrator wired to mock cache, fetcher and completion services."""
    return InsightOrchestrator(
        cache_service=mock_cache_service,
        fetcher=mock_fetcher,
        llm_service=mock_llm_service,
    )


@pytest.fixture
def mock_rate_limiter() -> MagicMock:
    """Create a mock rate limiter that allows everything."""
    mock = MagicMock(spec=RateLimitService)
    mock.check_api_limit = AsyncMock(return_value=(True, -1))
    mock.window_seconds = 60
    return mock


# =============================================================================
# HTTP Client Fixtures
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def client(
    orchestrator: InsightOrchestrator,
    mock_rate_limiter: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with service overrides."""
    app.dependency_overrides[get_insight_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_rate_limit_service] = lambda: mock_rate_limiter

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
