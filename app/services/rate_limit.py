"""Rate limiting service using Upstash Redis REST API.

Implements sliding window rate limiting per client for the insight
endpoints. Every request can trigger paid completion calls, so the
limit is the main guard against a single client draining the budget.
Uses direct REST API calls for async compatibility.
"""

import time
from functools import lru_cache

import httpx

from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class RateLimitService:
    """Rate limiting service using Upstash Redis REST API.

    Fails open: when the limiter itself is unreachable, requests pass.
    """

    def __init__(self) -> None:
        """Initialize rate limit service."""
        settings = get_settings()
        self._enabled = settings.rate_limit_enabled and settings.redis_available
        self._url = settings.upstash_redis_rest_url
        self._token = settings.upstash_redis_rest_token
        self._api_limit = settings.rate_limit_requests_per_minute
        self._window_seconds = 60

        self._client: httpx.AsyncClient | None = None

        if self._enabled:
            logger.info("Rate limiting initialized", api_limit=self._api_limit)
        else:
            logger.info("Rate limiting disabled")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create persistent HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(5.0, connect=2.0),
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
                headers={"Authorization": f"Bearer {self._token}"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def is_enabled(self) -> bool:
        """Check if rate limiting is enabled."""
        return self._enabled

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    async def _check_limit(self, key: str, limit: int) -> tuple[bool, int]:
        """Check rate limit using sliding window counter.

        Args:
            key: Redis key for the rate limit counter
            limit: Maximum requests allowed in window

        Returns:
            Tuple of (allowed, remaining_requests)
        """
        if not self._enabled:
            return True, -1

        try:
            current_time = int(time.time())
            window_start = current_time - self._window_seconds
            request_id = f"{current_time}:{time.time_ns()}"

            client = await self._get_client()

            # Pipeline: remove old entries, add new, set expiry, count
            response = await client.post(
                f"{self._url}/pipeline",
                json=[
                    ["ZREMRANGEBYSCORE", key, "0", str(window_start)],
                    ["ZADD", key, str(current_time), request_id],
                    ["EXPIRE", key, str(self._window_seconds * 2)],
                    ["ZCARD", key],
                ],
            )
            response.raise_for_status()
            results = response.json()

            # ZCARD result is the last item in pipeline
            count = results[-1].get("result", 0) if results else 0

            return count <= limit, max(0, limit - count)

        except Exception as e:
            logger.warning("Rate limit check failed", key=key, error=str(e))
            return True, -1

    async def check_api_limit(self, identifier: str) -> tuple[bool, int]:
        """Check the insight API rate limit.

        Args:
            identifier: Client identifier (IP address)

        Returns:
            Tuple of (allowed, remaining_requests)
        """
        key = f"ratelimit:api:{identifier}"
        return await self._check_limit(key, self._api_limit)


@lru_cache
def get_rate_limit_service() -> RateLimitService:
    """Get or create the rate limit service instance (cached)."""
    return RateLimitService()
