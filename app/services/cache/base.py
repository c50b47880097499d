"""Base cache operations - low-level Redis primitives."""

import asyncio

from upstash_redis.asyncio import Redis

from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class BaseCacheOperations:
    """Low-level Redis operations with graceful degradation.

    With no Redis configured, or after a failed startup ping, every read
    is a miss and every write a no-op.
    """

    def __init__(self) -> None:
        """Initialize the cache service."""
        settings = get_settings()
        self._client: Redis | None = None

        if settings.redis_available:
            try:
                self._client = Redis(
                    url=settings.upstash_redis_rest_url.strip(),
                    token=settings.upstash_redis_rest_token.strip(),
                )
                logger.info("Redis cache initialized")
            except Exception as e:
                logger.warning("Failed to initialize Redis cache", error=str(e))
                self._client = None
        else:
            logger.info("Redis cache not configured, response cache disabled")

    @property
    def is_available(self) -> bool:
        """Check if cache is available."""
        return self._client is not None

    async def connect(self, timeout: float = 5.0) -> bool:
        """Verify connectivity once at startup.

        A failed ping switches the service to disabled mode for the rest of
        the process lifetime.
        """
        if not self.is_available:
            return False

        if await self.check_health(timeout=timeout):
            logger.info("Redis connected, response cache enabled")
            return True

        logger.error("Redis connect failed, response cache disabled")
        self._client = None
        return False

    # ========== String operations ==========

    async def get(self, key: str) -> str | None:
        """Get a value from cache."""
        if not self.is_available:
            return None

        try:
            result = await self._client.get(key)  # type: ignore
            return result if isinstance(result, str) else None
        except Exception as e:
            logger.debug("Cache get failed", key=key, error=str(e))
            return None

    async def set(
        self,
        key: str,
        value: str,
        ttl: int | None = None,
    ) -> bool:
        """Set a value in cache with optional TTL."""
        if not self.is_available:
            return False

        try:
            if ttl:
                await self._client.set(key, value, ex=ttl)  # type: ignore
            else:
                await self._client.set(key, value)  # type: ignore
            return True
        except Exception as e:
            logger.error("Cache set failed", key=key, error=str(e))
            return False

    # ========== Health check ==========

    async def check_health(self, timeout: float = 5.0) -> bool:
        """Check Redis connectivity with timeout."""
        if not self.is_available:
            return False

        try:
            result = await asyncio.wait_for(
                self._client.ping(),  # type: ignore
                timeout=timeout
            )
            return bool(result)
        except asyncio.TimeoutError:
            logger.error("Redis health check timed out", timeout=timeout)
            return False
        except Exception as e:
            logger.error("Redis health check failed", error=str(e))
            return False
