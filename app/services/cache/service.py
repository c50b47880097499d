"""Main CacheService combining all cache operations."""

from app.services.cache.responses import ResponseCacheMixin


class CacheService(ResponseCacheMixin):
    """Async Redis caching service with graceful degradation.

    Combines cache operations through inheritance:
    - BaseCacheOperations: Low-level Redis primitives
    - ResponseCacheMixin: Normalized keys and timestamped response entries
    """
    pass


# Global cache service instance
_cache_service: CacheService | None = None


def get_cache_service() -> CacheService:
    """Get or create the global cache service instance."""
    global _cache_service

    if _cache_service is None:
        _cache_service = CacheService()

    return _cache_service
