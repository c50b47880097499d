"""Async Redis response cache using Upstash.

Features:
- Cache-aside pattern for endpoint responses
- Keys normalized for case and whitespace
- TTL management per endpoint
- Graceful degradation when cache is unavailable or misbehaving
"""

from app.services.cache.constants import (
    KEY_PREFIX_BUDGET,
    KEY_PREFIX_COMPARE,
    KEY_PREFIX_DOCUMENTS,
    KEY_PREFIX_OVERALL,
    KEY_PREFIX_PROFILE_MATCH,
    KEY_PREFIX_UNIVERSITY_SCORE,
    TTL_BUDGET,
    TTL_COMPARE,
    TTL_DOCUMENTS,
    TTL_OVERALL,
    TTL_PROFILE_MATCH,
    TTL_UNIVERSITY_SCORE,
)
from app.services.cache.responses import CacheEntry, normalize_key, now_ms
from app.services.cache.service import CacheService, get_cache_service

__all__ = [
    # TTL constants
    "TTL_UNIVERSITY_SCORE",
    "TTL_PROFILE_MATCH",
    "TTL_BUDGET",
    "TTL_OVERALL",
    "TTL_DOCUMENTS",
    "TTL_COMPARE",
    # Key prefix constants
    "KEY_PREFIX_UNIVERSITY_SCORE",
    "KEY_PREFIX_PROFILE_MATCH",
    "KEY_PREFIX_BUDGET",
    "KEY_PREFIX_OVERALL",
    "KEY_PREFIX_DOCUMENTS",
    "KEY_PREFIX_COMPARE",
    # Entries and keys
    "CacheEntry",
    "normalize_key",
    "now_ms",
    # Service
    "CacheService",
    "get_cache_service",
]
