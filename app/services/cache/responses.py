"""Response cache: normalized keys and timestamped JSON entries.

Only successful, already-normalized results are written. Reads are
fail-open: a missing, expired or corrupt entry is a miss, never an error.
"""

import re
import time
from dataclasses import dataclass
from typing import Any

import orjson

from app.core.exceptions import CacheFailure
from app.core.logging import get_logger
from app.services.cache.base import BaseCacheOperations
from app.services.cache.constants import KEY_DELIMITER

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")


def _normalize_part(part: Any) -> str:
    if part is None:
        return ""
    text = _WHITESPACE.sub(" ", str(part).strip().lower())
    # Escape "%" first so an escaped delimiter can't be forged from input.
    return text.replace("%", "%25").replace(KEY_DELIMITER, "%3a")


def normalize_key(parts: list[Any] | tuple[Any, ...]) -> str:
    """Build a cache key that ignores case and incidental whitespace.

    A delimiter inside a part is escaped, so parts never run together.

    >>> normalize_key(["  Glasgow  ", "UK"])
    'glasgow:uk'
    """
    return KEY_DELIMITER.join(p for p in map(_normalize_part, parts) if p)


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheEntry:
    """A cached response payload and the moment it was produced."""

    data: Any
    cached_at: int

    def to_json(self) -> str:
        return orjson.dumps({"data": self.data, "cachedAt": self.cached_at}).decode()

    @classmethod
    def from_json(cls, raw: str) -> "CacheEntry":
        """Decode a stored entry, raising CacheFailure when it is unusable."""
        try:
            parsed = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise CacheFailure(f"Corrupt cache entry: {e}") from e

        if not isinstance(parsed, dict):
            raise CacheFailure("Cache entry is not an object")

        cached_at = parsed.get("cachedAt")
        if isinstance(cached_at, bool) or not isinstance(cached_at, (int, float)):
            raise CacheFailure("Cache entry has no numeric cachedAt")

        return cls(data=parsed.get("data"), cached_at=int(cached_at))


class ResponseCacheMixin(BaseCacheOperations):
    """Endpoint response caching on top of the string primitives."""

    async def get_entry(self, key: str) -> CacheEntry | None:
        """Read an entry; any failure is reported as a miss."""
        if not self.is_available or not key:
            return None

        try:
            raw = await self.get(key)
            if not raw:
                return None
            return CacheEntry.from_json(raw)
        except CacheFailure as e:
            logger.debug("Discarding unusable cache entry", key=key, error=e.message)
            return None
        except Exception as e:
            logger.debug("Cache read failed", key=key, error=str(e))
            return None

    async def set_entry(self, key: str, data: Any, ttl_seconds: int) -> bool:
        """Store ``data`` stamped with the current time; never raises."""
        if not self.is_available or not key:
            return False

        try:
            value = CacheEntry(data=data, cached_at=now_ms()).to_json()
        except TypeError as e:
            logger.error("Cache payload not serializable", key=key, error=str(e))
            return False

        return await self.set(key, value, ttl_seconds)

    async def get_response(self, prefix: str, *parts: Any) -> CacheEntry | None:
        """Look up a cached endpoint response by its logical inputs."""
        return await self.get_entry(normalize_key([prefix, *parts]))

    async def set_response(
        self,
        prefix: str,
        *parts: Any,
        data: Any,
        ttl_seconds: int,
    ) -> bool:
        """Cache an endpoint response under its logical inputs."""
        return await self.set_entry(normalize_key([prefix, *parts]), data, ttl_seconds)
