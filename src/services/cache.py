"""Response caching with Redis primary and in-memory LRU fallback.

Geocoding results are cached so repeated lookups of the same address or
GPS fix do not hit the provider again.  When Redis is missing or goes
away, every operation falls through to a process-local LRU so a cache outage never
blocks location resolution.
"""

from __future__ import annotations

import asyncio
import contextlib
import hashlib
import time
from collections import OrderedDict
from typing import Any, Protocol, runtime_checkable

import orjson
import structlog

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Backend protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class CacheBackend(Protocol):
    """Async byte-level key/value store."""

    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, value: bytes, ttl_seconds: int | None = None) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def exists(self, key: str) -> bool: ...


# ---------------------------------------------------------------------------
# Redis backend
# ---------------------------------------------------------------------------


class RedisCacheBackend:
    """``redis.asyncio`` client over a shared connection pool."""

    __slots__ = ("_pool", "_redis")

    def __init__(self, url: str, *, max_connections: int = 20) -> None:
        import redis.asyncio as aioredis

        self._pool = aioredis.ConnectionPool.from_url(
            url,
            max_connections=max_connections,
            decode_responses=False,
        )
        self._redis = aioredis.Redis(connection_pool=self._pool)

    async def get(self, key: str) -> bytes | None:
        return await self._redis.get(key)

    async def set(self, key: str, value: bytes, ttl_seconds: int | None = None) -> None:
        await self._redis.set(key, value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        await self._redis.delete(key)

    async def exists(self, key: str) -> bool:
        return bool(await self._redis.exists(key))

    async def close(self) -> None:
        await self._redis.aclose()
        await self._pool.aclose()

    async def ping(self) -> bool:
        """Return *True* if the Redis server answers."""
        try:
            return bool(await self._redis.ping())
        except Exception:
            return False


# ---------------------------------------------------------------------------
# In-memory LRU backend
# ---------------------------------------------------------------------------


class _CacheEntry:
    __slots__ = ("expires_at", "value")

    def __init__(self, value: bytes, ttl_seconds: int | None) -> None:
        self.value = value
        self.expires_at: float | None = (time.monotonic() + ttl_seconds) if ttl_seconds is not None else None

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() > self.expires_at


class InMemoryCacheBackend:
    """LRU cache on an :class:`OrderedDict`, guarded by an :class:`asyncio.Lock`.

    Expired entries are dropped when they are next read; the oldest entry
    is evicted when a write would exceed ``max_size``.
    """

    __slots__ = ("_data", "_lock", "_max_size")

    def __init__(self, *, max_size: int = 10_000) -> None:
        self._max_size = max_size
        self._data: OrderedDict[str, _CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    def _live(self, key: str) -> _CacheEntry | None:
        entry = self._data.get(key)
        if entry is not None and entry.expired:
            del self._data[key]
            return None
        return entry

    async def get(self, key: str) -> bytes | None:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                return None
            self._data.move_to_end(key)
            return entry.value

    async def set(self, key: str, value: bytes, ttl_seconds: int | None = None) -> None:
        async with self._lock:
            self._data.pop(key, None)
            while len(self._data) >= self._max_size:
                self._data.popitem(last=False)
            self._data[key] = _CacheEntry(value, ttl_seconds)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)

    async def exists(self, key: str) -> bool:
        async with self._lock:
            return self._live(key) is not None

    @property
    def size(self) -> int:
        """Number of stored entries, including ones not yet noticed as expired."""
        return len(self._data)


# ---------------------------------------------------------------------------
# CacheManager
# ---------------------------------------------------------------------------


def stable_hash(text: str) -> str:
    """Deterministic short hash for building cache keys from free text."""
    return hashlib.sha256(text.encode()).hexdigest()[:16]


class CacheManager:
    """JSON-value cache that prefers Redis and falls back to memory.

    Parameters
    ----------
    redis_url:
        Redis connection string.  ``None`` or ``""`` skips Redis entirely.
    namespace:
        Prefix prepended to every key (e.g. ``"geocode:"``).
    inmemory_max_size:
        Capacity of the in-memory fallback.
    """

    __slots__ = (
        "_fallback",
        "_namespace",
        "_redis",
        "_redis_available",
        "_redis_checked",
    )

    def __init__(
        self,
        *,
        redis_url: str | None = None,
        namespace: str = "",
        inmemory_max_size: int = 10_000,
    ) -> None:
        self._namespace = namespace
        self._fallback = InMemoryCacheBackend(max_size=inmemory_max_size)
        self._redis: RedisCacheBackend | None = None
        self._redis_available = False
        self._redis_checked = False

        if redis_url:
            try:
                self._redis = RedisCacheBackend(url=redis_url)
            except Exception:
                logger.warning("cache.redis_init_failed", redis_url=redis_url)
                self._redis = None

    @classmethod
    def for_namespace(
        cls,
        namespace: str,
        *,
        redis_url: str | None = None,
        inmemory_max_size: int = 10_000,
    ) -> CacheManager:
        """Create a manager scoped to *namespace*.

        Example::

            geocode_cache = CacheManager.for_namespace("geocode:", redis_url=url)
        """
        return cls(redis_url=redis_url, namespace=namespace, inmemory_max_size=inmemory_max_size)

    # -- Internal helpers ------------------------------------------------------

    def _make_key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    async def _ensure_checked(self) -> None:
        """Ping Redis once, lazily, on first use."""
        if self._redis is not None and not self._redis_checked:
            self._redis_checked = True
            self._redis_available = await self._redis.ping()
            if self._redis_available:
                logger.info("cache.redis_connected", namespace=self._namespace)
            else:
                logger.warning("cache.redis_unavailable_using_inmemory", namespace=self._namespace)

    async def _call(self, method: str, key: str, *args: Any, **kwargs: Any) -> Any:
        """Run *method* on Redis; on failure switch to the in-memory backend."""
        await self._ensure_checked()
        if self._redis_available and self._redis is not None:
            try:
                return await getattr(self._redis, method)(key, *args, **kwargs)
            except Exception:
                logger.warning("cache.redis_op_failed", method=method, key=key)
                self._redis_available = False

        return await getattr(self._fallback, method)(key, *args, **kwargs)

    # -- Public API ------------------------------------------------------------

    @property
    def redis_available(self) -> bool:
        return self._redis_available

    async def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value decoded with *orjson*, or *default*."""
        raw: bytes | None = await self._call("get", self._make_key(key))
        if raw is None:
            return default
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.warning("cache.corrupt_value", key=key)
            return default

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        await self._call("set", self._make_key(key), orjson.dumps(value), ttl_seconds=ttl_seconds)

    async def delete(self, key: str) -> None:
        await self._call("delete", self._make_key(key))

    async def exists(self, key: str) -> bool:
        return bool(await self._call("exists", self._make_key(key)))

    async def close(self) -> None:
        """Shut down the Redis connection pool, if one was opened."""
        if self._redis is not None:
            with contextlib.suppress(Exception):
                await self._redis.close()
