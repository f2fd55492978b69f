# aurora/data_engine/storage/cache.py
"""
OHLC cache backends

Caches are injected into the price collectors rather than held at module
level. Both backends implement the same async interface:

    get(key) -> entry | None
    put(key, entry, ttl) -> bool

InMemoryCache takes a clock callable so expiry can be tested without
wall-clock waits. RedisCache stores JSON-encoded entries with a native
Redis TTL.
"""

import json
import time
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from loguru import logger
from redis.asyncio import Redis

from aurora.config.settings import get_settings

settings = get_settings()


@runtime_checkable
class OHLCCache(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def put(self, key: str, entry: Any, ttl: int | None = None) -> bool: ...


class InMemoryCache:
    """
    Process-local TTL cache

    Entries are stored as ``(expiry, entry)`` and dropped lazily when read
    after expiry.
    """

    def __init__(
        self,
        default_ttl: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            default_ttl: TTL in seconds when put() receives none
            clock: Returns the current time in seconds
        """
        self.default_ttl = default_ttl or settings.OHLC_CACHE_TTL
        self.clock = clock
        self._data: dict[str, tuple[float, Any]] = {}

    async def get(self, key: str) -> Any | None:
        item = self._data.get(key)
        if item is None:
            return None

        expiry, entry = item
        if self.clock() >= expiry:
            self._data.pop(key, None)
            logger.debug(f"Cache entry expired: {key}")
            return None

        return entry

    async def put(self, key: str, entry: Any, ttl: int | None = None) -> bool:
        ttl = ttl or self.default_ttl
        self._data[key] = (self.clock() + ttl, entry)
        return True

    def __len__(self) -> int:
        return len(self._data)


class RedisCache:
    """
    Redis-backed cache shared across worker processes
    """

    def __init__(
        self,
        redis_url: str | None = None,
        default_ttl: int | None = None,
        prefix: str = "aurora:ohlc:",
        client: Redis | None = None,
    ):
        """
        Args:
            redis_url: Redis connection URL
            default_ttl: Default TTL in seconds
            prefix: Key namespace
            client: Pre-built client (mainly for tests)
        """
        self.redis_url = redis_url or settings.REDIS_URL
        self.default_ttl = default_ttl or settings.OHLC_CACHE_TTL
        self.prefix = prefix
        self.redis: Redis | None = client

        logger.info("RedisCache initialized")

    async def connect(self):
        """Establish Redis connection"""
        if self.redis is None:
            self.redis = Redis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
            )
            logger.success("Connected to Redis")

    async def disconnect(self):
        """Close Redis connection"""
        if self.redis:
            await self.redis.aclose()
            self.redis = None

    async def get(self, key: str) -> Any | None:
        """Get value from cache; connection problems read as a miss"""
        try:
            await self.connect()
            value = await self.redis.get(self.prefix + key)

            if value:
                return json.loads(value)
            return None

        except Exception as e:
            logger.error(f"Error getting from cache: {e}")
            return None

    async def put(self, key: str, entry: Any, ttl: int | None = None) -> bool:
        """Set value in cache"""
        try:
            await self.connect()

            serialized = json.dumps(entry, default=str)
            ttl = ttl or self.default_ttl

            await self.redis.set(self.prefix + key, serialized, ex=ttl)
            return True

        except Exception as e:
            logger.error(f"Error setting cache: {e}")
            return False
