"""Redis implementation of CacheStore.

Plain string keys with server-side expiry (``SET key value EX ttl``).
It's the default implementation and satisfies the CacheStore protocol.
"""

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from weather_cache.config import get_redis_client, settings
from weather_cache.errors import CacheUnavailableError

logger = logging.getLogger(__name__)


class RedisCacheRepository:
    """Redis-backed key/value cache.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    The client is long-lived and shared by every request; redis-py's
    connection pool makes it safe for concurrent use. Every backend error
    is re-raised as ``CacheUnavailableError``.
    """

    def __init__(
        self,
        redis_client: aioredis.Redis | None = None,
        ttl: int | None = None,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Async Redis client instance. If None, creates default.
            ttl: Default time-to-live, reported in stats only.
        """
        self._client = redis_client or get_redis_client()
        self._ttl = ttl or settings.cache_ttl

    @classmethod
    def create(cls, ttl: int | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults.

        Args:
            ttl: Entry TTL in seconds. If None, uses settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(ttl=ttl)

    async def get(self, key: str) -> bytes | None:
        """Fetch a value from Redis.

        Args:
            key: The cache key

        Returns:
            Stored bytes, or None on a miss
        """
        try:
            value = await self._client.get(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError(f"Redis GET failed for {key}: {e}") from e

        if isinstance(value, str):
            return value.encode("utf-8")
        return value

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store a value with expiry.

        Args:
            key: The cache key
            value: Serialized payload
            ttl: Time-to-live in seconds
        """
        try:
            await self._client.set(key, value, ex=ttl)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError(f"Redis SET failed for {key}: {e}") from e

    async def delete(self, key: str) -> bool:
        """Delete a specific entry by key.

        Args:
            key: The cache key

        Returns:
            True if deleted, False otherwise
        """
        try:
            result: int = await self._client.delete(key)
        except (RedisError, OSError) as e:
            raise CacheUnavailableError(f"Redis DEL failed for {key}: {e}") from e
        return result > 0

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError):
            logger.warning("Redis ping failed", exc_info=True)
            return False

    async def close(self) -> None:
        """Close the connection pool."""
        await self._client.aclose()

    @property
    def ttl(self) -> int:
        """Default TTL in seconds."""
        return self._ttl

    @property
    def client(self) -> aioredis.Redis:
        """Get the Redis client."""
        return self._client
