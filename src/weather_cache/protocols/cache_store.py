"""Cache storage protocol.

Defines the interface for any key/value backend the weather service can
use as its read-through cache.

Implementations can include:
- Redis (default)
- In-process dictionary with TTL (development and tests)
- Memcached
- Any other store with per-key expiry
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. Implementations must be safe to share
    between concurrent requests and must raise
    ``CacheUnavailableError`` when the backend fails, so callers can tell a
    fault apart from a miss.

    Example:
        ```python
        from weather_cache.protocols import CacheStore

        store: CacheStore = RedisCacheRepository.create()
        store: CacheStore = InMemoryCacheRepository()
        ```
    """

    async def get(self, key: str) -> bytes | None:
        """Fetch a value.

        Args:
            key: The cache key

        Returns:
            The stored bytes, or None if absent or expired

        Raises:
            CacheUnavailableError: If the backend cannot be read
        """
        ...

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        """Store a value with an expiry.

        Args:
            key: The cache key
            value: Serialized payload
            ttl: Time-to-live in seconds

        Raises:
            CacheUnavailableError: If the backend cannot be written
        """
        ...

    async def delete(self, key: str) -> bool:
        """Delete a value.

        Args:
            key: The cache key

        Returns:
            True if an entry was removed, False otherwise
        """
        ...

    async def health_check(self) -> bool:
        """Check if the backend is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...

    async def close(self) -> None:
        """Release the backend connection."""
        ...
