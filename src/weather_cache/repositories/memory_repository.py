"""In-process implementation of CacheStore.

Useful for local development without Redis (``CACHE_BACKEND=memory``)
and as a deterministic store in tests. Expired entries are dropped on read
and swept on every write.
"""

import asyncio
import time
from collections.abc import Callable


class InMemoryCacheRepository:
    """Dictionary-backed cache with per-entry expiry.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        clock = FakeClock()
        store = InMemoryCacheRepository(clock=clock)
        await store.set("weather:current:london", b"...", ttl=1800)
        clock.advance(1801)
        assert await store.get("weather:current:london") is None
        ```
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the store.

        Args:
            clock: Returns the current time in seconds; injectable for tests.
        """
        self._clock = clock
        self._entries: dict[str, tuple[bytes, float]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> bytes | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        async with self._lock:
            now = self._clock()
            expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
            for k in expired:
                del self._entries[k]
            self._entries[key] = (value, now + ttl)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._entries.pop(key, None) is not None

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        async with self._lock:
            self._entries.clear()

    def expire(self, key: str) -> None:
        """Force an entry past its expiry without touching the clock."""
        entry = self._entries.get(key)
        if entry is not None:
            self._entries[key] = (entry[0], self._clock())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
