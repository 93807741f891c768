"""Weather service: the cache-aside read path.

This service orchestrates a single weather lookup by coordinating the
cache store (data access) and the weather provider (upstream HTTP API):

    get_weather("London")
      -> CacheStore.get("weather:current:london")     exactly one read
      -> on miss: WeatherProvider.fetch_current()      at most one fetch
      -> CacheStore.set(key, record, ttl)              at most one write

The cache is an optimization, never a dependency: cache faults and corrupt
entries are logged and treated as misses. Upstream failures are surfaced
unchanged and nothing is cached for them.
"""

import asyncio
import logging
import time

from weather_cache.config import settings
from weather_cache.entities import WeatherQuery, WeatherRecord
from weather_cache.errors import CacheUnavailableError, CorruptCacheEntryError, WeatherTimeoutError
from weather_cache.metrics import (
    weather_cache_errors_total,
    weather_cache_hits_total,
    weather_cache_misses_total,
    weather_provider_errors_total,
    weather_provider_latency_seconds,
    weather_provider_requests_total,
    weather_request_timeouts_total,
)
from weather_cache.protocols import CacheStore, WeatherProvider
from weather_cache.serialization import decode_record, encode_record

from .single_flight import SingleFlight

logger = logging.getLogger(__name__)


class WeatherService:
    """Read-through weather lookup.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: can be Redis, in-memory, etc.
    - WeatherProvider: can be WeatherAPI.com or any other source

    It holds no mutable per-request state; everything shared lives in the
    cache store. The only exception is the optional single-flight table,
    which coalesces concurrent misses for the same city into one fetch.

    Example:
        ```python
        from weather_cache.repositories import RedisCacheRepository, WeatherApiProvider
        from weather_cache.services import WeatherService

        service = WeatherService.create(
            cache_store=RedisCacheRepository.create(),
            provider=WeatherApiProvider.create(),
        )
        record = await service.get_weather(" London ")
        ```
    """

    def __init__(
        self,
        cache_store: CacheStore,
        provider: WeatherProvider,
        ttl: int | None = None,
        timeout: float | None = None,
        single_flight: bool | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the weather service.

        Args:
            cache_store: Cache storage backend (required).
            provider: Upstream weather provider (required).
            ttl: Time-to-live for cached records in seconds. Defaults to settings.
            timeout: Deadline for a whole lookup in seconds. Defaults to settings.
            single_flight: Coalesce concurrent misses per city. Defaults to settings.
            key_prefix: Cache key namespace. Defaults to settings.
        """
        self._cache = cache_store
        self._provider = provider
        self._ttl = ttl if ttl is not None else settings.cache_ttl
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._key_prefix = key_prefix or settings.cache_key_prefix
        if single_flight is None:
            single_flight = settings.cache_single_flight
        self._flight = SingleFlight() if single_flight else None

    @classmethod
    def create(
        cls,
        cache_store: CacheStore,
        provider: WeatherProvider,
        ttl: int | None = None,
        timeout: float | None = None,
    ) -> "WeatherService":
        """Factory method to create WeatherService with sensible defaults.

        Args:
            cache_store: Cache storage backend (required).
            provider: Upstream weather provider (required).
            ttl: Time-to-live in seconds. If None, uses settings.
            timeout: Lookup deadline in seconds. If None, uses settings.

        Returns:
            Configured WeatherService instance
        """
        return cls(cache_store=cache_store, provider=provider, ttl=ttl, timeout=timeout)

    async def get_weather(self, city_name: str, timeout: float | None = None) -> WeatherRecord:
        """Return current weather for a city, from cache when possible.

        Business logic:
        1. Normalize the city name into a cache key
        2. Read the cache; a hit returns immediately with no network I/O
        3. On a miss (or an unreadable entry) fetch from the provider
        4. Store the fetched record with the configured TTL and return it

        A single deadline covers all three I/O steps.

        Args:
            city_name: City as the user typed it
            timeout: Override the default deadline in seconds

        Returns:
            The current WeatherRecord

        Raises:
            InvalidInputError: If city_name is blank
            CityNotFoundError: If the provider has no such city
            UpstreamUnavailableError: If the provider could not be reached
            UpstreamInvalidResponseError: If the provider sent an unusable payload
            WeatherTimeoutError: If the deadline elapsed first
        """
        query = WeatherQuery.from_city(city_name, prefix=self._key_prefix)
        deadline = timeout if timeout is not None else self._timeout

        try:
            return await asyncio.wait_for(self._read_through(query), timeout=deadline)
        except asyncio.TimeoutError:
            weather_request_timeouts_total.inc()
            logger.warning("Weather lookup for %r exceeded %.1fs deadline", query.city, deadline)
            raise WeatherTimeoutError(deadline) from None

    async def _read_through(self, query: WeatherQuery) -> WeatherRecord:
        record = await self._read_cache(query.cache_key)
        if record is not None:
            weather_cache_hits_total.inc()
            return record

        if self._flight is not None:
            return await self._flight.do(query.cache_key, lambda: self._fetch_and_store(query))
        return await self._fetch_and_store(query)

    async def _read_cache(self, key: str) -> WeatherRecord | None:
        try:
            raw = await self._cache.get(key)
        except CacheUnavailableError:
            weather_cache_errors_total.labels(operation="get").inc()
            weather_cache_misses_total.labels(reason="cache_error").inc()
            logger.warning("Weather cache GET failed for key=%s", key, exc_info=True)
            return None

        if raw is None:
            weather_cache_misses_total.labels(reason="absent").inc()
            logger.debug("Weather cache miss: %s", key)
            return None

        try:
            record = decode_record(raw)
        except CorruptCacheEntryError:
            weather_cache_misses_total.labels(reason="corrupt").inc()
            logger.warning("Discarding corrupt weather cache entry for key=%s", key, exc_info=True)
            return None

        logger.debug("Weather cache hit: %s", key)
        return record

    async def _fetch_and_store(self, query: WeatherQuery) -> WeatherRecord:
        provider_name = self._provider.name
        weather_provider_requests_total.labels(provider=provider_name).inc()
        start_time = time.perf_counter()
        try:
            record = await self._provider.fetch_current(query.city)
        except Exception as exc:
            weather_provider_errors_total.labels(
                provider=provider_name,
                error_type=exc.__class__.__name__,
            ).inc()
            logger.info("Weather provider failed for %r: %s", query.city, exc)
            raise
        finally:
            weather_provider_latency_seconds.labels(provider=provider_name).observe(
                time.perf_counter() - start_time
            )

        await self._write_cache(query.cache_key, record)
        return record

    async def _write_cache(self, key: str, record: WeatherRecord) -> None:
        try:
            await self._cache.set(key, encode_record(record), self._ttl)
        except CacheUnavailableError:
            weather_cache_errors_total.labels(operation="set").inc()
            logger.warning("Weather cache SET failed for key=%s", key, exc_info=True)
            return
        logger.debug("Weather cached: key=%s ttl=%ds", key, self._ttl)

    async def invalidate(self, city_name: str) -> bool:
        """Evict the cached record for a city.

        Args:
            city_name: City in any casing/spacing

        Returns:
            True if an entry was removed, False otherwise

        Raises:
            InvalidInputError: If city_name is blank
            CacheUnavailableError: If the cache backend failed
        """
        query = WeatherQuery.from_city(city_name, prefix=self._key_prefix)
        removed = await self._cache.delete(query.cache_key)
        logger.info("Weather cache invalidated: key=%s removed=%s", query.cache_key, removed)
        return removed

    async def is_healthy(self) -> dict[str, bool]:
        """Report backend health.

        The provider is not probed: every probe spends rate-limited quota.

        Returns:
            Dict with ``cache_healthy``
        """
        return {"cache_healthy": await self._cache.health_check()}

    @property
    def ttl(self) -> int:
        """Get the cache TTL in seconds."""
        return self._ttl

    @property
    def timeout(self) -> float:
        """Get the default lookup deadline in seconds."""
        return self._timeout

    @property
    def cache_store(self) -> CacheStore:
        """Get the underlying cache store (for testing)."""
        return self._cache

    @property
    def provider(self) -> WeatherProvider:
        """Get the underlying provider (for testing)."""
        return self._provider
