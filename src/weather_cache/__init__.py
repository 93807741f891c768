"""Weather Cache - current weather by city behind a read-through cache.

This package provides a layered architecture for cache-aside weather lookups:

Layers:
    - protocols: Interface contracts (CacheStore, WeatherProvider)
    - repositories: Data access implementations (Redis, in-memory, WeatherAPI.com)
    - services: Business logic (the cache-aside read path)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from weather_cache.repositories import RedisCacheRepository, WeatherApiProvider
    from weather_cache.services import WeatherService

    service = WeatherService.create(
        cache_store=RedisCacheRepository.create(),
        provider=WeatherApiProvider.create(),
    )
    record = await service.get_weather("London")
    ```

For HTTP API:
    ```python
    from weather_cache.api.app import app
    ```
"""

from weather_cache.config import get_redis_client, get_settings, settings
from weather_cache.dto import WeatherQueryParams, WeatherResponse
from weather_cache.entities import CurrentConditions, Location, WeatherQuery, WeatherRecord
from weather_cache.errors import (
    CacheUnavailableError,
    CityNotFoundError,
    CorruptCacheEntryError,
    InvalidInputError,
    UpstreamError,
    UpstreamInvalidResponseError,
    UpstreamUnavailableError,
    WeatherCacheError,
    WeatherTimeoutError,
)
from weather_cache.handlers import WeatherHandler
from weather_cache.protocols import CacheStore, WeatherProvider
from weather_cache.repositories import InMemoryCacheRepository, RedisCacheRepository, WeatherApiProvider
from weather_cache.services import SingleFlight, WeatherService

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStore",
    "WeatherProvider",
    # Services (business logic)
    "WeatherService",
    "SingleFlight",
    # Handlers (HTTP)
    "WeatherHandler",
    # Repositories (data access)
    "RedisCacheRepository",
    "InMemoryCacheRepository",
    "WeatherApiProvider",
    # Entities (domain models)
    "WeatherQuery",
    "WeatherRecord",
    "Location",
    "CurrentConditions",
    # DTOs (API contracts)
    "WeatherQueryParams",
    "WeatherResponse",
    # Errors
    "WeatherCacheError",
    "InvalidInputError",
    "CityNotFoundError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "UpstreamInvalidResponseError",
    "WeatherTimeoutError",
    "CacheUnavailableError",
    "CorruptCacheEntryError",
]
