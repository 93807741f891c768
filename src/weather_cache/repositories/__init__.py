"""Repository layer for data access.

This layer abstracts external dependencies (Redis, the weather HTTP API)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Redis -> in-memory, WeatherAPI -> another provider)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from weather_cache.protocols import CacheStore, WeatherProvider

from .memory_repository import InMemoryCacheRepository
from .redis_repository import RedisCacheRepository
from .weatherapi_provider import WeatherApiProvider

__all__ = [
    "CacheStore",
    "WeatherProvider",
    "InMemoryCacheRepository",
    "RedisCacheRepository",
    "WeatherApiProvider",
]
