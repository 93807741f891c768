"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis -> in-memory, WeatherAPI -> another provider)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from weather_cache.protocols import CacheStore, WeatherProvider

    # Type hints work with any implementation
    store: CacheStore = RedisCacheRepository()       # works
    store: CacheStore = InMemoryCacheRepository()    # also works
    ```
"""

from .cache_store import CacheStore
from .weather_provider import WeatherProvider

__all__ = [
    "CacheStore",
    "WeatherProvider",
]
