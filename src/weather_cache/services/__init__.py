"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from weather_cache.services import WeatherService

    service = WeatherService.create(cache_store=store, provider=provider)
    record = await service.get_weather("London")
    ```
"""

from .single_flight import SingleFlight
from .weather_service import WeatherService

__all__ = [
    "SingleFlight",
    "WeatherService",
]
