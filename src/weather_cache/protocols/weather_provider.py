"""Weather provider protocol.

Defines the interface for any upstream service that can return the
current weather for a city name.

Implementations can include:
- WeatherAPI.com (default)
- OpenWeatherMap
- Test doubles
"""

from typing import Protocol, runtime_checkable

from weather_cache.entities import WeatherRecord


@runtime_checkable
class WeatherProvider(Protocol):
    """Protocol for upstream weather providers.

    Timeouts and retries are the provider's concern. Failures must be
    raised as one of ``CityNotFoundError``, ``UpstreamUnavailableError`` or
    ``UpstreamInvalidResponseError``.
    """

    @property
    def name(self) -> str:
        """Short identifier used in logs and metrics."""
        ...

    async def fetch_current(self, city: str) -> WeatherRecord:
        """Fetch current weather.

        Args:
            city: Human-readable city name as the user typed it

        Returns:
            The current weather record
        """
        ...

    async def close(self) -> None:
        """Release the HTTP transport."""
        ...
