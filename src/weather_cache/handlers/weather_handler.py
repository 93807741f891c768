"""HTTP handlers for weather operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import logging

from fastapi import HTTPException, status

from weather_cache.dto import HealthCheckResponse, InvalidateResponse, WeatherQueryParams, WeatherResponse
from weather_cache.errors import CacheUnavailableError, WeatherCacheError
from weather_cache.services import WeatherService

logger = logging.getLogger(__name__)


class WeatherHandler:
    """HTTP handlers for weather operations.

    This handler delegates business logic to WeatherService and maps the
    service's closed error taxonomy onto status codes:

        InvalidInputError             -> 400
        CityNotFoundError             -> 404
        UpstreamUnavailableError      -> 502
        UpstreamInvalidResponseError  -> 502
        WeatherTimeoutError           -> 504

    Example:
        ```python
        handler = WeatherHandler(weather_service=service)

        @app.get("/weather", response_model=WeatherResponse)
        async def get_weather(params: Annotated[WeatherQueryParams, Query()]):
            return await handler.get_weather(params)
        ```
    """

    def __init__(self, weather_service: WeatherService) -> None:
        """Initialize the weather handler.

        Args:
            weather_service: The weather service for business logic (required).
        """
        self._weather = weather_service

    async def get_weather(self, params: WeatherQueryParams) -> WeatherResponse:
        """Handle GET /weather requests.

        Args:
            params: The validated query parameters

        Returns:
            WeatherResponse for the requested city

        Raises:
            HTTPException: With the status mapped from the service error
        """
        try:
            record = await self._weather.get_weather(params.city or "", timeout=params.timeout)
        except WeatherCacheError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message) from e

        return WeatherResponse.from_entity(record)

    async def invalidate(self, params: WeatherQueryParams) -> InvalidateResponse:
        """Handle DELETE /weather/cache requests.

        Args:
            params: The validated query parameters

        Returns:
            InvalidateResponse telling whether an entry was evicted
        """
        try:
            removed = await self._weather.invalidate(params.city or "")
        except CacheUnavailableError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Failed to invalidate cache: {e.message}",
            ) from e
        except WeatherCacheError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message) from e

        return InvalidateResponse(city=params.city or "", removed=removed)

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        A cache outage degrades latency, not correctness, so it is reported
        as "degraded" with a 200 rather than failing the health check.

        Returns:
            HealthCheckResponse with cache status
        """
        health = await self._weather.is_healthy()
        cache_healthy = health["cache_healthy"]
        if not cache_healthy:
            logger.warning("Health check: cache backend unreachable")

        return HealthCheckResponse(
            status="healthy" if cache_healthy else "degraded",
            cache_healthy=cache_healthy,
        )
