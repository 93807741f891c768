"""WeatherAPI.com provider.

Calls the ``/current.json`` endpoint and maps its payload onto
``WeatherRecord``. The provider owns the transport policy: per-attempt
timeout, retries with linear backoff for transient failures, and the
classification of every failure into the service's error taxonomy.

WeatherAPI.com ``/current.json`` returns:
    {
      "location": {"name": "London", "region": "City of London, Greater London",
                   "country": "United Kingdom", "lat": 51.52, "lon": -0.11,
                   "tz_id": "Europe/London", "localtime": "2024-05-01 14:30"},
      "current":  {"temp_c": 10.0, "temp_f": 50.0,
                   "condition": {"text": "Partly cloudy", "icon": "//cdn..."},
                   "wind_kph": 11.2, "wind_mph": 6.9, "humidity": 76,
                   "feelslike_c": 8.4, "feelslike_f": 47.1,
                   "last_updated": "2024-05-01 14:15"}
    }

Errors come back as ``{"error": {"code": 1006, "message": "No matching
location found."}}`` with HTTP 400.
"""

import asyncio
import logging
from typing import Any

import httpx

from weather_cache.config import settings
from weather_cache.entities import CurrentConditions, Location, WeatherRecord
from weather_cache.errors import (
    CityNotFoundError,
    UpstreamInvalidResponseError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

# Provider error codes meaning "the query did not resolve to a place"
_NOT_FOUND_CODES = {1006}

# Statuses worth another attempt
_RETRYABLE_STATUSES = {429, 500, 502, 503, 504}


class WeatherApiProvider:
    """WeatherAPI.com implementation of the WeatherProvider protocol.

    This class satisfies the WeatherProvider protocol through structural
    typing - no explicit inheritance needed.

    The HTTP client is created lazily and reused for the lifetime of the
    provider, so a single instance should be shared across requests and
    closed on shutdown.

    Example:
        ```python
        provider = WeatherApiProvider.create(api_key="...")
        record = await provider.fetch_current("London")
        print(record.current.temp_c)
        await provider.close()
        ```
    """

    name = "weatherapi"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: WeatherAPI.com key. Defaults to settings.weather_api_key.
            base_url: API root, e.g. "https://api.weatherapi.com/v1".
            timeout: Per-attempt timeout in seconds.
            max_retries: Extra attempts after the first for transient failures.
            backoff_seconds: Base delay; attempt n waits n * backoff_seconds.
            client: Pre-built client (tests inject one with a mock transport).
        """
        self._api_key = api_key if api_key is not None else settings.weather_api_key
        self._base_url = (base_url or settings.weather_api_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.provider_timeout
        self._max_retries = max_retries if max_retries is not None else settings.provider_max_retries
        self._backoff = backoff_seconds if backoff_seconds is not None else settings.provider_backoff
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> "WeatherApiProvider":
        """Factory method to create WeatherApiProvider with defaults.

        Args:
            api_key: API key. If None, uses settings.
            base_url: API root. If None, uses settings.

        Returns:
            Configured WeatherApiProvider
        """
        return cls(api_key=api_key, base_url=base_url)

    async def fetch_current(self, city: str) -> WeatherRecord:
        """Fetch current weather for a city.

        Args:
            city: City name as the user typed it

        Returns:
            Parsed WeatherRecord

        Raises:
            CityNotFoundError: The provider has no such location
            UpstreamUnavailableError: Network failure, timeout, 5xx or 429
                after all retries
            UpstreamInvalidResponseError: Auth failure, other 4xx, or a body
                that does not describe current weather
        """
        payload = await self._request(city)
        return self._parse(payload)

    async def _request(self, city: str) -> dict[str, Any]:
        url = f"{self._base_url}/current.json"
        params = {"key": self._api_key, "q": city, "aqi": "no"}

        for attempt in range(self._max_retries + 1):
            try:
                response = await self.client.get(url, params=params)
            except httpx.TimeoutException as e:
                failure: Exception = UpstreamUnavailableError(f"Weather provider timed out: {e}")
            except httpx.TransportError as e:
                failure = UpstreamUnavailableError(f"Weather provider unreachable: {e}")
            else:
                if response.status_code not in _RETRYABLE_STATUSES:
                    return self._check_response(response, city)
                failure = UpstreamUnavailableError(
                    f"Weather provider returned HTTP {response.status_code}"
                )

            if attempt < self._max_retries:
                delay = self._backoff * (attempt + 1)
                logger.info(
                    "Weather provider attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt + 1,
                    self._max_retries + 1,
                    failure,
                    delay,
                )
                await asyncio.sleep(delay)
                continue
            raise failure

        raise UpstreamUnavailableError("Weather provider request failed")  # pragma: no cover

    def _check_response(self, response: httpx.Response, city: str) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            if response.is_success:
                raise UpstreamInvalidResponseError(f"Weather provider sent non-JSON body: {e}") from e
            data = None

        if response.is_success:
            if not isinstance(data, dict):
                raise UpstreamInvalidResponseError("Unexpected weather provider response shape")
            return data

        error = data.get("error") if isinstance(data, dict) else None
        code = error.get("code") if isinstance(error, dict) else None
        message = error.get("message", "") if isinstance(error, dict) else ""

        if response.status_code == 404 or code in _NOT_FOUND_CODES:
            raise CityNotFoundError(city)

        raise UpstreamInvalidResponseError(
            f"Weather provider rejected request: HTTP {response.status_code}"
            + (f" (code {code}: {message})" if code is not None else "")
        )

    def _parse(self, payload: dict[str, Any]) -> WeatherRecord:
        location = payload.get("location")
        current = payload.get("current")
        if not isinstance(location, dict) or not isinstance(current, dict):
            raise UpstreamInvalidResponseError("Weather payload lacks location or current block")

        name = location.get("name")
        if not isinstance(name, str) or not name:
            raise UpstreamInvalidResponseError("Weather payload has no location name")

        temp_c = self._to_float(current.get("temp_c"), "temp_c")
        if temp_c is None:
            raise UpstreamInvalidResponseError("Weather payload has no temp_c reading")

        condition = current.get("condition")
        if not isinstance(condition, dict):
            condition = {}

        humidity = self._to_float(current.get("humidity"), "humidity")

        return WeatherRecord(
            location=Location(
                name=name,
                region=str(location.get("region") or ""),
                country=str(location.get("country") or ""),
                lat=self._to_float(location.get("lat"), "lat"),
                lon=self._to_float(location.get("lon"), "lon"),
                tz_id=str(location.get("tz_id") or ""),
                localtime=str(location.get("localtime") or ""),
            ),
            current=CurrentConditions(
                temp_c=temp_c,
                temp_f=self._to_float(current.get("temp_f"), "temp_f"),
                condition_text=str(condition.get("text") or ""),
                condition_icon=str(condition.get("icon") or ""),
                wind_kph=self._to_float(current.get("wind_kph"), "wind_kph"),
                wind_mph=self._to_float(current.get("wind_mph"), "wind_mph"),
                humidity=int(humidity) if humidity is not None else None,
                feelslike_c=self._to_float(current.get("feelslike_c"), "feelslike_c"),
                feelslike_f=self._to_float(current.get("feelslike_f"), "feelslike_f"),
                last_updated=str(current.get("last_updated") or ""),
            ),
        )

    def _to_float(self, value: Any, field: str) -> float | None:
        if value is None:
            return None
        if isinstance(value, bool):
            raise UpstreamInvalidResponseError(f"Weather payload field {field} is not numeric")
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise UpstreamInvalidResponseError(f"Weather payload field {field} is not numeric") from e

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
