"""Error taxonomy for the weather read path.

Every failure the service can produce is one of the classes below, so the
HTTP boundary maps errors to status codes without inspecting messages:

    WeatherCacheError
    ├── InvalidInputError              400  bad city name, user-correctable
    ├── CityNotFoundError              404  provider knows no such city
    ├── UpstreamError
    │   ├── UpstreamUnavailableError   502  network, timeout, 5xx, 429
    │   └── UpstreamInvalidResponseError 502  provider broke its contract
    ├── WeatherTimeoutError            504  request deadline exceeded
    ├── CacheUnavailableError          (never surfaced, degraded mode)
    └── CorruptCacheEntryError         (never surfaced, treated as a miss)

Caller cancellation is not wrapped: ``asyncio.CancelledError`` propagates.
"""


class WeatherCacheError(Exception):
    """Base class for all weather service errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(WeatherCacheError):
    """The city name is empty or otherwise unusable."""

    status_code = 400


class CityNotFoundError(WeatherCacheError):
    """The provider has no location matching the query."""

    status_code = 404

    def __init__(self, city: str) -> None:
        super().__init__(f"No matching location found for {city!r}")
        self.city = city


class UpstreamError(WeatherCacheError):
    """The provider call failed."""

    status_code = 502


class UpstreamUnavailableError(UpstreamError):
    """Transient provider failure, worth a client retry."""


class UpstreamInvalidResponseError(UpstreamError):
    """The provider answered with something we cannot use. Not retryable."""


class WeatherTimeoutError(WeatherCacheError):
    """The request deadline elapsed before a result was available."""

    status_code = 504

    def __init__(self, timeout: float) -> None:
        super().__init__(f"Weather lookup exceeded deadline of {timeout:.1f}s")
        self.timeout = timeout


class CacheUnavailableError(WeatherCacheError):
    """The cache backend could not be reached or errored."""

    status_code = 503


class CorruptCacheEntryError(WeatherCacheError):
    """A cached payload could not be decoded into a WeatherRecord."""
