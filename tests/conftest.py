"""
Shared test fixtures for the weather cache test suite.

Provides:
- a controllable clock and an in-memory cache store bound to it
- a scripted fake provider that records every call
- cache stores that spy on or fail every operation
- the London record used across scenarios
"""

import asyncio
import time

import pytest

from weather_cache.entities import CurrentConditions, Location, WeatherRecord
from weather_cache.errors import CacheUnavailableError
from weather_cache.repositories import InMemoryCacheRepository
from weather_cache.services import WeatherService

TTL = 1800


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """WeatherProvider double returning a fixed record or raising a fixed error."""

    name = "fake"

    def __init__(
        self,
        record: WeatherRecord | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.record = record
        self.error = error
        self.delay = delay
        self.calls: list[str] = []
        self.cancelled = False

    async def fetch_current(self, city: str) -> WeatherRecord:
        self.calls.append(city)
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        assert self.record is not None
        return self.record

    async def close(self) -> None:
        pass


class SpyCacheStore(InMemoryCacheRepository):
    """In-memory store that records every operation."""

    def __init__(self, clock=time.monotonic) -> None:
        super().__init__(clock=clock)
        self.gets: list[str] = []
        self.sets: list[tuple[str, bytes, int]] = []

    async def get(self, key: str) -> bytes | None:
        self.gets.append(key)
        return await super().get(key)

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        self.sets.append((key, value, ttl))
        await super().set(key, value, ttl)


class BrokenCacheStore:
    """Cache store whose backend is down: every operation fails."""

    def __init__(self) -> None:
        self.gets = 0
        self.sets = 0

    async def get(self, key: str) -> bytes | None:
        self.gets += 1
        raise CacheUnavailableError("connection refused")

    async def set(self, key: str, value: bytes, ttl: int) -> None:
        self.sets += 1
        raise CacheUnavailableError("connection refused")

    async def delete(self, key: str) -> bool:
        raise CacheUnavailableError("connection refused")

    async def health_check(self) -> bool:
        return False

    async def close(self) -> None:
        pass


@pytest.fixture
def london_payload() -> dict:
    """WeatherAPI.com /current.json body for London."""
    return {
        "location": {
            "name": "London",
            "region": "City of London, Greater London",
            "country": "United Kingdom",
            "lat": 51.52,
            "lon": -0.11,
            "tz_id": "Europe/London",
            "localtime": "2024-05-01 14:30",
        },
        "current": {
            "last_updated": "2024-05-01 14:15",
            "temp_c": 10.0,
            "temp_f": 50.0,
            "condition": {
                "text": "Partly cloudy",
                "icon": "//cdn.weatherapi.com/weather/64x64/day/116.png",
                "code": 1003,
            },
            "wind_mph": 6.9,
            "wind_kph": 11.2,
            "humidity": 76,
            "feelslike_c": 8.4,
            "feelslike_f": 47.1,
        },
    }


@pytest.fixture
def london_record() -> WeatherRecord:
    """The record the provider parses out of london_payload."""
    return WeatherRecord(
        location=Location(
            name="London",
            region="City of London, Greater London",
            country="United Kingdom",
            lat=51.52,
            lon=-0.11,
            tz_id="Europe/London",
            localtime="2024-05-01 14:30",
        ),
        current=CurrentConditions(
            temp_c=10.0,
            temp_f=50.0,
            condition_text="Partly cloudy",
            condition_icon="//cdn.weatherapi.com/weather/64x64/day/116.png",
            wind_kph=11.2,
            wind_mph=6.9,
            humidity=76,
            feelslike_c=8.4,
            feelslike_f=47.1,
            last_updated="2024-05-01 14:15",
        ),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> SpyCacheStore:
    return SpyCacheStore(clock=clock)


@pytest.fixture
def provider(london_record) -> FakeProvider:
    return FakeProvider(record=london_record)


@pytest.fixture
def service(store, provider) -> WeatherService:
    """Service wired to the spy store and fake provider, single-flight off."""
    return WeatherService(
        cache_store=store,
        provider=provider,
        ttl=TTL,
        timeout=5.0,
        single_flight=False,
        key_prefix="weather",
    )
