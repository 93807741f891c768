"""
Tests for the WeatherAPI.com provider client.

The HTTP layer is replaced by httpx.MockTransport, so these run offline.
"""

import httpx
import pytest

from weather_cache.errors import (
    CityNotFoundError,
    UpstreamInvalidResponseError,
    UpstreamUnavailableError,
)
from weather_cache.repositories import WeatherApiProvider

pytestmark = pytest.mark.asyncio


def make_provider(handler, max_retries: int = 0) -> WeatherApiProvider:
    """Provider whose requests are answered by ``handler``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WeatherApiProvider(
        api_key="test-key",
        base_url="https://api.weather.test/v1/",
        timeout=1.0,
        max_retries=max_retries,
        backoff_seconds=0.0,
        client=client,
    )


class Script:
    """Replays a list of responses (or exceptions), recording each request."""

    def __init__(self, *steps) -> None:
        self.steps = list(steps)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.steps.pop(0) if len(self.steps) > 1 else self.steps[0]
        if isinstance(step, Exception):
            raise step
        return step


async def test_london_payload_maps_onto_record(london_payload, london_record):
    script = Script(httpx.Response(200, json=london_payload))
    provider = make_provider(script)

    record = await provider.fetch_current("London")

    assert record == london_record
    assert record.current.temp_c == 10.0
    assert record.current.condition_text == "Partly cloudy"
    assert record.current.humidity == 76


async def test_request_shape(london_payload):
    script = Script(httpx.Response(200, json=london_payload))
    provider = make_provider(script)

    await provider.fetch_current("New York")

    request = script.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/v1/current.json"
    assert request.url.params["key"] == "test-key"
    assert request.url.params["q"] == "New York"


async def test_partial_payload_leaves_missing_readings_empty():
    payload = {"location": {"name": "Nuuk"}, "current": {"temp_c": -4}}
    provider = make_provider(Script(httpx.Response(200, json=payload)))

    record = await provider.fetch_current("Nuuk")

    assert record.location.name == "Nuuk"
    assert record.current.temp_c == -4.0
    assert record.current.wind_kph is None
    assert record.current.humidity is None
    assert record.current.condition_text == ""


async def test_unknown_city_is_not_found():
    body = {"error": {"code": 1006, "message": "No matching location found."}}
    provider = make_provider(Script(httpx.Response(400, json=body)))

    with pytest.raises(CityNotFoundError) as exc_info:
        await provider.fetch_current("Atlantis")

    assert exc_info.value.city == "Atlantis"


async def test_http_404_is_not_found():
    provider = make_provider(Script(httpx.Response(404, text="not found")))

    with pytest.raises(CityNotFoundError):
        await provider.fetch_current("Atlantis")


async def test_not_found_is_not_retried():
    body = {"error": {"code": 1006, "message": "No matching location found."}}
    script = Script(httpx.Response(400, json=body))
    provider = make_provider(script, max_retries=2)

    with pytest.raises(CityNotFoundError):
        await provider.fetch_current("Atlantis")

    assert len(script.requests) == 1


@pytest.mark.parametrize("status_code", [401, 403])
async def test_auth_failure_is_invalid_response(status_code):
    body = {"error": {"code": 2006, "message": "API key is invalid."}}
    script = Script(httpx.Response(status_code, json=body))
    provider = make_provider(script, max_retries=2)

    with pytest.raises(UpstreamInvalidResponseError, match="2006"):
        await provider.fetch_current("London")

    assert len(script.requests) == 1


@pytest.mark.parametrize("status_code", [500, 502, 503, 504, 429])
async def test_transient_status_is_unavailable_after_retries(status_code):
    script = Script(httpx.Response(status_code))
    provider = make_provider(script, max_retries=2)

    with pytest.raises(UpstreamUnavailableError):
        await provider.fetch_current("London")

    assert len(script.requests) == 3


async def test_transient_failure_then_success(london_payload, london_record):
    script = Script(httpx.Response(503), httpx.Response(200, json=london_payload))
    provider = make_provider(script, max_retries=2)

    assert await provider.fetch_current("London") == london_record
    assert len(script.requests) == 2


async def test_connection_error_is_unavailable():
    request = httpx.Request("GET", "https://api.weather.test/v1/current.json")
    provider = make_provider(Script(httpx.ConnectError("connection refused", request=request)), max_retries=1)

    with pytest.raises(UpstreamUnavailableError, match="unreachable"):
        await provider.fetch_current("London")


async def test_timeout_is_unavailable():
    request = httpx.Request("GET", "https://api.weather.test/v1/current.json")
    provider = make_provider(Script(httpx.ReadTimeout("read timed out", request=request)))

    with pytest.raises(UpstreamUnavailableError, match="timed out"):
        await provider.fetch_current("London")


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>maintenance</html>"),
        httpx.Response(200, json=["not", "an", "object"]),
        httpx.Response(200, json={"location": {"name": "London"}}),
        httpx.Response(200, json={"location": {}, "current": {"temp_c": 10}}),
        httpx.Response(200, json={"location": {"name": "London"}, "current": {"humidity": 76}}),
        httpx.Response(200, json={"location": {"name": "London"}, "current": {"temp_c": "warm"}}),
        httpx.Response(200, json={"location": {"name": "London"}, "current": {"temp_c": True}}),
    ],
)
async def test_malformed_payload_is_invalid_response(response):
    provider = make_provider(Script(response))

    with pytest.raises(UpstreamInvalidResponseError):
        await provider.fetch_current("London")


async def test_close_releases_client(london_payload):
    provider = make_provider(Script(httpx.Response(200, json=london_payload)))
    client = provider.client

    await provider.close()

    assert client.is_closed
    assert provider.client is not client
    await provider.close()
