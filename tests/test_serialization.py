"""
Tests for the cached record codec.
"""

import json

import pytest

from weather_cache.entities import CurrentConditions, Location, WeatherRecord
from weather_cache.errors import CorruptCacheEntryError
from weather_cache.serialization import SCHEMA_VERSION, decode_record, encode_record


def test_encoded_record_is_versioned_json(london_record):
    document = json.loads(encode_record(london_record))

    assert document["v"] == SCHEMA_VERSION
    assert document["location"]["name"] == "London"
    assert document["current"]["humidity"] == 76


def test_decode_restores_equal_record(london_record):
    assert decode_record(encode_record(london_record)) == london_record


def test_partial_record_keeps_missing_readings_as_none():
    record = WeatherRecord(location=Location(name="Reykjavik"), current=CurrentConditions(temp_c=-2.5))

    decoded = decode_record(encode_record(record))

    assert decoded.current.wind_kph is None
    assert decoded.current.humidity is None
    assert decoded.location.lat is None


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"{not json",
        b"\xff\xfe",
        b"[1, 2, 3]",
        b'{"location": {"name": "London"}, "current": {"temp_c": 1.0}}',
        b'{"v": 99, "location": {"name": "London"}, "current": {"temp_c": 1.0}}',
        b'{"v": 1, "location": {"name": "London"}}',
        b'{"v": 1, "location": {"name": "London"}, "current": {}}',
        b'{"v": 1, "location": {"name": "London"}, "current": {"temp_c": 1.0, "pressure_mb": 1012}}',
    ],
)
def test_corrupt_payloads_raise(raw):
    with pytest.raises(CorruptCacheEntryError):
        decode_record(raw)


@pytest.mark.parametrize(
    ("section", "field", "value"),
    [
        ("current", "temp_c", None),
        ("current", "temp_c", "hot"),
        ("current", "temp_c", True),
        ("current", "humidity", 76.5),
        ("current", "wind_kph", "fast"),
        ("current", "condition_text", 3),
        ("location", "name", 42),
        ("location", "name", None),
        ("location", "lat", "51.5"),
    ],
)
def test_wrongly_typed_fields_raise(london_record, section, field, value):
    document = json.loads(encode_record(london_record))
    document[section][field] = value

    with pytest.raises(CorruptCacheEntryError, match=field):
        decode_record(json.dumps(document))


def test_integer_readings_and_null_optionals_decode():
    raw = b'{"v": 1, "location": {"name": "Oslo", "lat": null}, "current": {"temp_c": -3, "humidity": 80}}'

    record = decode_record(raw)

    assert record.current.temp_c == -3
    assert record.current.humidity == 80
    assert record.location.lat is None
