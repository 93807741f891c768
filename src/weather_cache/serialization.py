"""Byte codec for cached weather records.

Cache values are UTF-8 JSON documents tagged with a schema version. Any
payload that does not decode into a complete, well-typed ``WeatherRecord``
raises ``CorruptCacheEntryError`` so callers can treat it as a cache miss.
"""

import json
from dataclasses import asdict
from typing import Any

from weather_cache.entities import CurrentConditions, Location, WeatherRecord
from weather_cache.errors import CorruptCacheEntryError

SCHEMA_VERSION = 1

# Expected JSON type per field: "str", "number" (int or float, never bool),
# "number?" and "int?" (nullable)
_LOCATION_FIELDS = {
    "name": "str",
    "region": "str",
    "country": "str",
    "lat": "number?",
    "lon": "number?",
    "tz_id": "str",
    "localtime": "str",
}

_CURRENT_FIELDS = {
    "temp_c": "number",
    "temp_f": "number?",
    "condition_text": "str",
    "condition_icon": "str",
    "wind_kph": "number?",
    "wind_mph": "number?",
    "humidity": "int?",
    "feelslike_c": "number?",
    "feelslike_f": "number?",
    "last_updated": "str",
}


def encode_record(record: WeatherRecord) -> bytes:
    """Serialize a record for storage in the cache."""
    document = {"v": SCHEMA_VERSION, **asdict(record)}
    return json.dumps(document, separators=(",", ":")).encode("utf-8")


def decode_record(raw: bytes | str) -> WeatherRecord:
    """Deserialize a cached record.

    Raises:
        CorruptCacheEntryError: If the payload is not a valid record of the
            current schema version, including any field of the wrong type.
    """
    try:
        document = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CorruptCacheEntryError(f"Cached payload is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise CorruptCacheEntryError("Cached payload is not a JSON object")

    version = document.get("v")
    if version != SCHEMA_VERSION:
        raise CorruptCacheEntryError(f"Unsupported cache schema version: {version!r}")

    location = _as_mapping(document.get("location"))
    current = _as_mapping(document.get("current"))
    _check_types(location, _LOCATION_FIELDS, "location")
    _check_types(current, _CURRENT_FIELDS, "current")

    try:
        return WeatherRecord(location=Location(**location), current=CurrentConditions(**current))
    except TypeError as e:
        # Missing mandatory fields or unexpected keys
        raise CorruptCacheEntryError(f"Cached payload has the wrong shape: {e}") from e


def _as_mapping(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise CorruptCacheEntryError("Cached payload is missing a section")
    return value


def _check_types(section: dict[str, Any], fields: dict[str, str], name: str) -> None:
    for field, kind in fields.items():
        if field not in section:
            continue
        value = section[field]
        if value is None and kind.endswith("?"):
            continue
        if kind == "str":
            valid = isinstance(value, str)
        elif kind == "int?":
            valid = isinstance(value, int) and not isinstance(value, bool)
        else:
            valid = isinstance(value, (int, float)) and not isinstance(value, bool)
        if not valid:
            raise CorruptCacheEntryError(f"Cached {name}.{field} has the wrong type: {value!r}")
