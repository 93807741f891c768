"""Weather record domain entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Location:
    """Where the observation applies.

    Attributes:
        name: Resolved place name as reported by the provider
        region: Region or state
        country: Country name
        lat: Latitude in degrees
        lon: Longitude in degrees
        tz_id: IANA timezone, e.g. "Europe/London"
        localtime: Provider's local time string, e.g. "2024-05-01 14:30"
    """

    name: str
    region: str = ""
    country: str = ""
    lat: float | None = None
    lon: float | None = None
    tz_id: str = ""
    localtime: str = ""


@dataclass(frozen=True)
class CurrentConditions:
    """Observed conditions at fetch time.

    Only ``temp_c`` is guaranteed; the remaining readings are ``None`` when
    the provider omits them.
    """

    temp_c: float
    temp_f: float | None = None
    condition_text: str = ""
    condition_icon: str = ""
    wind_kph: float | None = None
    wind_mph: float | None = None
    humidity: int | None = None
    feelslike_c: float | None = None
    feelslike_f: float | None = None
    last_updated: str = ""


@dataclass(frozen=True)
class WeatherRecord:
    """Current weather for a location.

    Created once per provider fetch and never mutated; a refresh replaces
    the whole record.
    """

    location: Location
    current: CurrentConditions
