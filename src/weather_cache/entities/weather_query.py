"""Weather query domain entity."""

from dataclasses import dataclass

from weather_cache.errors import InvalidInputError


def normalize_city(city: str) -> str:
    """Canonical form of a city name: case-folded, trimmed, single-spaced.

    " New   York " -> "new york"
    "LONDON"       -> "london"
    """
    return " ".join(city.split()).casefold()


@dataclass(frozen=True)
class WeatherQuery:
    """A validated request for current weather in one city.

    Attributes:
        city: The caller's city name, trimmed but otherwise untouched.
            This is what the provider receives.
        normalized: Canonical form used to build the cache key.
        prefix: Namespace for cache keys.
    """

    city: str
    normalized: str
    prefix: str = "weather"

    @classmethod
    def from_city(cls, city: str | None, prefix: str = "weather") -> "WeatherQuery":
        """Build a query from raw user input.

        Raises:
            InvalidInputError: If the name is missing or blank.
        """
        if city is None or not city.strip():
            raise InvalidInputError("city must be a non-empty string")
        return cls(city=city.strip(), normalized=normalize_city(city), prefix=prefix)

    @property
    def cache_key(self) -> str:
        """Key under which this city's current weather is cached."""
        return f"{self.prefix}:current:{self.normalized}"
