"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field

from weather_cache.entities import WeatherRecord


class LocationItem(BaseModel):
    """Location block of a weather response."""

    name: str = Field(..., description="Resolved place name")
    region: str = Field("", description="Region or state")
    country: str = Field("", description="Country name")
    lat: float | None = Field(None, description="Latitude in degrees")
    lon: float | None = Field(None, description="Longitude in degrees")
    tz_id: str = Field("", description="IANA timezone identifier")
    localtime: str = Field("", description="Local time at the location")


class CurrentItem(BaseModel):
    """Current conditions block of a weather response."""

    temp_c: float = Field(..., description="Temperature in °C")
    temp_f: float | None = Field(None, description="Temperature in °F")
    condition_text: str = Field("", description="Condition summary, e.g. 'Partly cloudy'")
    condition_icon: str = Field("", description="Condition icon URL")
    wind_kph: float | None = Field(None, description="Wind speed in km/h")
    wind_mph: float | None = Field(None, description="Wind speed in mph")
    humidity: int | None = Field(None, description="Relative humidity in percent")
    feelslike_c: float | None = Field(None, description="Feels-like temperature in °C")
    feelslike_f: float | None = Field(None, description="Feels-like temperature in °F")
    last_updated: str = Field("", description="Provider's observation time")


class WeatherResponse(BaseModel):
    """Response DTO for GET /weather."""

    location: LocationItem
    current: CurrentItem

    @classmethod
    def from_entity(cls, record: WeatherRecord) -> "WeatherResponse":
        """Build the API representation of a domain record."""
        return cls(
            location=LocationItem.model_validate(record.location, from_attributes=True),
            current=CurrentItem.model_validate(record.current, from_attributes=True),
        )


class ErrorResponse(BaseModel):
    """Body returned with every non-2xx status."""

    detail: str = Field(..., description="Human-readable error message")


class InvalidateResponse(BaseModel):
    """Response DTO for DELETE /weather/cache."""

    city: str = Field(..., description="City as requested")
    removed: bool = Field(..., description="Whether a cached entry existed")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded'")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
