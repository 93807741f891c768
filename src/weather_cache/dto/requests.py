"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class WeatherQueryParams(BaseModel):
    """Query parameters for weather lookups.

    Blank names are rejected by the service layer, not here, so that the
    error body has the same shape as every other domain error.
    """

    city: str | None = Field(None, description="City name, e.g. 'London'", max_length=200)
    timeout: float | None = Field(
        None,
        description="Override the lookup deadline in seconds",
        gt=0.0,
        le=60.0,
    )
