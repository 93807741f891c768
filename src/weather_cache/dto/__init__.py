"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import WeatherQueryParams
from .responses import (
    CurrentItem,
    ErrorResponse,
    HealthCheckResponse,
    InvalidateResponse,
    LocationItem,
    WeatherResponse,
)

__all__ = [
    "WeatherQueryParams",
    "LocationItem",
    "CurrentItem",
    "WeatherResponse",
    "ErrorResponse",
    "InvalidateResponse",
    "HealthCheckResponse",
]
