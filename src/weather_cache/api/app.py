from typing import Annotated, Any

from fastapi import FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from weather_cache.api.dependencies import HandlerDep, lifespan
from weather_cache.config import settings
from weather_cache.dto import (
    ErrorResponse,
    HealthCheckResponse,
    InvalidateResponse,
    WeatherQueryParams,
    WeatherResponse,
)

app = FastAPI(
    title="Weather Cache API",
    description="Current weather by city, served through a Redis read-through cache",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing or invalid city"},
    404: {"model": ErrorResponse, "description": "Unknown city"},
    502: {"model": ErrorResponse, "description": "Upstream provider failed"},
    504: {"model": ErrorResponse, "description": "Lookup deadline exceeded"},
}


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed query parameters as 400 rather than 422."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": message},
    )


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Weather Cache API",
        "version": "0.1.0",
        "description": "Current weather by city, served through a Redis read-through cache",
        "endpoints": {
            "weather": "/weather?city=<name>",
            "health": "/health",
            "metrics": "/metrics",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Liveness check; reports cache reachability."""
    return await handler.health_check()


@app.get("/weather", response_model=WeatherResponse, responses=_ERROR_RESPONSES)
async def get_weather(
    params: Annotated[WeatherQueryParams, Query()],
    handler: HandlerDep,
) -> WeatherResponse:
    """
    Get current weather for a city.

    Args:
        params: Query parameters with city and optional deadline override.

    Returns:
        Location metadata and current conditions.
    """
    return await handler.get_weather(params)


@app.delete("/weather/cache", response_model=InvalidateResponse, responses=_ERROR_RESPONSES)
async def invalidate_weather(
    params: Annotated[WeatherQueryParams, Query()],
    handler: HandlerDep,
) -> InvalidateResponse:
    """Evict the cached record for a city so the next lookup refetches."""
    return await handler.invalidate(params)


@app.get("/metrics")
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "weather_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
