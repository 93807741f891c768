"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from weather_cache.config import settings
from weather_cache.handlers import WeatherHandler
from weather_cache.logging_config import configure_logging
from weather_cache.protocols import CacheStore
from weather_cache.repositories import InMemoryCacheRepository, RedisCacheRepository, WeatherApiProvider
from weather_cache.services import WeatherService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> WeatherHandler:
    """Dependency injection for WeatherHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The WeatherHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "weather_handler", None)
    if handler is None:
        raise RuntimeError("WeatherHandler not initialized. Check lifespan setup.")
    return handler


def build_cache_store() -> CacheStore:
    """Create the cache backend selected by CACHE_BACKEND."""
    if settings.cache_backend == "memory":
        return InMemoryCacheRepository()
    return RedisCacheRepository.create()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Cache store and provider (data access) - long-lived, shared by all requests
    2. Service (business logic) - stored in app.state.weather_service
    3. Handler (HTTP endpoints) - stored in app.state.weather_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Closes the Redis pool and the HTTP client, removes services from app.state
    """
    configure_logging(settings.log_level)

    cache_store = build_cache_store()
    provider = WeatherApiProvider.create()

    if not settings.weather_api_key:
        logger.warning("WEATHER_API_KEY is not set; upstream requests will be rejected")

    weather_service = WeatherService.create(cache_store=cache_store, provider=provider)
    weather_handler = WeatherHandler(weather_service=weather_service)

    # Store in app.state (FastAPI pattern)
    app.state.weather_service = weather_service
    app.state.weather_handler = weather_handler
    app.state.cache_store = cache_store
    app.state.provider = provider

    if await cache_store.health_check():
        logger.info("Cache backend %r reachable", settings.cache_backend)
    else:
        logger.warning("Cache backend %r unreachable; serving from upstream only", settings.cache_backend)
    logger.info("Weather service initialized (ttl=%ds, timeout=%.1fs)", weather_service.ttl, weather_service.timeout)

    yield

    # Cleanup - close shared transports, remove from app.state
    await provider.close()
    await cache_store.close()
    del app.state.weather_handler
    del app.state.weather_service
    del app.state.cache_store
    del app.state.provider
    logger.info("Weather service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[WeatherHandler, Depends(get_handler)]
