import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as aioredis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Cache
    cache_backend: str = os.getenv("CACHE_BACKEND", "redis")  # "redis" or "memory"
    cache_ttl: int = int(os.getenv("CACHE_TTL", "1800"))  # 30 minutes default
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "weather")
    cache_single_flight: bool = os.getenv("CACHE_SINGLE_FLIGHT", "true").lower() == "true"

    # Upstream provider (WeatherAPI.com)
    weather_api_key: str = os.getenv("WEATHER_API_KEY", "")
    weather_api_base_url: str = os.getenv("WEATHER_API_BASE_URL", "https://api.weatherapi.com/v1")
    provider_timeout: float = float(os.getenv("PROVIDER_TIMEOUT", "10.0"))
    provider_max_retries: int = int(os.getenv("PROVIDER_MAX_RETRIES", "2"))
    provider_backoff: float = float(os.getenv("PROVIDER_BACKOFF", "0.5"))

    # Deadline for a whole GET /weather call (cache read + fetch + cache write)
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "15.0"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend not in ("redis", "memory"):
            raise ValueError(f"CACHE_BACKEND must be 'redis' or 'memory', got {self.cache_backend!r}")

        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.request_timeout <= 0 or self.provider_timeout <= 0:
            raise ValueError("REQUEST_TIMEOUT and PROVIDER_TIMEOUT must be positive")

        if self.provider_max_retries < 0:
            raise ValueError("PROVIDER_MAX_RETRIES must be >= 0")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> aioredis.Redis:
    """Create an async Redis client instance."""
    return aioredis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
        socket_connect_timeout=5,
    )
