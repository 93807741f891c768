"""Prometheus counters for the weather read path."""

from prometheus_client import Counter, Histogram

weather_cache_hits_total = Counter(
    "weather_cache_hits_total",
    "Requests served from the cache",
)

weather_cache_misses_total = Counter(
    "weather_cache_misses_total",
    "Requests that needed an upstream fetch",
    labelnames=["reason"],
)

weather_cache_errors_total = Counter(
    "weather_cache_errors_total",
    "Cache backend failures, swallowed by the service",
    labelnames=["operation"],
)

weather_provider_requests_total = Counter(
    "weather_provider_requests_total",
    "Total weather provider requests",
    labelnames=["provider"],
)

weather_provider_errors_total = Counter(
    "weather_provider_errors_total",
    "Total weather provider request errors",
    labelnames=["provider", "error_type"],
)

weather_provider_latency_seconds = Histogram(
    "weather_provider_latency_seconds",
    "Latency of weather provider requests",
    labelnames=["provider"],
    buckets=(0.1, 0.3, 0.5, 1, 2, 5, 10, 20, 30),
)

weather_coalesced_requests_total = Counter(
    "weather_coalesced_requests_total",
    "Cache misses that joined an in-flight fetch for the same city",
)

weather_request_timeouts_total = Counter(
    "weather_request_timeouts_total",
    "Weather lookups that exceeded the request deadline",
)
