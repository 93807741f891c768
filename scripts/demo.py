#!/usr/bin/env python3
"""
Demo script for the weather cache.

This script demonstrates the cache-aside read path against the live
WeatherAPI.com endpoint. Set WEATHER_API_KEY first; the cache lives in
process memory so no Redis is needed.
"""

import asyncio
import time

from weather_cache import (
    InMemoryCacheRepository,
    WeatherApiProvider,
    WeatherCacheError,
    WeatherService,
)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def timed_lookup(service: WeatherService, city: str) -> None:
    """Look up one city and report how long it took."""
    start_time = time.perf_counter()
    try:
        record = await service.get_weather(city)
    except WeatherCacheError as e:
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        print(f"  {city!r:<16} ✗ {e.__class__.__name__}: {e.message} ({elapsed_ms:.1f} ms)")
        return

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    print(
        f"  {city!r:<16} ✓ {record.location.name}, {record.location.country}: "
        f"{record.current.temp_c:.1f}°C, {record.current.condition_text} ({elapsed_ms:.1f} ms)"
    )


async def demo_cache_aside(service: WeatherService) -> None:
    """Show a miss followed by hits for spelling variants of the same city."""
    print_section("Cache-aside read path")

    print("\n🔍 First lookup (cache miss, goes upstream):")
    await timed_lookup(service, "London")

    print("\n🔍 Variants of the same city (served from cache):")
    for variant in [" london ", "LONDON", "London  "]:
        await timed_lookup(service, variant)


async def demo_errors(service: WeatherService) -> None:
    """Show how failures are classified."""
    print_section("Error classification")

    for city in ["Qwzxplkj", "   "]:
        await timed_lookup(service, city)

    print("\n🔍 Unknown city is not cached, so this goes upstream again:")
    await timed_lookup(service, "Qwzxplkj")


async def demo_invalidate(service: WeatherService) -> None:
    """Show explicit eviction."""
    print_section("Invalidation")

    removed = await service.invalidate("london")
    print(f"\n  Evicted 'london': {removed}")
    print("\n🔍 Next lookup refetches:")
    await timed_lookup(service, "London")


async def main() -> None:
    provider = WeatherApiProvider.create()
    service = WeatherService.create(cache_store=InMemoryCacheRepository(), provider=provider)
    try:
        await demo_cache_aside(service)
        await demo_errors(service)
        await demo_invalidate(service)
    finally:
        await provider.close()

    print("\n✓ Demo complete")


if __name__ == "__main__":
    asyncio.run(main())
