"""
Tests for per-key call coalescing.
"""

import asyncio

import pytest

from weather_cache.services import SingleFlight

pytestmark = pytest.mark.asyncio


async def test_concurrent_calls_share_one_execution():
    flight = SingleFlight()
    calls = 0

    async def work():
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.02)
        return "sunny"

    results = await asyncio.gather(*(flight.do("k", work) for _ in range(5)))

    assert results == ["sunny"] * 5
    assert calls == 1
    assert not flight.in_flight("k")


async def test_different_keys_run_independently():
    flight = SingleFlight()
    seen = []

    async def work(name):
        seen.append(name)
        await asyncio.sleep(0.01)
        return name

    results = await asyncio.gather(flight.do("a", lambda: work("a")), flight.do("b", lambda: work("b")))

    assert results == ["a", "b"]
    assert sorted(seen) == ["a", "b"]


async def test_sequential_calls_run_again():
    flight = SingleFlight()
    calls = 0

    async def work():
        nonlocal calls
        calls += 1
        return calls

    assert await flight.do("k", work) == 1
    assert await flight.do("k", work) == 2


async def test_exception_reaches_every_waiter():
    flight = SingleFlight()

    async def work():
        await asyncio.sleep(0.01)
        raise LookupError("no such city")

    results = await asyncio.gather(*(flight.do("k", work) for _ in range(3)), return_exceptions=True)

    assert all(isinstance(r, LookupError) for r in results)
    assert not flight.in_flight("k")


async def test_one_cancelled_waiter_does_not_cancel_the_others():
    flight = SingleFlight()
    started = asyncio.Event()
    release = asyncio.Event()

    async def work():
        started.set()
        await release.wait()
        return 42

    first = asyncio.create_task(flight.do("k", work))
    second = asyncio.create_task(flight.do("k", work))
    await started.wait()

    first.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first
    release.set()

    assert await second == 42


async def test_last_waiter_leaving_cancels_the_work():
    flight = SingleFlight()
    started = asyncio.Event()
    cancelled = asyncio.Event()

    async def work():
        started.set()
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.set()
            raise

    waiter = asyncio.create_task(flight.do("k", work))
    await started.wait()
    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    await asyncio.wait_for(cancelled.wait(), timeout=1.0)
    assert not flight.in_flight("k")
