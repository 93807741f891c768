"""Per-key de-duplication of concurrent work.

When several requests miss the cache for the same city at once, only the
first one starts an upstream fetch; the others wait on it and receive the
same result or exception.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from weather_cache.metrics import weather_coalesced_requests_total

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class _Call:
    task: asyncio.Task
    waiters: int = 0


class SingleFlight:
    """Coalesce concurrent calls that share a key into one execution.

    The shared work runs in its own task so that one waiter being cancelled
    does not cancel it for the others. The task is cancelled only once every
    waiter has gone away.

    Example:
        ```python
        flight = SingleFlight()
        record = await flight.do("weather:current:london", lambda: fetch("London"))
        ```
    """

    def __init__(self) -> None:
        self._calls: dict[str, _Call] = {}

    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``fn`` unless a call for ``key`` is already in flight.

        Args:
            key: De-duplication key
            fn: Zero-argument coroutine factory for the shared work

        Returns:
            The result of the (possibly shared) call
        """
        call = self._calls.get(key)
        if call is None:
            call = _Call(task=asyncio.ensure_future(fn()))
            self._calls[key] = call
            call.task.add_done_callback(lambda _task: self._forget(key, call))
        else:
            weather_coalesced_requests_total.inc()
            logger.debug("Joining in-flight fetch for %s", key)

        call.waiters += 1
        try:
            return await asyncio.shield(call.task)
        finally:
            call.waiters -= 1
            if call.waiters == 0 and not call.task.done():
                call.task.cancel()
                self._forget(key, call)

    def in_flight(self, key: str) -> bool:
        """Whether a call for ``key`` is currently running."""
        return key in self._calls

    def _forget(self, key: str, call: _Call) -> None:
        if self._calls.get(key) is call:
            del self._calls[key]
