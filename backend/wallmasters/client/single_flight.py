"""Collapse concurrent calls for the same key into one execution."""
import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Any


class SingleFlight:
    """Task cache keyed by an arbitrary hashable.

    The first caller for a key starts ``fn`` as its own task; every caller,
    the first included, awaits that task and receives the same result or
    exception. Cancelling a caller never cancels the shared task. The entry
    is dropped as soon as the task settles, so the next call after that runs
    ``fn`` again.
    """

    def __init__(self):
        self._inflight: dict[Hashable, asyncio.Task] = {}

    def in_flight(self, key: Hashable) -> bool:
        return key in self._inflight

    def _settled(self, key: Hashable, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        if not task.cancelled():
            # Mark retrieved; if every caller was cancelled nobody else will.
            task.exception()

    async def do(self, key: Hashable, fn: Callable[[], Awaitable[Any]]) -> Any:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._inflight[key] = task
            task.add_done_callback(lambda t: self._settled(key, t))
        return await asyncio.shield(task)
