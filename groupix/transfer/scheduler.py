"""
Bounded-concurrency task scheduler.

Runs one coroutine per work item with at most `concurrency` of them in
flight. Items are started in input order; as soon as any running task
finishes its slot is handed to the next pending item, so a slow item never
holds back the rest of a "batch".

Example:
    >>> scheduler = BoundedScheduler(concurrency=3)
    >>> await scheduler.run(paths, copy_one, on_failure=record_failure)
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from groupix.core.exceptions import ConfigurationError

T = TypeVar("T")

SuccessCallback = Callable[[T, Any], None]
FailureCallback = Callable[[T, Exception], None]


class BoundedScheduler:
    """
    Sliding-window worker pool on a single event loop.

    The pending queue, in-flight set and counters are only touched from the
    loop running `run()`, so no locks are needed. There is no per-task
    timeout: a worker that never returns keeps its slot.
    """

    def __init__(self, concurrency: int):
        if concurrency < 1:
            msg = f"concurrency must be a positive integer, got {concurrency}"
            raise ConfigurationError(msg, key="concurrency")
        self.concurrency = concurrency
        self.started = 0
        self.max_in_flight = 0

    async def run(
        self,
        items: Iterable[T],
        worker: Callable[[T], Awaitable[Any]],
        on_success: SuccessCallback | None = None,
        on_failure: FailureCallback | None = None,
    ) -> None:
        """
        Run `worker` once for every item.

        Args:
            items: Work items, started in iteration order
            worker: Coroutine function processing one item
            on_success: Called with (item, result) when a worker returns
            on_failure: Called with (item, exception) when a worker raises

        Worker exceptions never propagate out of run(). Cancellation and
        errors raised by a callback do, after the in-flight tasks have been
        cancelled.
        """
        pending = iter(items)
        in_flight: dict[asyncio.Task, T] = {}

        def fill() -> None:
            while len(in_flight) < self.concurrency:
                try:
                    item = next(pending)
                except StopIteration:
                    return
                task = asyncio.create_task(worker(item))
                in_flight[task] = item
                self.started += 1
                self.max_in_flight = max(self.max_in_flight, len(in_flight))

        fill()
        try:
            while in_flight:
                done, _ = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    item = in_flight.pop(task)
                    self._settle(task, item, on_success, on_failure)
                fill()
        finally:
            # Only non-empty when leaving early: cancellation or a raising callback
            for task in in_flight:
                task.cancel()

    @staticmethod
    def _settle(
        task: asyncio.Task,
        item: T,
        on_success: SuccessCallback | None,
        on_failure: FailureCallback | None,
    ) -> None:
        """Route a finished task to the matching callback."""
        if task.cancelled():
            raise asyncio.CancelledError
        exc = task.exception()
        if exc is None:
            if on_success is not None:
                on_success(item, task.result())
        elif isinstance(exc, Exception):
            if on_failure is not None:
                on_failure(item, exc)
        else:
            raise exc
