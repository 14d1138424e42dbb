"""Bounded-concurrency fan-out with streaming results.

fan_out() runs one worker per item with at most ``width`` workers in
flight, and yields results in completion order through a queue of the
same capacity. A slow consumer therefore stalls the workers instead of
growing the buffer. The stream ends once every worker has finished and
its result has been yielded.

If the consumer stops early, workers that are already running finish in
the background and their results are discarded; items still waiting for
a slot are never started.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_CLOSED = object()

# Strong references to dispatchers left running after their consumer went away.
_background: set[asyncio.Task[None]] = set()


class _Raised:
    __slots__ = ("error",)

    def __init__(self, error: Exception) -> None:
        self.error = error


def _available_cpus() -> int:
    """CPUs this process may run on, honoring affinity where the OS exposes it."""
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0))
    return os.cpu_count() or 1


def concurrency_width(limit: int) -> int:
    """Return min(limit, available CPUs), never less than 1."""
    return max(1, min(limit, _available_cpus()))


async def fan_out(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    width: int,
) -> AsyncIterator[R]:
    """Run ``worker`` over ``items`` and yield results as they complete.

    Args:
        items: Inputs, one worker call each.
        worker: Coroutine function producing one result per input. It
            should report failures in its result; an exception it raises
            is re-raised to the consumer.
        width: Maximum number of workers in flight and buffer capacity.

    Yields:
        Worker results in completion order.
    """
    items = list(items)
    queue: asyncio.Queue[object] = asyncio.Queue(maxsize=width)
    semaphore = asyncio.Semaphore(width)
    abandoned = asyncio.Event()

    async def _run(item: T) -> None:
        async with semaphore:
            if abandoned.is_set():
                return
            try:
                result: object = await worker(item)
            except Exception as e:
                result = _Raised(e)
            if abandoned.is_set():
                return
            # Put while holding the slot so at most `width` producers wait on the queue.
            await queue.put(result)

    async def _dispatch() -> None:
        await asyncio.gather(*(_run(item) for item in items))
        if not abandoned.is_set():
            await queue.put(_CLOSED)

    logger.debug(f"Fanning out {len(items)} items with width {width}")
    dispatcher = asyncio.create_task(_dispatch())
    try:
        while True:
            result = await queue.get()
            if result is _CLOSED:
                break
            if isinstance(result, _Raised):
                raise result.error
            yield result  # type: ignore[misc]
    finally:
        if not dispatcher.done():
            abandoned.set()
            # Free every slot so producers blocked on put() can finish.
            while not queue.empty():
                queue.get_nowait()
            _background.add(dispatcher)
            dispatcher.add_done_callback(_background.discard)
