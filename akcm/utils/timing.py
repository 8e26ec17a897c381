# AKCM Timing Utilities
# Polling waits and elapsed-time formatting

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar, Union

T = TypeVar("T")

Predicate = Callable[[], Union[Awaitable[Optional[T]], Optional[T]]]


async def wait_for(
    predicate: Predicate,
    *,
    timeout: float,
    interval: float,
    initial_delay: bool = False,
) -> Optional[T]:
    """
    Poll a predicate until it returns a truthy value or the timeout elapses.

    The predicate may be a plain callable or a coroutine function. Polling
    sleeps between checks and never spins.

    Args:
        predicate: Callable returning a truthy value once satisfied.
        timeout: Seconds to wait before giving up.
        interval: Seconds between checks.
        initial_delay: Sleep one interval before the first check.

    Returns:
        The first truthy value returned, or None on timeout.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    if initial_delay:
        await asyncio.sleep(interval)

    while True:
        value = predicate()
        if asyncio.iscoroutine(value) or isinstance(value, asyncio.Future):
            value = await value
        if value:
            return value
        if loop.time() >= deadline:
            return None
        await asyncio.sleep(interval)


def ms(value: Union[int, float]) -> float:
    """Convert milliseconds to seconds."""
    return value / 1000.0


def format_elapsed(seconds: float) -> str:
    """
    Format a duration the way progress lines show it.

    Args:
        seconds: Elapsed seconds.

    Returns:
        "42s" or "3m5s".
    """
    total = int(seconds)
    minutes, secs = divmod(total, 60)
    return f"{minutes}m{secs}s" if minutes > 0 else f"{secs}s"


class Stopwatch:
    """Monotonic elapsed-time tracker."""

    def __init__(self) -> None:
        self._start = time.monotonic()

    def reset(self) -> None:
        """Restart the clock."""
        self._start = time.monotonic()

    @property
    def elapsed(self) -> float:
        """Seconds since creation or last reset."""
        return time.monotonic() - self._start

    def __str__(self) -> str:
        return format_elapsed(self.elapsed)
