"""Async combinators for running one coroutine function over many items.

run_sequential awaits each call before starting the next, so later items may
rely on the side effects of earlier ones. run_parallel starts every call at
once and joins them; the first failure is raised.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def run_sequential(items: Iterable[T], fn: Callable[[T], Awaitable[R]]) -> list[R]:
    """Call fn on each item in order, one at a time. Stops at the first error."""
    results: list[R] = []
    for item in items:
        results.append(await fn(item))
    return results


async def run_parallel(items: Iterable[T], fn: Callable[[T], Awaitable[R]]) -> list[R]:
    """Call fn on every item concurrently. Results keep the order of items."""
    return list(await asyncio.gather(*(fn(item) for item in items)))
