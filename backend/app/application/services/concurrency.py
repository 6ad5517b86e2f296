"""Concurrent store reads that are abandoned together."""

import asyncio
from collections.abc import Coroutine
from typing import Any


async def gather_all(*coros: Coroutine[Any, Any, Any]) -> list[Any]:
    """Await every coroutine concurrently and return their results in order.

    The first failure cancels the reads still running, and that failure's own
    exception is re-raised rather than the surrounding ExceptionGroup.
    """
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(coro) for coro in coros]
    except ExceptionGroup as failures:
        raise failures.exceptions[0]
    return [task.result() for task in tasks]
