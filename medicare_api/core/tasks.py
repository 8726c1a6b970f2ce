import asyncio
from typing import Any, Awaitable, List


async def gather_or_cancel(*aws: Awaitable[Any]) -> List[Any]:
    """
    Run awaitables concurrently and return their results in order.

    The first failure cancels every sibling still running, waits for them to
    unwind, then propagates.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
