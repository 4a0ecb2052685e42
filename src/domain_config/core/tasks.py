"""Utilities for safe async task management.

Provides wrappers that ensure:
- Errors from concurrent work are logged rather than silently swallowed
- Writes to external stores run to completion even if the request that
  started them is cancelled
"""

import asyncio
from collections.abc import Awaitable, Coroutine
from typing import Any, TypeVar

from domain_config.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_detached_tasks: set[asyncio.Future[Any]] = set()


async def gather_with_errors(
    *coros: Awaitable[T],
    return_exceptions: bool = False,
) -> list[T | BaseException]:
    """Gather coroutines and handle errors consistently.

    Like asyncio.gather but with better error handling:
    - Logs all exceptions
    - Returns exceptions in results if return_exceptions=True
    - Re-raises first exception if return_exceptions=False

    Args:
        *coros: Coroutines to run concurrently
        return_exceptions: If True, return exceptions instead of raising

    Returns:
        List of results (and exceptions if return_exceptions=True)
    """
    results = await asyncio.gather(*coros, return_exceptions=True)

    exceptions = [r for r in results if isinstance(r, BaseException)]
    if exceptions:
        for exc in exceptions:
            logger.warning(
                "gather_task_failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )

        if not return_exceptions:
            raise exceptions[0]

    return results


async def run_to_completion(coro: Coroutine[Any, Any, T], task_name: str) -> T:
    """Run a coroutine that must not be interrupted half-way.

    The coroutine is wrapped in its own task and shielded: if the caller is
    cancelled, the task keeps running and its result is discarded. Used for
    cache population and invalidation so an abandoned request never leaves
    a partial write behind.
    """
    task = asyncio.ensure_future(coro)
    try:
        return await asyncio.shield(task)
    except asyncio.CancelledError:
        # The event loop only holds weak references to tasks
        _detached_tasks.add(task)
        task.add_done_callback(_detached_tasks.discard)
        logger.debug("shielded_task_detached", task=task_name)
        raise

