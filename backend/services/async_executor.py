"""
Async executor for blocking SDK and disk operations.

The Razorpay SDK is synchronous (requests under the hood) and file writes
for uploads block too. Both run in a small thread pool so the asyncio event
loop keeps serving other requests.
"""
import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

_executor: ThreadPoolExecutor | None = None
_MAX_WORKERS = 4


def get_executor() -> ThreadPoolExecutor:
    """Lazy-initialize thread pool executor."""
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(max_workers=_MAX_WORKERS, thread_name_prefix="blocking_")
        logger.info(f"Thread pool executor initialized (max_workers={_MAX_WORKERS})")
    return _executor


T = TypeVar("T")


async def run_blocking(
    func: Callable[..., T],
    *args: Any,
    timeout: float | None = None,
    **kwargs: Any,
) -> T:
    """
    Run a blocking (synchronous) function in the thread pool.

    With `timeout`, raises asyncio.TimeoutError once it elapses. The worker
    thread is not interrupted; the caller simply stops waiting for it.
    """
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(
        get_executor(),
        functools.partial(func, *args, **kwargs),
    )
    if timeout is None:
        return await future
    return await asyncio.wait_for(future, timeout=timeout)


def shutdown_executor() -> None:
    """Shutdown the thread pool on app lifecycle end."""
    global _executor
    if _executor:
        _executor.shutdown(wait=True)
        _executor = None
        logger.info("Thread pool executor shutdown")
