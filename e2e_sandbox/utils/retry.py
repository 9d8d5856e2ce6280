"""Bounded retry for flaky filesystem and process operations.

Sandbox operations touch the real filesystem and process table, which fail
transiently (propagation delays, locked handles). A small number of
fixed-delay retries absorbs these without hiding persistent failures.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from ..config import settings

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def retry(
    effect: Callable[[], Awaitable[T]],
    retries: Optional[int] = None,
    delay: Optional[float] = None,
) -> T:
    """Await ``effect()`` up to ``retries`` times, sleeping ``delay`` between attempts.

    Args:
        effect: Zero-argument callable returning a fresh awaitable per call
        retries: Total number of attempts (defaults to settings.retry_attempts)
        delay: Seconds between attempts (defaults to settings.retry_delay)

    Returns:
        The result of the first successful attempt

    Raises:
        The exception of the last attempt, unchanged, once every attempt failed
    """
    if retries is None:
        retries = settings.retry_attempts
    if delay is None:
        delay = settings.retry_delay
    if retries < 1:
        raise ValueError("retries must be >= 1")

    for attempt in range(1, retries + 1):
        try:
            return await effect()
        except Exception as e:
            logger.warning(
                "Attempt failed",
                error=str(e) or type(e).__name__,
                attempt=attempt,
                retries=retries,
            )
            if attempt == retries:
                raise
            await asyncio.sleep(delay)
