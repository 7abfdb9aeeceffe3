"""Async retry decorator with exponential backoff.

Used for startup connectivity checks (database, broker) where the dependency
may come up a few seconds after the service in containerized deployments.
"""

from __future__ import annotations

import asyncio
import logging
import random
from functools import wraps
from typing import TYPE_CHECKING, ParamSpec, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


class RetryError(Exception):
    """Error raised after exhausting retry attempts."""

    def __init__(self, last_exception: Exception, attempts: int) -> None:
        self.last_exception = last_exception
        self.attempts = attempts
        super().__init__(f"Failed after {attempts} attempts. Last error: {last_exception}")


def calculate_delay(
    attempt: int,
    *,
    initial_delay: float,
    max_delay: float,
    exponential_base: float,
    jitter: bool,
) -> float:
    """Backoff delay in seconds before retry number ``attempt`` (0-based)."""
    delay = min(initial_delay * (exponential_base**attempt), max_delay)
    if jitter:
        delay *= random.uniform(0.5, 1.5)  # noqa: S311
    return delay


def retry(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry an async callable on the given exceptions.

    Args:
        max_attempts: Total attempts including the first call.
        initial_delay: Delay before the first retry, in seconds.
        max_delay: Upper bound for a single delay.
        exponential_base: Multiplier applied per attempt.
        jitter: Randomize each delay by 0.5x-1.5x.
        exceptions: Exception types that trigger a retry; anything else propagates.

    Raises:
        RetryError: When every attempt failed.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_attempts - 1:
                        logger.error(
                            "All retry attempts exhausted for %s",
                            func.__name__,
                            extra={
                                "function": func.__name__,
                                "attempts": attempt + 1,
                                "last_exception": str(e),
                            },
                        )
                        raise RetryError(e, attempt + 1) from e

                    delay = calculate_delay(
                        attempt,
                        initial_delay=initial_delay,
                        max_delay=max_delay,
                        exponential_base=exponential_base,
                        jitter=jitter,
                    )
                    logger.warning(
                        "Retrying %s after %.2fs (attempt %d/%d)",
                        func.__name__,
                        delay,
                        attempt + 1,
                        max_attempts,
                        extra={"function": func.__name__, "exception": str(e)},
                    )
                    await asyncio.sleep(delay)

            msg = "Retry logic error: exhausted all attempts"
            raise RuntimeError(msg)

        return async_wrapper

    return decorator
