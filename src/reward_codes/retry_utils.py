# SPDX-License-Identifier: MIT
"""Retry helpers for calls against unreliable external collaborators.

Both the counter store and the identity lookup are polled at a fixed interval
until they succeed or a caller supplied deadline would be exceeded. Whether a
given exception is worth another attempt is decided by a classifier so each
collaborator can share this loop.
"""

from __future__ import annotations

import asyncio
import time
from numbers import Real
from typing import Awaitable, Callable, TypeVar

import logfire

from .constants import RETRY_INTERVAL_SECONDS
from .result import Failure, Result, Success

T = TypeVar("T")

Classifier = Callable[[Exception], bool]
Clock = Callable[[], float]


def require_timeout(timeout: object) -> float:
    """Return ``timeout`` as a float.

    Raises:
        TypeError: If ``timeout`` is missing or not a real number.
    """
    if isinstance(timeout, bool) or not isinstance(timeout, Real):
        raise TypeError(
            "Expected number for timeout, got "
            f"{type(timeout).__name__} ({timeout!r})"
        )
    return float(timeout)


async def retry_until_deadline(
    operation: Callable[[], Awaitable[T]],
    *,
    timeout: float,
    classify: Classifier,
    interval: float = RETRY_INTERVAL_SECONDS,
    clock: Clock = time.monotonic,
    name: str = "operation",
) -> Result[T]:
    """Run ``operation`` until it succeeds or the deadline would be exceeded.

    Args:
        operation: Factory returning a fresh awaitable for each attempt.
        timeout: Seconds from the first attempt after which no retry starts.
        classify: Returns ``True`` when an exception may be retried.
        interval: Seconds to wait between attempts.
        clock: Monotonic time source.
        name: Label used in log records.

    Returns:
        ``Success`` with the operation result, or ``Failure`` carrying the last
        error message.
    """
    deadline = clock() + require_timeout(timeout)
    attempt = 0
    while True:
        attempt += 1
        try:
            value = await operation()
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            if not classify(exc):
                logfire.warning(
                    "Giving up on non-retryable error",
                    operation=name,
                    attempt=attempt,
                    reason=reason,
                )
                return Failure(reason)
            if clock() + interval >= deadline:
                logfire.warning(
                    "Retry deadline reached",
                    operation=name,
                    attempt=attempt,
                    reason=reason,
                )
                return Failure(reason)
            logfire.info(
                "Retrying request",
                operation=name,
                attempt=attempt,
                backoff_delay=interval,
                reason=reason,
            )
            await asyncio.sleep(interval)
            continue
        return Success(value)


__all__ = ["Classifier", "Clock", "require_timeout", "retry_until_deadline"]
