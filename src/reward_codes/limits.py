# SPDX-License-Identifier: MIT
"""Usage limit bookkeeping for public reward codes.

Each use of a limited public code increments a counter held by an external
store. The store's atomic update is the only concurrency boundary: this module
adds no locking of its own.
"""

from __future__ import annotations

import time
from typing import Callable, Protocol

import logfire

from .canonical import validation_string
from .constants import LIMIT_DISCRIMINATOR, RETRY_INTERVAL_SECONDS, SEGMENT_SEPARATOR
from .errors import AmbiguousStoreError, TransientStoreError
from .models import CodeKind, CodePayload
from .result import Failure, Result, Success
from .retry_utils import Clock, require_timeout, retry_until_deadline

Transform = Callable[[int | None], int | None]


class CounterStore(Protocol):
    """Ordered integer store with an atomic read-modify-write primitive."""

    async def update(self, key: str, transform: Transform) -> int | None:
        """Apply ``transform`` to the value stored at ``key``.

        ``transform`` receives the current value (``None`` when absent) and
        returns the new value, or ``None`` to leave the entry unchanged.
        Implementations raise :class:`TransientStoreError` when the request
        can be retried and :class:`AmbiguousStoreError` when the write may or
        may not have been applied.
        """
        ...


def counter_key(payload: CodePayload) -> str:
    """Return the store key tracking uses of ``payload``."""
    return SEGMENT_SEPARATOR.join(
        (validation_string(payload), LIMIT_DISCRIMINATOR, (payload.hash or "").lower())
    )


class LimitTracker:
    """Check and record uses of limited public codes."""

    def __init__(
        self,
        store: CounterStore,
        *,
        interval: float = RETRY_INTERVAL_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        self.store = store
        self.interval = interval
        self.clock = clock

    async def check_and_mark(
        self,
        payload: CodePayload,
        timeout: float,
        retry_on_ambiguous: bool = False,
    ) -> Result[bool]:
        """Increment the use counter and report whether the use is allowed.

        Args:
            payload: Authenticated code payload.
            timeout: Seconds after which no further retry is started.
            retry_on_ambiguous: Retry updates that may already have applied.
                This trades exact counting for availability since a retried
                update can count a single use twice.

        Returns:
            ``Success(within_limit)`` or ``Failure(reason)`` when the store
            could not be updated.

        Raises:
            TypeError: If ``timeout`` is missing or not a number.
        """
        timeout = require_timeout(timeout)
        if payload.kind is not CodeKind.PUBLIC or payload.limit is None:
            return Success(True)

        limit = payload.limit
        key = counter_key(payload)
        outcome: dict[str, bool] = {}

        def transform(value: int | None) -> int | None:
            if value is None:
                outcome["within_limit"] = True
                return 1
            if value > limit:
                outcome["within_limit"] = False
                return None
            outcome["within_limit"] = True
            return value + 1

        def classify(exc: Exception) -> bool:
            if isinstance(exc, TransientStoreError):
                return True
            return retry_on_ambiguous and isinstance(exc, AmbiguousStoreError)

        async def attempt() -> bool:
            outcome.clear()
            await self.store.update(key, transform)
            return outcome["within_limit"]

        with logfire.span("limits.check_and_mark", attributes={"limit": limit}):
            result = await retry_until_deadline(
                attempt,
                timeout=timeout,
                classify=classify,
                interval=self.interval,
                clock=self.clock,
                name="counter_store.update",
            )
        if isinstance(result, Failure):
            logfire.error("Failed to mark code use", reason=result.reason)
        else:
            logfire.info("Marked code use", within_limit=result.value)
        return result


__all__ = ["CounterStore", "LimitTracker", "Transform", "counter_key"]
