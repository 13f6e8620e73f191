# SPDX-License-Identifier: MIT
"""Resolve the username bound to a personal code and compare identities."""

from __future__ import annotations

import time
from typing import Protocol

import logfire

from .canonical import Identity, render_identity
from .constants import RETRY_INTERVAL_SECONDS
from .errors import IdentityNotFoundError
from .models import CodeKind, CodePayload
from .result import Failure, Result, Success
from .retry_utils import Clock, require_timeout, retry_until_deadline


class IdentityLookup(Protocol):
    """Resolves usernames to stable user identities."""

    async def resolve(self, username: str) -> Identity:
        """Return the identity for ``username``.

        Raises:
            IdentityNotFoundError: If no such user exists.
        """
        ...


class IdentityResolver:
    """Check that the redeeming user owns a name-bound code.

    Usernames can change, so the bound name is resolved to a stable identity
    and compared with the presented one. Resolutions, including "no such
    user", are cached on the payload.
    """

    def __init__(
        self,
        lookup: IdentityLookup,
        *,
        interval: float = RETRY_INTERVAL_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        self.lookup = lookup
        self.interval = interval
        self.clock = clock

    async def _resolve(self, payload: CodePayload, timeout: float) -> Failure | None:
        username = payload.username or ""

        async def attempt() -> Identity | None:
            try:
                return await self.lookup.resolve(username)
            except IdentityNotFoundError:
                logfire.info("Bound username does not exist")
                return None

        result = await retry_until_deadline(
            attempt,
            timeout=timeout,
            classify=lambda exc: True,
            interval=self.interval,
            clock=self.clock,
            name="identity_lookup.resolve",
        )
        if isinstance(result, Failure):
            logfire.error("Failed to resolve bound username", reason=result.reason)
            return result
        payload._resolved_identity = result.value
        payload._identity_resolved = True
        return None

    async def check_identity(
        self, payload: CodePayload, timeout: float, identity: Identity
    ) -> Result[bool]:
        """Return whether ``identity`` owns ``payload``.

        Args:
            payload: Authenticated code payload.
            timeout: Seconds after which no further lookup is started.
            identity: Identity of the redeeming user.

        Returns:
            ``Success(match)`` or ``Failure(reason)`` when the lookup did not
            succeed before the deadline.

        Raises:
            TypeError: If ``timeout`` or ``identity`` is missing or invalid.
        """
        timeout = require_timeout(timeout)
        presented = render_identity(identity)
        if payload.kind is not CodeKind.PERSONAL_BY_NAME:
            # Id-bound codes carry their identity in the hash.
            return Success(True)

        if not payload._identity_resolved:
            with logfire.span("identity.resolve"):
                failure = await self._resolve(payload, timeout)
            if failure is not None:
                return failure

        resolved = payload._resolved_identity
        if resolved is None:
            return Success(False)
        return Success(render_identity(resolved) == presented)


__all__ = ["IdentityLookup", "IdentityResolver"]
