# SPDX-License-Identifier: MIT
"""Test configuration for reward-codes.

Keeps logfire local and provides fakes for the external collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import logfire
import pytest

from reward_codes import retry_utils
from reward_codes.errors import IdentityNotFoundError

logfire.configure(send_to_logfire=False, console=False)


@dataclass
class FakeClock:
    """Monotonic clock advanced only by the patched ``asyncio.sleep``."""

    now: float = 0.0
    sleeps: list[float] = field(default_factory=list)

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


@pytest.fixture()
def fake_clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Return a fake clock and route retry sleeps through it."""
    clock = FakeClock()
    monkeypatch.setattr(retry_utils.asyncio, "sleep", clock.sleep)
    return clock


class FakeCounterStore:
    """In-memory counter store that can be told to fail."""

    def __init__(self, errors: list[Exception] | None = None) -> None:
        self.values: dict[str, int] = {}
        self.errors = list(errors or [])
        self.calls = 0

    async def update(
        self, key: str, transform: Callable[[int | None], int | None]
    ) -> int | None:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        new_value = transform(self.values.get(key))
        if new_value is not None:
            self.values[key] = new_value
        return new_value


class FakeIdentityLookup:
    """Username lookup backed by a dictionary."""

    def __init__(
        self,
        users: dict[str, int | str] | None = None,
        errors: list[Exception] | None = None,
    ) -> None:
        self.users = dict(users or {})
        self.errors = list(errors or [])
        self.calls: list[str] = []

    async def resolve(self, username: str) -> int | str:
        self.calls.append(username)
        if self.errors:
            raise self.errors.pop(0)
        try:
            return self.users[username]
        except KeyError:
            raise IdentityNotFoundError("user does not exist") from None
