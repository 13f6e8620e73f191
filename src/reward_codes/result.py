# SPDX-License-Identifier: MIT
"""Tagged success/failure values returned by the post-authentication checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar, Union

from .errors import ResultError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T
    ok: Literal[True] = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying a human readable ``reason``."""

    reason: str
    ok: Literal[False] = False

    def unwrap(self) -> None:
        """Raise :class:`ResultError` with the failure reason."""
        raise ResultError(self.reason)


Result = Union[Success[T], Failure]

__all__ = ["Failure", "Result", "Success"]
