# SPDX-License-Identifier: MIT
"""Reporting for configuration problems that should not stop a command.

An unreadable or malformed configuration file is skipped so that flags and
environment variables still apply. The handlers here decide how the skipped
source is surfaced.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import TextIO

import logfire


class ErrorHandler(ABC):
    """Receives problems with optional configuration sources."""

    @abstractmethod
    def handle(self, message: str, exc: Exception | None = None) -> None:
        """Record ``message`` with optional ``exc`` context."""


class LoggingErrorHandler(ErrorHandler):
    """Report skipped sources as structured ``logfire`` warnings."""

    def handle(self, message: str, exc: Exception | None = None) -> None:
        logfire.warning(
            "{message}",
            message=message,
            error_type=type(exc).__name__ if exc else None,
            error=str(exc) if exc else None,
        )


class ConsoleErrorHandler(LoggingErrorHandler):
    """Also echo problems to ``stream``.

    Settings are loaded before the CLI configures logfire, so warnings would
    otherwise never reach the user's terminal.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream

    def handle(self, message: str, exc: Exception | None = None) -> None:
        stream = self.stream or sys.stderr
        text = f"{message}: {exc}" if exc else message
        print(f"warning: {text}", file=stream)
        super().handle(message, exc)
