# SPDX-License-Identifier: MIT
"""Tests for configuration problem reporting."""

import io

from reward_codes.utils import error_handler
from reward_codes.utils.error_handler import ConsoleErrorHandler, LoggingErrorHandler


def test_logging_handler_emits_structured_warning(monkeypatch) -> None:
    records: list[tuple[str, dict]] = []
    monkeypatch.setattr(
        error_handler.logfire,
        "warning",
        lambda template, **attrs: records.append((template, attrs)),
    )
    LoggingErrorHandler().handle("Skipping config file x.yaml", OSError("denied"))
    assert records == [
        (
            "{message}",
            {
                "message": "Skipping config file x.yaml",
                "error_type": "OSError",
                "error": "denied",
            },
        )
    ]


def test_console_handler_writes_to_stream(monkeypatch) -> None:
    monkeypatch.setattr(error_handler.logfire, "warning", lambda *a, **k: None)
    stream = io.StringIO()
    handler = ConsoleErrorHandler(stream)
    handler.handle("Skipping config file x.yaml", ValueError("bad yaml"))
    handler.handle("Nothing to load")
    assert stream.getvalue().splitlines() == [
        "warning: Skipping config file x.yaml: bad yaml",
        "warning: Nothing to load",
    ]
