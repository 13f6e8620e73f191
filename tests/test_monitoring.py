# SPDX-License-Identifier: MIT
"""Tests for monitoring helpers."""

from types import SimpleNamespace

from reward_codes.observability import monitoring


def _dummy_logfire(called: dict[str, object], instruments: list[str]):
    class ConsoleOptions:
        def __init__(self, **kwargs):
            self.__dict__.update(kwargs)

    return SimpleNamespace(
        ConsoleOptions=ConsoleOptions,
        configure=lambda **kwargs: called.update(kwargs),
        instrument_pydantic=lambda: instruments.append("pydantic"),
        debug=lambda *a, **k: None,
    )


def test_init_logfire_configures_and_instruments(monkeypatch):
    called: dict[str, object] = {}
    instruments: list[str] = []
    monkeypatch.setattr(monitoring, "logfire", _dummy_logfire(called, instruments))

    monitoring.init_logfire("token", "info")

    assert called["token"] == "token"
    assert called["service_name"] == "reward-codes"
    assert called["send_to_logfire"] == "if-token-present"
    assert called["console"].min_log_level == "info"
    assert called["min_level"] == "info"
    assert instruments == ["pydantic"]


def test_init_logfire_reads_token_from_env(monkeypatch):
    called: dict[str, object] = {}
    monkeypatch.setattr(monitoring, "logfire", _dummy_logfire(called, []))
    monkeypatch.setenv("REWARD_CODES_LOGFIRE_TOKEN", "env-token")

    monitoring.init_logfire()

    assert called["token"] == "env-token"
    assert called["min_level"] == "warn"


def test_init_logfire_without_token(monkeypatch):
    called: dict[str, object] = {}
    monkeypatch.setattr(monitoring, "logfire", _dummy_logfire(called, []))
    monkeypatch.delenv("REWARD_CODES_LOGFIRE_TOKEN", raising=False)

    monitoring.init_logfire()

    assert "token" in called and called["token"] is None


def test_mask_token():
    assert monitoring._mask_token("abcdefgh") == "abcd..."
    assert monitoring._mask_token(None) is None
