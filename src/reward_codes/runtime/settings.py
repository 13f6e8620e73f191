# SPDX-License-Identifier: MIT
"""Centralised configuration management.

This module exposes :class:`Settings`, a ``pydantic-settings`` model holding
the generation options and logging configuration. Values are merged from a
configuration file, environment variables prefixed with ``REWARD_CODES_`` and
explicit overrides such as command-line flags, in increasing precedence.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import logfire
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from ..constants import ENV_PREFIX
from ..io_utils.loader import load_code_config
from ..models import GenerateOptions, parse_options, summarise_validation_error
from ..utils import ErrorHandler

OPTION_FIELDS = frozenset(
    {"key", "public", "username", "userid", "label", "currency", "max", "bytes"}
)


class Settings(BaseSettings):
    """Generation options and logging configuration."""

    key: str | None = Field(None, description="HMAC key.", repr=False)
    public: bool | None = Field(None, description="Issue a public code.")
    username: str | None = Field(None, description="Bind the code to a username.")
    userid: str | None = Field(None, description="Bind the code to a user id.")
    label: str | None = Field(None, description="User visible label.")
    currency: int | None = Field(None, description="Currency amount to award.")
    max: int | None = Field(None, description="Maximum uses of a public code.")
    bytes: list[int] | None = Field(
        None, description="Flattened (currency, bytes) truncation pairs."
    )
    log_level: str = Field("INFO", description="Logging verbosity level.")
    logfire_token: str | None = Field(
        None, description="Logfire authentication token, if available.", repr=False
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX, case_sensitive=False, extra="ignore"
    )

    @field_validator("userid", mode="before")
    @classmethod
    def _coerce_userid(cls, value: Any) -> Any:
        """Accept integer user ids from JSON or YAML configuration."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_options(self) -> GenerateOptions:
        """Return validated generation options.

        Raises:
            OptionsError: If the merged values do not describe a valid code.
        """
        return parse_options(self.model_dump(include=OPTION_FIELDS, exclude_none=True))


class _MergedSettings(Settings):
    """Settings built only from already merged values."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)


def _environment_values() -> dict[str, Any]:
    env_file_path = Path(".env")
    env_file = env_file_path if env_file_path.exists() else None
    # Only values actually present in the environment count as set.
    return Settings(_env_file=env_file).model_dump(exclude_unset=True)


def load_settings(
    config_path: Path | str | None = None,
    *,
    use_env: bool = True,
    use_file: bool = True,
    overrides: Mapping[str, Any] | None = None,
    error_handler: ErrorHandler | None = None,
) -> Settings:
    """Load and validate settings.

    Configuration file values are overridden by environment variables, which
    are in turn overridden by ``overrides``. ``None`` overrides are ignored so
    unset command-line flags fall through to the other sources.

    Args:
        config_path: Optional JSON or YAML configuration file.
        use_env: Read ``REWARD_CODES_*`` variables and ``.env``.
        use_file: Read the configuration file.
        overrides: Highest precedence values, typically from the CLI.
        error_handler: Processor for configuration file problems.

    Returns:
        Settings: Fully validated settings.

    Raises:
        RuntimeError: If a value has the wrong type.
    """
    with logfire.span("settings.load_settings"):
        merged: dict[str, Any] = {}
        try:
            if use_file:
                merged.update(load_code_config(config_path, error_handler))
            if use_env:
                merged.update(_environment_values())
            merged.update(
                {
                    name: value
                    for name, value in (overrides or {}).items()
                    if value is not None
                }
            )
            known = {
                name: value
                for name, value in merged.items()
                if name in Settings.model_fields
            }
            return _MergedSettings(**known)
        except ValidationError as exc:
            raise RuntimeError(
                f"Invalid configuration: {summarise_validation_error(exc)}"
            ) from exc


__all__ = ["OPTION_FIELDS", "Settings", "load_settings"]
