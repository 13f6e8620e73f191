# SPDX-License-Identifier: MIT
"""Load generation options from JSON or YAML configuration files.

A missing default configuration file is not an error. Problems with an
explicitly requested file are reported through an :class:`ErrorHandler` and
the file is skipped, so command-line and environment values still apply.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import logfire
import yaml
from pydantic import TypeAdapter, ValidationError

from ..constants import DEFAULT_CONFIG_FILE
from ..utils import ErrorHandler, LoggingErrorHandler

_CONFIG_ADAPTER = TypeAdapter(dict[str, Any])


def _parse_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = _CONFIG_ADAPTER.validate_json(text)
    else:
        data = _CONFIG_ADAPTER.validate_python(yaml.safe_load(text) or {})
    return {str(name).lower(): value for name, value in data.items()}


def load_code_config(
    path: Path | str | None = None,
    error_handler: ErrorHandler | None = None,
) -> dict[str, Any]:
    """Return option values read from a configuration file.

    Args:
        path: Explicit configuration file. ``None`` selects
            ``reward_codes.yaml`` in the working directory.
        error_handler: Processor for any errors encountered.

    Returns:
        Mapping of lowercase option names to raw values; empty when the file
        is absent or unreadable.
    """
    handler = error_handler or LoggingErrorHandler()
    explicit = path is not None
    config_path = Path(path) if explicit else DEFAULT_CONFIG_FILE
    with logfire.span("loader.load_code_config", attributes={"path": str(config_path)}):
        try:
            return _parse_config(config_path)
        except FileNotFoundError as exc:
            if explicit:
                handler.handle(f"Skipping config file {config_path}", exc)
            else:
                logfire.debug("No default config file", path=str(config_path))
            return {}
        except (OSError, ValidationError, ValueError, yaml.YAMLError) as exc:
            handler.handle(f"Skipping config file {config_path}", exc)
            return {}


__all__ = ["load_code_config"]
