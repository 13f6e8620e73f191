"""File-system helpers for configuration data."""

from .loader import load_code_config

__all__ = ["load_code_config"]
