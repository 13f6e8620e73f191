"""Telemetry helpers for the reward code tools.

Exports:
    init_logfire: Configure Pydantic Logfire instrumentation.
"""

from .monitoring import init_logfire

__all__ = ["init_logfire"]
