"""Utility interfaces and implementations."""

from .error_handler import ConsoleErrorHandler, ErrorHandler, LoggingErrorHandler

__all__ = ["ConsoleErrorHandler", "ErrorHandler", "LoggingErrorHandler"]
