"""Logging infrastructure for authguard."""

from .logger import AuthGuardLogger, get_logger
from .context import LogContext, logging_context

__all__ = ["AuthGuardLogger", "get_logger", "LogContext", "logging_context"]
