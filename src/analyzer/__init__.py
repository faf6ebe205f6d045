"""Logging call-site analysis."""

from analyzer.classifier import DEFAULT_SURFACE, LoggingSurface, is_logger_call
from analyzer.engine import LogLinter

__all__ = [
    "DEFAULT_SURFACE",
    "LogLinter",
    "LoggingSurface",
    "is_logger_call",
]
