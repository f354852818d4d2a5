"""Logging module with structured logging and request tracking."""

from orgmanager.core.logging.config import configure_logging
from orgmanager.core.logging.middleware import RequestLoggingMiddleware


__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
]
