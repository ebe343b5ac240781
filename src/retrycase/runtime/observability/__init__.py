"""Observability - structured logging and retry event observers."""

from .logging import (
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    LogRenderer,
    NoOpRenderer,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    log_context,
    set_renderer,
)
from .observer import NULL_OBSERVER, LoggingObserver, NullObserver, RetryObserver, notify

__all__ = [
    # Logging
    "BoundLogger",
    "ConsoleRenderer",
    "JsonRenderer",
    "LogEntry",
    "LogRenderer",
    "NoOpRenderer",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "log_context",
    "set_renderer",
    # Observers
    "RetryObserver",
    "LoggingObserver",
    "NullObserver",
    "NULL_OBSERVER",
    "notify",
]
