"""Retry event sinks.

The executor reports each retry through a ``RetryObserver``. Observers are
notifications only: whatever they do (or raise) never changes the outcome of
the retried call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .logging import BoundLogger, get_logger

logger = logging.getLogger("retrycase.retry")


@runtime_checkable
class RetryObserver(Protocol):
    """Receives the events emitted while preparing a retry.

    Per retry the executor calls, in order: ``retry_triggered``, then
    ``reloading`` (only with a reload target), ``waited`` (only with a positive
    delay) and finally ``retrying``.
    """

    def retry_triggered(self, category: str, failure: BaseException, attempt: int) -> None: ...
    def reloading(self, target_type: str) -> None: ...
    def waited(self, seconds: float) -> None: ...
    def retrying(self, attempt: int) -> None: ...


class NullObserver:
    """Observer that ignores every event."""

    __slots__ = ()

    def retry_triggered(self, category: str, failure: BaseException, attempt: int) -> None:
        pass

    def reloading(self, target_type: str) -> None:
        pass

    def waited(self, seconds: float) -> None:
        pass

    def retrying(self, attempt: int) -> None:
        pass

    def __repr__(self) -> str:
        return "NULL_OBSERVER"


NULL_OBSERVER = NullObserver()


@dataclass(slots=True)
class LoggingObserver:
    """Writes retry events through the structured logger.

    Args:
        name: Logger name bound as ``logger`` on each entry
        context: Extra key/value pairs bound on each entry
    """

    name: str = "retrycase.retry"
    context: dict[str, object] = field(default_factory=dict)

    def _log(self) -> BoundLogger:
        # Resolved per event so configure_logging() applies to existing observers
        return get_logger(self.name, **self.context)

    def retry_triggered(self, category: str, failure: BaseException, attempt: int) -> None:
        self._log().info("preparing to retry operation", category=category, attempt=attempt, error=str(failure))

    def reloading(self, target_type: str) -> None:
        self._log().info("reloading instance", target=target_type)

    def waited(self, seconds: float) -> None:
        self._log().info("waited before retrying", wait_ms=round(seconds * 1000, 3))

    def retrying(self, attempt: int) -> None:
        self._log().info("retrying operation", attempt=attempt)


def notify(observer: RetryObserver, event: str, *args: object) -> None:
    """Deliver one event, containing any exception the observer raises."""
    try:
        getattr(observer, event)(*args)
    except Exception:
        logger.debug("Retry observer %r failed handling %s", observer, event, exc_info=True)
