"""Retry execution.

Runs a zero-argument operation under a RetryPolicy, synchronously and on the
caller's thread:

    attempt -> success: return value
            -> failure not matching the classifier: re-raise at once
            -> matching failure, stop policy exhausted: re-raise it
            -> matching failure, budget left: prepare, attempt again

Preparing a retry notifies the observer, reloads the recovery target (if
any) and sleeps for the configured delay. An exception from ``reload()``
escapes immediately and is never retried.

Example:
    >>> rows = execute_with_retry(lambda: db.fetch(query), RetryPolicy.of(on=ConnectionError, attempts=3))
    >>> outcome = try_execute_with_retry(sync_users)
    >>> outcome.map_err(lambda f: f.category).unwrap_or(None)
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Generic, TypeVar

from retrycase.foundation.errors import Err, Failure, FailureSource, Ok, Result
from retrycase.runtime.observability import notify

from .policy import RetryPolicy

T = TypeVar("T")

logger = logging.getLogger("retrycase.retry")

DEFAULT_POLICY = RetryPolicy()


class RetryExecution(Generic[T]):
    """State of one retried call.

    Attributes:
        attempts: Invocations of the operation during the latest run()
        stage: Where the most recent exception came from ("operation" or "reload")
    """

    __slots__ = ("_operation", "_policy", "attempts", "stage")

    def __init__(self, operation: Callable[[], T], policy: RetryPolicy | None = None) -> None:
        if not callable(operation):
            raise TypeError(f"operation must be callable, got {operation!r}")
        self._operation = operation
        self._policy = policy if policy is not None else DEFAULT_POLICY
        self.attempts = 0
        self.stage: FailureSource = "operation"

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def run(self) -> T:
        """Execute until success or a terminal failure, which is re-raised unchanged."""
        policy = self._policy
        self.attempts = 0
        budget = policy.stop.begin()
        while True:
            self.attempts += 1
            self.stage = "operation"
            try:
                return self._operation()
            except Exception as exc:
                if not policy.classifier.matches(exc):
                    raise
                if not budget.allows_retry():
                    logger.debug(f"Giving up after {self.attempts} attempt(s) ({type(exc).__name__}: {exc})")
                    raise
                self._prepare(exc)

    def _prepare(self, exc: Exception) -> None:
        policy = self._policy
        observer = policy.observer
        notify(observer, "retry_triggered", type(exc).__name__, exc, self.attempts)

        if (target := policy.reload_target) is not None:
            notify(observer, "reloading", type(target).__name__)
            self.stage = "reload"
            target.reload()
            self.stage = "operation"

        if policy.delay > 0:
            time.sleep(policy.delay)
            notify(observer, "waited", policy.delay)

        notify(observer, "retrying", self.attempts + 1)


def execute_with_retry(operation: Callable[[], T], policy: RetryPolicy | None = None) -> T:
    """Run ``operation`` under ``policy`` and return its result.

    Args:
        operation: Zero-argument callable; failure is signalled by raising
        policy: Retry configuration (default: any Exception, 2 attempts)

    Returns:
        Whatever the successful attempt returned (None for procedures).

    Raises:
        The last exception raised by the operation once retrying stops, or
        the exception raised by the reload target.
    """
    return RetryExecution(operation, policy).run()


def try_execute_with_retry(operation: Callable[[], T], policy: RetryPolicy | None = None) -> Result[T, Failure]:
    """Like ``execute_with_retry`` but returns ``Err(Failure)`` instead of raising."""
    execution = RetryExecution(operation, policy)
    try:
        return Ok(execution.run())
    except Exception as exc:
        return Err(Failure.from_exception(exc, attempts=execution.attempts, source=execution.stage))
