"""Retrycase - synchronous retry execution for flaky operations.

Re-invokes a unit of work that may fail, bounded by an attempt count or a
wall-clock deadline, optionally reloading a recovery target and waiting a
fixed delay before each retry.

Quick Start:
    >>> from retrycase import RetryPolicy, execute_with_retry
    >>>
    >>> # Two attempts, any exception
    >>> execute_with_retry(service.do_something)
    >>>
    >>> # Only connection errors, up to 4 attempts, half a second apart
    >>> value = execute_with_retry(
    ...     service.fetch,
    ...     RetryPolicy.of(on=ConnectionError, attempts=4, delay=0.5),
    ... )
    >>>
    >>> # Keep trying for two minutes while a directory sync settles
    >>> execute_with_retry(update_user, RetryPolicy.of(on=LookupError, timeout=120, delay=10))

Reload Between Attempts:
    >>> class ApiClient:
    ...     def reload(self) -> None:
    ...         self.secret = vault.read("api-secret")
    >>>
    >>> client = ApiClient()
    >>> execute_with_retry(client.call, RetryPolicy.of(on=PermissionError, reload=client))

Without Exceptions:
    >>> from retrycase import try_execute_with_retry
    >>> outcome = try_execute_with_retry(service.fetch)
    >>> outcome.match(ok=render, err=lambda failure: log_failure(failure.category))
"""

from retrycase.foundation.config import (
    LoggingSettings,
    RetrycaseSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)
from retrycase.foundation.errors import (
    TRANSIENT_CODES,
    Err,
    ErrorCode,
    Failure,
    Ok,
    Result,
    classify_exception,
)
from retrycase.runtime.observability import (
    NULL_OBSERVER,
    LoggingObserver,
    RetryObserver,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    log_context,
)
from retrycase.runtime.retry import (
    ANY_FAILURE,
    DEFAULT_POLICY,
    Deadline,
    FailureClassifier,
    MaxAttempts,
    Reloadable,
    RetryExecution,
    RetryPolicy,
    StopPolicy,
    execute_with_retry,
    retry,
    try_execute_with_retry,
)

__version__ = "0.1.0"

__all__ = [
    # Execution
    "execute_with_retry",
    "try_execute_with_retry",
    "retry",
    "RetryExecution",
    # Policy
    "RetryPolicy",
    "DEFAULT_POLICY",
    "FailureClassifier",
    "ANY_FAILURE",
    "StopPolicy",
    "MaxAttempts",
    "Deadline",
    "Reloadable",
    # Errors
    "ErrorCode",
    "TRANSIENT_CODES",
    "classify_exception",
    "Failure",
    "Result",
    "Ok",
    "Err",
    # Observability
    "RetryObserver",
    "LoggingObserver",
    "NULL_OBSERVER",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "log_context",
    # Config
    "RetrycaseSettings",
    "RetrySettings",
    "LoggingSettings",
    "get_settings",
    "clear_settings_cache",
]
