"""Retry execution with attempt-count or deadline stop policies.

Example:
    >>> from retrycase import RetryPolicy, execute_with_retry
    >>>
    >>> class Mailbox:
    ...     def reload(self) -> None:
    ...         self.token = read_token()  # picks up a rotated credential
    ...
    >>> mailbox = Mailbox()
    >>> execute_with_retry(
    ...     mailbox.send_digest,
    ...     RetryPolicy.of(on=PermissionError, attempts=3, reload=mailbox, delay=0.5),
    ... )
"""

from .classifier import ANY_FAILURE, FailureClassifier
from .decorator import retry
from .executor import DEFAULT_POLICY, RetryExecution, execute_with_retry, try_execute_with_retry
from .policy import RetryPolicy
from .reload import Reloadable
from .stopping import Deadline, MaxAttempts, StopBudget, StopPolicy

__all__ = [
    # Classification
    "FailureClassifier",
    "ANY_FAILURE",
    # Stop policies
    "StopPolicy",
    "StopBudget",
    "MaxAttempts",
    "Deadline",
    # Recovery
    "Reloadable",
    # Policy
    "RetryPolicy",
    "DEFAULT_POLICY",
    # Execution
    "RetryExecution",
    "execute_with_retry",
    "try_execute_with_retry",
    "retry",
]
