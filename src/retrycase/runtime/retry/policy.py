"""Retry policy configuration.

One immutable value describes everything the executor needs: which failures
to retry, when to stop, what to reload and how long to wait between attempts.

Example:
    >>> policy = RetryPolicy.of(on=ConnectionError, attempts=4, delay=0.5)
    >>> policy = RetryPolicy.of(on=LookupError, timeout=timedelta(minutes=2), delay=10)
    >>> policy = RetryPolicy.of(on=PermissionError, reload=client)  # 2 attempts
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, computed_field, field_validator

from retrycase.runtime.observability import LoggingObserver, RetryObserver

from .classifier import FailureClassifier
from .reload import Reloadable
from .stopping import Deadline, MaxAttempts, StopPolicy, to_seconds

if TYPE_CHECKING:
    from retrycase.foundation.config import RetrySettings


class RetryPolicy(BaseModel):
    """Configuration for one retried call.

    Attributes:
        classifier: Which exceptions are retryable (default: any Exception).
            Also accepts an exception type, a tuple of types, an ErrorCode or
            a predicate.
        stop: MaxAttempts or Deadline (default: MaxAttempts(2))
        reload_target: Object whose ``reload()`` runs before each retry
        delay: Fixed wait before each retry in seconds (timedelta accepted)
        observer: Sink for retry events (default: LoggingObserver)
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
    )

    classifier: FailureClassifier = Field(default_factory=FailureClassifier.any)
    stop: StopPolicy = Field(default_factory=MaxAttempts)
    reload_target: Reloadable | None = Field(default=None, repr=False)
    delay: NonNegativeFloat = Field(default=0.0, allow_inf_nan=False)
    observer: RetryObserver = Field(default_factory=LoggingObserver, exclude=True, repr=False)

    @field_validator("classifier", mode="before")
    @classmethod
    def _coerce_classifier(cls, v: Any) -> FailureClassifier:
        return FailureClassifier.coerce(v)

    @field_validator("delay", mode="before")
    @classmethod
    def _delay_seconds(cls, v: Any) -> Any:
        """Convert timedelta using its full duration."""
        return to_seconds(v) if isinstance(v, timedelta) else v

    @computed_field
    @property
    def max_attempts(self) -> int | None:
        """Attempt limit, or None under a deadline policy."""
        return self.stop.attempts if isinstance(self.stop, MaxAttempts) else None

    @computed_field
    @property
    def timeout(self) -> float | None:
        """Deadline in seconds, or None under an attempt-count policy."""
        return self.stop.timeout if isinstance(self.stop, Deadline) else None

    @classmethod
    def of(
        cls,
        *,
        on: Any = None,
        attempts: int | None = None,
        timeout: float | timedelta | None = None,
        reload: Reloadable | None = None,
        delay: float | timedelta = 0.0,
        observer: RetryObserver | None = None,
    ) -> RetryPolicy:
        """Build a policy from keyword options.

        ``attempts`` and ``timeout`` pick the stop policy and are mutually
        exclusive; with neither, two attempts are made.
        """
        if attempts is not None and timeout is not None:
            raise ValueError("Pass either attempts or timeout, not both")
        stop: StopPolicy = Deadline(timeout) if timeout is not None else MaxAttempts(2 if attempts is None else attempts)
        fields: dict[str, Any] = {"classifier": on, "stop": stop, "reload_target": reload, "delay": delay}
        if observer is not None:
            fields["observer"] = observer
        return cls(**fields)

    @classmethod
    def from_settings(cls, settings: RetrySettings | None = None, **options: Any) -> RetryPolicy:
        """Build a policy from ``RetrySettings``; keyword ``options`` override them.

        A configured timeout selects the deadline policy.
        """
        if settings is None:
            from retrycase.foundation.config import get_settings
            settings = get_settings().retry
        if "attempts" not in options and "timeout" not in options:
            if settings.timeout is not None:
                options["timeout"] = settings.timeout
            else:
                options["attempts"] = settings.max_attempts
        options.setdefault("delay", settings.delay)
        return cls.of(**options)

    def with_reload(self, target: Reloadable | None) -> RetryPolicy:
        return self.model_copy(update={"reload_target": target})

    def with_observer(self, observer: RetryObserver) -> RetryPolicy:
        return self.model_copy(update={"observer": observer})

    def describe(self) -> str:
        limit = f"{self.max_attempts} attempts" if self.max_attempts is not None else f"{self.timeout:g}s deadline"
        reload = f", reload {type(self.reload_target).__name__}" if self.reload_target is not None else ""
        return f"retry {self.classifier.label} up to {limit}{reload}, delay {self.delay:g}s"
