"""Stop policies bounding a retry sequence.

A policy is an immutable description; ``begin()`` creates the per-call
budget that the executor consults after every retryable failure:
- MaxAttempts: fixed number of attempts (first attempt included)
- Deadline: keep retrying until a deadline passes
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, Protocol, runtime_checkable

Clock = Callable[[], float]


@runtime_checkable
class StopBudget(Protocol):
    """Per-call state of a stop policy."""

    def allows_retry(self) -> bool:
        """Consume one retryable failure; True when another attempt may start."""
        ...


@runtime_checkable
class StopPolicy(Protocol):
    """Protocol for stop policies."""

    def begin(self) -> StopBudget:
        """Start a new call. Called once, before the first attempt."""
        ...


def to_seconds(value: float | timedelta) -> float:
    """Full duration in seconds; whole seconds of a timedelta are kept."""
    return value.total_seconds() if isinstance(value, timedelta) else float(value)


@dataclass(slots=True)
class _AttemptBudget:
    remaining: int

    def allows_retry(self) -> bool:
        self.remaining -= 1
        return self.remaining > 0


@dataclass(frozen=True, slots=True)
class MaxAttempts:
    """Allow at most ``attempts`` invocations of the operation.

    ``attempts=1`` disables retrying; the first failure is terminal.

    Attributes:
        attempts: Total attempts including the first (default: 2)
    """

    attempts: int = 2

    def __post_init__(self) -> None:
        if isinstance(self.attempts, bool) or not isinstance(self.attempts, int):
            raise TypeError(f"attempts must be an int, got {self.attempts!r}")
        if self.attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {self.attempts}")

    def begin(self) -> _AttemptBudget:
        return _AttemptBudget(self.attempts)


@dataclass(slots=True)
class _DeadlineBudget:
    deadline: float
    clock: Clock

    def allows_retry(self) -> bool:
        return self.clock() <= self.deadline


@dataclass(frozen=True, slots=True)
class Deadline:
    """Retry until ``timeout`` seconds have passed since the call started.

    The deadline is only checked between attempts: an attempt that is already
    running is never interrupted, and a failure observed before the deadline
    always earns one more attempt.

    Attributes:
        timeout: Budget for the whole sequence, seconds or timedelta
        clock: Time source in seconds (default: time.monotonic)
    """

    timeout: float
    clock: Clock = field(default=time.monotonic, repr=False, compare=False)

    def __post_init__(self) -> None:
        seconds = to_seconds(self.timeout)
        if not math.isfinite(seconds) or seconds < 0:
            raise ValueError(f"timeout must be a finite number >= 0, got {self.timeout!r}")
        object.__setattr__(self, "timeout", seconds)

    def begin(self) -> _DeadlineBudget:
        return _DeadlineBudget(self.clock() + self.timeout, self.clock)
