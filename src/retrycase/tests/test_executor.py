"""Tests for attempt-bounded retry execution.

Validates:
- Attempt counting and the terminal failure surfaced
- Classifier mismatch propagates without retry
- Reload hook ordering and reload failures
- Delay handling and observer isolation
- Non-raising Result form
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from retrycase import (
    NULL_OBSERVER,
    Failure,
    RetryExecution,
    RetryPolicy,
    execute_with_retry,
    try_execute_with_retry,
)
from retrycase.foundation.errors import ErrorCode
from retrycase.foundation.testing import EventLog, FlakyOperation, RecordingObserver, RecordingTarget
from retrycase.runtime.observability import set_renderer


class InvalidOperationError(Exception):
    pass


class ArgumentError(Exception):
    pass


def _policy(**options: object) -> RetryPolicy:
    options.setdefault("observer", NULL_OBSERVER)
    return RetryPolicy.of(**options)  # type: ignore[arg-type]


# ═════════════════════════════════════════════════════════════════════════════
# Attempt Counting
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("attempts", [1, 2, 3, 5])
def test_succeeds_on_last_allowed_attempt(attempts: int) -> None:
    """N-1 failures followed by success returns the value after exactly N attempts."""
    op = FlakyOperation(failures=attempts - 1, result="done")

    assert execute_with_retry(op, _policy(attempts=attempts)) == "done"
    assert op.call_count == attempts


@pytest.mark.parametrize("attempts", [1, 2, 4])
def test_always_failing_surfaces_last_failure(attempts: int) -> None:
    """Every attempt fails: exactly N attempts, and the N-th exception object is raised."""
    op = FlakyOperation(failures=None, error=InvalidOperationError)

    with pytest.raises(InvalidOperationError) as exc_info:
        execute_with_retry(op, _policy(attempts=attempts))

    assert op.call_count == attempts
    assert exc_info.value is op.raised[-1]
    assert str(exc_info.value) == f"attempt {attempts} failed"


def test_single_attempt_never_retries() -> None:
    target = RecordingTarget()
    op = FlakyOperation(failures=1, result=1)

    with pytest.raises(RuntimeError):
        execute_with_retry(op, _policy(attempts=1, reload=target))

    assert op.call_count == 1
    assert target.reload_count == 0


def test_default_policy_makes_two_attempts() -> None:
    op = FlakyOperation(failures=None)

    with pytest.raises(RuntimeError):
        execute_with_retry(op)

    assert op.call_count == 2


def test_first_attempt_success_skips_everything(sleeps: list[float], observer: RecordingObserver) -> None:
    target = RecordingTarget()
    op = FlakyOperation(failures=0, result=7)

    assert execute_with_retry(op, _policy(attempts=3, reload=target, delay=1, observer=observer)) == 7
    assert op.call_count == 1
    assert target.reload_count == 0
    assert sleeps == []
    assert observer.events == []


def test_void_operation_returns_none() -> None:
    calls: list[int] = []

    def procedure() -> None:
        calls.append(1)
        if len(calls) < 2:
            raise ConnectionError("reset by peer")

    assert execute_with_retry(procedure, _policy(on=ConnectionError)) is None
    assert len(calls) == 2


def test_original_traceback_preserved() -> None:
    """The terminal exception is re-raised, not wrapped."""
    def explode() -> None:
        raise InvalidOperationError("state is stale")

    with pytest.raises(InvalidOperationError) as exc_info:
        execute_with_retry(explode, _policy(on=InvalidOperationError, attempts=2))

    assert exc_info.value.__cause__ is None
    assert exc_info.traceback[-1].name == "explode"


# ═════════════════════════════════════════════════════════════════════════════
# Classification
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("attempts", [1, 3, 10])
def test_non_matching_failure_propagates_immediately(attempts: int, sleeps: list[float]) -> None:
    """Mismatched category: one attempt, no reload, no delay, regardless of attempts."""
    target = RecordingTarget()
    op = FlakyOperation(failures=1, error=InvalidOperationError, result=5)

    with pytest.raises(InvalidOperationError):
        execute_with_retry(op, _policy(on=ArgumentError, attempts=attempts, reload=target, delay=0.5))

    assert op.call_count == 1
    assert target.reload_count == 0
    assert sleeps == []


def test_later_non_matching_failure_propagates() -> None:
    """A later non-matching failure is raised as-is even with attempts left."""
    errors = iter([ConnectionError("flap"), KeyError("missing")])

    def op() -> None:
        raise next(errors)

    with pytest.raises(KeyError):
        execute_with_retry(op, _policy(on=ConnectionError, attempts=5))


def test_subclass_matches_parent_category() -> None:
    op = FlakyOperation(failures=1, error=ConnectionRefusedError, result="ok")

    assert execute_with_retry(op, _policy(on=OSError)) == "ok"
    assert op.call_count == 2


def test_error_code_classifier() -> None:
    op = FlakyOperation(failures=2, error=TimeoutError, result="ok")

    assert execute_with_retry(op, _policy(on=ErrorCode.TIMEOUT, attempts=3)) == "ok"


def test_base_exceptions_are_never_retried() -> None:
    calls: list[int] = []

    def interrupted() -> None:
        calls.append(1)
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        execute_with_retry(interrupted, _policy(attempts=3))

    assert calls == [1]


# ═════════════════════════════════════════════════════════════════════════════
# Scenarios
# ═════════════════════════════════════════════════════════════════════════════


def test_scenario_recovers_on_third_attempt() -> None:
    """Fails twice with the retryable category, succeeds on the third of four allowed."""
    service = RecordingTarget()
    op = FlakyOperation(failures=2, error=InvalidOperationError, result=5)

    result = execute_with_retry(op, _policy(on=InvalidOperationError, attempts=4, reload=service))

    assert result == 5
    assert service.reload_count == 2
    assert op.call_count == 3


def test_scenario_exhausts_attempts() -> None:
    service = RecordingTarget()
    op = FlakyOperation(failures=None, error=InvalidOperationError)

    with pytest.raises(InvalidOperationError):
        execute_with_retry(op, _policy(on=InvalidOperationError, attempts=3, reload=service))

    assert op.call_count == 3
    assert service.reload_count == 2


def test_scenario_category_mismatch() -> None:
    service = RecordingTarget()
    op = FlakyOperation(failures=1, error=InvalidOperationError, result=5)

    with pytest.raises(InvalidOperationError):
        execute_with_retry(op, _policy(on=ArgumentError, reload=service))

    assert op.call_count == 1
    assert service.reload_count == 0


def test_same_object_as_operation_and_reload_target() -> None:
    """The reloaded object may also own the retried method."""

    class ReloadableService:
        def __init__(self) -> None:
            self.reloads = 0
            self.attempts = 0
            self.secret = "expired"

        def reload(self) -> None:
            self.reloads += 1
            self.secret = "fresh"

        def fetch(self) -> str:
            self.attempts += 1
            if self.secret != "fresh":
                raise PermissionError("secret expired")
            return "payload"

    service = ReloadableService()

    assert execute_with_retry(service.fetch, _policy(on=PermissionError, reload=service)) == "payload"
    assert (service.attempts, service.reloads) == (2, 1)


# ═════════════════════════════════════════════════════════════════════════════
# Prepare-for-retry
# ═════════════════════════════════════════════════════════════════════════════


def test_prepare_order(events: EventLog, observer: RecordingObserver, sleeps: list[float]) -> None:
    """Per retry: triggered, reloading, reload, wait, waited, retrying, next attempt."""
    target = RecordingTarget(events=events)
    op = FlakyOperation(failures=1, error=InvalidOperationError, result=1, events=events)

    execute_with_retry(op, _policy(on=InvalidOperationError, reload=target, delay=0.25, observer=observer))

    assert events == [
        ("attempt", 1),
        ("retry_triggered", "InvalidOperationError"),
        ("reloading", "RecordingTarget"),
        ("reload", 1),
        ("waited", 0.25),
        ("retrying", 2),
        ("attempt", 2),
    ]
    assert sleeps == [0.25]


def test_reload_once_per_retry_before_reinvocation(events: EventLog) -> None:
    target = RecordingTarget(events=events)
    op = FlakyOperation(failures=None, events=events)

    with pytest.raises(RuntimeError):
        execute_with_retry(op, _policy(attempts=4, reload=target))

    assert target.reload_count == 3
    assert events == [
        ("attempt", 1), ("reload", 1),
        ("attempt", 2), ("reload", 2),
        ("attempt", 3), ("reload", 3),
        ("attempt", 4),
    ]


def test_reload_failure_is_terminal_and_supersedes() -> None:
    """A failing reload escapes at once, with attempts still left."""
    reload_error = OSError("vault unreachable")
    target = RecordingTarget(raises=reload_error)
    op = FlakyOperation(failures=None, error=InvalidOperationError)

    with pytest.raises(OSError) as exc_info:
        execute_with_retry(op, _policy(on=InvalidOperationError, attempts=5, reload=target))

    assert exc_info.value is reload_error
    assert isinstance(exc_info.value.__context__, InvalidOperationError)
    assert op.call_count == 1
    assert target.reload_count == 1


def test_no_delay_means_no_sleep(sleeps: list[float], observer: RecordingObserver) -> None:
    op = FlakyOperation(failures=2, result=1)

    execute_with_retry(op, _policy(attempts=3, observer=observer))

    assert sleeps == []
    assert "waited" not in observer.names()
    assert observer.names().count("retrying") == 2


def test_delay_once_per_retry(sleeps: list[float]) -> None:
    op = FlakyOperation(failures=None)

    with pytest.raises(RuntimeError):
        execute_with_retry(op, _policy(attempts=3, delay=0.1))

    assert sleeps == [0.1, 0.1]


def test_timedelta_delay_keeps_whole_seconds(sleeps: list[float]) -> None:
    op = FlakyOperation(failures=1, result=1)

    execute_with_retry(op, _policy(delay=timedelta(seconds=1, milliseconds=500)))

    assert sleeps == [1.5]


def test_real_delay_blocks() -> None:
    """Without patching, the delay is a real blocking wait."""
    import time

    op = FlakyOperation(failures=1, result=1)
    start = time.perf_counter()
    execute_with_retry(op, _policy(delay=0.05))

    assert time.perf_counter() - start >= 0.04


def test_broken_observer_does_not_affect_outcome() -> None:
    class ExplodingObserver:
        def retry_triggered(self, category: str, failure: BaseException, attempt: int) -> None:
            raise RuntimeError("sink down")

        def reloading(self, target_type: str) -> None:
            raise RuntimeError("sink down")

        def waited(self, seconds: float) -> None:
            raise RuntimeError("sink down")

        def retrying(self, attempt: int) -> None:
            raise RuntimeError("sink down")

    target = RecordingTarget()
    op = FlakyOperation(failures=2, error=InvalidOperationError, result="ok")
    policy = RetryPolicy.of(on=InvalidOperationError, attempts=3, reload=target, observer=ExplodingObserver())

    assert execute_with_retry(op, policy) == "ok"
    assert target.reload_count == 2


def test_default_observer_logs_retry_events(log_capture: object) -> None:
    target = RecordingTarget()
    op = FlakyOperation(failures=1, result=1)

    execute_with_retry(op, RetryPolicy.of(reload=target))

    assert log_capture.events() == [  # type: ignore[attr-defined]
        "preparing to retry operation",
        "reloading instance",
        "retrying operation",
    ]
    first = log_capture.entries[0]  # type: ignore[attr-defined]
    assert first.context["category"] == "RuntimeError"
    assert first.context["attempt"] == 1


def test_default_policy_is_silent_until_logging_configured(capsys: pytest.CaptureFixture[str]) -> None:
    set_renderer(None)

    assert execute_with_retry(FlakyOperation(failures=1, result=1)) == 1

    captured = capsys.readouterr()
    assert captured.err == ""
    assert captured.out == ""


# ═════════════════════════════════════════════════════════════════════════════
# Execution State & Result Form
# ═════════════════════════════════════════════════════════════════════════════


def test_execution_tracks_attempts() -> None:
    execution = RetryExecution(FlakyOperation(failures=2, result="x"), _policy(attempts=5))

    assert execution.run() == "x"
    assert execution.attempts == 3


def test_execution_rerun_counts_from_one() -> None:
    execution = RetryExecution(FlakyOperation(failures=1, result="x"), _policy(attempts=3))

    execution.run()
    assert execution.attempts == 2
    assert execution.run() == "x"
    assert execution.attempts == 1


def test_execution_rejects_non_callable() -> None:
    with pytest.raises(TypeError):
        RetryExecution("not callable")  # type: ignore[arg-type]


def test_try_execute_ok() -> None:
    outcome = try_execute_with_retry(FlakyOperation(failures=1, result=42), _policy())

    assert outcome.is_ok()
    assert outcome.unwrap() == 42


def test_try_execute_err_carries_failure() -> None:
    op = FlakyOperation(failures=None, error=TimeoutError)

    outcome = try_execute_with_retry(op, _policy(attempts=3))

    assert outcome.is_err()
    failure = outcome.unwrap_err()
    assert isinstance(failure, Failure)
    assert failure.exception is op.raised[-1]
    assert failure.attempts == 3
    assert failure.category == "TimeoutError"
    assert failure.error_code == ErrorCode.TIMEOUT
    assert failure.source == "operation"
    with pytest.raises(TimeoutError):
        failure.reraise()


def test_try_execute_err_for_mismatch() -> None:
    outcome = try_execute_with_retry(FlakyOperation(failures=1, error=KeyError), _policy(on=ValueError, attempts=3))

    assert outcome.unwrap_err().attempts == 1


def test_try_execute_reports_reload_failure() -> None:
    target = RecordingTarget(raises=PermissionError("denied"))

    outcome = try_execute_with_retry(FlakyOperation(failures=None), _policy(attempts=3, reload=target))

    failure = outcome.unwrap_err()
    assert failure.source == "reload"
    assert failure.from_reload
    assert failure.category == "PermissionError"
    assert failure.attempts == 1
