"""Testing - doubles for retried operations, reload targets, observers and clocks."""

from .mock import EventLog, FakeClock, FlakyOperation, Invocation, RecordingObserver, RecordingTarget

__all__ = [
    "EventLog",
    "FakeClock",
    "FlakyOperation",
    "Invocation",
    "RecordingObserver",
    "RecordingTarget",
]
