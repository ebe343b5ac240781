"""Shared fixtures."""

from __future__ import annotations

import pytest

from retrycase.foundation.config import clear_settings_cache
from retrycase.foundation.testing import EventLog, RecordingObserver
from retrycase.runtime.observability import LogEntry, set_renderer
from retrycase.runtime.retry import executor as executor_module


class CaptureRenderer:
    """Renderer keeping entries in memory."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def events(self) -> list[str]:
        return [e.event for e in self.entries]


@pytest.fixture(autouse=True)
def log_capture() -> object:
    """Capture structured log output instead of writing to stderr."""
    renderer = CaptureRenderer()
    set_renderer(renderer, level="DEBUG")
    yield renderer
    set_renderer(None, level="INFO")


@pytest.fixture(autouse=True)
def clean_settings() -> object:
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Replace the executor's blocking sleep with a recorder."""
    calls: list[float] = []
    monkeypatch.setattr(executor_module.time, "sleep", calls.append)
    return calls


@pytest.fixture
def events() -> EventLog:
    return []


@pytest.fixture
def observer(events: EventLog) -> RecordingObserver:
    return RecordingObserver(events)
