"""Test configuration for pytest."""
import os
from datetime import datetime, timezone

import pytest

from counter_provider.cancellation import CancellationToken
from counter_provider.config.loader import GeneratorConfig
from counter_provider.observers import GeneratorObserver


@pytest.fixture
def sample_config():
    """Sample host configuration for testing."""
    return {
        "interval": 0,
        "max_count": 3,
    }


@pytest.fixture
def fast_config():
    """Bounded configuration with no delay."""
    return GeneratorConfig(interval_ms=0, max_count=3)


@pytest.fixture
def token():
    """Fresh cancellation token."""
    return CancellationToken()


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same instant."""
    moment = datetime(2024, 1, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep provider environment overrides from leaking into tests."""
    for key in list(os.environ):
        if key.upper().startswith("COUNTER_PROVIDER_"):
            monkeypatch.delenv(key, raising=False)


class RecordingObserver(GeneratorObserver):
    """Observer that remembers every callback."""

    def __init__(self):
        self.events = []

    def on_start(self, config):
        self.events.append(("start", config.interval_ms, config.max_count))

    def on_record(self, record):
        self.events.append(("record", record.value))

    def on_stop(self, reason, count):
        self.events.append(("stop", reason, count))


class RecordingPacer:
    """Pacer stand-in that never sleeps and records each call."""

    def __init__(self, generator_ref=None, cancel_after=None):
        self.calls = 0
        self.states = []
        self.generator_ref = generator_ref
        self.cancel_after = cancel_after

    def wait(self, cancel):
        self.calls += 1
        if self.generator_ref is not None:
            self.states.append(self.generator_ref().state)
        if self.cancel_after is not None and self.calls >= self.cancel_after:
            cancel.cancel()
        return not cancel.is_cancelled


@pytest.fixture
def recording_observer():
    """Observer that records lifecycle callbacks."""
    return RecordingObserver()


@pytest.fixture
def recording_pacer():
    """Factory for pacers that record calls instead of sleeping."""
    return RecordingPacer
