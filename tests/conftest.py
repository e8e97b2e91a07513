"""Test configuration for store-sanitizer."""

import tempfile
from pathlib import Path

import pytest
import structlog

from store_sanitizer.core.config import get_config
from store_sanitizer.core.exceptions import StoreUnreadableError, StoreWriteError
from store_sanitizer.models import Outcome
from store_sanitizer.reporting import ObservabilitySink
from store_sanitizer.storage import InMemoryStore


class RecordingSink(ObservabilitySink):
    """Sink that keeps every outcome it receives."""

    name = "recording"

    def __init__(self):
        self.outcomes: list[Outcome] = []

    def report(self, outcome):
        self.outcomes.append(outcome)


class ExplodingSink(ObservabilitySink):
    """Sink that fails on every delivery."""

    name = "exploding"

    def __init__(self):
        self.calls = 0

    def report(self, outcome):
        self.calls += 1
        raise RuntimeError("sink is down")


class FailingClearStore(InMemoryStore):
    """In-memory store whose clear_all always fails to commit."""

    def clear_all(self):
        raise StoreWriteError(message="disk full", store_name=self.name, operation="clear_all")


class UnreadableStore(InMemoryStore):
    """In-memory store whose snapshot always fails to load."""

    def snapshot(self):
        raise StoreUnreadableError(message="corrupt preferences file", store_name=self.name)


@pytest.fixture(autouse=True)
def clean_config_cache(monkeypatch):
    """Isolate tests from SANITIZER_* variables of the outer environment.

    Clears the cached configuration before and after each test and resets
    any logging configuration a CLI test installed.
    """
    import os

    for key in list(os.environ):
        if key.startswith("SANITIZER_"):
            monkeypatch.delenv(key, raising=False)
    get_config.cache_clear()
    yield
    get_config.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_entries():
    """Entries covering every supported value type.

    Returns:
        dict: Keys in the ``flutter.`` namespace mapped to sample values.
    """
    return {
        "flutter.onboarded": True,
        "flutter.launch_count": 42,
        "flutter.last_sync_ms": 1718000000000,
        "flutter.ratio": 0.75,
        "flutter.token": "abc123",
        "flutter.tags": ["alpha", "beta"],
    }


@pytest.fixture
def populated_store(sample_entries):
    """In-memory store holding the sample entries."""
    return InMemoryStore("FlutterSharedPreferences", sample_entries)


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def exploding_sink():
    return ExplodingSink()


@pytest.fixture
def failing_clear_store(sample_entries):
    return FailingClearStore("FlutterSharedPreferences", sample_entries)


@pytest.fixture
def unreadable_store():
    return UnreadableStore("FlutterSharedPreferences", {"flutter.token": "x"})
