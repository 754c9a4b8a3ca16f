import asyncio
import os

import pytest

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["SHEETS_BACKEND"] = "memory"
os.environ["AUTO_INITIALIZE_SHEETS"] = "true"

from fastapi.testclient import TestClient

from leave_sheets.database import get_store
from leave_sheets.main import app
from leave_sheets.services.sheets_backend import InMemorySheetsBackend
from leave_sheets.services.sheets_client import TabularStore
from leave_sheets.services.sheets_setup import SheetsSetupService


class RecordingBackend(InMemorySheetsBackend):
    """In-memory backend that records every mutating call."""

    def __init__(self, sheets=None):
        super().__init__(sheets)
        self.writes = []

    def update_values(self, a1, values):
        self.writes.append(("update", a1))
        super().update_values(a1, values)

    def append_values(self, a1, values):
        self.writes.append(("append", a1))
        super().append_values(a1, values)

    def clear_values(self, a1):
        self.writes.append(("clear", a1))
        super().clear_values(a1)

    def batch_update_values(self, data):
        self.writes.append(("batch", len(data)))
        super().batch_update_values(data)

    def add_sheet(self, title):
        self.writes.append(("add_sheet", title))
        super().add_sheet(title)


class FlakyBackend(InMemorySheetsBackend):
    """Reads fail `failures` times before succeeding."""

    def __init__(self, failures, sheets=None):
        super().__init__(sheets)
        self.failures = failures
        self.read_calls = 0

    def get_values(self, a1):
        self.read_calls += 1
        if self.read_calls <= self.failures:
            raise RuntimeError("HTTP 503 backend unavailable")
        return super().get_values(a1)


def run_sync(coro):
    """Run a coroutine on a private loop, leaving the global loop alone."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def make_store(backend):
    return TabularStore(backend, max_retries=3, base_delay=0)


@pytest.fixture(scope="function")
def backend():
    return RecordingBackend()


@pytest.fixture(scope="function")
def store(backend):
    """Store over an empty in-memory spreadsheet, no backoff delay."""
    return make_store(backend)


@pytest.fixture(scope="function")
def seeded_store(store):
    """Store with all four sheets created and seeded."""
    run_sync(SheetsSetupService(store).initialize_sheets())
    store.backend.writes.clear()
    return store


@pytest.fixture(scope="function")
def sleeps():
    return []


@pytest.fixture(scope="function")
def recorded_sleep(sleeps):
    async def _sleep(delay):
        sleeps.append(delay)
    return _sleep


@pytest.fixture(scope="function")
def client():
    """TestClient over a fresh in-memory store; startup seeds the sheets."""
    test_store = make_store(InMemorySheetsBackend())
    app.dependency_overrides[get_store] = lambda: test_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
