"""
Store wiring: picks the spreadsheet backend from settings and hands out the
process-wide TabularStore.
"""
import threading
from typing import Optional

from leave_sheets.core.config import SheetsSettings, settings
from leave_sheets.core.exceptions import ConfigurationError
from leave_sheets.services.sheets_backend import (
    GoogleSheetsBackend,
    InMemorySheetsBackend,
    SheetsBackend,
    SheetsClientManager,
)
from leave_sheets.services.sheets_client import TabularStore

_store: Optional[TabularStore] = None
_store_lock = threading.Lock()


def build_backend(config: SheetsSettings) -> SheetsBackend:
    if config.backend == "google":
        return GoogleSheetsBackend(SheetsClientManager(config))
    if config.backend == "memory":
        return InMemorySheetsBackend()
    raise ConfigurationError(
        f"Unknown SHEETS_BACKEND '{config.backend}'",
        details={"allowed": ["google", "memory"]},
    )


def build_store(config: SheetsSettings = settings.sheets) -> TabularStore:
    return TabularStore(
        build_backend(config),
        max_retries=config.max_retries,
        base_delay=config.retry_base_delay,
    )


def get_store() -> TabularStore:
    """
    Store Provider: one store per process, built on first use.
    Overridden in tests through app.dependency_overrides.
    """
    global _store
    with _store_lock:
        if _store is None:
            _store = build_store()
        return _store
