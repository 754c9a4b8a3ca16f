"""
Spreadsheet backends.

A backend performs one blocking call against the tabular store and raises on
any failure; retries, async dispatch and error wrapping live in
TabularStore (sheets_client.py).

- GoogleSheetsBackend: Google Sheets API v4 through a service account.
- InMemorySheetsBackend: same range semantics held in process memory, used for
  local development (SHEETS_BACKEND=memory) and the test suite.
"""
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build

from leave_sheets.core.config import SheetsSettings
from leave_sheets.core.exceptions import ConfigurationError
from leave_sheets.services.a1 import parse_range

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

Cell = Any
Rows = List[List[Cell]]


def split_a1(a1: str):
    """'Users!A2:K2' -> ('Users', 'A2:K2'); 'Users' -> ('Users', None)."""
    if "!" in a1:
        sheet, rng = a1.split("!", 1)
        return sheet, rng or None
    return a1, None


class SheetsBackend:
    def get_values(self, a1: str) -> Rows:  # pragma: no cover - interface
        raise NotImplementedError

    def update_values(self, a1: str, values: Rows) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def append_values(self, a1: str, values: Rows) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def clear_values(self, a1: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def batch_update_values(self, data: List[Dict[str, Any]]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def add_sheet(self, title: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def sheet_titles(self) -> List[str]:  # pragma: no cover - interface
        raise NotImplementedError


class SheetsClientManager:
    """
    Owns the authenticated Sheets API handle.

    Building the handle signs a service-account JWT and loads the discovery
    document, so it is memoized. `acquire()` returns the cached handle while it
    is younger than `ttl` seconds and rebuilds it afterwards. There is no
    release step: the handle is reusable by any caller. Backend calls run on
    worker threads, hence the lock.
    """

    def __init__(
        self,
        config: SheetsSettings,
        ttl: Optional[float] = None,
        client_factory: Optional[Callable[[str, str], Any]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.ttl = config.client_cache_seconds if ttl is None else ttl
        self._client_factory = client_factory or self._build_client
        self._clock = clock
        self._lock = threading.Lock()
        self._client = None
        self._created_at = 0.0

    def validate(self) -> None:
        missing = []
        if not self.config.service_account_email:
            missing.append("GOOGLE_SERVICE_ACCOUNT_EMAIL")
        if not self.config.private_key:
            missing.append("GOOGLE_PRIVATE_KEY")
        if not self.config.spreadsheet_id:
            missing.append("GOOGLE_SHEET_ID")
        if missing:
            raise ConfigurationError(
                f"Missing Google Sheets configuration: {', '.join(missing)}",
                details={"missing": missing},
            )

    @property
    def spreadsheet_id(self) -> str:
        self.validate()
        return self.config.spreadsheet_id

    def acquire(self):
        with self._lock:
            if self._client is not None and self._clock() - self._created_at < self.ttl:
                return self._client
            self.validate()
            logger.info("Building Google Sheets client")
            self._client = self._client_factory(self.config.service_account_email, self.config.private_key)
            self._created_at = self._clock()
            return self._client

    def invalidate(self) -> None:
        with self._lock:
            self._client = None

    @staticmethod
    def _build_client(email: str, private_key: str):
        credentials = service_account.Credentials.from_service_account_info(
            {
                "type": "service_account",
                "client_email": email,
                "private_key": private_key,
                "token_uri": GOOGLE_TOKEN_URI,
            },
            scopes=SCOPES,
        )
        return build("sheets", "v4", credentials=credentials, cache_discovery=False)


class GoogleSheetsBackend(SheetsBackend):
    def __init__(self, manager: SheetsClientManager):
        # Fail fast on missing credentials, before any request is served
        manager.validate()
        self.manager = manager

    def _spreadsheets(self):
        return self.manager.acquire().spreadsheets()

    def get_values(self, a1: str) -> Rows:
        response = self._spreadsheets().values().get(
            spreadsheetId=self.manager.spreadsheet_id,
            range=a1,
        ).execute()
        return response.get("values", [])

    def update_values(self, a1: str, values: Rows) -> None:
        self._spreadsheets().values().update(
            spreadsheetId=self.manager.spreadsheet_id,
            range=a1,
            valueInputOption="RAW",
            body={"values": values},
        ).execute()

    def append_values(self, a1: str, values: Rows) -> None:
        self._spreadsheets().values().append(
            spreadsheetId=self.manager.spreadsheet_id,
            range=a1,
            valueInputOption="RAW",
            body={"values": values},
        ).execute()

    def clear_values(self, a1: str) -> None:
        self._spreadsheets().values().clear(
            spreadsheetId=self.manager.spreadsheet_id,
            range=a1,
            body={},
        ).execute()

    def batch_update_values(self, data: List[Dict[str, Any]]) -> None:
        self._spreadsheets().values().batchUpdate(
            spreadsheetId=self.manager.spreadsheet_id,
            body={"valueInputOption": "RAW", "data": data},
        ).execute()

    def add_sheet(self, title: str) -> None:
        self._spreadsheets().batchUpdate(
            spreadsheetId=self.manager.spreadsheet_id,
            body={"requests": [{"addSheet": {"properties": {"title": title}}}]},
        ).execute()

    def sheet_titles(self) -> List[str]:
        spreadsheet = self._spreadsheets().get(
            spreadsheetId=self.manager.spreadsheet_id,
        ).execute()
        return [sheet["properties"]["title"] for sheet in spreadsheet.get("sheets", [])]


def _formatted(cell: Cell) -> str:
    # values.get returns FORMATTED_VALUE strings
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "TRUE" if cell else "FALSE"
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)


def _trim(rows: Rows) -> Rows:
    trimmed = []
    for row in rows:
        end = len(row)
        while end and row[end - 1] == "":
            end -= 1
        trimmed.append(row[:end])
    while trimmed and not trimmed[-1]:
        trimmed.pop()
    return trimmed


class InMemorySheetsBackend(SheetsBackend):
    """
    Spreadsheet held in a dict of grids.

    Mirrors the API behaviour the services depend on: ranges in A1 notation,
    formatted string values on read, trailing blank cells and rows omitted,
    appends landing after the last occupied row, writes rejected when the
    data does not fit the given range.
    """

    def __init__(self, sheets: Optional[Dict[str, Rows]] = None):
        self._lock = threading.Lock()
        self._sheets: Dict[str, Rows] = {}
        for title, rows in (sheets or {}).items():
            self._sheets[title] = [list(row) for row in rows]

    def _grid(self, sheet: str) -> Rows:
        if sheet not in self._sheets:
            raise LookupError(f"Unable to parse range: {sheet}")
        return self._sheets[sheet]

    def get_values(self, a1: str) -> Rows:
        sheet, rng = split_a1(a1)
        with self._lock:
            grid = self._grid(sheet)
            bounds = parse_range(rng)
            last_row = len(grid) if bounds.end_row is None else min(bounds.end_row, len(grid))
            result = []
            for row in grid[bounds.start_row - 1:last_row]:
                stop = len(row) if bounds.end_col is None else bounds.end_col + 1
                result.append([_formatted(cell) for cell in row[bounds.start_col:stop]])
            return _trim(result)

    def _write(self, grid: Rows, start_row: int, start_col: int, values: Rows) -> None:
        for offset, row in enumerate(values):
            index = start_row - 1 + offset
            while len(grid) <= index:
                grid.append([])
            target = grid[index]
            needed = start_col + len(row)
            if len(target) < needed:
                target.extend([""] * (needed - len(target)))
            target[start_col:needed] = list(row)

    def update_values(self, a1: str, values: Rows) -> None:
        sheet, rng = split_a1(a1)
        with self._lock:
            grid = self._grid(sheet)
            bounds = parse_range(rng)
            if bounds.end_row is not None and bounds.start_row + len(values) - 1 > bounds.end_row:
                raise ValueError(f"Requested writing within range [{a1}], but tried writing to row {bounds.start_row + len(values) - 1}")
            width = max((len(row) for row in values), default=0)
            if bounds.end_col is not None and bounds.start_col + width - 1 > bounds.end_col:
                raise ValueError(f"Requested writing within range [{a1}], but tried writing to column {bounds.start_col + width - 1}")
            self._write(grid, bounds.start_row, bounds.start_col, values)

    def append_values(self, a1: str, values: Rows) -> None:
        sheet, rng = split_a1(a1)
        with self._lock:
            grid = self._grid(sheet)
            last_used = 0
            for index, row in enumerate(grid, start=1):
                if any(cell not in ("", None) for cell in row):
                    last_used = index
            self._write(grid, last_used + 1, parse_range(rng).start_col, values)

    def clear_values(self, a1: str) -> None:
        sheet, rng = split_a1(a1)
        with self._lock:
            grid = self._grid(sheet)
            if rng is None:
                self._sheets[sheet] = []
                return
            bounds = parse_range(rng)
            last_row = len(grid) if bounds.end_row is None else min(bounds.end_row, len(grid))
            for row in grid[bounds.start_row - 1:last_row]:
                stop = len(row) if bounds.end_col is None else min(bounds.end_col + 1, len(row))
                for col in range(bounds.start_col, stop):
                    row[col] = ""

    def batch_update_values(self, data: List[Dict[str, Any]]) -> None:
        for item in data:
            self.update_values(item["range"], item["values"])

    def add_sheet(self, title: str) -> None:
        with self._lock:
            if title in self._sheets:
                raise ValueError(f'A sheet with the name "{title}" already exists.')
            self._sheets[title] = []

    def sheet_titles(self) -> List[str]:
        with self._lock:
            return list(self._sheets)

    def snapshot(self, title: str) -> Rows:
        """Raw copy of a sheet's grid."""
        with self._lock:
            return [list(row) for row in self._grid(title)]
