"""
Tabular store client.

Single point of contact with the spreadsheet backend. Every operation is a
coroutine: the blocking backend call runs on a worker thread and is retried
with exponential backoff (tenacity) when it fails.

Ranges are addressed as (table, A1 range); no range means the whole table.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Sequence

from pydantic import BaseModel
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from leave_sheets.core.exceptions import AppException, ConcurrentModificationError, TransientBackendError
from leave_sheets.services.a1 import block_range
from leave_sheets.services.sheets_backend import SheetsBackend

logger = logging.getLogger(__name__)

Rows = List[List[Any]]


class RangeUpdate(BaseModel):
    table: str
    range: str
    rows: Rows


def _a1(table: str, range_: Optional[str] = None) -> str:
    return f"{table}!{range_}" if range_ else table


class TabularStore:
    def __init__(
        self,
        backend: SheetsBackend,
        max_retries: int = 3,
        base_delay: float = 0.1,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.backend = backend
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep

    async def _invoke(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, *args)
        except AppException:
            raise
        except Exception as exc:
            raise TransientBackendError(
                f"Sheets {operation} failed: {exc}",
                details={"operation": operation},
            ) from exc

    async def _call(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.base_delay, exp_base=2, min=0),
            retry=retry_if_exception_type(TransientBackendError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            sleep=self._sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                result = await self._invoke(operation, fn, *args)
        return result

    async def read_range(self, table: str, range_: Optional[str] = None) -> Rows:
        values = await self._call("read", self.backend.get_values, _a1(table, range_))
        return values or []

    async def write_range(self, table: str, range_: str, rows: Rows) -> None:
        await self._call("write", self.backend.update_values, _a1(table, range_), rows)

    async def append_rows(self, table: str, rows: Rows) -> None:
        if not rows:
            return
        await self._call("append", self.backend.append_values, _a1(table), rows)

    async def clear_range(self, table: str, range_: Optional[str] = None) -> None:
        await self._call("clear", self.backend.clear_values, _a1(table, range_))

    async def create_table(self, name: str) -> None:
        await self._call("create", self.backend.add_sheet, name)

    async def batch_write(self, updates: Sequence[RangeUpdate]) -> None:
        if not updates:
            return
        data = [{"range": _a1(u.table, u.range), "values": u.rows} for u in updates]
        await self._call("batch write", self.backend.batch_update_values, data)

    async def table_exists(self, name: str) -> bool:
        """
        Existence probe. Any backend failure is reported as "does not exist":
        a transient error looks like absence, which setup tolerates because it
        is idempotent and can be re-run.
        """
        try:
            titles = await self._invoke("sheet lookup", self.backend.sheet_titles)
        except TransientBackendError as exc:
            logger.error(f"Error checking sheet existence for {name}: {exc}")
            return False
        return name in titles

    async def replace_table(
        self,
        table: str,
        header: Sequence[Any],
        rows: Rows,
        expected_row_count: Optional[int] = None,
    ) -> None:
        """
        Rewrite a whole table: clear it, then write header + rows from A1.

        The backend has no delete-by-key, so removals and bulk upserts go
        through here. When `expected_row_count` is given (the number of rows the
        caller read), the table is re-read just before clearing and a
        ConcurrentModificationError is raised if it changed. This detects
        races, it does not prevent them: a reader can still observe the table
        empty between the clear and the write.
        """
        if expected_row_count is not None:
            current = await self.read_range(table)
            if len(current) != expected_row_count:
                raise ConcurrentModificationError(table, expected_row_count, len(current))

        payload = [list(header)] + [list(row) for row in rows]
        await self.clear_range(table)
        await self.write_range(table, block_range(1, len(payload), len(header)), payload)
        logger.info(f"Rewrote sheet {table} with {len(rows)} data rows")
