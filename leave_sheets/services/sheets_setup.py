"""
Sheet bootstrap and schema migration.

initialize_sheets() is safe to call on every startup: tables that already
exist are left alone. Migration is explicit (run_migration, or
scripts/migrate_sheets.py) and never happens implicitly on a read.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from leave_sheets.core.config import settings
from leave_sheets.core.constants import (
    DEFAULT_ADMIN,
    DEFAULT_HOLIDAYS_2025,
    DEFAULT_POLICY,
    HOLIDAY_HEADERS,
    LEAVE_HEADERS,
    SETTING_HEADERS,
    USER_HEADERS,
    SheetNames,
)
from leave_sheets.core.exceptions import SchemaError, SetupError, TransientBackendError
from leave_sheets.core.security import get_password_hash
from leave_sheets.models import Holiday, Setting, User
from leave_sheets.services.a1 import row_range
from leave_sheets.services.base import BaseService
from leave_sheets.services.row_codec import (
    data_rows,
    holiday_to_row,
    row_to_setting,
    setting_to_row,
    user_to_row,
    utc_now_iso,
)
from leave_sheets.services.settings_service import encode_setting_value
from leave_sheets.services.sheets_client import Rows, TabularStore
from leave_sheets.services.user_layouts import CURRENT_USER_LAYOUT, detect_user_layout, migrate_user_rows

logger = logging.getLogger(__name__)

TABLE_HEADERS: Dict[str, List[str]] = {
    SheetNames.USERS: USER_HEADERS,
    SheetNames.LEAVES: LEAVE_HEADERS,
    SheetNames.SETTINGS: SETTING_HEADERS,
    SheetNames.HOLIDAYS: HOLIDAY_HEADERS,
}


class MigrationResult(BaseModel):
    from_layout: int
    to_layout: int = int(CURRENT_USER_LAYOUT)
    users_migrated: int = 0
    settings_added: List[str] = []
    rewritten: bool = False


def default_policy_rows(year: int) -> Rows:
    return [
        setting_to_row(Setting(key=key, value=encode_setting_value(value), year=year))
        for key, value in DEFAULT_POLICY.items()
    ]


class SheetsSetupService(BaseService):
    def __init__(self, store: TabularStore, admin_password: Optional[str] = None):
        super().__init__(store)
        self.admin_password = admin_password or settings.default_admin_password

    def seed_rows(self, table: str) -> Rows:
        if table == SheetNames.USERS:
            admin = User(
                **DEFAULT_ADMIN,
                password=get_password_hash(self.admin_password),
                created_at=utc_now_iso(),
            )
            return [user_to_row(admin)]
        if table == SheetNames.SETTINGS:
            return default_policy_rows(datetime.now().year)
        if table == SheetNames.HOLIDAYS:
            return [holiday_to_row(Holiday(date=d, name=n)) for d, n in DEFAULT_HOLIDAYS_2025]
        return []

    async def _ensure_table(self, table: str) -> bool:
        if await self.store.table_exists(table):
            logger.info(f"Sheet {table} already exists")
            return False

        header = TABLE_HEADERS[table]
        await self.store.create_table(table)
        await self.store.write_range(table, row_range(1, len(header)), [header])
        await self.store.append_rows(table, self.seed_rows(table))
        logger.info(f"Created sheet {table}")
        return True

    async def initialize_sheets(self) -> List[str]:
        """Create and seed whichever of the four tables are missing."""
        created = []
        try:
            for table in SheetNames.ALL:
                if await self._ensure_table(table):
                    created.append(table)
        except TransientBackendError as exc:
            logger.error(f"Error initializing sheets: {exc}")
            raise SetupError(details={"cause": exc.message, "created": created}) from exc
        logger.info(f"Sheets initialization complete, created: {created or 'none'}")
        return created

    async def check_sheets_initialized(self) -> bool:
        for table in SheetNames.ALL:
            if not await self.store.table_exists(table):
                return False
        return True

    async def run_migration(self, year: Optional[int] = None) -> MigrationResult:
        """
        Bring the Users table to the current layout and back-fill missing
        policy keys for `year`. Re-running on an up-to-date store writes nothing.
        """
        year = year or datetime.now().year
        rows = await self.store.read_range(SheetNames.USERS)
        if not rows:
            raise SchemaError("Users sheet has no header row", details={"table": SheetNames.USERS})

        layout = detect_user_layout(rows[0])
        result = MigrationResult(from_layout=int(layout))
        if layout != CURRENT_USER_LAYOUT:
            users = migrate_user_rows([row for _, row in data_rows(rows)], layout)
            await self.store.replace_table(
                SheetNames.USERS,
                USER_HEADERS,
                [user_to_row(user) for user in users],
                expected_row_count=len(rows),
            )
            result.users_migrated = len(users)
            result.rewritten = True
            logger.info(f"Migrated {len(users)} users from layout V{int(layout)} to V{int(CURRENT_USER_LAYOUT)}")

        result.settings_added = await self._backfill_policy(year)
        return result

    async def _backfill_policy(self, year: int) -> List[str]:
        rows = await self.store.read_range(SheetNames.SETTINGS)
        present = {
            setting.key for setting in (row_to_setting(row) for _, row in data_rows(rows))
            if setting.year == year
        }
        missing = [key for key in DEFAULT_POLICY if key not in present]
        if missing:
            await self.store.append_rows(SheetNames.SETTINGS, [
                setting_to_row(Setting(key=key, value=encode_setting_value(DEFAULT_POLICY[key]), year=year))
                for key in missing
            ])
            logger.info(f"Added {len(missing)} missing settings for {year}: {missing}")
        return missing
