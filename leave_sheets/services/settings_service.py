"""
Settings Service Layer

Per-year policy key/value pairs (Settings sheet) and public holidays
(Holidays sheet).
"""
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from leave_sheets.core.constants import DEFAULT_POLICY, HOLIDAY_HEADERS, SETTING_HEADERS, SheetNames
from leave_sheets.core.exceptions import ConflictError, NotFoundError, ValidationError
from leave_sheets.models import POLICY_FIELDS, Holiday, PolicySettings, Setting
from leave_sheets.services.a1 import row_range
from leave_sheets.services.base import BaseService
from leave_sheets.services.row_codec import (
    SETTING_WIDTH,
    as_int,
    data_rows,
    encode_bool,
    holiday_to_row,
    row_to_holiday,
    row_to_setting,
    setting_to_row,
)


def encode_setting_value(value: Any) -> str:
    if isinstance(value, bool):
        return encode_bool(value)
    if value is None:
        return ""
    return str(value)


def _current_year() -> int:
    return datetime.now().year


class SettingsService(BaseService):

    async def _setting_snapshot(self) -> Tuple[int, List[Tuple[int, Setting]]]:
        rows = await self.store.read_range(SheetNames.SETTINGS)
        return len(rows), [(number, row_to_setting(row)) for number, row in data_rows(rows)]

    async def get_settings(self, year: Optional[int] = None) -> List[Setting]:
        year = year or _current_year()
        _, records = await self._setting_snapshot()
        return [setting for _, setting in records if setting.year == year]

    async def get_policy_settings(self, year: Optional[int] = None) -> PolicySettings:
        """
        Typed policy for a year. Keys missing from the sheet, or holding an
        unparseable value, take their default.
        """
        values = {s.key: s.value for s in await self.get_settings(year)}
        policy: Dict[str, Any] = {}
        for key, default in DEFAULT_POLICY.items():
            raw = values.get(key)
            if raw is None:
                value = default
            elif isinstance(default, bool):
                value = raw.strip().lower() == "true"
            else:
                value = as_int(raw, default)
            policy[POLICY_FIELDS[key]] = value
        return PolicySettings(**policy)

    async def update_setting(self, key: str, value: Any, year: Optional[int] = None) -> Setting:
        """Upsert one key: rewrite its row(s) in place, or append a new row."""
        if not key:
            raise ValidationError("Setting key is required")
        setting = Setting(key=key, value=encode_setting_value(value), year=year or _current_year())

        _, records = await self._setting_snapshot()
        matches = [number for number, existing in records if existing.key == key and existing.year == setting.year]
        if not matches:
            await self.store.append_rows(SheetNames.SETTINGS, [setting_to_row(setting)])
            return setting

        # hand-edited duplicates get the same value
        for number in matches:
            await self.store.write_range(SheetNames.SETTINGS, row_range(number, SETTING_WIDTH), [setting_to_row(setting)])
        return setting

    async def update_settings(self, updates: Mapping[str, Any], year: Optional[int] = None) -> List[Setting]:
        """
        Merge several keys for one year and rewrite the Settings table.
        Rows for other years are kept untouched. Duplicate rows of an updated
        key are collapsed into its first row.
        """
        year = year or _current_year()
        pending = {key: encode_setting_value(value) for key, value in updates.items()}
        if not all(pending):
            raise ValidationError("Setting key is required")

        row_count, records = await self._setting_snapshot()
        merged: List[Setting] = []
        written = set()
        for _, existing in records:
            if existing.year == year and existing.key in pending:
                if existing.key not in written:
                    merged.append(Setting(key=existing.key, value=pending[existing.key], year=year))
                    written.add(existing.key)
            else:
                merged.append(existing)
        merged.extend(
            Setting(key=key, value=value, year=year) for key, value in pending.items() if key not in written
        )

        await self.store.replace_table(
            SheetNames.SETTINGS,
            SETTING_HEADERS,
            [setting_to_row(s) for s in merged],
            expected_row_count=row_count,
        )
        self.log_info(f"Updated {len(updates)} settings for {year}")
        return [s for s in merged if s.year == year]

    # --- holidays ---

    async def _holiday_snapshot(self) -> Tuple[int, List[Holiday]]:
        rows = await self.store.read_range(SheetNames.HOLIDAYS)
        return len(rows), [row_to_holiday(row) for _, row in data_rows(rows)]

    async def list_holidays(self) -> List[Holiday]:
        _, holidays = await self._holiday_snapshot()
        return holidays

    async def get_holidays(self, year: Optional[int] = None) -> List[Holiday]:
        year = year or _current_year()
        return [h for h in await self.list_holidays() if h.year == year]

    async def add_holiday(self, holiday_date: str, name: str) -> Holiday:
        try:
            date.fromisoformat(holiday_date)
        except (TypeError, ValueError):
            raise ValidationError("Holiday date must be YYYY-MM-DD", details={"date": holiday_date})
        if not (name or "").strip():
            raise ValidationError("Holiday name is required")

        if any(h.date == holiday_date for h in await self.list_holidays()):
            raise ConflictError(f"Holiday on {holiday_date} already exists", details={"date": holiday_date})

        holiday = Holiday(date=holiday_date, name=name.strip())
        await self.store.append_rows(SheetNames.HOLIDAYS, [holiday_to_row(holiday)])
        return holiday

    async def delete_holiday(self, holiday_date: str) -> None:
        row_count, holidays = await self._holiday_snapshot()
        remaining = [h for h in holidays if h.date != holiday_date]
        if len(remaining) == len(holidays):
            raise NotFoundError("Holiday", holiday_date)

        await self.store.replace_table(
            SheetNames.HOLIDAYS,
            HOLIDAY_HEADERS,
            [holiday_to_row(h) for h in remaining],
            expected_row_count=row_count,
        )
        self.log_info(f"Deleted holiday {holiday_date}")
