"""
Row codec: typed records <-> positional sheet rows.

Encoding uses a fixed column order per table. Decoding is defensive: blank or
malformed cells fall back to a type-appropriate default instead of failing,
since any human can edit the sheet.
"""
import enum
import math
from datetime import date, datetime, timezone
from typing import Any, List, Optional, Sequence, Tuple, Type, TypeVar

from leave_sheets.core.constants import (
    DECODE_QUOTA_FALLBACKS,
    HOLIDAY_HEADERS,
    LEAVE_HEADERS,
    SETTING_HEADERS,
    USER_HEADERS,
)
from leave_sheets.models import Holiday, LeaveRequest, LeaveStatus, LeaveType, Setting, User, UserRole

Row = List[Any]
E = TypeVar("E", bound=enum.Enum)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# --- cell decoders ---

def cell(row: Sequence[Any], index: int) -> Any:
    return row[index] if index < len(row) else None


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def as_int(value: Any, default: int = 0) -> int:
    """Non-negative int from a cell; blank, garbled, infinite or negative values give `default`."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return default
        number = int(value)
    else:
        text = str(value).strip()
        if not text:
            return default
        try:
            number = int(text)
        except ValueError:
            try:
                parsed = float(text)
            except ValueError:
                return default
            if not math.isfinite(parsed):
                return default
            number = int(parsed)
    return number if number >= 0 else default


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return as_text(value).strip().lower() == "true"


def as_timestamp(value: Any) -> str:
    text = as_text(value).strip()
    return text or utc_now_iso()


def as_date(value: Any) -> Optional[date]:
    text = as_text(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def as_enum(enum_cls: Type[E], value: Any, default: E) -> E:
    try:
        return enum_cls(as_text(value).strip())
    except ValueError:
        return default


def encode_bool(value: bool) -> str:
    return "true" if value else "false"


# --- row filtering ---

def is_data_row(row: Sequence[Any]) -> bool:
    return bool(row) and as_text(row[0]).strip() != ""


def data_rows(rows: Sequence[Row], skip_header: bool = True) -> List[Tuple[int, Row]]:
    """
    Rows that hold a record, paired with their 1-based sheet row number.

    Blank padding rows (first cell empty) are dropped, but the numbering is
    kept so in-place writes hit the right row.
    """
    result = []
    for number, row in enumerate(rows, start=1):
        if skip_header and number == 1:
            continue
        if is_data_row(row):
            result.append((number, list(row)))
    return result


# --- Users (current layout, see user_layouts for older ones) ---

def user_to_row(user: User) -> Row:
    return [
        user.emp_id,
        user.name,
        user.password,
        user.role.value,
        user.leave_quota,
        user.sick_leave_quota,
        user.personal_leave_quota,
        user.maternity_leave_quota,
        user.sterilization_leave_quota,
        user.unpaid_leave_quota,
        user.compassionate_leave_quota,
        encode_bool(user.is_registered),
        user.created_at,
    ]


def row_to_user(row: Sequence[Any]) -> User:
    return User(
        emp_id=as_text(cell(row, 0)),
        name=as_text(cell(row, 1)),
        password=as_text(cell(row, 2)),
        role=as_enum(UserRole, cell(row, 3), UserRole.EMPLOYEE),
        leave_quota=as_int(cell(row, 4), DECODE_QUOTA_FALLBACKS["leave_quota"]),
        sick_leave_quota=as_int(cell(row, 5), DECODE_QUOTA_FALLBACKS["sick_leave_quota"]),
        personal_leave_quota=as_int(cell(row, 6), DECODE_QUOTA_FALLBACKS["personal_leave_quota"]),
        maternity_leave_quota=as_int(cell(row, 7), DECODE_QUOTA_FALLBACKS["maternity_leave_quota"]),
        sterilization_leave_quota=as_int(cell(row, 8), DECODE_QUOTA_FALLBACKS["sterilization_leave_quota"]),
        unpaid_leave_quota=as_int(cell(row, 9), DECODE_QUOTA_FALLBACKS["unpaid_leave_quota"]),
        compassionate_leave_quota=as_int(cell(row, 10), DECODE_QUOTA_FALLBACKS["compassionate_leave_quota"]),
        is_registered=as_bool(cell(row, 11)),
        created_at=as_timestamp(cell(row, 12)),
    )


USER_WIDTH = len(USER_HEADERS)


# --- Leaves ---

def leave_to_row(leave: LeaveRequest) -> Row:
    return [
        leave.id,
        leave.emp_id,
        leave.type.value,
        leave.start_date.isoformat() if leave.start_date else "",
        leave.end_date.isoformat() if leave.end_date else "",
        leave.total_days,
        leave.reason,
        leave.status.value,
        leave.approver_note or "",
        leave.created_at,
        leave.updated_at,
    ]


def row_to_leave(row: Sequence[Any]) -> LeaveRequest:
    note = as_text(cell(row, 8))
    return LeaveRequest(
        id=as_text(cell(row, 0)),
        emp_id=as_text(cell(row, 1)),
        type=as_enum(LeaveType, cell(row, 2), LeaveType.ANNUAL),
        start_date=as_date(cell(row, 3)),
        end_date=as_date(cell(row, 4)),
        total_days=as_int(cell(row, 5), 0),
        reason=as_text(cell(row, 6)),
        status=as_enum(LeaveStatus, cell(row, 7), LeaveStatus.PENDING),
        approver_note=note if note else None,
        created_at=as_timestamp(cell(row, 9)),
        updated_at=as_timestamp(cell(row, 10)),
    )


LEAVE_WIDTH = len(LEAVE_HEADERS)


# --- Settings ---

def setting_to_row(setting: Setting) -> Row:
    return [setting.key, setting.value, setting.year]


def row_to_setting(row: Sequence[Any]) -> Setting:
    return Setting(
        key=as_text(cell(row, 0)),
        value=as_text(cell(row, 1)),
        year=as_int(cell(row, 2), datetime.now().year),
    )


SETTING_WIDTH = len(SETTING_HEADERS)


# --- Holidays ---

def holiday_to_row(holiday: Holiday) -> Row:
    return [holiday.date, holiday.name]


def row_to_holiday(row: Sequence[Any]) -> Holiday:
    return Holiday(
        date=as_text(cell(row, 0)).strip(),
        name=as_text(cell(row, 1)),
    )


HOLIDAY_WIDTH = len(HOLIDAY_HEADERS)
