"""
Historical layouts of the Users sheet and the upgrades between them.

V1  empId..personalLeaveQuota, isRegistered, createdAt                 (9 columns)
V2  adds maternity, sterilization and unpaid quotas before isRegistered (12 columns)
V3  adds the compassionate quota after unpaid                           (13 columns, current)

The layout of a sheet is read from its header row, each row is decoded with
that layout into its own record type, then lifted to the current User by one
upgrade function per version step.
"""
import enum
from typing import Any, List, Sequence, Union

from pydantic import BaseModel

from leave_sheets.core.constants import DECODE_QUOTA_FALLBACKS, DEFAULT_QUOTAS, USER_HEADERS
from leave_sheets.core.exceptions import SchemaError
from leave_sheets.models import User, UserRole
from leave_sheets.services.row_codec import as_bool, as_enum, as_int, as_text, as_timestamp, cell, row_to_user


class UserLayout(enum.IntEnum):
    V1 = 1
    V2 = 2
    V3 = 3


CURRENT_USER_LAYOUT = UserLayout.V3

LAYOUT_HEADERS = {
    UserLayout.V1: [
        "empId", "name", "password", "role",
        "leaveQuota", "sickLeaveQuota", "personalLeaveQuota",
        "isRegistered", "createdAt",
    ],
    UserLayout.V2: [
        "empId", "name", "password", "role",
        "leaveQuota", "sickLeaveQuota", "personalLeaveQuota",
        "maternityLeaveQuota", "sterilizationLeaveQuota", "unpaidLeaveQuota",
        "isRegistered", "createdAt",
    ],
    UserLayout.V3: USER_HEADERS,
}


class UserRowV1(BaseModel):
    emp_id: str
    name: str
    password: str
    role: UserRole
    leave_quota: int
    sick_leave_quota: int
    personal_leave_quota: int
    is_registered: bool
    created_at: str


class UserRowV2(UserRowV1):
    maternity_leave_quota: int
    sterilization_leave_quota: int
    unpaid_leave_quota: int


VersionedUserRow = Union[UserRowV1, UserRowV2, User]


def detect_user_layout(header: Sequence[Any]) -> UserLayout:
    names = [as_text(h).strip() for h in header]
    while names and not names[-1]:
        names.pop()
    for layout, expected in LAYOUT_HEADERS.items():
        if names == expected:
            return layout
    # Renamed header cells: fall back to the column count
    for layout, expected in LAYOUT_HEADERS.items():
        if len(names) == len(expected):
            return layout
    raise SchemaError(
        f"Unrecognised Users header with {len(names)} columns",
        details={"header": names},
    )


def _decode_common(row: Sequence[Any]) -> dict:
    return dict(
        emp_id=as_text(cell(row, 0)),
        name=as_text(cell(row, 1)),
        password=as_text(cell(row, 2)),
        role=as_enum(UserRole, cell(row, 3), UserRole.EMPLOYEE),
        leave_quota=as_int(cell(row, 4), DECODE_QUOTA_FALLBACKS["leave_quota"]),
        sick_leave_quota=as_int(cell(row, 5), DECODE_QUOTA_FALLBACKS["sick_leave_quota"]),
        personal_leave_quota=as_int(cell(row, 6), DECODE_QUOTA_FALLBACKS["personal_leave_quota"]),
    )


def decode_v1(row: Sequence[Any]) -> UserRowV1:
    return UserRowV1(
        **_decode_common(row),
        is_registered=as_bool(cell(row, 7)),
        created_at=as_timestamp(cell(row, 8)),
    )


def decode_v2(row: Sequence[Any]) -> UserRowV2:
    return UserRowV2(
        **_decode_common(row),
        maternity_leave_quota=as_int(cell(row, 7), DECODE_QUOTA_FALLBACKS["maternity_leave_quota"]),
        sterilization_leave_quota=as_int(cell(row, 8), DECODE_QUOTA_FALLBACKS["sterilization_leave_quota"]),
        unpaid_leave_quota=as_int(cell(row, 9), DECODE_QUOTA_FALLBACKS["unpaid_leave_quota"]),
        is_registered=as_bool(cell(row, 10)),
        created_at=as_timestamp(cell(row, 11)),
    )


DECODERS = {
    UserLayout.V1: decode_v1,
    UserLayout.V2: decode_v2,
    UserLayout.V3: row_to_user,
}


def upgrade_v1_to_v2(record: UserRowV1) -> UserRowV2:
    return UserRowV2(
        **record.model_dump(),
        maternity_leave_quota=DEFAULT_QUOTAS["maternity_leave_quota"],
        sterilization_leave_quota=DEFAULT_QUOTAS["sterilization_leave_quota"],
        unpaid_leave_quota=DEFAULT_QUOTAS["unpaid_leave_quota"],
    )


def upgrade_v2_to_v3(record: UserRowV2) -> User:
    return User(
        **record.model_dump(),
        compassionate_leave_quota=DEFAULT_QUOTAS["compassionate_leave_quota"],
    )


def decode_user_row(row: Sequence[Any], layout: UserLayout) -> VersionedUserRow:
    return DECODERS[layout](row)


def upgrade_user_row(record: VersionedUserRow) -> User:
    if isinstance(record, User):
        return record
    if not isinstance(record, UserRowV2):
        record = upgrade_v1_to_v2(record)
    return upgrade_v2_to_v3(record)


def migrate_user_rows(rows: Sequence[Sequence[Any]], layout: UserLayout) -> List[User]:
    """Decode data rows written in `layout` and lift them to the current User."""
    return [upgrade_user_row(decode_user_row(row, layout)) for row in rows]
