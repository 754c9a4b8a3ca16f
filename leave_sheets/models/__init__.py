from leave_sheets.models.leave_request import LeaveRequest, LeaveStatistics, LeaveStatus, LeaveType
from leave_sheets.models.user import QUOTA_FIELDS, User, UserRole
from leave_sheets.models.setting import POLICY_FIELDS, Holiday, PolicySettings, Setting

__all__ = [
    "Holiday",
    "LeaveRequest",
    "LeaveStatistics",
    "LeaveStatus",
    "LeaveType",
    "POLICY_FIELDS",
    "PolicySettings",
    "QUOTA_FIELDS",
    "Setting",
    "User",
    "UserRole",
]
