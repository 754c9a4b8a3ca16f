"""
User record as stored in the Users sheet.
"""
import enum
from pydantic import BaseModel, Field

from leave_sheets.core.constants import DEFAULT_QUOTAS
from leave_sheets.models.leave_request import LeaveType


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


# Leave category -> quota counter on the User record
QUOTA_FIELDS = {
    LeaveType.ANNUAL: "leave_quota",
    LeaveType.SICK: "sick_leave_quota",
    LeaveType.PERSONAL: "personal_leave_quota",
    LeaveType.MATERNITY: "maternity_leave_quota",
    LeaveType.STERILIZATION: "sterilization_leave_quota",
    LeaveType.UNPAID: "unpaid_leave_quota",
    LeaveType.COMPASSIONATE: "compassionate_leave_quota",
}


class User(BaseModel):
    emp_id: str
    name: str = ""
    # Salted hash; sheets from older deployments may still hold plaintext
    password: str = ""
    role: UserRole = UserRole.EMPLOYEE
    leave_quota: int = Field(default=DEFAULT_QUOTAS["leave_quota"], ge=0)
    sick_leave_quota: int = Field(default=DEFAULT_QUOTAS["sick_leave_quota"], ge=0)
    personal_leave_quota: int = Field(default=DEFAULT_QUOTAS["personal_leave_quota"], ge=0)
    maternity_leave_quota: int = Field(default=DEFAULT_QUOTAS["maternity_leave_quota"], ge=0)
    sterilization_leave_quota: int = Field(default=DEFAULT_QUOTAS["sterilization_leave_quota"], ge=0)
    unpaid_leave_quota: int = Field(default=DEFAULT_QUOTAS["unpaid_leave_quota"], ge=0)
    compassionate_leave_quota: int = Field(default=DEFAULT_QUOTAS["compassionate_leave_quota"], ge=0)
    is_registered: bool = False
    created_at: str = ""

    def quota_for(self, category: LeaveType) -> int:
        return getattr(self, QUOTA_FIELDS[category])
