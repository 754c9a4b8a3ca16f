import enum
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


class LeaveType(str, enum.Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    STERILIZATION = "sterilization"
    UNPAID = "unpaid"
    COMPASSIONATE = "compassionate"


class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveRequest(BaseModel):
    id: str
    emp_id: str = ""
    type: LeaveType = LeaveType.ANNUAL
    # None only when a sheet cell could not be parsed as a date
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_days: int = Field(default=0, ge=0)
    reason: str = ""
    status: LeaveStatus = LeaveStatus.PENDING
    approver_note: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    def overlaps(self, range_start: date, range_end: date) -> bool:
        if self.start_date is None or self.end_date is None:
            return False
        return (
            (range_start <= self.start_date <= range_end)
            or (range_start <= self.end_date <= range_end)
            or (self.start_date <= range_start and self.end_date >= range_end)
        )


class LeaveStatistics(BaseModel):
    total_requests: int = 0
    pending_requests: int = 0
    approved_requests: int = 0
    rejected_requests: int = 0
    approval_rate: int = 0
