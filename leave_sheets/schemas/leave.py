from pydantic import BaseModel
from datetime import date
from typing import Optional

from leave_sheets.models import LeaveStatus, LeaveType


class LeaveRequestCreate(BaseModel):
    emp_id: str
    type: LeaveType
    start_date: date
    end_date: date
    reason: str


class LeaveStatusUpdate(BaseModel):
    status: LeaveStatus
    approver_note: Optional[str] = None
