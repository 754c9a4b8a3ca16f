"""
Leave Service Layer

Leave requests live in the Leaves sheet, one row per request, addressed by a
random UUID. Status changes rewrite the request's row (A{n}:K{n}) in place.
"""
import calendar
import uuid
from datetime import date
from typing import List, Optional, Tuple, Union

from leave_sheets.core.constants import SheetNames
from leave_sheets.core.exceptions import NotFoundError, ValidationError
from leave_sheets.models import LeaveRequest, LeaveStatistics, LeaveStatus, LeaveType
from leave_sheets.services.a1 import row_range
from leave_sheets.services.base import BaseService
from leave_sheets.services.business_days import calculate_business_days, years_in_range
from leave_sheets.services.row_codec import LEAVE_WIDTH, data_rows, leave_to_row, row_to_leave, utc_now_iso
from leave_sheets.services.settings_service import SettingsService

DECISIONS = (LeaveStatus.APPROVED, LeaveStatus.REJECTED)


def _parse_date(value: Union[date, str], field: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a date in YYYY-MM-DD format", details={field: value})


class LeaveService(BaseService):
    def __init__(self, store, settings_service: Optional[SettingsService] = None):
        super().__init__(store)
        self.settings_service = settings_service or SettingsService(store)

    async def _snapshot(self) -> List[Tuple[int, LeaveRequest]]:
        rows = await self.store.read_range(SheetNames.LEAVES)
        return [(number, row_to_leave(row)) for number, row in data_rows(rows)]

    async def list_all(self) -> List[LeaveRequest]:
        return [leave for _, leave in await self._snapshot()]

    async def list_by_emp_id(self, emp_id: str) -> List[LeaveRequest]:
        return [leave for leave in await self.list_all() if leave.emp_id == emp_id]

    async def get_by_id(self, leave_id: str) -> Optional[LeaveRequest]:
        for leave in await self.list_all():
            if leave.id == leave_id:
                return leave
        return None

    async def get_required(self, leave_id: str) -> LeaveRequest:
        leave = await self.get_by_id(leave_id)
        if leave is None:
            raise NotFoundError("Leave request", leave_id)
        return leave

    async def _holiday_dates(self, start: date, end: date) -> List[str]:
        """Holidays of every calendar year the range touches."""
        years = set(years_in_range(start, end))
        return [h.date for h in await self.settings_service.list_holidays() if h.year in years]

    async def create(
        self,
        emp_id: str,
        leave_type: LeaveType,
        start_date: Union[date, str],
        end_date: Union[date, str],
        reason: str,
    ) -> LeaveRequest:
        """
        File a new request. The day count excludes weekends and the
        configured public holidays; the request starts out pending.
        """
        if not (emp_id or "").strip():
            raise ValidationError("Employee ID is required")
        if not (reason or "").strip():
            raise ValidationError("Reason is required")
        try:
            leave_type = LeaveType(leave_type)
        except ValueError:
            raise ValidationError(f"Unknown leave type: {leave_type}", details={"type": leave_type})

        start = _parse_date(start_date, "start_date")
        end = _parse_date(end_date, "end_date")
        if end < start:
            raise ValidationError(
                "End date cannot be before start date",
                details={"start_date": start.isoformat(), "end_date": end.isoformat()},
            )

        holidays = await self._holiday_dates(start, end)
        now = utc_now_iso()
        leave = LeaveRequest(
            id=str(uuid.uuid4()),
            emp_id=emp_id.strip(),
            type=leave_type,
            start_date=start,
            end_date=end,
            total_days=calculate_business_days(start, end, holidays),
            reason=reason.strip(),
            status=LeaveStatus.PENDING,
            approver_note=None,
            created_at=now,
            updated_at=now,
        )
        await self.store.append_rows(SheetNames.LEAVES, [leave_to_row(leave)])
        self.log_info(f"Leave request {leave.id} created for {leave.emp_id} ({leave.total_days} days)")
        return leave

    async def update_status(
        self,
        leave_id: str,
        status: Union[LeaveStatus, str],
        approver_note: Optional[str] = None,
    ) -> LeaveRequest:
        """
        Record an approval decision. Any current status can be overwritten,
        including an earlier decision.
        """
        try:
            status = LeaveStatus(status)
        except ValueError:
            raise ValidationError(f"Invalid status: {status}", details={"status": status})
        if status not in DECISIONS:
            raise ValidationError("Status must be approved or rejected", details={"status": status.value})

        note = (approver_note or "").strip() or None
        if status == LeaveStatus.REJECTED and note is None:
            raise ValidationError("A note is required when rejecting a leave request")

        for number, leave in await self._snapshot():
            if leave.id == leave_id:
                break
        else:
            raise NotFoundError("Leave request", leave_id)

        if leave.status != LeaveStatus.PENDING:
            self.log_warning(f"Leave request {leave_id} already {leave.status.value}, overwriting with {status.value}")

        updated = leave.model_copy(update={
            "status": status,
            "approver_note": note,
            "updated_at": utc_now_iso(),
        })
        await self.store.write_range(SheetNames.LEAVES, row_range(number, LEAVE_WIDTH), [leave_to_row(updated)])
        return updated

    async def get_statistics(self) -> LeaveStatistics:
        leaves = await self.list_all()
        total = len(leaves)
        pending = sum(1 for leave in leaves if leave.status == LeaveStatus.PENDING)
        approved = sum(1 for leave in leaves if leave.status == LeaveStatus.APPROVED)
        rejected = sum(1 for leave in leaves if leave.status == LeaveStatus.REJECTED)
        # half rounds up (round() would round half to even)
        rate = int(approved * 100 / total + 0.5) if total else 0
        return LeaveStatistics(
            total_requests=total,
            pending_requests=pending,
            approved_requests=approved,
            rejected_requests=rejected,
            approval_rate=rate,
        )

    async def list_by_date_range(self, start: Union[date, str], end: Union[date, str]) -> List[LeaveRequest]:
        range_start = _parse_date(start, "start")
        range_end = _parse_date(end, "end")
        return [leave for leave in await self.list_all() if leave.overlaps(range_start, range_end)]

    async def list_pending(self) -> List[LeaveRequest]:
        return [leave for leave in await self.list_all() if leave.status == LeaveStatus.PENDING]

    async def list_approved_in_month(self, year: int, month: int) -> List[LeaveRequest]:
        """Approved requests overlapping the given calendar month."""
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12", details={"month": month})
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])
        return [
            leave for leave in await self.list_all()
            if leave.status == LeaveStatus.APPROVED and leave.overlaps(first, last)
        ]
