from datetime import date
from fastapi import APIRouter, Depends, status
from typing import List, Optional

from leave_sheets.core.schemas import ApiResponse
from leave_sheets.dependencies import get_leave_service
from leave_sheets.models import LeaveRequest, LeaveStatistics, LeaveStatus
from leave_sheets.schemas.leave import LeaveRequestCreate, LeaveStatusUpdate
from leave_sheets.services.leave_service import LeaveService

router = APIRouter(
    prefix="/leaves",
    tags=["leave"]
)


@router.post("", response_model=ApiResponse[LeaveRequest], status_code=status.HTTP_201_CREATED)
async def submit_leave_request(data: LeaveRequestCreate, leaves: LeaveService = Depends(get_leave_service)):
    leave = await leaves.create(data.emp_id, data.type, data.start_date, data.end_date, data.reason)
    return ApiResponse.ok(leave, message="Leave request submitted")


@router.get("", response_model=ApiResponse[List[LeaveRequest]])
async def list_leave_requests(
    emp_id: Optional[str] = None,
    status: Optional[LeaveStatus] = None,
    leaves: LeaveService = Depends(get_leave_service),
):
    result = await leaves.list_by_emp_id(emp_id) if emp_id else await leaves.list_all()
    if status is not None:
        result = [leave for leave in result if leave.status == status]
    return ApiResponse.ok(result)


@router.get("/statistics", response_model=ApiResponse[LeaveStatistics])
async def get_statistics(leaves: LeaveService = Depends(get_leave_service)):
    return ApiResponse.ok(await leaves.get_statistics())


@router.get("/calendar", response_model=ApiResponse[List[LeaveRequest]])
async def get_leave_calendar(start: date, end: date, leaves: LeaveService = Depends(get_leave_service)):
    """Requests overlapping [start, end], for the team calendar."""
    return ApiResponse.ok(await leaves.list_by_date_range(start, end))


@router.get("/{leave_id}", response_model=ApiResponse[LeaveRequest])
async def get_leave_request(leave_id: str, leaves: LeaveService = Depends(get_leave_service)):
    return ApiResponse.ok(await leaves.get_required(leave_id))


@router.patch("/{leave_id}", response_model=ApiResponse[LeaveRequest])
async def update_leave_status(
    leave_id: str,
    data: LeaveStatusUpdate,
    leaves: LeaveService = Depends(get_leave_service),
):
    leave = await leaves.update_status(leave_id, data.status, data.approver_note)
    return ApiResponse.ok(leave, message=f"Leave request {leave.status.value}")
