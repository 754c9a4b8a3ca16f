from fastapi import APIRouter, Depends, status
from typing import List, Optional

from leave_sheets.core.schemas import ApiResponse
from leave_sheets.dependencies import get_settings_service
from leave_sheets.models import Holiday, PolicySettings, Setting
from leave_sheets.schemas.settings import HolidayCreate, SettingsUpdate
from leave_sheets.services.settings_service import SettingsService

router = APIRouter(
    prefix="/settings",
    tags=["settings"]
)


@router.get("", response_model=ApiResponse[PolicySettings])
async def get_policy(year: Optional[int] = None, service: SettingsService = Depends(get_settings_service)):
    return ApiResponse.ok(await service.get_policy_settings(year))


@router.post("", response_model=ApiResponse[List[Setting]])
async def update_settings(data: SettingsUpdate, service: SettingsService = Depends(get_settings_service)):
    saved = await service.update_settings(data.values, data.year)
    return ApiResponse.ok(saved, message="Settings saved")


@router.get("/holidays", response_model=ApiResponse[List[Holiday]])
async def get_holidays(year: Optional[int] = None, service: SettingsService = Depends(get_settings_service)):
    holidays = await service.get_holidays(year) if year else await service.list_holidays()
    return ApiResponse.ok(holidays)


@router.post("/holidays", response_model=ApiResponse[Holiday], status_code=status.HTTP_201_CREATED)
async def add_holiday(data: HolidayCreate, service: SettingsService = Depends(get_settings_service)):
    return ApiResponse.ok(await service.add_holiday(data.date, data.name), message="Holiday added")


@router.delete("/holidays/{holiday_date}", response_model=ApiResponse[None])
async def delete_holiday(holiday_date: str, service: SettingsService = Depends(get_settings_service)):
    await service.delete_holiday(holiday_date)
    return ApiResponse.ok(None, message="Holiday deleted")
