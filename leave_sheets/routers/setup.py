from fastapi import APIRouter, Depends
from typing import Optional
import logging

from leave_sheets.core.schemas import ApiResponse
from leave_sheets.dependencies import get_setup_service
from leave_sheets.services.sheets_setup import MigrationResult, SheetsSetupService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/status")
async def get_setup_status(setup: SheetsSetupService = Depends(get_setup_service)):
    """Check whether all four sheets exist."""
    return {"initialized": await setup.check_sheets_initialized()}


@router.post("/initialize")
async def initialize_sheets(setup: SheetsSetupService = Depends(get_setup_service)):
    """Create missing sheets with headers and seed rows. Existing sheets are untouched."""
    created = await setup.initialize_sheets()
    return ApiResponse.ok({"created": created}, message="Sheets initialized").to_dict()


@router.post("/migrate", response_model=ApiResponse[MigrationResult])
async def migrate_sheets(year: Optional[int] = None, setup: SheetsSetupService = Depends(get_setup_service)):
    result = await setup.run_migration(year)
    logger.info(f"Migration finished: {result.model_dump()}")
    return ApiResponse.ok(result)
