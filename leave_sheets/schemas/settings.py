from pydantic import BaseModel
from typing import Any, Dict, Optional


class SettingsUpdate(BaseModel):
    """Keys as stored in the Settings sheet, e.g. {"annualLeaveMax": 12}."""
    values: Dict[str, Any]
    year: Optional[int] = None


class HolidayCreate(BaseModel):
    date: str
    name: str
