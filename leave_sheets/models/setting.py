from pydantic import BaseModel

from leave_sheets.core.constants import DEFAULT_POLICY


class Setting(BaseModel):
    key: str
    value: str = ""
    year: int


class Holiday(BaseModel):
    date: str  # YYYY-MM-DD
    name: str = ""

    @property
    def year(self) -> int:
        try:
            return int(self.date[:4])
        except ValueError:
            return 0


class PolicySettings(BaseModel):
    annual_leave_max: int = DEFAULT_POLICY["annualLeaveMax"]
    sick_leave_max: int = DEFAULT_POLICY["sickLeaveMax"]
    personal_leave_max: int = DEFAULT_POLICY["personalLeaveMax"]
    maternity_leave_max: int = DEFAULT_POLICY["maternityLeaveMax"]
    sterilization_leave_max: int = DEFAULT_POLICY["sterilizationLeaveMax"]
    unpaid_leave_max: int = DEFAULT_POLICY["unpaidLeaveMax"]
    compassionate_leave_max: int = DEFAULT_POLICY["compassionateLeaveMax"]
    min_advance_notice_days: int = DEFAULT_POLICY["minAdvanceNoticeDays"]
    carry_over_enabled: bool = DEFAULT_POLICY["carryOverEnabled"]
    carry_over_max_days: int = DEFAULT_POLICY["carryOverMaxDays"]


# Settings-sheet key -> PolicySettings attribute
POLICY_FIELDS = {
    "annualLeaveMax": "annual_leave_max",
    "sickLeaveMax": "sick_leave_max",
    "personalLeaveMax": "personal_leave_max",
    "maternityLeaveMax": "maternity_leave_max",
    "sterilizationLeaveMax": "sterilization_leave_max",
    "unpaidLeaveMax": "unpaid_leave_max",
    "compassionateLeaveMax": "compassionate_leave_max",
    "minAdvanceNoticeDays": "min_advance_notice_days",
    "carryOverEnabled": "carry_over_enabled",
    "carryOverMaxDays": "carry_over_max_days",
}
