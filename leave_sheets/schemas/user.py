from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional

from leave_sheets.models import QUOTA_FIELDS, User, UserRole


class UserBase(BaseModel):
    name: str
    role: UserRole = UserRole.EMPLOYEE


class QuotaFields(BaseModel):
    leave_quota: Optional[int] = Field(default=None, ge=0)
    sick_leave_quota: Optional[int] = Field(default=None, ge=0)
    personal_leave_quota: Optional[int] = Field(default=None, ge=0)
    maternity_leave_quota: Optional[int] = Field(default=None, ge=0)
    sterilization_leave_quota: Optional[int] = Field(default=None, ge=0)
    unpaid_leave_quota: Optional[int] = Field(default=None, ge=0)
    compassionate_leave_quota: Optional[int] = Field(default=None, ge=0)

    def quotas(self) -> Dict[str, int]:
        return {
            field: getattr(self, field)
            for field in QUOTA_FIELDS.values()
            if getattr(self, field) is not None
        }


class UserCreate(UserBase, QuotaFields):
    emp_id: str


class UserUpdate(QuotaFields):
    name: Optional[str] = None
    role: Optional[UserRole] = None


class UserResponse(UserBase):
    """Public profile: everything but the password."""
    model_config = ConfigDict(from_attributes=True)

    emp_id: str
    leave_quota: int
    sick_leave_quota: int
    personal_leave_quota: int
    maternity_leave_quota: int
    sterilization_leave_quota: int
    unpaid_leave_quota: int
    compassionate_leave_quota: int
    is_registered: bool
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls.model_validate(user.model_dump(exclude={"password"}))
