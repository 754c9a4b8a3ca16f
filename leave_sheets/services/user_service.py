"""
User Service Layer

CRUD over the Users sheet. Records are addressed by their sheet row: a
record found at sheet row n is rewritten in place with the range A{n}:M{n}.
Deletion has no native counterpart in the backend, so it rewrites the table.
"""
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from leave_sheets.core.constants import ADMIN_EMP_ID, DEFAULT_QUOTAS, USER_HEADERS, SheetNames
from leave_sheets.core.exceptions import ConflictError, NotFoundError, ValidationError
from leave_sheets.core.security import get_password_hash
from leave_sheets.models import QUOTA_FIELDS, LeaveType, User, UserRole
from leave_sheets.services.a1 import row_range
from leave_sheets.services.base import BaseService
from leave_sheets.services.row_codec import USER_WIDTH, data_rows, row_to_user, user_to_row, utc_now_iso

UPDATABLE_FIELDS = {
    "name",
    "password",
    "role",
    "is_registered",
    *QUOTA_FIELDS.values(),
}


class UserService(BaseService):

    async def _snapshot(self) -> Tuple[int, List[Tuple[int, User]]]:
        """(raw row count, [(sheet row, user)]) for the whole Users sheet."""
        rows = await self.store.read_range(SheetNames.USERS)
        return len(rows), [(number, row_to_user(row)) for number, row in data_rows(rows)]

    async def _locate(self, emp_id: str) -> Tuple[int, User]:
        _, records = await self._snapshot()
        for number, user in records:
            if user.emp_id == emp_id:
                return number, user
        raise NotFoundError("User", emp_id)

    async def list_all(self) -> List[User]:
        _, records = await self._snapshot()
        return [user for _, user in records]

    async def get_by_emp_id(self, emp_id: str) -> Optional[User]:
        for user in await self.list_all():
            if user.emp_id == emp_id:
                return user
        return None

    async def get_required(self, emp_id: str) -> User:
        user = await self.get_by_emp_id(emp_id)
        if user is None:
            raise NotFoundError("User", emp_id)
        return user

    async def exists(self, emp_id: str) -> bool:
        return await self.get_by_emp_id(emp_id) is not None

    async def create(
        self,
        emp_id: str,
        name: str,
        role: UserRole = UserRole.EMPLOYEE,
        quotas: Optional[Dict[str, int]] = None,
    ) -> User:
        """
        Add an employee record. The password stays empty until the employee
        registers. Missing quotas take the company defaults.
        """
        emp_id = (emp_id or "").strip()
        if not emp_id or not (name or "").strip():
            raise ValidationError("Employee ID and name are required")

        quotas = {k: v for k, v in (quotas or {}).items() if v is not None}
        unknown = set(quotas) - set(QUOTA_FIELDS.values())
        if unknown:
            raise ValidationError(f"Unknown quota fields: {', '.join(sorted(unknown))}")

        if await self.exists(emp_id):
            raise ConflictError(f"User with empId {emp_id} already exists", details={"emp_id": emp_id})

        try:
            user = User(
                emp_id=emp_id,
                name=name.strip(),
                password="",
                role=role,
                **{**DEFAULT_QUOTAS, **quotas},
                is_registered=False,
                created_at=utc_now_iso(),
            )
        except PydanticValidationError as exc:
            raise ValidationError("Invalid user data", details={"errors": exc.errors()}) from exc

        await self.store.append_rows(SheetNames.USERS, [user_to_row(user)])
        self.log_info(f"Created user {emp_id}")
        return user

    async def update(self, emp_id: str, updates: Dict[str, Any]) -> User:
        """Merge the given fields onto the stored record and rewrite its row."""
        if "emp_id" in updates and updates["emp_id"] != emp_id:
            raise ValidationError("Employee ID cannot be changed")
        updates = {k: v for k, v in updates.items() if k != "emp_id"}
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        number, user = await self._locate(emp_id)
        try:
            updated = User.model_validate({**user.model_dump(), **updates})
        except PydanticValidationError as exc:
            raise ValidationError("Invalid user data", details={"errors": exc.errors()}) from exc

        await self.store.write_range(SheetNames.USERS, row_range(number, USER_WIDTH), [user_to_row(updated)])
        return updated

    async def delete(self, emp_id: str) -> None:
        if emp_id == ADMIN_EMP_ID:
            raise ValidationError("The default administrator cannot be deleted", details={"emp_id": emp_id})

        row_count, records = await self._snapshot()
        if not any(user.emp_id == emp_id for _, user in records):
            raise NotFoundError("User", emp_id)

        remaining = [user_to_row(user) for _, user in records if user.emp_id != emp_id]
        await self.store.replace_table(SheetNames.USERS, USER_HEADERS, remaining, expected_row_count=row_count)
        self.log_info(f"Deleted user {emp_id}")

    # --- quotas ---

    async def get_quota(self, emp_id: str, category: LeaveType) -> int:
        user = await self.get_required(emp_id)
        return user.quota_for(LeaveType(category))

    async def set_quota(self, emp_id: str, category: LeaveType, amount: int) -> User:
        if amount < 0:
            raise ValidationError("Quota cannot be negative", details={"amount": amount})
        return await self.update(emp_id, {QUOTA_FIELDS[LeaveType(category)]: amount})

    async def deduct_quota(self, emp_id: str, category: LeaveType, days: int) -> User:
        """Subtract days from a quota; the result never goes below zero."""
        if days < 0:
            raise ValidationError("Days to deduct cannot be negative", details={"days": days})
        category = LeaveType(category)
        user = await self.get_required(emp_id)
        remaining = max(0, user.quota_for(category) - days)
        return await self.update(emp_id, {QUOTA_FIELDS[category]: remaining})

    # --- credentials ---

    async def register(self, emp_id: str, password: str) -> User:
        """First-time password setup for an employee created by an admin."""
        user = await self.get_required(emp_id)
        if user.is_registered:
            raise ConflictError("User already registered", details={"emp_id": emp_id})
        return await self.update(emp_id, {
            "password": get_password_hash(password),
            "is_registered": True,
        })

    async def reset_password(self, emp_id: str, new_password: str) -> User:
        return await self.update(emp_id, {"password": get_password_hash(new_password)})
