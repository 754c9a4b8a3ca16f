import logging
from typing import Optional

from leave_sheets.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from leave_sheets.core.security import get_password_hash, needs_rehash, verify_password
from leave_sheets.models import User
from leave_sheets.services.base import BaseService
from leave_sheets.services.sheets_client import TabularStore
from leave_sheets.services.user_service import UserService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 4


class AuthService(BaseService):
    def __init__(self, store: TabularStore, users: Optional[UserService] = None):
        super().__init__(store)
        self.users = users or UserService(store)

    async def login(self, emp_id: str, password: str) -> User:
        if not emp_id or not password:
            raise ValidationError("Employee ID and password are required")

        user = await self.users.get_by_emp_id(emp_id)
        if user is None:
            raise NotFoundError("User", emp_id)
        if not user.is_registered:
            raise AuthenticationError("Please register before logging in")
        if not verify_password(password, user.password):
            logger.warning(f"Failed login for {emp_id}")
            raise AuthenticationError("Incorrect password")

        # Legacy plaintext (or an outdated hash) is replaced on the first good login
        if needs_rehash(user.password):
            user = await self.users.update(emp_id, {"password": get_password_hash(password)})
            logger.info(f"Upgraded stored password for {emp_id}")
        return user

    async def register(self, emp_id: str, password: str, confirm_password: str) -> User:
        """First login for an employee the admin has already added."""
        if not emp_id or not password or not confirm_password:
            raise ValidationError("All fields are required")
        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        user = await self.users.register(emp_id, password)
        logger.info(f"User {emp_id} registered")
        return user

    async def verify_session(self, emp_id: str) -> Optional[User]:
        """The user behind a client-held session, or None if it is no longer valid."""
        if not emp_id:
            return None
        user = await self.users.get_by_emp_id(emp_id)
        if user is None or not user.is_registered:
            return None
        return user
