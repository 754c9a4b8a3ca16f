from fastapi import APIRouter, Depends
import logging

from leave_sheets.core.schemas import ApiResponse
from leave_sheets.dependencies import get_auth_service
from leave_sheets.schemas.auth import LoginRequest, RegisterRequest
from leave_sheets.schemas.user import UserResponse
from leave_sheets.services.auth import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)


@router.post("/login", response_model=ApiResponse[UserResponse])
async def login(data: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    user = await auth.login(data.emp_id, data.password)
    return ApiResponse.ok(UserResponse.from_user(user), message="Login successful")


@router.post("/register", response_model=ApiResponse[UserResponse])
async def register(data: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    user = await auth.register(data.emp_id, data.password, data.confirm_password)
    return ApiResponse.ok(UserResponse.from_user(user), message="Registration successful")


@router.get("/session/{emp_id}", response_model=ApiResponse[UserResponse])
async def verify_session(emp_id: str, auth: AuthService = Depends(get_auth_service)):
    user = await auth.verify_session(emp_id)
    if user is None:
        return ApiResponse.fail("Session is no longer valid", code="SESSION_INVALID")
    return ApiResponse.ok(UserResponse.from_user(user))
