from fastapi import APIRouter, Depends, status
from typing import List

from leave_sheets.core.schemas import ApiResponse
from leave_sheets.dependencies import get_user_service
from leave_sheets.schemas.user import UserCreate, UserResponse, UserUpdate
from leave_sheets.services.user_service import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"]
)


@router.get("", response_model=ApiResponse[List[UserResponse]])
async def list_users(users: UserService = Depends(get_user_service)):
    return ApiResponse.ok([UserResponse.from_user(u) for u in await users.list_all()])


@router.post("", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate, users: UserService = Depends(get_user_service)):
    user = await users.create(data.emp_id, data.name, role=data.role, quotas=data.quotas())
    return ApiResponse.ok(UserResponse.from_user(user), message="User created")


@router.get("/{emp_id}", response_model=ApiResponse[UserResponse])
async def get_user(emp_id: str, users: UserService = Depends(get_user_service)):
    return ApiResponse.ok(UserResponse.from_user(await users.get_required(emp_id)))


@router.patch("/{emp_id}", response_model=ApiResponse[UserResponse])
async def update_user(emp_id: str, data: UserUpdate, users: UserService = Depends(get_user_service)):
    user = await users.update(emp_id, data.model_dump(exclude_none=True))
    return ApiResponse.ok(UserResponse.from_user(user), message="User updated")


@router.delete("/{emp_id}", response_model=ApiResponse[None])
async def delete_user(emp_id: str, users: UserService = Depends(get_user_service)):
    await users.delete(emp_id)
    return ApiResponse.ok(None, message="User deleted")
