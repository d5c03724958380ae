# routers/users.py - Account creation and the assignable employee pool
from typing import List

from fastapi import APIRouter, Depends

from auth import require_permission, CurrentUser
from dependencies import get_user_directory
from schemas import UserCreate, UserSummary, EmployeeOut
from services.users import UserDirectory

router = APIRouter(prefix="/api/v1", tags=["Users"])


@router.post("/users", response_model=UserSummary, status_code=201)
async def create_user(
    data: UserCreate,
    user: CurrentUser = Depends(require_permission("users:create")),
    users: UserDirectory = Depends(get_user_directory),
):
    """Register a new account (admin only)"""
    return await users.create(data.full_name, data.email, data.password, data.role)


@router.get("/employees", response_model=List[EmployeeOut])
async def list_employees(
    user: CurrentUser = Depends(require_permission("employees:read")),
    users: UserDirectory = Depends(get_user_directory),
):
    """Users that tasks can be assigned to"""
    return await users.list_employees()
