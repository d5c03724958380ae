# schemas.py - Request bodies and immutable response projections
# Projections are built from ORM rows by the service layer and never carry
# the password hash.
from datetime import date, datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from models import Role, TaskStatus, TaskPriority, NotificationType

MIN_PASSWORD_LENGTH = 8


class Projection(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


# ============================================================
# USERS
# ============================================================

class UserCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str
    role: Role

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


class UserSummary(Projection):
    id: str
    full_name: str
    email: str
    role: Role
    active: bool


class EmployeeOut(Projection):
    id: str
    full_name: str
    email: str
    role: Role


# ============================================================
# TASKS
# ============================================================

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    # Defaults to the authenticated caller
    created_by_user_id: Optional[str] = None
    assigned_to_user_id: str


class TaskUpdate(BaseModel):
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None


class TaskOut(Projection):
    id: str
    title: str
    description: Optional[str] = None
    priority: TaskPriority
    status: TaskStatus
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    created_by_user_id: str
    assigned_to_user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TaskPage(Projection):
    items: List[TaskOut]
    total: int
    page: int
    size: int


# ============================================================
# PERFORMANCE
# ============================================================

class UserPerformance(Projection):
    user_id: str
    full_name: str
    email: str
    total_tasks: int
    completed_tasks: int
    completion_rate_percent: float


class PerformanceSummary(Projection):
    total_tasks: int
    completed_tasks: int
    in_progress_tasks: int
    pending_tasks: int
    completion_rate_percent: float
    user_stats: List[UserPerformance]


# ============================================================
# TEAMS
# ============================================================

class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class TeamMemberAdd(BaseModel):
    user_id: str


class TeamOut(Projection):
    id: str
    name: str
    lead_id: str
    lead_name: str
    lead_email: str
    created_at: Optional[datetime] = None


class TeamMemberOut(Projection):
    id: str
    full_name: str
    email: str


# ============================================================
# NOTIFICATIONS
# ============================================================

class NotificationOut(Projection):
    id: str
    message: str
    type: NotificationType
    is_read: bool
    task_id: Optional[str] = None
    created_at: Optional[datetime] = None
