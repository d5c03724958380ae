# routers/admin.py - Unfiltered administrative views
from typing import List

from fastapi import APIRouter, Depends

from auth import require_permission, CurrentUser
from dependencies import (
    get_task_manager, get_user_directory, get_team_registry, get_performance_aggregator,
)
from schemas import TaskOut, UserSummary, TeamOut, PerformanceSummary
from services.performance import PerformanceAggregator
from services.tasks import TaskLifecycleManager
from services.teams import TeamRegistry
from services.users import UserDirectory

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])


@router.get("/tasks", response_model=List[TaskOut])
async def list_all_tasks(
    user: CurrentUser = Depends(require_permission("admin:read")),
    tasks: TaskLifecycleManager = Depends(get_task_manager),
):
    return await tasks.get_all_tasks()


@router.get("/users", response_model=List[UserSummary])
async def list_all_users(
    user: CurrentUser = Depends(require_permission("admin:read")),
    users: UserDirectory = Depends(get_user_directory),
):
    return await users.list_all()


@router.get("/performance", response_model=PerformanceSummary)
async def performance_summary(
    user: CurrentUser = Depends(require_permission("admin:read")),
    performance: PerformanceAggregator = Depends(get_performance_aggregator),
):
    """Completion rates overall and per assignee, best first"""
    return await performance.get_performance_summary()


@router.get("/teams", response_model=List[TeamOut])
async def list_all_teams(
    user: CurrentUser = Depends(require_permission("admin:read")),
    teams: TeamRegistry = Depends(get_team_registry),
):
    return await teams.get_all_teams()
