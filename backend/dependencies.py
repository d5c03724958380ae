# dependencies.py - Per-request service composition (FastAPI Depends)
# Every service built for one request shares that request's session.
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import AuthService
from database import get_db_session
from services.notifications import NotificationLog
from services.performance import PerformanceAggregator
from services.tasks import TaskLifecycleManager
from services.teams import TeamRegistry
from services.users import UserDirectory


def get_user_directory(db: AsyncSession = Depends(get_db_session)) -> UserDirectory:
    return UserDirectory(db, AuthService.hash_password)


def get_notification_log(db: AsyncSession = Depends(get_db_session)) -> NotificationLog:
    return NotificationLog(db)


def get_task_manager(
    db: AsyncSession = Depends(get_db_session),
    users: UserDirectory = Depends(get_user_directory),
    notifications: NotificationLog = Depends(get_notification_log),
) -> TaskLifecycleManager:
    return TaskLifecycleManager(db, users, notifications)


def get_team_registry(
    db: AsyncSession = Depends(get_db_session),
    users: UserDirectory = Depends(get_user_directory),
) -> TeamRegistry:
    return TeamRegistry(db, users)


def get_performance_aggregator(db: AsyncSession = Depends(get_db_session)) -> PerformanceAggregator:
    return PerformanceAggregator(db)
