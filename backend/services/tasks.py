# services/tasks.py - Task lifecycle: creation, assignment, status changes
import logging
from datetime import date
from typing import Optional, List

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import NotFoundError, ValidationError
from models import Task, User, Role, TaskStatus, TaskPriority, NotificationType
from schemas import TaskOut, TaskPage
from services.notifications import NotificationLog
from services.users import UserDirectory

logger = logging.getLogger("taskdesk.tasks")

CREATOR_ROLES = (Role.MANAGER, Role.ADMIN, Role.TEAM_LEAD)


def to_out(task: Task) -> TaskOut:
    return TaskOut(
        id=task.id,
        title=task.title,
        description=task.description,
        priority=task.priority,
        status=task.status,
        start_date=task.start_date,
        due_date=task.due_date,
        created_by_user_id=task.created_by_id,
        assigned_to_user_id=task.assigned_to_id,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


class TaskLifecycleManager:
    """Creates, updates and deletes tasks and emits the matching notifications.

    Notifications are recorded after the task change is committed. A failure
    while recording is logged and rolled back; it never undoes the task change.
    """

    def __init__(self, db: AsyncSession, users: UserDirectory, notifications: NotificationLog):
        self.db = db
        self.users = users
        self.notifications = notifications

    async def _resolve(self, user_id: str) -> User:
        try:
            return await self.users.get_by_id_or_throw(user_id)
        except NotFoundError as e:
            raise ValidationError(e.message)

    async def _notify(self, recipient_id: str, message: str, type: NotificationType, task_id: str) -> None:
        try:
            await self.notifications.record(recipient_id, message, type, related_task_id=task_id)
        except SQLAlchemyError:
            logger.exception(f"Failed to record {type.value} notification for task {task_id}")
            await self.db.rollback()

    async def _get_or_throw(self, task_id: str) -> Task:
        result = await self.db.execute(select(Task).where(Task.id == task_id))
        task = result.scalar_one_or_none()
        if not task:
            raise NotFoundError(f"Task not found: {task_id}")
        return task

    async def create_task(
        self,
        title: str,
        description: Optional[str],
        creator_id: str,
        assignee_id: str,
        priority: Optional[TaskPriority] = None,
        status: Optional[TaskStatus] = None,
        due_date: Optional[date] = None,
        start_date: Optional[date] = None,
    ) -> TaskOut:
        creator = await self._resolve(creator_id)
        if creator.role not in CREATOR_ROLES:
            raise ValidationError("createdBy must be a MANAGER, ADMIN, or TEAM_LEAD")

        assignee = await self._resolve(assignee_id)
        if assignee.role != Role.EMPLOYEE:
            raise ValidationError("assignedTo must be an EMPLOYEE")

        task = Task(
            title=title,
            description=description,
            priority=priority or TaskPriority.MEDIUM,
            status=status or TaskStatus.PENDING,
            start_date=start_date,
            due_date=due_date,
            created_by_id=creator.id,
            assigned_to_id=assignee.id,
        )
        self.db.add(task)
        await self.db.commit()
        await self.db.refresh(task)
        out = to_out(task)
        logger.info(f"Task {task.id} created by {creator.id} for {assignee.id}")

        await self._notify(
            assignee.id,
            f"{creator.full_name} assigned you a task: {title}",
            NotificationType.TASK_ASSIGNED,
            task.id,
        )
        return out

    async def get_task(self, task_id: str) -> TaskOut:
        return to_out(await self._get_or_throw(task_id))

    async def update_task(
        self,
        task_id: str,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
    ) -> TaskOut:
        task = await self._get_or_throw(task_id)

        completing = task.status != TaskStatus.COMPLETED and status == TaskStatus.COMPLETED

        if status is not None:
            task.status = status
        if priority is not None:
            task.priority = priority

        await self.db.commit()
        await self.db.refresh(task)
        out = to_out(task)

        if completing:
            logger.info(f"Task {task.id} completed")
            # Self-completion is not announced
            if task.created_by_id != task.assigned_to_id:
                assignee = await self.users.get_by_id_or_throw(task.assigned_to_id)
                await self._notify(
                    task.created_by_id,
                    f"{assignee.full_name} completed the task: {task.title}",
                    NotificationType.TASK_COMPLETED,
                    task.id,
                )
        return out

    async def delete_task(self, task_id: str) -> None:
        task = await self._get_or_throw(task_id)
        await self.db.delete(task)
        await self.db.commit()
        logger.info(f"Task {task_id} deleted")

    async def get_tasks_for_assignee(self, user_id: str) -> List[TaskOut]:
        result = await self.db.execute(
            select(Task)
            .where(Task.assigned_to_id == user_id)
            .order_by(Task.created_at.desc())
        )
        return [to_out(t) for t in result.scalars().all()]

    async def get_tasks_for_assignee_page(self, user_id: str, page: int, size: int) -> TaskPage:
        """Offset-paged variant; page numbers start at 0"""
        total = (await self.db.execute(
            select(func.count(Task.id)).where(Task.assigned_to_id == user_id)
        )).scalar() or 0

        result = await self.db.execute(
            select(Task)
            .where(Task.assigned_to_id == user_id)
            .order_by(Task.created_at.desc())
            .offset(page * size)
            .limit(size)
        )
        return TaskPage(
            items=[to_out(t) for t in result.scalars().all()],
            total=total,
            page=page,
            size=size,
        )

    async def get_tasks_created_by(self, creator_id: str) -> List[TaskOut]:
        result = await self.db.execute(
            select(Task)
            .where(Task.created_by_id == creator_id)
            .order_by(Task.created_at.desc())
        )
        return [to_out(t) for t in result.scalars().all()]

    async def get_all_tasks(self) -> List[TaskOut]:
        result = await self.db.execute(select(Task).order_by(Task.created_at.desc()))
        return [to_out(t) for t in result.scalars().all()]
