# routers/tasks.py - Task creation, assignment queries and status updates
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from auth import require_permission, CurrentUser
from dependencies import get_task_manager
from models import Role
from schemas import TaskCreate, TaskUpdate, TaskOut, TaskPage
from services.tasks import TaskLifecycleManager

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


def _ensure_self_for_employee(user: CurrentUser, user_id: str) -> None:
    if user.role == Role.EMPLOYEE.value and user.id != user_id:
        raise HTTPException(status_code=403, detail="Employees can only access their own tasks")


@router.post("", response_model=TaskOut, status_code=201)
async def create_task(
    data: TaskCreate,
    user: CurrentUser = Depends(require_permission("tasks:create")),
    tasks: TaskLifecycleManager = Depends(get_task_manager),
):
    """Create a task and assign it to an employee"""
    return await tasks.create_task(
        title=data.title,
        description=data.description,
        creator_id=data.created_by_user_id or user.id,
        assignee_id=data.assigned_to_user_id,
        priority=data.priority,
        status=data.status,
        due_date=data.due_date,
        start_date=data.start_date,
    )


@router.get("/assigned/{user_id}", response_model=List[TaskOut])
async def tasks_for_assignee(
    user_id: str,
    user: CurrentUser = Depends(require_permission("tasks:read")),
    tasks: TaskLifecycleManager = Depends(get_task_manager),
):
    _ensure_self_for_employee(user, user_id)
    return await tasks.get_tasks_for_assignee(user_id)


@router.get("/assigned/{user_id}/paged", response_model=TaskPage)
async def tasks_for_assignee_paged(
    user_id: str,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=200),
    user: CurrentUser = Depends(require_permission("tasks:read")),
    tasks: TaskLifecycleManager = Depends(get_task_manager),
):
    _ensure_self_for_employee(user, user_id)
    return await tasks.get_tasks_for_assignee_page(user_id, page, size)


@router.get("/created/{creator_id}", response_model=List[TaskOut])
async def tasks_created_by(
    creator_id: str,
    user: CurrentUser = Depends(require_permission("tasks:read_created")),
    tasks: TaskLifecycleManager = Depends(get_task_manager),
):
    return await tasks.get_tasks_created_by(creator_id)


@router.patch("/{task_id}/status", response_model=TaskOut)
async def update_task(
    task_id: str,
    data: TaskUpdate,
    user: CurrentUser = Depends(require_permission("tasks:update")),
    tasks: TaskLifecycleManager = Depends(get_task_manager),
):
    """Change status and/or priority; omitted fields are left as they are"""
    if user.role == Role.EMPLOYEE.value:
        current = await tasks.get_task(task_id)
        _ensure_self_for_employee(user, current.assigned_to_user_id)
    return await tasks.update_task(task_id, status=data.status, priority=data.priority)


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    user: CurrentUser = Depends(require_permission("tasks:delete")),
    tasks: TaskLifecycleManager = Depends(get_task_manager),
):
    await tasks.delete_task(task_id)
    return {"status": "deleted", "task_id": task_id}
