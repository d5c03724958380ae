# routers/notifications.py - The caller's own notification feed
from typing import List

from fastapi import APIRouter, Depends

from auth import require_permission, CurrentUser
from dependencies import get_notification_log
from schemas import NotificationOut
from services.notifications import NotificationLog

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationOut])
async def list_notifications(
    user: CurrentUser = Depends(require_permission("notifications:read")),
    notifications: NotificationLog = Depends(get_notification_log),
):
    """All notifications for the caller, newest first"""
    return await notifications.list_for_user(user.id)


@router.get("/unread-count")
async def unread_count(
    user: CurrentUser = Depends(require_permission("notifications:read")),
    notifications: NotificationLog = Depends(get_notification_log),
):
    return {"count": await notifications.unread_count(user.id)}


@router.post("/mark-read")
async def mark_all_read(
    user: CurrentUser = Depends(require_permission("notifications:read")),
    notifications: NotificationLog = Depends(get_notification_log),
):
    return {"marked": await notifications.mark_all_read(user.id)}
