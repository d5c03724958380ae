# services/notifications.py - Per-user notification log
from typing import Optional, List

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from models import Notification, NotificationType
from schemas import NotificationOut


def to_out(n: Notification) -> NotificationOut:
    return NotificationOut(
        id=n.id,
        message=n.message,
        type=n.type,
        is_read=bool(n.is_read),
        task_id=n.task_id,
        created_at=n.created_at,
    )


class NotificationLog:
    """Append-only message log; entries only ever move from unread to read"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(self, user_id: str) -> List[NotificationOut]:
        result = await self.db.execute(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
        )
        return [to_out(n) for n in result.scalars().all()]

    async def unread_count(self, user_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )
        return result.scalar() or 0

    async def mark_all_read(self, user_id: str) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        await self.db.commit()
        return result.rowcount or 0

    async def record(
        self,
        recipient_id: str,
        message: str,
        type: NotificationType,
        related_task_id: Optional[str] = None,
    ) -> NotificationOut:
        notif = Notification(
            user_id=recipient_id,
            message=message,
            type=type,
            is_read=False,
            task_id=related_task_id,
        )
        self.db.add(notif)
        await self.db.commit()
        await self.db.refresh(notif)
        return to_out(notif)
