# tests/test_notification_service.py - Notification log read state and ordering
import pytest

from models import NotificationType


@pytest.mark.asyncio
async def test_notification_log_read_state(notifications, employee):
    first = await notifications.record(employee.id, "first", NotificationType.TASK_ASSIGNED)
    second = await notifications.record(employee.id, "second", NotificationType.TASK_ASSIGNED)

    feed = await notifications.list_for_user(employee.id)
    assert [n.id for n in feed] == [second.id, first.id]
    assert await notifications.unread_count(employee.id) == 2

    assert await notifications.mark_all_read(employee.id) == 2
    assert await notifications.unread_count(employee.id) == 0
    assert all(n.is_read for n in await notifications.list_for_user(employee.id))

    # Nothing left to flip
    assert await notifications.mark_all_read(employee.id) == 0


@pytest.mark.asyncio
async def test_mark_all_read_only_touches_own_feed(notifications, employee, other_employee):
    await notifications.record(employee.id, "mine", NotificationType.TASK_ASSIGNED)
    await notifications.record(other_employee.id, "theirs", NotificationType.TASK_ASSIGNED)

    await notifications.mark_all_read(employee.id)
    assert await notifications.unread_count(other_employee.id) == 1


@pytest.mark.asyncio
async def test_record_without_task(notifications, employee):
    note = await notifications.record(
        employee.id, "standalone", NotificationType.TASK_COMPLETED,
    )
    assert note.task_id is None
    assert note.is_read is False
    assert note.type == NotificationType.TASK_COMPLETED
