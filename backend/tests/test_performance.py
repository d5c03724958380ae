# tests/test_performance.py - Completion rate rollups
import pytest

from models import Task, User, TaskStatus
from services.performance import completion_rate, summarize


def _task(status, assignee=None):
    task = Task(title="t", status=status)
    task.assigned_to = assignee
    return task


def _user(user_id, name):
    return User(id=user_id, full_name=name, email=f"{user_id}@taskdesk.dev")


def test_completion_rate_zero_guard():
    assert completion_rate(0, 0) == 0.0
    assert completion_rate(1, 4) == 25.0


def test_summarize_empty():
    summary = summarize([])
    assert summary.total_tasks == 0
    assert summary.completion_rate_percent == 0.0
    assert summary.user_stats == []


def test_summarize_counts_and_ordering():
    alice = _user("alice", "Alice")
    bob = _user("bob", "Bob")
    tasks = [
        _task(TaskStatus.COMPLETED, alice),
        _task(TaskStatus.PENDING, alice),
        _task(TaskStatus.PENDING, alice),
        _task(TaskStatus.COMPLETED, bob),
        _task(TaskStatus.IN_PROGRESS, bob),
        _task(TaskStatus.COMPLETED, None),
    ]

    summary = summarize(tasks)

    assert summary.total_tasks == 6
    assert summary.completed_tasks == 3
    assert summary.in_progress_tasks == 1
    assert summary.pending_tasks == 2
    assert summary.completion_rate_percent == 50.0

    # Unassigned task is excluded from per-user stats
    assert [p.user_id for p in summary.user_stats] == ["bob", "alice"]
    bob_stats, alice_stats = summary.user_stats
    assert (bob_stats.total_tasks, bob_stats.completed_tasks) == (2, 1)
    assert bob_stats.completion_rate_percent == 50.0
    assert alice_stats.completion_rate_percent == pytest.approx(100.0 / 3)


def test_equal_rates_keep_first_seen_order():
    first = _user("first", "First")
    second = _user("second", "Second")
    summary = summarize([
        _task(TaskStatus.PENDING, first),
        _task(TaskStatus.PENDING, second),
    ])
    assert [p.user_id for p in summary.user_stats] == ["first", "second"]


@pytest.mark.asyncio
async def test_summary_from_database(tasks, performance, manager, employee, other_employee):
    for title in ("a", "b"):
        await tasks.create_task(title, None, creator_id=manager.id, assignee_id=employee.id)
    done = await tasks.create_task("c", None, creator_id=manager.id, assignee_id=other_employee.id)
    await tasks.update_task(done.id, status=TaskStatus.COMPLETED)

    summary = await performance.get_performance_summary()

    assert summary.total_tasks == 3
    assert summary.completed_tasks == 1
    assert summary.pending_tasks == 2
    assert summary.completion_rate_percent == pytest.approx(100.0 / 3)
    assert summary.user_stats[0].user_id == other_employee.id
    assert summary.user_stats[0].completion_rate_percent == 100.0
    assert summary.user_stats[0].email == "employee2@taskdesk.dev"
    assert summary.user_stats[1].user_id == employee.id
    assert summary.user_stats[1].completion_rate_percent == 0.0


@pytest.mark.asyncio
async def test_summary_on_empty_database(performance):
    summary = await performance.get_performance_summary()
    assert summary.total_tasks == 0
    assert summary.completion_rate_percent == 0.0
