# services/performance.py - Completion statistics across the whole task set
from dataclasses import dataclass
from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models import Task, TaskStatus
from schemas import PerformanceSummary, UserPerformance


def completion_rate(completed: int, total: int) -> float:
    """Percentage of completed tasks, 0.0 for an empty scope"""
    if total == 0:
        return 0.0
    return completed * 100.0 / total


@dataclass
class _Counter:
    user_id: str
    full_name: str
    email: str
    total: int = 0
    completed: int = 0


def summarize(tasks: Iterable[Task]) -> PerformanceSummary:
    total = completed = in_progress = pending = 0
    counters: Dict[str, _Counter] = {}

    for task in tasks:
        total += 1
        if task.status == TaskStatus.COMPLETED:
            completed += 1
        elif task.status == TaskStatus.IN_PROGRESS:
            in_progress += 1
        elif task.status == TaskStatus.PENDING:
            pending += 1

        assignee = task.assigned_to
        if assignee is None or assignee.id is None:
            continue
        counter = counters.get(assignee.id)
        if counter is None:
            counter = counters[assignee.id] = _Counter(assignee.id, assignee.full_name, assignee.email)
        counter.total += 1
        if task.status == TaskStatus.COMPLETED:
            counter.completed += 1

    # sorted() is stable: equal rates keep first-seen order
    user_stats = sorted(
        (
            UserPerformance(
                user_id=c.user_id,
                full_name=c.full_name,
                email=c.email,
                total_tasks=c.total,
                completed_tasks=c.completed,
                completion_rate_percent=completion_rate(c.completed, c.total),
            )
            for c in counters.values()
        ),
        key=lambda p: p.completion_rate_percent,
        reverse=True,
    )

    return PerformanceSummary(
        total_tasks=total,
        completed_tasks=completed,
        in_progress_tasks=in_progress,
        pending_tasks=pending,
        completion_rate_percent=completion_rate(completed, total),
        user_stats=user_stats,
    )


class PerformanceAggregator:
    """Read-only rollup over every task"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_performance_summary(self) -> PerformanceSummary:
        result = await self.db.execute(
            select(Task)
            .options(selectinload(Task.assigned_to))
            .order_by(Task.created_at)
        )
        return summarize(result.scalars().all())
