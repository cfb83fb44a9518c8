# src/plant_care/care/overdue.py

from __future__ import annotations

"""
Read-time overdue evaluation.

Overdue is never stored: a task becomes overdue purely by the passage of time,
so it is recomputed against an explicit `now_ts` on every read.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from .care_models import DAY_SECONDS, CareTask

UPCOMING_DAYS = 7
UPCOMING_LIMIT = 5


def is_overdue(task: CareTask, now_ts: float) -> bool:
    return not task.is_completed and task.scheduled_at < now_ts


def evaluate_tasks(tasks: Iterable[CareTask], now_ts: float) -> list[CareTask]:
    """Copies of `tasks` with `is_overdue` recomputed for `now_ts`."""
    return [replace(t, is_overdue=is_overdue(t, now_ts)) for t in tasks]


@dataclass(slots=True)
class TaskBuckets:
    """Task lists as the schedule view shows them."""

    pending: list[CareTask] = field(default_factory=list)
    due_this_week: list[CareTask] = field(default_factory=list)
    overdue: list[CareTask] = field(default_factory=list)
    completed: list[CareTask] = field(default_factory=list)


def partition_tasks(
    tasks: Iterable[CareTask],
    now_ts: float,
    *,
    window_days: int = UPCOMING_DAYS,
) -> TaskBuckets:
    """
    Split tasks into buckets. Overdue is re-evaluated here as well, so callers
    may pass tasks from any source.

    - pending:       not completed
    - overdue:       pending and scheduled before now
    - due_this_week: pending, not overdue, scheduled within `window_days`
    - completed:     completed (most recent first)
    """
    horizon = now_ts + window_days * DAY_SECONDS
    buckets = TaskBuckets()

    for task in evaluate_tasks(tasks, now_ts):
        if task.is_completed:
            buckets.completed.append(task)
            continue
        buckets.pending.append(task)
        if task.is_overdue:
            buckets.overdue.append(task)
        elif task.scheduled_at <= horizon:
            buckets.due_this_week.append(task)

    for bucket in (buckets.pending, buckets.due_this_week, buckets.overdue):
        bucket.sort(key=lambda t: t.scheduled_at)
    buckets.completed.sort(key=lambda t: t.completed_at or 0.0, reverse=True)
    return buckets


def upcoming_tasks(
    tasks: Iterable[CareTask],
    now_ts: float,
    *,
    window_days: int = UPCOMING_DAYS,
    limit: int = UPCOMING_LIMIT,
) -> list[CareTask]:
    """Pending tasks due within the window (overdue included), soonest first."""
    horizon = now_ts + window_days * DAY_SECONDS
    out = [t for t in evaluate_tasks(tasks, now_ts) if not t.is_completed and t.scheduled_at <= horizon]
    out.sort(key=lambda t: t.scheduled_at)
    return out[: max(0, int(limit))]
