# tests/test_overdue.py

from __future__ import annotations

from plant_care.care.care_models import CareTask, TaskType
from plant_care.care.overdue import evaluate_tasks, is_overdue, partition_tasks, upcoming_tasks

from .fakes import DAY

NOW = 1_760_000_000.0


def _task(task_id: str, offset_days: float, *, completed: bool = False) -> CareTask:
    return CareTask(
        id=task_id,
        plant_id="p1",
        plant_name="Fern",
        task_type=TaskType.WATERING,
        scheduled_at=NOW + offset_days * DAY,
        is_completed=completed,
        completed_at=NOW if completed else None,
    )


def test_is_overdue_is_strictly_before_now() -> None:
    assert is_overdue(_task("a", -1), NOW)
    assert not is_overdue(_task("b", 0), NOW)
    assert not is_overdue(_task("c", 1), NOW)


def test_completed_task_is_never_overdue() -> None:
    assert not is_overdue(_task("a", -30, completed=True), NOW)


def test_evaluate_tasks_returns_copies() -> None:
    source_task = _task("a", -1)
    (evaluated,) = evaluate_tasks([source_task], NOW)
    assert evaluated.is_overdue is True
    assert source_task.is_overdue is False


def test_evaluation_is_idempotent_for_same_now() -> None:
    tasks = [_task("a", -2), _task("b", 3), _task("c", -1, completed=True)]
    first = [t.is_overdue for t in evaluate_tasks(tasks, NOW)]
    second = [t.is_overdue for t in evaluate_tasks(tasks, NOW)]
    assert first == second == [True, False, False]


def test_partition_tasks_buckets() -> None:
    tasks = [
        _task("late", -2),
        _task("soon", 3),
        _task("edge", 7),
        _task("later", 20),
        _task("done", -5, completed=True),
    ]
    buckets = partition_tasks(tasks, NOW)

    assert [t.id for t in buckets.pending] == ["late", "soon", "edge", "later"]
    assert [t.id for t in buckets.overdue] == ["late"]
    assert [t.id for t in buckets.due_this_week] == ["soon", "edge"]
    assert [t.id for t in buckets.completed] == ["done"]
    assert all(t.is_overdue for t in buckets.overdue)


def test_partition_completed_most_recent_first() -> None:
    older = CareTask("old", "p1", "Fern", TaskType.PRUNING, NOW, True, NOW - DAY)
    newer = CareTask("new", "p1", "Fern", TaskType.PRUNING, NOW, True, NOW)
    assert [t.id for t in partition_tasks([older, newer], NOW).completed] == ["new", "old"]


def test_upcoming_includes_overdue_and_respects_limit() -> None:
    tasks = [_task(f"t{i}", i - 2) for i in range(10)]
    out = upcoming_tasks(tasks, NOW, limit=5)
    assert [t.id for t in out] == ["t0", "t1", "t2", "t3", "t4"]
    assert out[0].is_overdue


def test_upcoming_skips_far_future_and_completed() -> None:
    tasks = [_task("far", 30), _task("done", 1, completed=True), _task("near", 1)]
    assert [t.id for t in upcoming_tasks(tasks, NOW)] == ["near"]
