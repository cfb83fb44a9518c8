# tests/test_task_store.py

from __future__ import annotations

from dataclasses import replace

import pytest

from plant_care.care.care_models import CareTask, TaskType
from plant_care.care.task_store import TaskStore

from .fakes import DAY, BrokenBackend, FakeClock, InMemoryBackend


def _task(task_id: str, plant_id: str, scheduled_at: float, task_type: TaskType = TaskType.WATERING) -> CareTask:
    return CareTask(
        id=task_id,
        plant_id=plant_id,
        plant_name=f"plant {plant_id}",
        task_type=task_type,
        scheduled_at=scheduled_at,
    )


def test_save_task_appends_then_replaces(task_store: TaskStore, clock: FakeClock) -> None:
    t1 = _task("t1", "p1", clock.now + DAY)
    t2 = _task("t2", "p1", clock.now + 2 * DAY)
    task_store.save_task(t1)
    task_store.save_task(t2)
    assert [t.id for t in task_store.list_tasks()] == ["t1", "t2"]

    task_store.save_task(replace(t1, notes="moved", scheduled_at=clock.now + 5 * DAY))
    tasks = task_store.list_tasks()
    assert [t.id for t in tasks] == ["t1", "t2"]
    assert tasks[0].notes == "moved"
    assert tasks[0].scheduled_at == clock.now + 5 * DAY
    assert task_store.count_tasks() == 2


def test_get_and_list_for_plant(task_store: TaskStore, clock: FakeClock) -> None:
    task_store.save_task(_task("t1", "p1", clock.now))
    task_store.save_task(_task("t2", "p2", clock.now))
    task_store.save_task(_task("t3", "p1", clock.now))

    assert task_store.get_task("t2").plant_id == "p2"
    assert task_store.get_task("missing") is None
    assert [t.id for t in task_store.list_tasks_for_plant("p1")] == ["t1", "t3"]


def test_delete_task_and_unknown_id(task_store: TaskStore, backend: InMemoryBackend, clock: FakeClock) -> None:
    task_store.save_task(_task("t1", "p1", clock.now))
    task_store.save_task(_task("t2", "p1", clock.now))

    task_store.delete_task("t1")
    assert [t.id for t in task_store.list_tasks()] == ["t2"]

    writes = backend.writes
    task_store.delete_task("nope")
    assert backend.writes == writes
    assert [t.id for t in task_store.list_tasks()] == ["t2"]


def test_delete_tasks_for_plant_leaves_others(task_store: TaskStore, clock: FakeClock) -> None:
    for i, plant in enumerate(["p1", "p2", "p1", "p3"]):
        task_store.save_task(_task(f"t{i}", plant, clock.now))

    assert task_store.delete_tasks_for_plant("p1") == 2
    assert {t.plant_id for t in task_store.list_tasks()} == {"p2", "p3"}
    assert task_store.delete_tasks_for_plant("p1") == 0


def test_overdue_tracks_clock_without_writes(
    task_store: TaskStore, backend: InMemoryBackend, clock: FakeClock
) -> None:
    task_store.save_task(_task("t1", "p1", clock.now + DAY))
    assert task_store.get_task("t1").is_overdue is False

    writes = backend.writes
    clock.advance(days=2)
    assert task_store.get_task("t1").is_overdue is True
    assert backend.writes == writes


def test_explicit_now_overrides_clock(task_store: TaskStore, clock: FakeClock) -> None:
    task_store.save_task(_task("t1", "p1", clock.now + DAY))
    assert task_store.list_tasks(now_ts=clock.now + 2 * DAY)[0].is_overdue is True
    assert task_store.list_tasks()[0].is_overdue is False


def test_is_overdue_is_never_persisted(task_store: TaskStore, backend: InMemoryBackend, clock: FakeClock) -> None:
    task_store.save_task(replace(_task("t1", "p1", clock.now - DAY), is_overdue=True))
    assert "is_overdue" not in backend.tasks[0]


def test_malformed_records_are_skipped(backend: InMemoryBackend, clock: FakeClock) -> None:
    backend.tasks = [
        {"id": "ok", "plant_id": "p1", "plant_name": "Fern", "task_type": "watering", "scheduled_at": clock.now},
        {"id": "bad-type", "plant_id": "p1", "task_type": "singing", "scheduled_at": clock.now},
        {"id": "no-date", "plant_id": "p1", "task_type": "watering"},
        {"id": "half-done", "plant_id": "p1", "task_type": "watering", "scheduled_at": 1.0, "is_completed": True},
        "garbage",
    ]
    store = TaskStore(backend, clock=clock)
    assert [t.id for t in store.list_tasks()] == ["ok"]


def test_broken_storage_degrades_silently(clock: FakeClock, caplog: pytest.LogCaptureFixture) -> None:
    store = TaskStore(BrokenBackend(), clock=clock)

    assert store.list_tasks() == []
    assert store.get_task("t1") is None
    assert store.save_task(_task("t1", "p1", clock.now)) is False
    store.delete_task("t1")
    assert store.delete_tasks_for_plant("p1") == 0
    assert "Failed to load care tasks" in caplog.text


def test_completed_date_invariant_is_enforced() -> None:
    with pytest.raises(ValueError):
        CareTask("t1", "p1", "Fern", TaskType.WATERING, 0.0, is_completed=True)
    with pytest.raises(ValueError):
        CareTask("t1", "p1", "Fern", TaskType.WATERING, 0.0, is_completed=False, completed_at=1.0)
