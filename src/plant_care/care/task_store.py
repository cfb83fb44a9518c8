# src/plant_care/care/task_store.py

from __future__ import annotations

import logging
import time

from ..core.ports import CareBackend, Clock
from .care_models import CareTask
from .codec import decode_tasks, task_to_record
from .overdue import evaluate_tasks

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Authoritative collection of care tasks.

    Semantics:
    - every mutation reads the whole collection, changes one element and
      writes the whole collection back before returning
    - every read re-evaluates is_overdue against the clock (never stored)
    - storage faults never raise: reads degrade to [], writes are dropped,
      both are logged

    Single writer is assumed (one local user).
    """

    def __init__(self, backend: CareBackend, *, clock: Clock = time.time) -> None:
        self._backend = backend
        self._clock = clock
        logger.info("TaskStore ready backend=%s total=%s", type(backend).__name__, self.count_tasks())

    # ---- low-level helpers ----

    def _load(self) -> list[CareTask]:
        try:
            records = self._backend.load_tasks()
        except Exception:
            logger.exception("Failed to load care tasks; using an empty collection.")
            return []
        return decode_tasks(records or [])

    def _write(self, tasks: list[CareTask]) -> bool:
        try:
            self._backend.save_tasks([task_to_record(t) for t in tasks])
            return True
        except Exception:
            logger.exception("Failed to save care tasks (n=%s); write dropped.", len(tasks))
            return False

    def _now(self, now_ts: float | None) -> float:
        return self._clock() if now_ts is None else float(now_ts)

    # ---- public API ----

    def count_tasks(self) -> int:
        return len(self._load())

    def list_tasks(self, *, now_ts: float | None = None) -> list[CareTask]:
        return evaluate_tasks(self._load(), self._now(now_ts))

    def get_task(self, task_id: str, *, now_ts: float | None = None) -> CareTask | None:
        for task in self.list_tasks(now_ts=now_ts):
            if task.id == task_id:
                return task
        return None

    def list_tasks_for_plant(self, plant_id: str, *, now_ts: float | None = None) -> list[CareTask]:
        return [t for t in self.list_tasks(now_ts=now_ts) if t.plant_id == plant_id]

    def save_task(self, task: CareTask) -> bool:
        """
        Upsert: replace the task with the same id wholesale, else append.
        Returns False when the write was dropped.
        """
        tasks = self._load()
        for i, existing in enumerate(tasks):
            if existing.id == task.id:
                tasks[i] = task
                break
        else:
            tasks.append(task)

        if not self._write(tasks):
            return False
        logger.debug(
            "Task saved id=%s plant_id=%s type=%s completed=%s",
            task.id,
            task.plant_id,
            task.task_type.value,
            task.is_completed,
        )
        return True

    def delete_task(self, task_id: str) -> None:
        tasks = self._load()
        kept = [t for t in tasks if t.id != task_id]
        if len(kept) == len(tasks):
            logger.debug("delete_task: no task id=%s", task_id)
            return
        if self._write(kept):
            logger.debug("Task deleted id=%s", task_id)

    def delete_tasks_for_plant(self, plant_id: str) -> int:
        """Remove every task referencing `plant_id`. Returns the number removed."""
        tasks = self._load()
        kept = [t for t in tasks if t.plant_id != plant_id]
        removed = len(tasks) - len(kept)
        if not removed:
            return 0
        if not self._write(kept):
            return 0
        logger.info("Deleted %s task(s) for plant_id=%s", removed, plant_id)
        return removed
