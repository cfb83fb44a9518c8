# src/plant_care/care/lifecycle.py

from __future__ import annotations

"""
Task completion.

Completing a task and updating the owning plant's last-cared timestamp are one
operation: complete_task() does both, with the same timestamp, so no caller
can complete a task without the plant record following.
"""

import logging
import time
from dataclasses import replace

from ..core.ports import PlantRepo, TaskRepo
from .care_models import TASK_CARE_TYPES, CareTask

logger = logging.getLogger(__name__)


def complete_task(
    task_store: TaskRepo,
    plant_store: PlantRepo,
    task_id: str,
    notes: str | None = None,
    *,
    now_ts: float | None = None,
) -> CareTask | None:
    """
    Pending -> Completed.

    - unknown task_id: no-op, returns None
    - task write dropped: the plant is not touched, returns None
    - already completed: no-op (terminal state), returns the stored task
    - otherwise: is_completed=True, completed_at=now, notes overwritten when
      a non-empty note is given; task persisted; then the plant's
      last_watered/fertilized/repotted timestamp is set to the same `now`
      (pruning and inspection have no plant field)
    """
    if now_ts is None:
        now_ts = time.time()

    task = task_store.get_task(task_id, now_ts=now_ts)
    if task is None:
        logger.debug("complete_task: no task id=%s", task_id)
        return None

    if task.is_completed:
        logger.debug("complete_task: task id=%s already completed", task_id)
        return task

    done = replace(
        task,
        is_completed=True,
        completed_at=now_ts,
        notes=notes if notes else task.notes,
        is_overdue=False,
    )
    if not task_store.save_task(done):
        logger.warning("complete_task: write dropped for task id=%s; plant left unchanged", task_id)
        return None
    logger.info("Task %s (%s, plant_id=%s) -> completed", done.id, done.task_type.value, done.plant_id)

    care_type = TASK_CARE_TYPES.get(done.task_type)
    if care_type is not None:
        plant_store.record_care(done.plant_id, care_type, now_ts=now_ts)

    return done
