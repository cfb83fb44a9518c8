# src/plant_care/care/task_generator.py

from __future__ import annotations

import logging
import time

from ..core.ports import TaskRepo
from .care_models import DAY_SECONDS, CareTask, Plant, new_id
from .frequency import parse_frequency

logger = logging.getLogger(__name__)


def generate_care_tasks(
    task_store: TaskRepo,
    plant: Plant,
    *,
    now_ts: float | None = None,
) -> list[CareTask]:
    """
    Create and persist the first pending task for each recurring care
    category in the plant's instructions (watering, fertilizing).

    Each call appends: pending tasks already stored for the same plant and
    category are neither checked nor replaced.

    Returns the tasks that were persisted ([] when the plant has no care
    instructions).
    """
    if plant.care_instructions is None:
        return []

    if now_ts is None:
        now_ts = time.time()

    created: list[CareTask] = []
    for task_type, frequency in plant.care_instructions.schedules():
        interval_days = parse_frequency(frequency)
        task = CareTask(
            id=new_id(),
            plant_id=plant.id,
            plant_name=plant.name,
            task_type=task_type,
            scheduled_at=now_ts + interval_days * DAY_SECONDS,
        )
        if not task_store.save_task(task):
            continue
        created.append(task)
        logger.debug(
            "Generated %s task id=%s plant_id=%s every=%sd (%r)",
            task_type.value,
            task.id,
            plant.id,
            interval_days,
            frequency,
        )

    logger.info("Generated %s care task(s) for plant_id=%s", len(created), plant.id)
    return created
