# src/plant_care/care/care_api.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.state import AppState
from .care_models import DAY_SECONDS, CareInstructions, CareTask, CareType, Plant, TaskType, new_id
from .lifecycle import complete_task
from .overdue import UPCOMING_DAYS, UPCOMING_LIMIT, TaskBuckets, partition_tasks, upcoming_tasks
from .task_generator import generate_care_tasks

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CareSummary:
    plants: int
    pending: int
    due_this_week: int
    overdue: int
    completed: int


def _window_days(state: AppState) -> int:
    return int(getattr(state.settings, "upcoming_days", UPCOMING_DAYS))


def add_plant(
    state: AppState,
    name: str,
    *,
    care_instructions: CareInstructions | None = None,
    scientific_name: str | None = None,
    common_names: list[str] | None = None,
    description: str | None = None,
    image_url: str | None = None,
    location: str | None = None,
    notes: str | None = None,
) -> Plant:
    """
    Add a plant to the collection and generate its first care tasks.

    The metadata keywords mirror what a plant database entry carries, so a
    search result can be added as-is. No tasks are generated when the plant
    write is dropped.
    """
    if not name or not name.strip():
        raise ValueError("name is required")

    plant = Plant(
        id=new_id(),
        name=name.strip(),
        scientific_name=scientific_name,
        common_names=[n.strip() for n in common_names or [] if n and n.strip()],
        description=description,
        image_url=image_url,
        care_instructions=care_instructions,
        planted_at=state.now(),
        location=location,
        is_user_plant=True,
        notes=notes,
    )
    if not state.plants.save_plant(plant):
        logger.warning("add_plant: plant write dropped id=%s name=%s; no tasks generated", plant.id, plant.name)
        return plant
    generate_care_tasks(state.tasks, plant, now_ts=plant.planted_at)
    logger.info("Plant added id=%s name=%s", plant.id, plant.name)
    return plant


def remove_plant(state: AppState, plant_id: str) -> int | None:
    """
    Delete a plant and every task referencing it.
    Tasks are removed even if the plant record is already gone.
    Returns the number of tasks removed, or None when the plant write was
    dropped (its tasks are then left alone).
    """
    if not state.plants.delete_plant(plant_id) and state.plants.get_plant(plant_id) is not None:
        logger.warning("remove_plant: plant delete dropped plant_id=%s; tasks kept", plant_id)
        return None
    return state.tasks.delete_tasks_for_plant(plant_id)


def record_plant_care(state: AppState, plant_id: str, care_type: CareType | str) -> bool:
    """
    Mark a plant as watered/fertilized/repotted now, without a task.
    Returns False for an unknown plant or a dropped write.
    """
    care_type = CareType.parse(care_type)
    return state.plants.record_care(plant_id, care_type, now_ts=state.now())


PLANT_SORTS = ("name", "added", "cared")


def _last_cared(plant: Plant) -> float:
    return max((ts for ts in (plant.last_care_at(c) for c in CareType) if ts is not None), default=0.0)


def sorted_plants(state: AppState, sort_by: str = "name") -> list[Plant]:
    """
    The collection ordered for display:
    - name: alphabetical, case-insensitive
    - added: most recently planted first
    - cared: most recently cared for (any care type) first
    Plants without the timestamp sort last.
    """
    key = (sort_by or "name").strip().lower()
    plants = state.plants.list_plants()
    if key == "name":
        return sorted(plants, key=lambda p: p.name.casefold())
    if key == "added":
        return sorted(plants, key=lambda p: p.planted_at or 0.0, reverse=True)
    if key == "cared":
        return sorted(plants, key=_last_cared, reverse=True)
    raise ValueError(f"unknown sort {sort_by!r} (expected one of: {', '.join(PLANT_SORTS)})")


def complete(state: AppState, task_id: str, notes: str | None = None) -> CareTask | None:
    return complete_task(state.tasks, state.plants, task_id, notes, now_ts=state.now())


def schedule_task(
    state: AppState,
    plant_id: str,
    task_type: TaskType | str,
    *,
    in_days: float = 0,
    notes: str | None = None,
) -> CareTask | None:
    """
    Add a one-off task (e.g. an inspection) for an existing plant.
    Returns None if the plant does not exist.
    """
    task_type = TaskType.parse(task_type)
    if in_days < 0:
        raise ValueError("in_days must be >= 0")

    plant = state.plants.get_plant(plant_id)
    if plant is None:
        logger.info("schedule_task: plant not found plant_id=%s", plant_id)
        return None

    task = CareTask(
        id=new_id(),
        plant_id=plant.id,
        plant_name=plant.name,
        task_type=task_type,
        scheduled_at=state.now() + in_days * DAY_SECONDS,
        notes=notes or None,
    )
    state.tasks.save_task(task)
    return task


def task_buckets(state: AppState) -> TaskBuckets:
    now_ts = state.now()
    return partition_tasks(state.tasks.list_tasks(now_ts=now_ts), now_ts, window_days=_window_days(state))


def upcoming(state: AppState) -> list[CareTask]:
    now_ts = state.now()
    limit = int(getattr(state.settings, "upcoming_limit", UPCOMING_LIMIT))
    return upcoming_tasks(
        state.tasks.list_tasks(now_ts=now_ts),
        now_ts,
        window_days=_window_days(state),
        limit=limit,
    )


def care_summary(state: AppState) -> CareSummary:
    buckets = task_buckets(state)
    return CareSummary(
        plants=state.plants.count_plants(),
        pending=len(buckets.pending),
        due_this_week=len(buckets.due_this_week),
        overdue=len(buckets.overdue),
        completed=len(buckets.completed),
    )
