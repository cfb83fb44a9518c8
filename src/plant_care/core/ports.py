# src/plant_care/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the care engine.

The engine depends on Protocols instead of concrete implementations.
This keeps storage backends swappable and makes testing easier.
"""

from typing import Any, Callable, Protocol

Record = dict[str, Any]
# Plain JSON-compatible dict; see care/codec.py for the field layout.

Clock = Callable[[], float]
# Returns POSIX seconds (time.time-compatible).


class CareBackend(Protocol):
    """
    Durable medium for the three collections (plants, tasks, preferences).

    Contract:
    - loads return [] / None when nothing is stored yet,
    - saves replace the whole collection before returning,
    - I/O faults may raise; the stores catch, log and degrade.
    """

    def load_plants(self) -> list[Record]: ...
    def save_plants(self, plants: list[Record]) -> None: ...

    def load_tasks(self) -> list[Record]: ...
    def save_tasks(self, tasks: list[Record]) -> None: ...

    def load_preferences(self) -> Record | None: ...
    def save_preferences(self, preferences: Record) -> None: ...


class TaskRepo(Protocol):
    def list_tasks(self, *, now_ts: float | None = None) -> list[Any]: ...
    def get_task(self, task_id: str, *, now_ts: float | None = None) -> Any | None: ...
    def list_tasks_for_plant(self, plant_id: str, *, now_ts: float | None = None) -> list[Any]: ...
    def save_task(self, task: Any) -> bool: ...
    def delete_task(self, task_id: str) -> None: ...
    def delete_tasks_for_plant(self, plant_id: str) -> int: ...
    def count_tasks(self) -> int: ...


class PlantRepo(Protocol):
    def list_plants(self) -> list[Any]: ...
    def get_plant(self, plant_id: str) -> Any | None: ...
    def save_plant(self, plant: Any) -> bool: ...
    def delete_plant(self, plant_id: str) -> bool: ...
    def record_care(self, plant_id: str, care_type: Any, *, now_ts: float | None = None) -> bool: ...
    def count_plants(self) -> int: ...
