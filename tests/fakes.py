# tests/fakes.py

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

DAY = 24 * 60 * 60


@dataclass(slots=True)
class FakeClock:
    """Deterministic clock; call it like time.time()."""

    now: float = 1_760_000_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, *, days: float = 0, seconds: float = 0) -> None:
        self.now += days * DAY + seconds


@dataclass(slots=True)
class InMemoryBackend:
    """
    CareBackend kept in dicts/lists.

    Records are deep-copied in both directions so tests see exactly what a
    real backend would persist. `writes` counts save_* calls; the fail_*
    flags make that collection's writes raise like a full disk.
    """

    plants: list[dict[str, Any]] = field(default_factory=list)
    tasks: list[dict[str, Any]] = field(default_factory=list)
    preferences: dict[str, Any] | None = None
    writes: int = 0
    fail_plant_writes: bool = False
    fail_task_writes: bool = False

    def load_plants(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self.plants)

    def save_plants(self, plants: list[dict[str, Any]]) -> None:
        if self.fail_plant_writes:
            raise OSError("plants not writable")
        self.writes += 1
        self.plants = copy.deepcopy(plants)

    def load_tasks(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self.tasks)

    def save_tasks(self, tasks: list[dict[str, Any]]) -> None:
        if self.fail_task_writes:
            raise OSError("tasks not writable")
        self.writes += 1
        self.tasks = copy.deepcopy(tasks)

    def load_preferences(self) -> dict[str, Any] | None:
        return copy.deepcopy(self.preferences)

    def save_preferences(self, preferences: dict[str, Any]) -> None:
        self.writes += 1
        self.preferences = copy.deepcopy(preferences)


class BrokenBackend:
    """Every operation fails like unreadable/unwritable storage."""

    def _fail(self, *args: Any, **kwargs: Any) -> Any:
        raise OSError("storage unavailable")

    load_plants = save_plants = _fail
    load_tasks = save_tasks = _fail
    load_preferences = save_preferences = _fail
