# src/plant_care/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..care.plant_store import PlantStore
from ..care.preferences import PreferencesStore
from ..care.task_store import TaskStore
from .ports import CareBackend, Clock


@dataclass
class AppState:
    # Settings object (config.Settings or a test namespace).
    settings: Any

    backend: CareBackend
    plants: PlantStore
    tasks: TaskStore
    preferences: PreferencesStore
    clock: Clock

    def now(self) -> float:
        return self.clock()
