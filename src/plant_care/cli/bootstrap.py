# src/plant_care/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the storage backend and wires the stores into AppState.
"""

from __future__ import annotations

import logging
import time

from ..care.plant_store import PlantStore
from ..care.preferences import PreferencesStore
from ..care.task_store import TaskStore
from ..config import STORAGE_JSON, get_settings
from ..core.ports import CareBackend, Clock
from ..core.state import AppState
from ..storage.json_backend import JsonFileBackend
from ..storage.sqlite_backend import SQLiteBackend

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_backend(settings) -> CareBackend:
    if getattr(settings, "storage", None) == STORAGE_JSON:
        return JsonFileBackend(settings.data_dir)
    return SQLiteBackend(settings.db_path)


def create_initial_state(*, settings=None, backend: CareBackend | None = None, clock: Clock = time.time) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the backend) injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back to
    get_settings().
    """
    if settings is None:
        settings = get_settings()

    if backend is None:
        _ensure_local_dirs(settings)
        backend = create_backend(settings)

    state = AppState(
        settings=settings,
        backend=backend,
        plants=PlantStore(backend, clock=clock),
        tasks=TaskStore(backend, clock=clock),
        preferences=PreferencesStore(backend),
        clock=clock,
    )
    logger.info("State ready storage=%s", type(backend).__name__)
    return state
