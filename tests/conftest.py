# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from plant_care.care.plant_store import PlantStore
from plant_care.care.task_store import TaskStore
from plant_care.cli.bootstrap import create_initial_state
from plant_care.core.state import AppState
from plant_care.storage.sqlite_backend import SQLiteBackend

from .fakes import FakeClock, InMemoryBackend


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="plant-care-test",
        log_level="DEBUG",
        storage="sqlite",
        data_dir=tmp_path,
        db_path=tmp_path / "plant_care.sqlite3",
        upcoming_days=7,
        upcoming_limit=5,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture()
def task_store(backend: InMemoryBackend, clock: FakeClock) -> TaskStore:
    return TaskStore(backend, clock=clock)


@pytest.fixture()
def plant_store(backend: InMemoryBackend, clock: FakeClock) -> PlantStore:
    return PlantStore(backend, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock) -> AppState:
    """
    AppState wired like the CLI does it.

    NOTE: We keep a real SQLite backend here because its correctness is part
    of what we want to test; only the clock is faked.
    """
    return create_initial_state(settings=settings, backend=SQLiteBackend(settings.db_path), clock=clock)
