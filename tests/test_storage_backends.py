# tests/test_storage_backends.py

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest

from plant_care.care import care_api
from plant_care.care.care_models import (
    CareInstructions,
    CareTask,
    FertilizingInstructions,
    Plant,
    SunlightInstructions,
    TaskType,
    TemperatureRange,
    UserPreferences,
    WateringInstructions,
)
from plant_care.care.plant_store import PlantStore
from plant_care.care.task_store import TaskStore
from plant_care.cli.bootstrap import create_initial_state
from plant_care.storage.json_backend import TASKS_FILE, JsonFileBackend
from plant_care.storage.sqlite_backend import SQLiteBackend

from .fakes import FakeClock


@pytest.fixture(params=["sqlite", "json"])
def any_backend(request, tmp_path: Path):
    if request.param == "sqlite":
        return SQLiteBackend(tmp_path / "care.sqlite3")
    return JsonFileBackend(tmp_path / "json")


def test_collections_persist_across_instances(any_backend, clock: FakeClock) -> None:
    ci = CareInstructions(
        watering=WateringInstructions(frequency="Weekly", amount="1 cup", notes="less in winter"),
        fertilizing=FertilizingInstructions(frequency="Monthly", type="liquid", season="spring"),
        sunlight=SunlightInstructions(type="partial shade", hours="4-6"),
        temperature=TemperatureRange(min=18, max=24, unit="C"),
        humidity="40-60%",
        soil_type="Well-draining potting mix",
    )
    plant = Plant(
        id="p1",
        name="Monstera",
        scientific_name="Monstera deliciosa",
        common_names=["Swiss cheese plant"],
        care_instructions=ci,
        planted_at=clock.now,
        last_watered_at=clock.now,
    )
    done = CareTask("t2", "p1", "Monstera", TaskType.PRUNING, clock.now, True, clock.now, "trimmed")

    PlantStore(any_backend, clock=clock).save_plant(plant)
    tasks = TaskStore(any_backend, clock=clock)
    tasks.save_task(CareTask("t1", "p1", "Monstera", TaskType.WATERING, clock.now + 10))
    tasks.save_task(done)

    reloaded_plant = PlantStore(any_backend, clock=clock).get_plant("p1")
    assert reloaded_plant.care_instructions == ci
    assert reloaded_plant.common_names == ["Swiss cheese plant"]
    assert reloaded_plant.last_watered_at == clock.now
    assert reloaded_plant.is_user_plant is True

    reloaded = TaskStore(any_backend, clock=clock).list_tasks()
    assert [t.id for t in reloaded] == ["t1", "t2"]
    assert reloaded[1] == done


def test_whole_collection_replace(any_backend) -> None:
    def rec(task_id: str) -> dict:
        return {"id": task_id, "plant_id": "p1", "task_type": "watering", "scheduled_at": 1.0}

    any_backend.save_tasks([rec("a"), rec("b")])
    any_backend.save_tasks([rec("c")])
    assert [r["id"] for r in any_backend.load_tasks()] == ["c"]


def test_missing_data_is_empty(any_backend) -> None:
    assert any_backend.load_plants() == []
    assert any_backend.load_tasks() == []
    assert any_backend.load_preferences() is None


def test_json_backend_tolerates_corrupt_file(tmp_path: Path, clock: FakeClock) -> None:
    backend = JsonFileBackend(tmp_path)
    (tmp_path / TASKS_FILE).write_text("{not json", "utf-8")
    assert TaskStore(backend, clock=clock).list_tasks() == []

    (tmp_path / TASKS_FILE).write_text(json.dumps({"oops": 1}), "utf-8")
    assert backend.load_tasks() == []


def test_json_backend_writes_atomically(tmp_path: Path) -> None:
    backend = JsonFileBackend(tmp_path)
    backend.save_tasks([{"id": "a"}])
    assert json.loads((tmp_path / TASKS_FILE).read_text("utf-8")) == [{"id": "a"}]
    assert not list(tmp_path.glob("*.tmp"))


def test_sqlite_backend_migrates_old_schema(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(db)
    conn.execute(
        "CREATE TABLE care_tasks (id TEXT PRIMARY KEY, position INTEGER NOT NULL DEFAULT 0, "
        "plant_id TEXT NOT NULL, task_type TEXT NOT NULL, scheduled_at REAL NOT NULL)"
    )
    conn.execute("INSERT INTO care_tasks(id, plant_id, task_type, scheduled_at) VALUES ('t1', 'p1', 'watering', 5)")
    conn.commit()
    conn.close()

    backend = SQLiteBackend(db)
    (task,) = TaskStore(backend, clock=lambda: 10.0).list_tasks()
    assert task.id == "t1"
    assert task.is_completed is False
    assert task.plant_name == ""
    assert task.is_overdue is True


def test_sqlite_backend_survives_non_database_file(settings, clock: FakeClock) -> None:
    garbage = b"this is not an sqlite database\x00\xff" * 64
    settings.db_path.write_bytes(garbage)

    state = create_initial_state(settings=settings, clock=clock)
    assert state.tasks.list_tasks() == []
    assert state.plants.list_plants() == []
    assert state.preferences.load() == UserPreferences()

    care_api.add_plant(state, "Fern")
    assert settings.db_path.read_bytes() == garbage


def test_sqlite_backend_bad_json_column_is_ignored(tmp_path: Path) -> None:
    backend = SQLiteBackend(tmp_path / "care.sqlite3")
    backend.save_plants([{"id": "p1", "name": "Fern", "care_instructions": {"watering": {"frequency": "Daily"}}}])

    conn = sqlite3.connect(tmp_path / "care.sqlite3")
    conn.execute("UPDATE plants SET care_instructions = '{broken'")
    conn.commit()
    conn.close()

    plant = PlantStore(backend).get_plant("p1")
    assert plant.name == "Fern"
    assert plant.care_instructions is None
