# src/plant_care/storage/json_backend.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from ..core.ports import Record

logger = logging.getLogger(__name__)

PLANTS_FILE = "plants.json"
TASKS_FILE = "care_tasks.json"
PREFERENCES_FILE = "preferences.json"


class JsonFileBackend:
    """
    One JSON file per collection under `data_dir`.

    Reads tolerate missing files and malformed content (logged, treated as
    empty). Writes go to a temp file first and are moved into place with
    os.replace, so a crash never leaves a half-written collection.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self._dir = Path(data_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        logger.info("JsonFileBackend ready dir=%s", self._dir)

    def close(self) -> None:
        return

    def _read(self, name: str) -> Any:
        path = self._dir / name
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to read %s; treating it as empty.", path)
            return None

    def _write(self, name: str, data: Any) -> None:
        path = self._dir / name
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, path)
        with contextlib.suppress(Exception):
            os.chmod(path, 0o600)

    def _read_list(self, name: str) -> list[Record]:
        data = self._read(name)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("%s does not hold a JSON list; treating it as empty.", name)
            return []
        return data

    # ---- CareBackend ----

    def load_plants(self) -> list[Record]:
        return self._read_list(PLANTS_FILE)

    def save_plants(self, plants: list[Record]) -> None:
        self._write(PLANTS_FILE, plants)

    def load_tasks(self) -> list[Record]:
        return self._read_list(TASKS_FILE)

    def save_tasks(self, tasks: list[Record]) -> None:
        self._write(TASKS_FILE, tasks)

    def load_preferences(self) -> Record | None:
        data = self._read(PREFERENCES_FILE)
        return data if isinstance(data, dict) else None

    def save_preferences(self, preferences: Record) -> None:
        self._write(PREFERENCES_FILE, preferences)
