# src/plant_care/care/plant_store.py

from __future__ import annotations

import logging
import time
from dataclasses import replace

from ..core.ports import CareBackend, Clock
from .care_models import CareType, Plant
from .codec import decode_plants, plant_to_record

logger = logging.getLogger(__name__)


class PlantStore:
    """
    The user's plant collection, plus the per-plant care-date tracker.

    Same storage semantics as TaskStore: whole-collection read-modify-write,
    storage faults logged and degraded, never raised.

    Deleting a plant does not touch tasks; care_api.remove_plant cascades.
    """

    def __init__(self, backend: CareBackend, *, clock: Clock = time.time) -> None:
        self._backend = backend
        self._clock = clock
        logger.info("PlantStore ready backend=%s total=%s", type(backend).__name__, self.count_plants())

    def _load(self) -> list[Plant]:
        try:
            records = self._backend.load_plants()
        except Exception:
            logger.exception("Failed to load plants; using an empty collection.")
            return []
        return decode_plants(records or [])

    def _write(self, plants: list[Plant]) -> bool:
        try:
            self._backend.save_plants([plant_to_record(p) for p in plants])
            return True
        except Exception:
            logger.exception("Failed to save plants (n=%s); write dropped.", len(plants))
            return False

    # ---- public API ----

    def count_plants(self) -> int:
        return len(self._load())

    def list_plants(self) -> list[Plant]:
        return self._load()

    def get_plant(self, plant_id: str) -> Plant | None:
        for plant in self._load():
            if plant.id == plant_id:
                return plant
        return None

    def save_plant(self, plant: Plant) -> bool:
        """
        Upsert by id. A plant entering the collection is flagged as a user plant.
        Returns False when the write was dropped.
        """
        plants = self._load()
        for i, existing in enumerate(plants):
            if existing.id == plant.id:
                plants[i] = plant
                break
        else:
            plants.append(replace(plant, is_user_plant=True))

        if not self._write(plants):
            return False
        logger.debug("Plant saved id=%s name=%s", plant.id, plant.name)
        return True

    def delete_plant(self, plant_id: str) -> bool:
        plants = self._load()
        kept = [p for p in plants if p.id != plant_id]
        if len(kept) == len(plants):
            logger.debug("delete_plant: no plant id=%s", plant_id)
            return False
        if not self._write(kept):
            return False
        logger.info("Plant deleted id=%s", plant_id)
        return True

    def record_care(self, plant_id: str, care_type: CareType, *, now_ts: float | None = None) -> bool:
        """
        Set the plant's last-cared timestamp for `care_type` and persist.

        Unknown plant ids are a logged no-op: a task can outlive its plant
        for a moment (e.g. completion racing a delete in the UI).
        """
        care_type = CareType(care_type)
        ts = self._clock() if now_ts is None else float(now_ts)
        plants = self._load()

        for plant in plants:
            if plant.id != plant_id:
                continue
            if care_type == CareType.WATERED:
                plant.last_watered_at = ts
            elif care_type == CareType.FERTILIZED:
                plant.last_fertilized_at = ts
            else:
                plant.last_repotted_at = ts

            if not self._write(plants):
                return False
            logger.debug("Recorded care plant_id=%s care=%s ts=%s", plant_id, care_type.value, ts)
            return True

        logger.info("record_care: plant not found plant_id=%s care=%s", plant_id, care_type.value)
        return False
