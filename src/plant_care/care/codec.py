# src/plant_care/care/codec.py

from __future__ import annotations

"""
Record <-> model conversion for the storage backends.

Records are plain JSON-compatible dicts. Decoding is tolerant: a malformed
record is logged and skipped, a malformed optional field falls back to its
default. Nothing here raises to the stores.
"""

import logging
from collections.abc import Iterable
from typing import Any

from .care_models import (
    MEASUREMENT_SYSTEMS,
    TEMPERATURE_UNITS,
    THEMES,
    CareInstructions,
    CareTask,
    FertilizingInstructions,
    LocationPreferences,
    NotificationPreferences,
    Plant,
    SunlightInstructions,
    TaskType,
    TemperatureRange,
    UnitPreferences,
    UserPreferences,
    WateringInstructions,
)

logger = logging.getLogger(__name__)

Record = dict[str, Any]


# ---- field helpers ----


def _opt_str(v: Any) -> str | None:
    if v is None:
        return None
    s = str(v)
    return s if s.strip() else None


def _opt_float(v: Any) -> float | None:
    if v is None or v == "":
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


def _bool(v: Any, default: bool = False) -> bool:
    if v is None:
        return default
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "yes", "y", "on"}
    return bool(v)


def _dict(v: Any) -> dict[str, Any] | None:
    return v if isinstance(v, dict) else None


def _one_of(v: Any, allowed: tuple[str, ...], default: str) -> str:
    s = str(v or "").strip().lower()
    for choice in allowed:
        if s == choice.lower():
            return choice
    return default


# ---- tasks ----


def task_to_record(task: CareTask) -> Record:
    # is_overdue is never written.
    return {
        "id": task.id,
        "plant_id": task.plant_id,
        "plant_name": task.plant_name,
        "task_type": task.task_type.value,
        "scheduled_at": float(task.scheduled_at),
        "is_completed": bool(task.is_completed),
        "completed_at": task.completed_at,
        "notes": task.notes,
    }


def task_from_record(rec: Record) -> CareTask:
    """Strict decode; raises (KeyError/TypeError/ValueError) on a malformed record."""
    scheduled_at = _opt_float(rec["scheduled_at"])
    if scheduled_at is None:
        raise ValueError("scheduled_at is missing")
    task_id = str(rec["id"]).strip()
    plant_id = str(rec["plant_id"]).strip()
    if not task_id or not plant_id:
        raise ValueError("id and plant_id are required")
    return CareTask(
        id=task_id,
        plant_id=plant_id,
        plant_name=str(rec.get("plant_name") or ""),
        task_type=TaskType(str(rec["task_type"])),
        scheduled_at=scheduled_at,
        is_completed=_bool(rec.get("is_completed")),
        completed_at=_opt_float(rec.get("completed_at")),
        notes=_opt_str(rec.get("notes")),
    )


def decode_tasks(records: Iterable[Any]) -> list[CareTask]:
    out: list[CareTask] = []
    for rec in records:
        if not isinstance(rec, dict):
            logger.warning("Skipping non-object task record: %r", rec)
            continue
        try:
            out.append(task_from_record(rec))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed task record id=%s: %s", rec.get("id"), e)
    return out


# ---- care instructions ----


def instructions_to_record(ci: CareInstructions) -> Record:
    rec: Record = {}
    if ci.watering is not None:
        rec["watering"] = {
            "frequency": ci.watering.frequency,
            "amount": ci.watering.amount,
            "notes": ci.watering.notes,
        }
    if ci.fertilizing is not None:
        rec["fertilizing"] = {
            "frequency": ci.fertilizing.frequency,
            "type": ci.fertilizing.type,
            "season": ci.fertilizing.season,
        }
    if ci.sunlight is not None:
        rec["sunlight"] = {"type": ci.sunlight.type, "hours": ci.sunlight.hours}
    if ci.temperature is not None:
        rec["temperature"] = {
            "min": ci.temperature.min,
            "max": ci.temperature.max,
            "unit": ci.temperature.unit,
        }
    for key in ("humidity", "soil_type", "repotting", "pruning"):
        val = getattr(ci, key)
        if val is not None:
            rec[key] = val
    return rec


def instructions_from_record(rec: Any) -> CareInstructions | None:
    rec = _dict(rec)
    if rec is None:
        return None

    watering = None
    w = _dict(rec.get("watering"))
    if w is not None and w.get("frequency") is not None:
        watering = WateringInstructions(
            frequency=str(w["frequency"]),
            amount=str(w.get("amount") or ""),
            notes=_opt_str(w.get("notes")),
        )

    fertilizing = None
    f = _dict(rec.get("fertilizing"))
    if f is not None and f.get("frequency") is not None:
        fertilizing = FertilizingInstructions(
            frequency=str(f["frequency"]),
            type=str(f.get("type") or ""),
            season=_opt_str(f.get("season")),
        )

    sunlight = None
    s = _dict(rec.get("sunlight"))
    if s is not None and s.get("type"):
        sunlight = SunlightInstructions(type=str(s["type"]), hours=str(s.get("hours") or ""))

    temperature = None
    t = _dict(rec.get("temperature"))
    if t is not None:
        t_min, t_max = _opt_float(t.get("min")), _opt_float(t.get("max"))
        if t_min is not None and t_max is not None:
            temperature = TemperatureRange(min=t_min, max=t_max, unit=str(t.get("unit") or "C"))

    return CareInstructions(
        watering=watering,
        fertilizing=fertilizing,
        sunlight=sunlight,
        temperature=temperature,
        humidity=_opt_str(rec.get("humidity")),
        soil_type=_opt_str(rec.get("soil_type")),
        repotting=_opt_str(rec.get("repotting")),
        pruning=_opt_str(rec.get("pruning")),
    )


# ---- plants ----


def plant_to_record(plant: Plant) -> Record:
    return {
        "id": plant.id,
        "name": plant.name,
        "scientific_name": plant.scientific_name,
        "common_names": list(plant.common_names),
        "description": plant.description,
        "image_url": plant.image_url,
        "care_instructions": (
            instructions_to_record(plant.care_instructions)
            if plant.care_instructions is not None
            else None
        ),
        "planted_at": plant.planted_at,
        "location": plant.location,
        "is_user_plant": bool(plant.is_user_plant),
        "notes": plant.notes,
        "last_watered_at": plant.last_watered_at,
        "last_fertilized_at": plant.last_fertilized_at,
        "last_repotted_at": plant.last_repotted_at,
    }


def plant_from_record(rec: Record) -> Plant:
    plant_id = str(rec["id"]).strip()
    if not plant_id:
        raise ValueError("id is required")
    names = rec.get("common_names")
    return Plant(
        id=plant_id,
        name=str(rec.get("name") or ""),
        scientific_name=_opt_str(rec.get("scientific_name")),
        common_names=[str(n) for n in names] if isinstance(names, list) else [],
        description=_opt_str(rec.get("description")),
        image_url=_opt_str(rec.get("image_url")),
        care_instructions=instructions_from_record(rec.get("care_instructions")),
        planted_at=_opt_float(rec.get("planted_at")),
        location=_opt_str(rec.get("location")),
        is_user_plant=_bool(rec.get("is_user_plant")),
        notes=_opt_str(rec.get("notes")),
        last_watered_at=_opt_float(rec.get("last_watered_at")),
        last_fertilized_at=_opt_float(rec.get("last_fertilized_at")),
        last_repotted_at=_opt_float(rec.get("last_repotted_at")),
    )


def decode_plants(records: Iterable[Any]) -> list[Plant]:
    out: list[Plant] = []
    for rec in records:
        if not isinstance(rec, dict):
            logger.warning("Skipping non-object plant record: %r", rec)
            continue
        try:
            out.append(plant_from_record(rec))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed plant record id=%s: %s", rec.get("id"), e)
    return out


# ---- preferences ----


def preferences_to_record(prefs: UserPreferences) -> Record:
    rec: Record = {
        "theme": prefs.theme,
        "notifications": {
            "care_reminders": prefs.notifications.care_reminders,
            "plant_tips": prefs.notifications.plant_tips,
            "watering_alerts": prefs.notifications.watering_alerts,
        },
        "units": {
            "temperature": prefs.units.temperature,
            "measurement": prefs.units.measurement,
        },
        "location": None,
    }
    if prefs.location is not None:
        rec["location"] = {
            "city": prefs.location.city,
            "country": prefs.location.country,
            "timezone": prefs.location.timezone,
        }
    return rec


def preferences_from_record(rec: Any) -> UserPreferences:
    """Missing or malformed parts fall back to defaults."""
    defaults = UserPreferences()
    rec = _dict(rec)
    if rec is None:
        return defaults

    n = _dict(rec.get("notifications")) or {}
    u = _dict(rec.get("units")) or {}
    loc = _dict(rec.get("location"))

    location = None
    if loc is not None and loc.get("city") and loc.get("country"):
        location = LocationPreferences(
            city=str(loc["city"]),
            country=str(loc["country"]),
            timezone=str(loc.get("timezone") or ""),
        )

    return UserPreferences(
        theme=_one_of(rec.get("theme"), THEMES, defaults.theme),
        notifications=NotificationPreferences(
            care_reminders=_bool(n.get("care_reminders"), defaults.notifications.care_reminders),
            plant_tips=_bool(n.get("plant_tips"), defaults.notifications.plant_tips),
            watering_alerts=_bool(n.get("watering_alerts"), defaults.notifications.watering_alerts),
        ),
        units=UnitPreferences(
            temperature=_one_of(u.get("temperature"), TEMPERATURE_UNITS, defaults.units.temperature),
            measurement=_one_of(u.get("measurement"), MEASUREMENT_SYSTEMS, defaults.units.measurement),
        ),
        location=location,
    )
