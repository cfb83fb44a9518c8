# src/plant_care/care/care_models.py

from __future__ import annotations

import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

DAY_SECONDS = 24 * 60 * 60


def new_id() -> str:
    """Collision-resistant identity for plants and tasks."""
    return uuid.uuid4().hex


class TaskType(StrEnum):
    WATERING = "watering"
    FERTILIZING = "fertilizing"
    REPOTTING = "repotting"
    PRUNING = "pruning"
    INSPECTION = "inspection"

    @classmethod
    def parse(cls, raw: str | None) -> TaskType:
        """Strict parse (raises ValueError), used for user input."""
        value = (raw or "").strip().lower()
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(t.value for t in cls)
            raise ValueError(f"unknown task type {raw!r} (expected one of: {allowed})") from None


class CareType(StrEnum):
    """Per-plant "last cared for" fields."""

    WATERED = "watered"
    FERTILIZED = "fertilized"
    REPOTTED = "repotted"

    @classmethod
    def parse(cls, raw: str | None) -> CareType:
        value = (raw or "").strip().lower()
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(c.value for c in cls)
            raise ValueError(f"unknown care type {raw!r} (expected one of: {allowed})") from None


# Pruning and inspection have no tracked plant field.
TASK_CARE_TYPES: dict[TaskType, CareType] = {
    TaskType.WATERING: CareType.WATERED,
    TaskType.FERTILIZING: CareType.FERTILIZED,
    TaskType.REPOTTING: CareType.REPOTTED,
}


# ---- care instructions (value objects) ----


@dataclass(frozen=True, slots=True)
class WateringInstructions:
    frequency: str
    amount: str = ""
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class FertilizingInstructions:
    frequency: str
    type: str = ""
    season: str | None = None


@dataclass(frozen=True, slots=True)
class SunlightInstructions:
    type: str
    hours: str = ""


@dataclass(frozen=True, slots=True)
class TemperatureRange:
    min: float
    max: float
    unit: str = "C"


@dataclass(frozen=True, slots=True)
class CareInstructions:
    """
    Care metadata supplied by the plant database when a plant is added.

    Only watering and fertilizing carry a recurrence. Repotting and pruning
    are descriptive text ("Every 1-2 years", "As needed") and do not produce tasks.
    """

    watering: WateringInstructions | None = None
    fertilizing: FertilizingInstructions | None = None
    sunlight: SunlightInstructions | None = None
    temperature: TemperatureRange | None = None
    humidity: str | None = None
    soil_type: str | None = None
    repotting: str | None = None
    pruning: str | None = None

    def schedules(self) -> Iterator[tuple[TaskType, str]]:
        """(task_type, frequency text) for each recurring category present."""
        if self.watering is not None:
            yield TaskType.WATERING, self.watering.frequency
        if self.fertilizing is not None:
            yield TaskType.FERTILIZING, self.fertilizing.frequency


# ---- entities ----


@dataclass(slots=True)
class Plant:
    id: str
    name: str
    scientific_name: str | None = None
    common_names: list[str] = field(default_factory=list)
    description: str | None = None
    image_url: str | None = None
    care_instructions: CareInstructions | None = None
    planted_at: float | None = None
    location: str | None = None
    is_user_plant: bool = False
    notes: str | None = None

    last_watered_at: float | None = None
    last_fertilized_at: float | None = None
    last_repotted_at: float | None = None

    def last_care_at(self, care_type: CareType) -> float | None:
        if care_type == CareType.WATERED:
            return self.last_watered_at
        if care_type == CareType.FERTILIZED:
            return self.last_fertilized_at
        return self.last_repotted_at


@dataclass(slots=True)
class CareTask:
    id: str
    plant_id: str
    plant_name: str  # denormalized copy, the plant record is the source of truth
    task_type: TaskType
    scheduled_at: float

    is_completed: bool = False
    completed_at: float | None = None
    notes: str | None = None

    # Read-time view, set by overdue.evaluate_tasks(). Never persisted.
    is_overdue: bool = False

    def __post_init__(self) -> None:
        if self.is_completed != (self.completed_at is not None):
            raise ValueError(
                f"task {self.id}: completed_at must be set if and only if the task is completed"
            )


# ---- preferences ----

THEMES = ("light", "dark", "auto")
TEMPERATURE_UNITS = ("C", "F")
MEASUREMENT_SYSTEMS = ("metric", "imperial")


@dataclass(slots=True)
class NotificationPreferences:
    care_reminders: bool = True
    plant_tips: bool = True
    watering_alerts: bool = True


@dataclass(slots=True)
class UnitPreferences:
    temperature: str = "C"
    measurement: str = "metric"


@dataclass(slots=True)
class LocationPreferences:
    city: str
    country: str
    timezone: str = ""


@dataclass(slots=True)
class UserPreferences:
    theme: str = "light"
    notifications: NotificationPreferences = field(default_factory=NotificationPreferences)
    units: UnitPreferences = field(default_factory=UnitPreferences)
    location: LocationPreferences | None = None
