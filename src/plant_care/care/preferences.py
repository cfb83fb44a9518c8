# src/plant_care/care/preferences.py

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass, replace
from typing import Any

from ..core.ports import CareBackend
from .care_models import (
    MEASUREMENT_SYSTEMS,
    TEMPERATURE_UNITS,
    THEMES,
    LocationPreferences,
    UserPreferences,
)
from .codec import preferences_from_record, preferences_to_record

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}

# Closed vocabularies; keys are dotted preference paths.
_CHOICES: dict[str, tuple[str, ...]] = {
    "theme": THEMES,
    "units.temperature": TEMPERATURE_UNITS,
    "units.measurement": MEASUREMENT_SYSTEMS,
}


def _choose(key: str, raw: Any) -> str:
    """Match `raw` case-insensitively against the allowed values; returns the canonical spelling."""
    allowed = _CHOICES[key]
    value = str(raw).strip()
    for choice in allowed:
        if value.lower() == choice.lower():
            return choice
    raise ValueError(f"invalid value {raw!r} for {key} (expected one of: {', '.join(allowed)})")


def _coerce(current: Any, raw: Any) -> Any:
    """Coerce `raw` (often a string from the console) to the type of `current`."""
    if isinstance(current, bool):
        if isinstance(raw, bool):
            return raw
        s = str(raw).strip().lower()
        if s in _TRUE:
            return True
        if s in _FALSE:
            return False
        raise ValueError(f"expected a boolean, got {raw!r}")
    return str(raw)


class PreferencesStore:
    """User preferences: defaults when nothing (or garbage) is stored."""

    def __init__(self, backend: CareBackend) -> None:
        self._backend = backend

    def load(self) -> UserPreferences:
        try:
            rec = self._backend.load_preferences()
        except Exception:
            logger.exception("Failed to load preferences; using defaults.")
            return UserPreferences()
        return preferences_from_record(rec)

    def save(self, prefs: UserPreferences) -> None:
        try:
            self._backend.save_preferences(preferences_to_record(prefs))
        except Exception:
            logger.exception("Failed to save preferences; write dropped.")

    def update(self, **changes: Any) -> UserPreferences:
        """
        Apply changes and persist. Keys are top-level fields ("theme") or
        one level of nesting with "__" / "." ("units__temperature",
        "notifications.care_reminders"). Unknown keys raise ValueError.
        """
        prefs = self.load()
        for key, raw in changes.items():
            path = key.replace("__", ".").split(".")
            dotted = ".".join(path)
            if dotted in _CHOICES:
                raw = _choose(dotted, raw)
            prefs = _apply(prefs, path, raw)
        self.save(prefs)
        return prefs

    def set_location(self, city: str, country: str, timezone: str = "") -> UserPreferences:
        if not city.strip() or not country.strip():
            raise ValueError("city and country are required")
        prefs = replace(
            self.load(),
            location=LocationPreferences(city=city.strip(), country=country.strip(), timezone=timezone.strip()),
        )
        self.save(prefs)
        return prefs


def _apply(obj: Any, path: list[str], raw: Any) -> Any:
    head, rest = path[0], path[1:]
    names = {f.name for f in fields(obj)}
    if head not in names or head == "location":
        raise ValueError(f"unknown preference: {head}")

    current = getattr(obj, head)
    if rest:
        if not is_dataclass(current):
            raise ValueError(f"preference {head} has no field {'.'.join(rest)}")
        return replace(obj, **{head: _apply(current, rest, raw)})
    if is_dataclass(current):
        raise ValueError(f"preference {head} needs a sub-key (e.g. {head}.<name>)")
    return replace(obj, **{head: _coerce(current, raw)})
