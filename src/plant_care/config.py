# src/plant_care/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every key has a local default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "PLANTCARE"

STORAGE_SQLITE = "sqlite"
STORAGE_JSON = "json"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Storage ----
    storage: str
    data_dir: Path
    db_path: Path

    # ---- Schedule views ----
    upcoming_days: int
    upcoming_limit: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "plant-care").strip() or "plant-care"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"

        storage = _env(_k("STORAGE"), STORAGE_SQLITE).strip().lower()
        if storage not in (STORAGE_SQLITE, STORAGE_JSON):
            storage = STORAGE_SQLITE

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/plant_care"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "plant_care.sqlite3")

        upcoming_days = max(1, _env_int(_k("UPCOMING_DAYS"), 7))
        upcoming_limit = max(1, _env_int(_k("UPCOMING_LIMIT"), 5))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            storage=storage,
            data_dir=data_dir,
            db_path=db_path,
            upcoming_days=upcoming_days,
            upcoming_limit=upcoming_limit,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
