# src/plant_care/storage/sqlite_backend.py

from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from ..core.ports import Record

logger = logging.getLogger(__name__)

_TASK_COLUMNS = (
    "id",
    "plant_id",
    "plant_name",
    "task_type",
    "scheduled_at",
    "is_completed",
    "completed_at",
    "notes",
)

_PLANT_COLUMNS = (
    "id",
    "name",
    "scientific_name",
    "common_names",
    "description",
    "image_url",
    "care_instructions",
    "planted_at",
    "location",
    "is_user_plant",
    "notes",
    "last_watered_at",
    "last_fertilized_at",
    "last_repotted_at",
)

# Plant fields stored as JSON text.
_PLANT_JSON_COLUMNS = ("common_names", "care_instructions")

_PREFERENCES_KEY = "preferences"


class SQLiteBackend:
    """
    SQLite storage for plants, tasks and preferences.

    The schema is intentionally simple and migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Saves replace a whole collection inside one transaction; `position`
    keeps insertion order.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "plant_care.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._ensure_schema()
        except sqlite3.DatabaseError:
            # Left in place untouched; every load/save will raise and the stores degrade.
            logger.exception("SQLiteBackend: unusable database file db=%s", self._db_path)
            return
        logger.info("SQLiteBackend ready db=%s", self._db_path)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS plants (
                    id TEXT PRIMARY KEY,
                    position INTEGER NOT NULL DEFAULT 0,
                    name TEXT NOT NULL DEFAULT ''
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS care_tasks (
                    id TEXT PRIMARY KEY,
                    position INTEGER NOT NULL DEFAULT 0,
                    plant_id TEXT NOT NULL,
                    task_type TEXT NOT NULL,
                    scheduled_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS settings_kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL DEFAULT '{}'
                )
                """
            )

            def add_cols(table: str, decls: dict[str, str]) -> None:
                cur.execute(f"PRAGMA table_info({table})")
                cols = {row["name"] for row in cur.fetchall()}
                for name, decl in decls.items():
                    if name in cols:
                        continue
                    cur.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
                    logger.info("SQLiteBackend migration: added %s.%s", table, name)

            add_cols(
                "plants",
                {
                    "scientific_name": "TEXT",
                    "common_names": "TEXT",
                    "description": "TEXT",
                    "image_url": "TEXT",
                    "care_instructions": "TEXT",
                    "planted_at": "REAL",
                    "location": "TEXT",
                    "is_user_plant": "INTEGER NOT NULL DEFAULT 0",
                    "notes": "TEXT",
                    "last_watered_at": "REAL",
                    "last_fertilized_at": "REAL",
                    "last_repotted_at": "REAL",
                },
            )
            add_cols(
                "care_tasks",
                {
                    "plant_name": "TEXT NOT NULL DEFAULT ''",
                    "is_completed": "INTEGER NOT NULL DEFAULT 0",
                    "completed_at": "REAL",
                    "notes": "TEXT",
                },
            )

            cur.execute("CREATE INDEX IF NOT EXISTS idx_care_tasks_plant ON care_tasks(plant_id)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _to_json(value: Any) -> str | None:
        if value is None:
            return None
        try:
            return json.dumps(value, ensure_ascii=False)
        except Exception:
            logger.exception("Failed to JSON-encode column value; storing NULL.")
            return None

    @staticmethod
    def _from_json(s: str | None) -> Any:
        if not s:
            return None
        try:
            return json.loads(s)
        except Exception:
            return None

    def _replace_all(self, table: str, columns: tuple[str, ...], rows: list[tuple[Any, ...]]) -> None:
        placeholders = ", ".join("?" for _ in range(len(columns) + 1))
        sql = f"INSERT INTO {table}(position, {', '.join(columns)}) VALUES ({placeholders})"

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(f"DELETE FROM {table}")
            cur.executemany(sql, [(i, *row) for i, row in enumerate(rows)])
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _select_all(self, table: str, columns: tuple[str, ...]) -> list[sqlite3.Row]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(f"SELECT {', '.join(columns)} FROM {table} ORDER BY position ASC")
            return cur.fetchall()
        finally:
            conn.close()

    # ---- CareBackend ----

    def load_tasks(self) -> list[Record]:
        return [dict(row) for row in self._select_all("care_tasks", _TASK_COLUMNS)]

    def save_tasks(self, tasks: list[Record]) -> None:
        rows = [
            (
                t.get("id"),
                t.get("plant_id"),
                t.get("plant_name") or "",
                t.get("task_type"),
                t.get("scheduled_at"),
                1 if t.get("is_completed") else 0,
                t.get("completed_at"),
                t.get("notes"),
            )
            for t in tasks
        ]
        self._replace_all("care_tasks", _TASK_COLUMNS, rows)
        logger.debug("Saved %s task row(s)", len(rows))

    def load_plants(self) -> list[Record]:
        out: list[Record] = []
        for row in self._select_all("plants", _PLANT_COLUMNS):
            rec = dict(row)
            for col in _PLANT_JSON_COLUMNS:
                rec[col] = self._from_json(rec.get(col))
            out.append(rec)
        return out

    def save_plants(self, plants: list[Record]) -> None:
        rows = []
        for p in plants:
            row = []
            for col in _PLANT_COLUMNS:
                val = p.get(col)
                if col in _PLANT_JSON_COLUMNS:
                    val = self._to_json(val)
                elif col == "is_user_plant":
                    val = 1 if val else 0
                row.append(val)
            rows.append(tuple(row))
        self._replace_all("plants", _PLANT_COLUMNS, rows)
        logger.debug("Saved %s plant row(s)", len(rows))

    def load_preferences(self) -> Record | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT value FROM settings_kv WHERE key = ?", (_PREFERENCES_KEY,))
            row = cur.fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        val = self._from_json(row["value"])
        return val if isinstance(val, dict) else None

    def save_preferences(self, preferences: Record) -> None:
        value = self._to_json(preferences) or "{}"
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO settings_kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (_PREFERENCES_KEY, value),
            )
            conn.commit()
        finally:
            conn.close()
