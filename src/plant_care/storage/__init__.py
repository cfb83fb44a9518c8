"""
Storage backends for the care collections.

Both implement the CareBackend port (core/ports.py):
- sqlite_backend.py: SQLite file, one table per collection
- json_backend.py: one JSON file per collection, atomic replace on write
"""

from .json_backend import JsonFileBackend
from .sqlite_backend import SQLiteBackend

__all__ = ["JsonFileBackend", "SQLiteBackend"]
