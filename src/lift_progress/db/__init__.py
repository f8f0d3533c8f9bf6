"""Database layer for lift-progress."""

from .engine import get_db_path, init_db
from .repositories import AppStateRepository, WorkoutEntryRepository

__all__ = [
    "AppStateRepository",
    "get_db_path",
    "init_db",
    "WorkoutEntryRepository",
]
