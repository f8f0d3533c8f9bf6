"""Data access layer for lift-progress."""

import json
import logging
from pathlib import Path
from uuid import uuid4

import aiosqlite

from ..models.workout import WorkoutEntry
from .engine import get_db_path

logger = logging.getLogger(__name__)


class WorkoutEntryRepository:
    """Repository for the workout log."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, entry: WorkoutEntry) -> str:
        """Store an entry, generating an ID when it has none."""
        entry_id = entry.id or uuid4().hex
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO workout_entries
                (id, user_id, recorded_at, muscle_group, exercise, sets, reps, weight)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry_id,
                    entry.user_id,
                    entry.timestamp,
                    entry.muscle_group_raw,
                    entry.exercise_name,
                    entry.set_count,
                    entry.reps_per_set,
                    entry.weight_per_rep,
                ),
            )
            await db.commit()
        return entry_id

    async def list_all(self, user_id: str | None = None) -> list[WorkoutEntry]:
        """List entries in insertion order, optionally for one user.

        Rows that no longer form a valid entry are skipped.
        """
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            if user_id:
                cursor = await db.execute(
                    "SELECT * FROM workout_entries WHERE user_id = ? ORDER BY seq",
                    (user_id,),
                )
            else:
                cursor = await db.execute("SELECT * FROM workout_entries ORDER BY seq")
            rows = await cursor.fetchall()

        entries = []
        for row in rows:
            try:
                entries.append(self._row_to_entry(row))
            except (TypeError, ValueError) as e:
                logger.warning("Skipping malformed workout entry %s: %s", row["id"], e)
        return entries

    async def delete(self, entry_id: str) -> bool:
        """Delete an entry. Returns True if a row was removed."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM workout_entries WHERE id = ?", (entry_id,)
            )
            await db.commit()
            return cursor.rowcount > 0

    def _row_to_entry(self, row: aiosqlite.Row) -> WorkoutEntry:
        """Convert a database row to a WorkoutEntry."""
        return WorkoutEntry.from_dict(
            {
                "id": row["id"],
                "timestamp": row["recorded_at"],
                "muscle_group": row["muscle_group"],
                "exercise": row["exercise"],
                "sets": row["sets"],
                "reps": row["reps"],
                "weight": row["weight"],
                "user_id": row["user_id"],
            }
        )


class AppStateRepository:
    """Repository for whole-record JSON documents keyed by name."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def get(self, key: str):
        """Get a decoded document, or None if it was never written.

        Raises:
            json.JSONDecodeError: If the stored document is not valid JSON.
        """
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT value FROM app_state WHERE key = ?", (key,)
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    async def put(self, key: str, value) -> None:
        """Replace a document."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO app_state (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, json.dumps(value)),
            )
            await db.commit()
