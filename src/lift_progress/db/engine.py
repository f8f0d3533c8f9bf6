"""Database engine setup and initialization."""

from pathlib import Path

import aiosqlite

from ..config import StorageConfig


def get_db_path(config: StorageConfig | None = None) -> Path:
    """Get the database file path, creating its directory."""
    if config is None:
        config = StorageConfig()
    config.data_dir.mkdir(parents=True, exist_ok=True)
    return config.db_path


async def _run_migrations(db: aiosqlite.Connection) -> None:
    """Run database migrations for schema updates."""
    # Databases created before per-user logs lack the user_id column
    cursor = await db.execute("PRAGMA table_info(workout_entries)")
    columns = await cursor.fetchall()
    column_names = {col[1] for col in columns}

    if "user_id" not in column_names:
        await db.execute("ALTER TABLE workout_entries ADD COLUMN user_id TEXT")

    await db.commit()


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        # Workout log: one row per logged exercise
        await db.execute("""
            CREATE TABLE IF NOT EXISTS workout_entries (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT UNIQUE NOT NULL,
                user_id TEXT,
                recorded_at TEXT NOT NULL,
                muscle_group TEXT DEFAULT '',
                exercise TEXT NOT NULL,
                sets INTEGER NOT NULL,
                reps INTEGER NOT NULL,
                weight REAL NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Whole-record JSON documents (target values, last selection)
        await db.execute("""
            CREATE TABLE IF NOT EXISTS app_state (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.commit()

        # Run migrations for existing databases
        await _run_migrations(db)

        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_workout_entries_exercise
            ON workout_entries(exercise)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_workout_entries_user
            ON workout_entries(user_id)
        """)

        await db.commit()
