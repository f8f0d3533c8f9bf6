"""Pytest configuration and fixtures."""

import pytest
import tempfile
from datetime import datetime
from pathlib import Path

from lift_progress.config import AppConfig, StorageConfig
from lift_progress.models.workout import WorkoutEntry
from lift_progress.storage.memory import InMemoryProgressStorage


def build_entry(
    exercise: str = "Bench Press",
    timestamp: str = "2024-06-10T18:00:00",
    muscle_group: str = "Chest",
    sets: int = 3,
    reps: int = 5,
    weight: float = 60,
    entry_id: str = "",
    user_id: str | None = None,
) -> WorkoutEntry:
    """Build a workout entry with sensible defaults."""
    return WorkoutEntry(
        id=entry_id or f"{exercise}-{timestamp}-{weight}",
        timestamp=timestamp,
        muscle_group_raw=muscle_group,
        exercise_name=exercise,
        set_count=sets,
        reps_per_set=reps,
        weight_per_rep=weight,
        user_id=user_id,
    )


@pytest.fixture
def make_entry():
    """Factory for workout entries."""
    return build_entry


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def temp_config(tmp_path):
    """Create a configuration pointing at a temporary data directory."""
    return AppConfig(storage=StorageConfig(data_dir=tmp_path / "data"))


@pytest.fixture
def now():
    """A fixed moment anchoring time windows."""
    return datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture
def sample_entries():
    """A small log across two exercises and several days."""
    return [
        build_entry("Bench Press", "2024-05-01T18:00:00", weight=50),
        build_entry("Leg Curl", "2024-05-02T18:00:00", muscle_group="Hamstrings", weight=30),
        build_entry("Bench Press", "2024-06-01T18:00:00", weight=60),
        build_entry("Pull Up", "2024-06-05T07:30:00", muscle_group="Lats", weight=0, reps=8),
        build_entry("Bench Press", "2024-06-10T18:00:00", weight=60),
        build_entry("Bench Press", "2024-06-10T18:20:00", weight=65),
        build_entry("Bench Press", "2024-06-14T18:00:00", weight=65),
    ]


@pytest.fixture
def memory_storage(sample_entries):
    """In-memory storage seeded with the sample log."""
    return InMemoryProgressStorage(entries=sample_entries)
