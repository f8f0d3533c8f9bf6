"""Workout log entry model."""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MetricType(str, Enum):
    """Metric plotted for an exercise.

    WEIGHT is the heaviest single effort of a day (max), VOLUME the total
    work of a day (sum of weight x reps x sets, or reps x sets for bodyweight).
    """

    WEIGHT = "weight"
    VOLUME = "volume"


class TimeRange(str, Enum):
    """Symbolic time windows for progress queries."""

    SEVEN_DAYS = "7d"
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    YEAR_TO_DATE = "ytd"
    LAST_YEAR = "ly"
    ALL = "all"


def parse_timestamp(value) -> datetime | None:
    """Parse a stored timestamp, returning None when it is not usable.

    Accepts datetime objects and ISO 8601 strings, including the trailing
    ``Z`` form written by JavaScript clients.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _as_number(value, default: float = 0.0) -> float:
    """Coerce a stored numeric field, falling back to ``default``."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


@dataclass(frozen=True)
class WorkoutEntry:
    """One logged exercise: a number of sets of the same reps and weight.

    A ``weight_per_rep`` of 0 marks a bodyweight exercise. The timestamp is
    kept as stored; use ``parsed_timestamp`` to read it.
    """

    id: str
    timestamp: str
    muscle_group_raw: str
    exercise_name: str
    set_count: int
    reps_per_set: int
    weight_per_rep: float
    user_id: str | None = None

    @property
    def parsed_timestamp(self) -> datetime | None:
        return parse_timestamp(self.timestamp)

    @property
    def is_bodyweight(self) -> bool:
        return self.weight_per_rep == 0

    @property
    def volume(self) -> float:
        """Work done in this entry.

        Weighted entries count weight x reps x sets; bodyweight entries
        count the total repetitions performed.
        """
        repetitions = self.reps_per_set * self.set_count
        if self.weight_per_rep > 0:
            return self.weight_per_rep * repetitions
        return float(repetitions)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "muscle_group": self.muscle_group_raw,
            "exercise": self.exercise_name,
            "sets": self.set_count,
            "reps": self.reps_per_set,
            "weight": self.weight_per_rep,
            "user_id": self.user_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutEntry":
        """Create from dictionary.

        Raises:
            ValueError: If the exercise name is missing.
        """
        exercise = data.get("exercise") or data.get("exercise_name")
        if not exercise or not isinstance(exercise, str):
            raise ValueError("Workout entry has no exercise name")

        timestamp = data.get("timestamp", data.get("date", ""))
        if isinstance(timestamp, datetime):
            timestamp = timestamp.isoformat()

        return cls(
            id=str(data.get("id") or ""),
            timestamp=timestamp if isinstance(timestamp, str) else "",
            muscle_group_raw=str(
                data.get("muscle_group", data.get("muscleGroup", "")) or ""
            ),
            exercise_name=exercise,
            set_count=int(_as_number(data.get("sets"))),
            reps_per_set=int(_as_number(data.get("reps"))),
            weight_per_rep=_as_number(data.get("weight")),
            user_id=data.get("user_id"),
        )


@dataclass(frozen=True)
class PerformedExercise:
    """An exercise that appears at least once in the entry log."""

    name: str
    muscle_group_raw: str

    def to_dict(self) -> dict:
        return {"name": self.name, "muscle_group": self.muscle_group_raw}
