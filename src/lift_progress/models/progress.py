"""Derived progress models: chart points, statistics and selections."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NamedTuple

from .workout import MetricType, TimeRange


@dataclass(frozen=True)
class ChartPoint:
    """One aggregated day of training for an exercise.

    ``date`` keeps the full timestamp of the first entry of that day;
    grouping itself only looks at the calendar date.
    """

    date: datetime
    peak_weight: float
    total_volume: float

    def value(self, metric_type: MetricType) -> float:
        """Read the field plotted for ``metric_type``."""
        if metric_type == MetricType.VOLUME:
            return self.total_volume
        return self.peak_weight

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "peak_weight": self.peak_weight,
            "total_volume": self.total_volume,
        }


@dataclass(frozen=True)
class ProgressStats:
    """Summary statistics over the valid samples of a chart."""

    sample_count: int = 0
    peak_value: float = 0
    latest_value: float = 0
    improvement_percent: float = 0

    def to_dict(self) -> dict:
        return {
            "sample_count": self.sample_count,
            "peak_value": self.peak_value,
            "latest_value": self.latest_value,
            "improvement_percent": self.improvement_percent,
        }


@dataclass(frozen=True)
class ExerciseProgress:
    """Result of a progress query: the chart and its statistics."""

    exercise_name: str
    points: list[ChartPoint] = field(default_factory=list)
    stats: ProgressStats = field(default_factory=ProgressStats)

    def to_dict(self) -> dict:
        return {
            "exercise": self.exercise_name,
            "points": [p.to_dict() for p in self.points],
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class ProgressQuery:
    """Parameters of a progress query.

    ``now`` anchors the time window, so the same query always selects the
    same entries.
    """

    exercise_name: str
    now: datetime
    time_range: TimeRange = TimeRange.ALL
    metric_type: MetricType = MetricType.WEIGHT
    user_id: str | None = None


class TargetKey(NamedTuple):
    """Composite key of a target value."""

    exercise_name: str
    metric_type: MetricType

    def to_storage_key(self) -> str:
        return f"{self.exercise_name}::{MetricType(self.metric_type).value}"

    @classmethod
    def from_storage_key(cls, key: str) -> "TargetKey":
        """Parse a stored key.

        Raises:
            ValueError: If the key has no known metric suffix.
        """
        name, sep, metric = key.rpartition("::")
        if not sep or not name:
            raise ValueError(f"Malformed target key: {key!r}")
        return cls(name, MetricType(metric))


@dataclass(frozen=True)
class SelectionState:
    """The muscle group and exercise shown by default.

    Empty strings mean nothing is selected.
    """

    muscle_group: str = ""
    exercise_name: str = ""
    saved_at: datetime | None = None

    @property
    def is_empty(self) -> bool:
        return not self.muscle_group or not self.exercise_name

    def to_dict(self) -> dict:
        return {
            "muscle_group": self.muscle_group,
            "exercise": self.exercise_name,
            "saved_at": self.saved_at.isoformat() if self.saved_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SelectionState":
        """Create from dictionary, degrading to the empty selection."""
        if not isinstance(data, dict):
            return cls()

        muscle_group = data.get("muscle_group", data.get("muscleGroup", ""))
        exercise = data.get("exercise", data.get("exercise_name", ""))
        if not isinstance(muscle_group, str) or not isinstance(exercise, str):
            return cls()

        saved_at = None
        if isinstance(data.get("saved_at"), str):
            try:
                saved_at = datetime.fromisoformat(data["saved_at"])
            except ValueError:
                saved_at = None

        return cls(muscle_group=muscle_group, exercise_name=exercise, saved_at=saved_at)


class ResolutionPhase(str, Enum):
    """Lifecycle of a default-selection resolver."""

    UNINITIALIZED = "uninitialized"
    RESOLVING = "resolving"
    RESOLVED = "resolved"


class ResolutionReason(str, Enum):
    """Why a resolver settled on its selection."""

    MANUAL = "manual"
    LAST_KNOWN = "last_known"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ResolverState:
    """Tagged state of a resolver: a phase plus, once resolved, its reason."""

    phase: ResolutionPhase = ResolutionPhase.UNINITIALIZED
    reason: ResolutionReason | None = None

    @property
    def is_resolved(self) -> bool:
        return self.phase == ResolutionPhase.RESOLVED

    @property
    def is_manual(self) -> bool:
        return self.reason == ResolutionReason.MANUAL

    @classmethod
    def resolved(cls, reason: ResolutionReason) -> "ResolverState":
        return cls(phase=ResolutionPhase.RESOLVED, reason=reason)

    def get_status_display(self) -> str:
        """Get a human-readable status string."""
        if self.reason is None:
            return self.phase.value.replace("_", " ").title()
        return f"Resolved ({self.reason.value.replace('_', ' ')})"
