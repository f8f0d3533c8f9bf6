"""Data models for lift-progress."""

from .progress import (
    ChartPoint,
    ExerciseProgress,
    ProgressQuery,
    ProgressStats,
    ResolutionPhase,
    ResolutionReason,
    ResolverState,
    SelectionState,
    TargetKey,
)
from .result import ProgressError, ServiceResult
from .workout import MetricType, PerformedExercise, TimeRange, WorkoutEntry

__all__ = [
    "ChartPoint",
    "ExerciseProgress",
    "MetricType",
    "PerformedExercise",
    "ProgressError",
    "ProgressQuery",
    "ProgressStats",
    "ResolutionPhase",
    "ResolutionReason",
    "ResolverState",
    "SelectionState",
    "ServiceResult",
    "TargetKey",
    "TimeRange",
    "WorkoutEntry",
]
