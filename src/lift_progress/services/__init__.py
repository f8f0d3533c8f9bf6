"""Progress services for lift-progress."""

from .aggregation import aggregate_daily
from .progress import ProgressService, get_performed_exercises
from .selection import ExerciseSelectionResolver
from .session import ProgressSession
from .stats import compute_stats
from .targets import TargetValueStore
from .time_range import filter_entries_by_time_range, get_time_window

__all__ = [
    "aggregate_daily",
    "compute_stats",
    "ExerciseSelectionResolver",
    "filter_entries_by_time_range",
    "get_performed_exercises",
    "get_time_window",
    "ProgressService",
    "ProgressSession",
    "TargetValueStore",
]
