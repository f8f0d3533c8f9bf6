"""Progress query service: filter, aggregate and summarise an exercise."""

import logging
from datetime import datetime, timezone

from ..models.progress import ExerciseProgress, ProgressQuery
from ..models.result import ServiceResult
from ..models.workout import PerformedExercise, TimeRange, WorkoutEntry
from ..storage.base import ProgressStorage
from .aggregation import aggregate_daily
from .stats import compute_stats
from .time_range import filter_entries_by_time_range

logger = logging.getLogger(__name__)


def _sort_key(moment: datetime) -> float:
    """Order naive and aware timestamps together, naive read as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()


def get_performed_exercises(entries: list[WorkoutEntry]) -> list[PerformedExercise]:
    """List the distinct exercises of a log in first-appearance order.

    The muscle group of an exercise is the one recorded on its first entry.
    """
    seen: dict[str, PerformedExercise] = {}
    for entry in entries:
        if entry.exercise_name not in seen:
            seen[entry.exercise_name] = PerformedExercise(
                name=entry.exercise_name,
                muscle_group_raw=entry.muscle_group_raw,
            )
    return list(seen.values())


class ProgressService:
    """Answers progress queries from the entries held by a storage backend."""

    def __init__(self, storage: ProgressStorage):
        self.storage = storage

    async def _load_exercise_entries(
        self, exercise_name: str, user_id: str | None
    ) -> ServiceResult[list[WorkoutEntry]]:
        result = await self.storage.load_entries(user_id)
        if not result.success:
            return ServiceResult.fail(result.error or "Failed to load workout entries")
        return ServiceResult.ok(
            [e for e in result.data or [] if e.exercise_name == exercise_name]
        )

    async def query_progress(self, query: ProgressQuery) -> ServiceResult[ExerciseProgress]:
        """Build the chart and statistics of one exercise.

        Args:
            query: Exercise, window, metric and the ``now`` anchoring the window

        Returns:
            The per-day points and their statistics, or the storage error
        """
        if not query.exercise_name:
            return ServiceResult.ok(ExerciseProgress(exercise_name=""))

        loaded = await self._load_exercise_entries(query.exercise_name, query.user_id)
        if not loaded.success:
            return ServiceResult.fail(loaded.error)

        entries = filter_entries_by_time_range(loaded.data, query.time_range, query.now)
        points = aggregate_daily(entries)
        stats = compute_stats(points, query.metric_type)

        logger.debug(
            "%s over %s: %d entries, %d points",
            query.exercise_name,
            TimeRange(query.time_range).value,
            len(entries),
            len(points),
        )
        return ServiceResult.ok(
            ExerciseProgress(exercise_name=query.exercise_name, points=points, stats=stats)
        )

    async def get_performed_exercises(
        self, user_id: str | None = None
    ) -> ServiceResult[list[PerformedExercise]]:
        """List the exercises present in the log, in discovery order."""
        result = await self.storage.load_entries(user_id)
        if not result.success:
            return ServiceResult.fail(result.error or "Failed to load workout entries")
        return ServiceResult.ok(get_performed_exercises(result.data or []))

    async def get_last_entry(
        self, exercise_name: str, user_id: str | None = None
    ) -> ServiceResult[WorkoutEntry | None]:
        """Get the most recent entry of an exercise, None if never logged.

        Entries with an unparsable timestamp are not considered.
        """
        loaded = await self._load_exercise_entries(exercise_name, user_id)
        if not loaded.success:
            return ServiceResult.fail(loaded.error)

        dated = [(e.parsed_timestamp, e) for e in loaded.data]
        dated = [(moment, e) for moment, e in dated if moment is not None]
        if not dated:
            return ServiceResult.ok(None)
        # Stable on ties: the later-stored entry wins
        latest = dated[0]
        for moment, entry in dated[1:]:
            if _sort_key(moment) >= _sort_key(latest[0]):
                latest = (moment, entry)
        return ServiceResult.ok(latest[1])
