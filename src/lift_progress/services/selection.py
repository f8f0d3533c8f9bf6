"""Default exercise selection for the progress view."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from ..config import ResolverConfig
from ..models.progress import (
    ResolutionPhase,
    ResolutionReason,
    ResolverState,
    SelectionState,
)
from ..models.workout import PerformedExercise
from ..storage.base import ProgressStorage, utcnow
from ..utils.muscle_groups import MuscleGroupMapper, map_to_main_group

logger = logging.getLogger(__name__)


class ExerciseSelectionResolver:
    """Resolves which muscle group and exercise a user sees first.

    One resolver lives as long as the view that owns it. Resolution tries,
    in order: the user's own choice this session, the remembered selection
    if it still matches the log, then the first exercise of the log. Once
    resolved the state is latched and automatic resolution never runs
    again; a manual selection latches it too and always wins.

    Selections made with ``select_exercise`` are persisted in the background.
    Call ``aclose`` when the view goes away so no write outlives it.
    """

    def __init__(
        self,
        storage: ProgressStorage,
        map_group: MuscleGroupMapper = map_to_main_group,
        config: ResolverConfig | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.storage = storage
        self.map_group = map_group
        self.config = config or ResolverConfig()
        self.clock = clock

        self._state = ResolverState()
        self._selection = SelectionState()
        self._attempted_size: int | None = None
        self._pending_writes: set[asyncio.Task] = set()

    @property
    def state(self) -> ResolverState:
        return self._state

    @property
    def selection(self) -> SelectionState:
        return self._selection

    @property
    def muscle_group(self) -> str:
        return self._selection.muscle_group

    @property
    def exercise_name(self) -> str:
        return self._selection.exercise_name

    def _latch(self, reason: ResolutionReason, selection: SelectionState) -> None:
        self._selection = selection
        if self._state.reason != reason:
            logger.debug("Selection resolved by %s: %s", reason.value, selection)
        self._state = ResolverState.resolved(reason)

    async def resolve_default_selection(
        self, performed_exercises: list[PerformedExercise]
    ) -> SelectionState:
        """Pick the selection shown when the view opens.

        Work is keyed off the size of ``performed_exercises``, never its
        identity: once resolved this returns the latched selection, and an
        unresolved call repeats only when the list has grown or shrunk. An
        empty list leaves the resolver unresolved.

        Args:
            performed_exercises: Exercises present in the log, discovery order

        Returns:
            The selection in effect after this call
        """
        if self._state.is_resolved:
            return self._selection

        size = len(performed_exercises)
        if size == 0 or size == self._attempted_size:
            return self._selection
        if self._state.phase == ResolutionPhase.RESOLVING:
            return self._selection

        self._attempted_size = size
        self._state = ResolverState(phase=ResolutionPhase.RESOLVING)

        try:
            return await self._resolve(performed_exercises)
        except BaseException:
            # Cancelled or failed midway: leave the resolver able to run again
            if not self._state.is_resolved:
                self._state = ResolverState()
                self._attempted_size = None
            raise

    async def _resolve(self, performed_exercises: list[PerformedExercise]) -> SelectionState:
        last_known = await self._load_last_known(performed_exercises)

        # The user chose while the load was suspended: their choice stands
        if self._state.is_manual:
            return self._selection

        if last_known is not None:
            self._latch(ResolutionReason.LAST_KNOWN, last_known)
            return self._selection

        first = performed_exercises[0]
        self._latch(
            ResolutionReason.FALLBACK,
            SelectionState(
                muscle_group=self.map_group(first.muscle_group_raw),
                exercise_name=first.name,
            ),
        )
        return self._selection

    async def _load_last_known(
        self, performed_exercises: list[PerformedExercise]
    ) -> SelectionState | None:
        """Load the remembered selection if it is still valid.

        A failed load counts as no remembered selection.
        """
        result = await self.storage.load_last_selection()
        if not result.success:
            logger.warning("Loading last selection failed: %s", result.error)
            return None

        saved = result.data or SelectionState()
        if saved.is_empty:
            return None
        if self._is_expired(saved):
            logger.debug("Last selection from %s has expired", saved.saved_at)
            return None

        performed = next(
            (p for p in performed_exercises if p.name == saved.exercise_name), None
        )
        if performed is None:
            return None

        saved_group = self.map_group(saved.muscle_group)
        if self.map_group(performed.muscle_group_raw) != saved_group:
            return None

        return SelectionState(muscle_group=saved_group, exercise_name=saved.exercise_name)

    def _is_expired(self, saved: SelectionState) -> bool:
        max_age = self.config.selection_max_age
        if max_age is None or saved.saved_at is None:
            return False
        saved_at = saved.saved_at
        if saved_at.tzinfo is None:
            saved_at = saved_at.replace(tzinfo=timezone.utc)
        return self.clock() - saved_at > max_age

    def select_muscle_group(self, muscle_group: str) -> SelectionState:
        """Record a manual muscle group choice; the exercise must be re-picked."""
        self._latch(
            ResolutionReason.MANUAL,
            SelectionState(muscle_group=muscle_group, exercise_name=""),
        )
        return self._selection

    def select_exercise(self, exercise_name: str) -> SelectionState:
        """Record a manual exercise choice and remember it.

        Must be called from a running event loop: the write runs there in
        the background and a failure is logged. Without a selected muscle
        group nothing is remembered.
        """
        self._latch(
            ResolutionReason.MANUAL,
            SelectionState(
                muscle_group=self._selection.muscle_group,
                exercise_name=exercise_name,
            ),
        )

        if not self._selection.muscle_group:
            logger.debug("No muscle group selected, not remembering %s", exercise_name)
            return self._selection

        task = asyncio.get_running_loop().create_task(self._persist(self._selection))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)
        return self._selection

    async def _persist(self, selection: SelectionState) -> None:
        result = await self.storage.save_last_selection(selection)
        if not result.success:
            logger.warning("Remembering selection failed: %s", result.error)

    def exercises_for_group(
        self, performed_exercises: list[PerformedExercise], muscle_group: str | None = None
    ) -> list[PerformedExercise]:
        """List performed exercises belonging to a main muscle group.

        Defaults to the selected muscle group.
        """
        group = self.map_group(muscle_group if muscle_group is not None else self.muscle_group)
        if not group:
            return []
        return [p for p in performed_exercises if self.map_group(p.muscle_group_raw) == group]

    @property
    def has_pending_writes(self) -> bool:
        return bool(self._pending_writes)

    async def aclose(self) -> None:
        """Wait for background selection writes to finish."""
        if not self._pending_writes:
            return
        results = await asyncio.gather(*self._pending_writes, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.warning("Remembering selection failed: %s", result)
