"""Base protocol for progress storage backends."""

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from ..models.progress import SelectionState, TargetKey
from ..models.result import ServiceResult
from ..models.workout import WorkoutEntry

logger = logging.getLogger(__name__)

TARGET_VALUES_KEY = "target_values"
LAST_SELECTION_KEY = "last_selection"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@runtime_checkable
class ProgressStorage(Protocol):
    """Protocol for the storage collaborator.

    Every method returns a ServiceResult and never raises.
    """

    async def load_entries(
        self, user_id: str | None = None
    ) -> ServiceResult[list[WorkoutEntry]]:
        """Load the workout log, in stored order."""
        ...

    async def load_target_map(self) -> ServiceResult[dict[TargetKey, float]]:
        """Load every target value."""
        ...

    async def save_target_map(
        self, targets: dict[TargetKey, float]
    ) -> ServiceResult[None]:
        """Replace the whole target map."""
        ...

    async def load_last_selection(self) -> ServiceResult[SelectionState]:
        """Load the last confirmed selection (empty if none)."""
        ...

    async def save_last_selection(self, state: SelectionState) -> ServiceResult[None]:
        """Replace the last confirmed selection."""
        ...


class BaseProgressStorage(ABC):
    """Base class for storage backends with common encoding helpers."""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock

    @abstractmethod
    async def load_entries(
        self, user_id: str | None = None
    ) -> ServiceResult[list[WorkoutEntry]]:
        pass

    @abstractmethod
    async def load_target_map(self) -> ServiceResult[dict[TargetKey, float]]:
        pass

    @abstractmethod
    async def save_target_map(
        self, targets: dict[TargetKey, float]
    ) -> ServiceResult[None]:
        pass

    @abstractmethod
    async def load_last_selection(self) -> ServiceResult[SelectionState]:
        pass

    @abstractmethod
    async def save_last_selection(self, state: SelectionState) -> ServiceResult[None]:
        pass

    def stamp_selection(self, state: SelectionState) -> SelectionState:
        """Return a copy of ``state`` stamped with the save time."""
        return SelectionState(
            muscle_group=state.muscle_group,
            exercise_name=state.exercise_name,
            saved_at=self.clock(),
        )

    @staticmethod
    def encode_target_map(targets: dict[TargetKey, float]) -> dict[str, float]:
        """Convert a target map to its JSON document."""
        return {TargetKey(*key).to_storage_key(): value for key, value in targets.items()}

    @staticmethod
    def decode_target_map(document) -> dict[TargetKey, float]:
        """Convert a stored document to a target map.

        A document of the wrong shape decodes to an empty map; individual
        malformed keys or values are dropped.
        """
        if not isinstance(document, dict):
            if document is not None:
                logger.warning("Ignoring malformed target map of type %s", type(document).__name__)
            return {}

        targets: dict[TargetKey, float] = {}
        for raw_key, value in document.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                logger.warning("Dropping non-numeric target for %r", raw_key)
                continue
            if not math.isfinite(value):
                continue
            try:
                key = TargetKey.from_storage_key(raw_key)
            except ValueError:
                logger.warning("Dropping malformed target key %r", raw_key)
                continue
            targets[key] = float(value)
        return targets

    @staticmethod
    def decode_selection(document) -> SelectionState:
        """Convert a stored document to a selection, empty if malformed."""
        if document is None:
            return SelectionState()
        if not isinstance(document, dict):
            logger.warning("Ignoring malformed last selection of type %s", type(document).__name__)
        return SelectionState.from_dict(document)
