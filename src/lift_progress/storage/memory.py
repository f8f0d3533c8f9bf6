"""In-memory storage backend."""

from collections.abc import Callable
from datetime import datetime

from ..models.progress import SelectionState, TargetKey
from ..models.result import ServiceResult
from ..models.workout import WorkoutEntry
from .base import LAST_SELECTION_KEY, TARGET_VALUES_KEY, BaseProgressStorage, utcnow


class InMemoryProgressStorage(BaseProgressStorage):
    """Storage collaborator keeping its records in dictionaries.

    Records are stored in their JSON document form, the way the SQLite
    backend stores them. Operation names listed in ``failing`` return a
    failed result, which lets callers exercise their error paths.
    """

    def __init__(
        self,
        entries: list[WorkoutEntry] | None = None,
        documents: dict | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        super().__init__(clock=clock)
        self.entries: list[WorkoutEntry] = list(entries or [])
        self.documents: dict = dict(documents or {})
        self.failing: set[str] = set()
        self.calls: list[str] = []

    def _check(self, operation: str) -> ServiceResult | None:
        self.calls.append(operation)
        if operation in self.failing:
            return ServiceResult.fail(f"{operation} failed")
        return None

    async def load_entries(
        self, user_id: str | None = None
    ) -> ServiceResult[list[WorkoutEntry]]:
        if failure := self._check("load_entries"):
            return failure
        if user_id:
            return ServiceResult.ok([e for e in self.entries if e.user_id == user_id])
        return ServiceResult.ok(list(self.entries))

    async def load_target_map(self) -> ServiceResult[dict[TargetKey, float]]:
        if failure := self._check("load_target_map"):
            return failure
        return ServiceResult.ok(self.decode_target_map(self.documents.get(TARGET_VALUES_KEY)))

    async def save_target_map(
        self, targets: dict[TargetKey, float]
    ) -> ServiceResult[None]:
        if failure := self._check("save_target_map"):
            return failure
        self.documents[TARGET_VALUES_KEY] = self.encode_target_map(targets)
        return ServiceResult.ok()

    async def load_last_selection(self) -> ServiceResult[SelectionState]:
        if failure := self._check("load_last_selection"):
            return failure
        return ServiceResult.ok(self.decode_selection(self.documents.get(LAST_SELECTION_KEY)))

    async def save_last_selection(self, state: SelectionState) -> ServiceResult[None]:
        if failure := self._check("save_last_selection"):
            return failure
        self.documents[LAST_SELECTION_KEY] = self.stamp_selection(state).to_dict()
        return ServiceResult.ok()
