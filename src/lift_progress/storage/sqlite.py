"""SQLite storage backend."""

import json
import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import aiosqlite

from ..db.engine import get_db_path
from ..db.repositories import AppStateRepository, WorkoutEntryRepository
from ..models.progress import SelectionState, TargetKey
from ..models.result import ServiceResult
from ..models.workout import WorkoutEntry
from .base import LAST_SELECTION_KEY, TARGET_VALUES_KEY, BaseProgressStorage, utcnow

logger = logging.getLogger(__name__)

# Errors converted to failed results at the storage boundary
STORAGE_ERRORS = (aiosqlite.Error, OSError)


class SqliteProgressStorage(BaseProgressStorage):
    """Storage collaborator backed by the lift-progress SQLite database."""

    def __init__(
        self,
        db_path: Path | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        super().__init__(clock=clock)
        self.db_path = db_path or get_db_path()
        self.entries = WorkoutEntryRepository(self.db_path)
        self.state = AppStateRepository(self.db_path)

    async def load_entries(
        self, user_id: str | None = None
    ) -> ServiceResult[list[WorkoutEntry]]:
        try:
            return ServiceResult.ok(await self.entries.list_all(user_id))
        except STORAGE_ERRORS as e:
            logger.warning("Failed to load workout entries: %s", e)
            return ServiceResult.fail(f"Failed to load workout entries: {e}")

    async def add_entry(self, entry: WorkoutEntry) -> ServiceResult[str]:
        """Append an entry to the log, returning its ID."""
        try:
            return ServiceResult.ok(await self.entries.create(entry))
        except STORAGE_ERRORS as e:
            logger.warning("Failed to save workout entry: %s", e)
            return ServiceResult.fail(f"Failed to save workout entry: {e}")

    async def delete_entry(self, entry_id: str) -> ServiceResult[bool]:
        """Remove an entry from the log."""
        try:
            return ServiceResult.ok(await self.entries.delete(entry_id))
        except STORAGE_ERRORS as e:
            logger.warning("Failed to delete workout entry %s: %s", entry_id, e)
            return ServiceResult.fail(f"Failed to delete workout entry: {e}")

    async def load_target_map(self) -> ServiceResult[dict[TargetKey, float]]:
        try:
            document = await self.state.get(TARGET_VALUES_KEY)
        except json.JSONDecodeError:
            logger.warning("Stored target values are not valid JSON; using none")
            return ServiceResult.ok({})
        except STORAGE_ERRORS as e:
            logger.warning("Failed to load target values: %s", e)
            return ServiceResult.fail(f"Failed to load target values: {e}")
        return ServiceResult.ok(self.decode_target_map(document))

    async def save_target_map(
        self, targets: dict[TargetKey, float]
    ) -> ServiceResult[None]:
        try:
            await self.state.put(TARGET_VALUES_KEY, self.encode_target_map(targets))
        except STORAGE_ERRORS as e:
            logger.warning("Failed to save target values: %s", e)
            return ServiceResult.fail(f"Failed to save target values: {e}")
        return ServiceResult.ok()

    async def load_last_selection(self) -> ServiceResult[SelectionState]:
        try:
            document = await self.state.get(LAST_SELECTION_KEY)
        except json.JSONDecodeError:
            logger.warning("Stored last selection is not valid JSON; using none")
            return ServiceResult.ok(SelectionState())
        except STORAGE_ERRORS as e:
            logger.warning("Failed to load last selection: %s", e)
            return ServiceResult.fail(f"Failed to load last selection: {e}")
        return ServiceResult.ok(self.decode_selection(document))

    async def save_last_selection(self, state: SelectionState) -> ServiceResult[None]:
        try:
            await self.state.put(LAST_SELECTION_KEY, self.stamp_selection(state).to_dict())
        except STORAGE_ERRORS as e:
            logger.warning("Failed to save last selection: %s", e)
            return ServiceResult.fail(f"Failed to save last selection: {e}")
        return ServiceResult.ok()
