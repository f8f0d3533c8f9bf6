"""Explicit wiring of the progress services for one session."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from ..config import AppConfig
from ..db.engine import init_db
from ..storage.base import ProgressStorage
from ..storage.sqlite import SqliteProgressStorage
from ..utils.muscle_groups import MuscleGroupMapper, map_to_main_group
from .progress import ProgressService
from .selection import ExerciseSelectionResolver
from .targets import TargetValueStore

logger = logging.getLogger(__name__)


class ProgressSession:
    """The services one progress view works with, sharing one storage.

    A session owns a single selection resolver, so remounting the view
    means creating a new session. Use ``ProgressSession.open`` to get a
    session backed by the SQLite database, or construct one directly around
    any storage backend; either way call ``close`` (or leave the ``async
    with`` block) when done.
    """

    def __init__(
        self,
        storage: ProgressStorage,
        config: AppConfig | None = None,
        map_group: MuscleGroupMapper = map_to_main_group,
    ):
        self.config = config or AppConfig()
        self.storage = storage
        self.progress = ProgressService(storage)
        self.targets = TargetValueStore(storage)
        self.resolver = ExerciseSelectionResolver(
            storage, map_group=map_group, config=self.config.resolver
        )
        self.closed = False

    async def close(self) -> None:
        """Finish background writes. The session must not be used afterwards."""
        if self.closed:
            return
        await self.resolver.aclose()
        self.closed = True
        logger.debug("Progress session closed")

    @classmethod
    @asynccontextmanager
    async def open(
        cls,
        config: AppConfig | None = None,
        map_group: MuscleGroupMapper = map_to_main_group,
    ) -> AsyncIterator["ProgressSession"]:
        """Open a session on the configured SQLite database.

        The schema is created if needed.
        """
        config = config or AppConfig()
        db_path = config.storage.db_path
        await init_db(db_path)

        session = cls(SqliteProgressStorage(db_path), config=config, map_group=map_group)
        try:
            yield session
        finally:
            await session.close()
