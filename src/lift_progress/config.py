"""Configuration for lift-progress components."""

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from .models.workout import MetricType, TimeRange

logger = logging.getLogger(__name__)

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent / "data"

DATA_DIR_ENV = "LIFT_PROGRESS_DATA_DIR"
SELECTION_MAX_AGE_ENV = "LIFT_PROGRESS_SELECTION_MAX_AGE_DAYS"


@dataclass(frozen=True)
class StorageConfig:
    """Where the SQLite database lives."""

    data_dir: Path = DATA_DIR
    db_filename: str = "lift_progress.db"

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_filename


@dataclass(frozen=True)
class ResolverConfig:
    """Default-selection resolver settings.

    A remembered selection older than ``selection_max_age`` is ignored;
    None keeps it indefinitely.
    """

    selection_max_age: timedelta | None = None


@dataclass(frozen=True)
class QueryDefaults:
    """Query parameters used when a caller does not choose them."""

    time_range: TimeRange = TimeRange.ONE_MONTH
    metric_type: MetricType = MetricType.WEIGHT


@dataclass(frozen=True)
class AppConfig:
    """Configuration of a lift-progress session."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    defaults: QueryDefaults = field(default_factory=QueryDefaults)

    @classmethod
    def from_env(cls, environ: dict | None = None) -> "AppConfig":
        """Build a configuration from environment variables.

        Reads ``LIFT_PROGRESS_DATA_DIR`` and
        ``LIFT_PROGRESS_SELECTION_MAX_AGE_DAYS``; unset or invalid values keep
        the defaults.
        """
        if environ is None:
            environ = dict(os.environ)

        storage = StorageConfig()
        data_dir = environ.get(DATA_DIR_ENV)
        if data_dir:
            storage = StorageConfig(data_dir=Path(data_dir).expanduser())

        resolver = ResolverConfig()
        max_age = environ.get(SELECTION_MAX_AGE_ENV)
        if max_age:
            try:
                days = float(max_age)
            except ValueError:
                logger.warning("Ignoring invalid %s=%r", SELECTION_MAX_AGE_ENV, max_age)
            else:
                if days > 0:
                    resolver = ResolverConfig(selection_max_age=timedelta(days=days))

        return cls(storage=storage, resolver=resolver)
