"""Per-exercise target values."""

import logging
import math

from ..models.progress import TargetKey
from ..models.result import ServiceResult
from ..models.workout import MetricType
from ..storage.base import ProgressStorage

logger = logging.getLogger(__name__)


def validate_target_value(value) -> str | None:
    """Check a target value entered by the user.

    Returns:
        A user-facing error message, or None if the value is acceptable
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "Target value must be a number"
    if math.isnan(value) or math.isinf(value):
        return "Target value must be a finite number"
    if value <= 0:
        return "Target value must be greater than zero"
    return None


class TargetValueStore:
    """Target values keyed by exercise and metric.

    The whole map is one stored record: each ``set`` re-reads it, merges a
    single key and writes it back. Last write wins; there is no protection
    against two concurrent writers.
    """

    def __init__(self, storage: ProgressStorage):
        self.storage = storage

    async def get(self, exercise_name: str, metric_type: MetricType) -> float:
        """Get the target of an exercise and metric, 0 when unset.

        A failed load is logged and reads as unset.
        """
        result = await self.storage.load_target_map()
        if not result.success:
            logger.warning("Reading targets failed, treating as unset: %s", result.error)
            return 0
        return (result.data or {}).get(TargetKey(exercise_name, MetricType(metric_type)), 0)

    async def set(
        self, exercise_name: str, metric_type: MetricType, value
    ) -> ServiceResult[None]:
        """Store a target value.

        Invalid values are rejected before storage is touched. If the current
        map cannot be read nothing is written.
        """
        if not exercise_name:
            return ServiceResult.fail("Please select an exercise first")
        error = validate_target_value(value)
        if error:
            return ServiceResult.fail(error)

        current = await self.storage.load_target_map()
        if not current.success:
            return ServiceResult.fail(current.error or "Failed to load target values")

        metric = MetricType(metric_type)
        targets = dict(current.data or {})
        targets[TargetKey(exercise_name, metric)] = float(value)

        saved = await self.storage.save_target_map(targets)
        if not saved.success:
            return ServiceResult.fail(saved.error or "Failed to save target value")

        logger.debug("Target for %s (%s) set to %s", exercise_name, metric.value, value)
        return ServiceResult.ok()

    async def load_all(self) -> ServiceResult[dict[TargetKey, float]]:
        """Load every stored target."""
        return await self.storage.load_target_map()
