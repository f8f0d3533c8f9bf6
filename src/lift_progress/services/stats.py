"""Summary statistics over aggregated chart points."""

import math
from numbers import Real

from ..models.progress import ChartPoint, ProgressStats
from ..models.workout import MetricType


def _is_valid_sample(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value) and value > 0


def round_half_up(value: float, digits: int = 1) -> float:
    """Round to ``digits`` decimals, halves rounding up (12.25 -> 12.3)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def compute_stats(points: list[ChartPoint], metric_type: MetricType) -> ProgressStats:
    """Compute statistics of one metric over a chart.

    Non-positive and non-finite values are not samples. Improvement compares
    the first and last valid samples, so a bodyweight day with no weighted
    sets does not drag a weight trend down to zero.
    """
    if not points:
        return ProgressStats()

    values = [p.value(metric_type) for p in points]
    values = [v for v in values if _is_valid_sample(v)]
    if not values:
        return ProgressStats()

    improvement = 0.0
    first, last = values[0], values[-1]
    if len(values) > 1 and first != 0:
        improvement = round_half_up((last - first) / first * 100)

    return ProgressStats(
        sample_count=len(values),
        peak_value=max(values),
        latest_value=last,
        improvement_percent=improvement,
    )
