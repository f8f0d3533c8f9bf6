"""Per-day aggregation of workout entries into chart points."""

from datetime import date, datetime

from ..models.progress import ChartPoint
from ..models.workout import WorkoutEntry


def _reduce_day(day_entries: list[tuple[datetime, WorkoutEntry]]) -> ChartPoint:
    """Reduce one day's entries to a single point.

    Peak weight is the heaviest weighted entry of the day (max); bodyweight
    entries are left out of it. Total volume adds up every entry (sum),
    bodyweight entries included.
    """
    first_moment = day_entries[0][0]
    weights = [e.weight_per_rep for _, e in day_entries if e.weight_per_rep > 0]
    return ChartPoint(
        date=first_moment,
        peak_weight=max(weights, default=0),
        total_volume=sum(e.volume for _, e in day_entries),
    )


def aggregate_daily(entries: list[WorkoutEntry]) -> list[ChartPoint]:
    """Group entries by calendar day and reduce each day to one point.

    Entries with an unparsable timestamp are skipped.

    Returns:
        One point per distinct day, sorted ascending by date
    """
    by_day: dict[date, list[tuple[datetime, WorkoutEntry]]] = {}
    for entry in entries:
        moment = entry.parsed_timestamp
        if moment is None:
            continue
        by_day.setdefault(moment.date(), []).append((moment, entry))

    return [_reduce_day(by_day[day]) for day in sorted(by_day)]
