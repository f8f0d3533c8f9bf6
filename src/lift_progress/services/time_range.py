"""Time window selection for workout entries."""

import calendar
from datetime import date, datetime, time, timedelta, timezone

from ..models.workout import TimeRange, WorkoutEntry

MONTHS_BY_RANGE = {
    TimeRange.ONE_MONTH: 1,
    TimeRange.THREE_MONTHS: 3,
    TimeRange.SIX_MONTHS: 6,
}


def subtract_months(day: date, months: int) -> date:
    """Go back ``months`` calendar months, clamping the day of month.

    March 31 minus one month is February 28 (or 29 in a leap year).
    """
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _midnight(day: date, like: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=like.tzinfo)


def get_time_window(time_range: TimeRange, now: datetime) -> tuple[datetime, datetime] | None:
    """Compute the inclusive ``(start, end)`` window for a time range.

    Returns:
        The window bounds, or None for ``TimeRange.ALL``.
    """
    time_range = TimeRange(time_range)

    if time_range == TimeRange.ALL:
        return None

    if time_range == TimeRange.SEVEN_DAYS:
        return now - timedelta(days=7), now

    if time_range in MONTHS_BY_RANGE:
        start_day = subtract_months(now.date(), MONTHS_BY_RANGE[time_range])
        return _midnight(start_day, now), now

    if time_range == TimeRange.YEAR_TO_DATE:
        return _midnight(date(now.year, 1, 1), now), now

    # Last year: the whole previous calendar year, December 31 included.
    start = _midnight(date(now.year - 1, 1, 1), now)
    end = datetime.combine(date(now.year - 1, 12, 31), time.max, tzinfo=now.tzinfo)
    return start, end


def align_to(moment: datetime, reference: datetime) -> datetime:
    """Make ``moment`` comparable with ``reference``.

    A naive reference is treated as UTC when the moment is aware; a naive
    moment adopts an aware reference's timezone.
    """
    if reference.tzinfo is None and moment.tzinfo is not None:
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
    if reference.tzinfo is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=reference.tzinfo)
    return moment


def is_within(moment: datetime, window: tuple[datetime, datetime]) -> bool:
    start, end = window
    moment = align_to(moment, start)
    return start <= moment <= end


def filter_entries_by_time_range(
    entries: list[WorkoutEntry],
    time_range: TimeRange,
    now: datetime,
) -> list[WorkoutEntry]:
    """Keep the entries logged inside the window of ``time_range``.

    Entries whose timestamp cannot be parsed are dropped for every bounded
    range. ``TimeRange.ALL`` returns the input unchanged. Input order is kept.

    Args:
        entries: Entries to filter
        time_range: Symbolic window selector
        now: Anchor of the window

    Returns:
        The entries inside the window
    """
    window = get_time_window(time_range, now)
    if window is None:
        return list(entries)

    selected = []
    for entry in entries:
        moment = entry.parsed_timestamp
        if moment is None:
            continue
        if is_within(moment, window):
            selected.append(entry)
    return selected
