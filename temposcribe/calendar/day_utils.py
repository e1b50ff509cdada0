"""Calendar-day helpers shared by the recurrence engine and calendar views.

Day-level comparisons throughout temposcribe use calendar-day equality in
local time: two instants on the same local date compare equal regardless of
their clock time. "Local" means the ``tz`` argument when one is given, and the
value's own wall clock otherwise.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Optional, Union

DateLike = Union[date, datetime]

# Python weekday numbering (Monday == 0); 6 starts weeks on Sunday.
SUNDAY = 6


def local_date(value: DateLike, tz: Optional[tzinfo] = None) -> date:
    """Return the local calendar date of a datetime or date.

    Args:
        value: Datetime or date to reduce to a calendar day
        tz: Zone to convert timezone-aware datetimes into before taking the date.
            Naive datetimes are already local wall clock and are not converted.

    Returns:
        Calendar date
    """
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            return value.astimezone(tz).date()
        return value.date()
    return value


def is_same_day(first: DateLike, second: DateLike, tz: Optional[tzinfo] = None) -> bool:
    """Check whether two values fall on the same local calendar day."""
    return local_date(first, tz) == local_date(second, tz)


def is_day_within(
    value: DateLike, start: DateLike, end: DateLike, tz: Optional[tzinfo] = None
) -> bool:
    """Check whether ``value``'s day lies in ``[start, end]``, both days inclusive."""
    return local_date(start, tz) <= local_date(value, tz) <= local_date(end, tz)


def start_of_day(value: datetime) -> datetime:
    """Midnight of the value's day, keeping its tzinfo."""
    return datetime.combine(value.date(), time.min, tzinfo=value.tzinfo)


def end_of_day(value: datetime) -> datetime:
    """Last representable instant of the value's day, keeping its tzinfo."""
    return datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)


def duration_between(start: datetime, end: datetime) -> timedelta:
    """Elapsed time from ``start`` to ``end``.

    Aware values are compared in UTC so the result is real elapsed time even
    when both share a zone with a DST transition in between.
    """
    if start.tzinfo is not None and end.tzinfo is not None:
        return end.astimezone(UTC) - start.astimezone(UTC)
    return end - start


def shift_by_duration(start: datetime, duration: timedelta) -> datetime:
    """Add exact elapsed time to ``start``, keeping its tzinfo."""
    if start.tzinfo is None:
        return start + duration
    return (start.astimezone(UTC) + duration).astimezone(start.tzinfo)


# Calendar grids for month and week views


def _resolve_week_start(week_starts_on: Optional[int]) -> int:
    """Explicit week start, or the configured one when None."""
    if week_starts_on is not None:
        return week_starts_on
    # Import here to avoid circular dependency (settings imports the recurrence engine)
    from ..settings import get_settings

    return get_settings().week_starts_on


def days_in_month(day: DateLike) -> list[date]:
    """All dates of the month containing ``day``."""
    first = local_date(day).replace(day=1)
    _, last_day = monthrange(first.year, first.month)
    return [first + timedelta(days=offset) for offset in range(last_day)]


def start_of_week(day: DateLike, week_starts_on: Optional[int] = None) -> date:
    """First date of the week containing ``day``.

    ``week_starts_on`` uses Python weekday numbering; None reads
    ``week_starts_on`` from the global settings (Sunday by default).
    """
    current = local_date(day)
    first_weekday = _resolve_week_start(week_starts_on)
    return current - timedelta(days=(current.weekday() - first_weekday) % 7)


def days_in_week(day: DateLike, week_starts_on: Optional[int] = None) -> list[date]:
    """The seven dates of the week containing ``day``."""
    first = start_of_week(day, week_starts_on)
    return [first + timedelta(days=offset) for offset in range(7)]


def days_grid(day: DateLike, week_starts_on: Optional[int] = None) -> list[date]:
    """Dates of the full weeks covering the month containing ``day``.

    The result always has a multiple of seven entries and includes the
    trailing and leading days of the adjacent months.
    """
    month_days = days_in_month(day)
    week_starts_on = _resolve_week_start(week_starts_on)
    grid_start = start_of_week(month_days[0], week_starts_on)
    grid_end = start_of_week(month_days[-1], week_starts_on) + timedelta(days=6)
    span = (grid_end - grid_start).days + 1
    return [grid_start + timedelta(days=offset) for offset in range(span)]


def is_same_month(first: DateLike, second: DateLike) -> bool:
    """Check whether two values fall in the same month of the same year."""
    first_day, second_day = local_date(first), local_date(second)
    return (first_day.year, first_day.month) == (second_day.year, second_day.month)


def format_date(value: DateLike, fmt: Optional[str] = None) -> str:
    """Format a date for display.

    Without ``fmt`` the medium form is used, e.g. ``"Jan 5, 2024"``.
    """
    if fmt is not None:
        return value.strftime(fmt)
    return f"{value:%b} {value.day}, {value.year}"
