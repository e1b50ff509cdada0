"""Recurrence expansion engine.

Turns event templates carrying a RecurrenceRule into concrete occurrences for
a queried day or inclusive day range. All functions are pure: they read their
arguments, keep no state between calls, and return fresh lists and copies.

Stepping uses ``dateutil.relativedelta`` anchored on the template start: the
k-th occurrence after the first is ``start + relativedelta(<unit>=k * interval)``.
Month and year steps clamp to the last valid day (Jan 31 + 1 month = Feb 28/29,
Jan 31 + 2 months = Mar 31) without drifting on later steps.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

from .day_utils import DateLike, duration_between, local_date, shift_by_duration
from .models import CalendarEvent, CountEnd, RecurrenceFrequency, RecurrenceRule, UntilEnd

logger = logging.getLogger(__name__)

# Enough for one year of daily occurrences per event per query.
DEFAULT_MAX_ITERATIONS = 366

_STEP_UNITS: dict[RecurrenceFrequency, str] = {
    RecurrenceFrequency.DAILY: "days",
    RecurrenceFrequency.WEEKLY: "weeks",
    RecurrenceFrequency.MONTHLY: "months",
    RecurrenceFrequency.YEARLY: "years",
}


def effective_interval(rule: RecurrenceRule) -> int:
    """Interval used for stepping; values below 1 step as 1."""
    if rule.interval < 1:
        logger.debug("Recurrence interval %d is below 1; stepping with 1", rule.interval)
        return 1
    return rule.interval


def _nth_start(
    start: datetime, frequency: RecurrenceFrequency, interval: int, steps: int
) -> Optional[datetime]:
    """Start of the occurrence ``steps`` steps after ``start``, or None past datetime range."""
    try:
        return start + relativedelta(**{_STEP_UNITS[frequency]: steps * interval})
    except (OverflowError, ValueError):
        logger.debug(
            "Stepping %s by %d %s leaves the supported datetime range",
            start,
            steps * interval,
            _STEP_UNITS[frequency],
        )
        return None


def iter_occurrence_starts(
    event: CalendarEvent, tz: Optional[tzinfo] = None
) -> Iterator[tuple[int, datetime]]:
    """Yield ``(index, start)`` for every occurrence of ``event`` in order.

    The index is 1-based and the template start is always occurrence 1. The
    iterator ends when the ``count`` bound is reached or a candidate's day is
    past the ``until`` day. For ``never`` rules it is unbounded; callers must
    stop on their own.

    Args:
        event: Event template
        tz: Zone used for the ``until`` day comparison

    Yields:
        Tuples of occurrence index and occurrence start
    """
    rule = event.recurrence
    yield 1, event.start

    if not rule.is_recurring:
        return

    interval = effective_interval(rule)
    bound = rule.end
    until_day = local_date(bound.until, tz) if isinstance(bound, UntilEnd) else None

    index = 1
    while True:
        if isinstance(bound, CountEnd) and index >= bound.count:
            return

        candidate = _nth_start(event.start, rule.frequency, interval, index)
        if candidate is None:
            return
        index += 1

        if until_day is not None and local_date(candidate, tz) > until_day:
            return

        yield index, candidate


def next_occurrence_after(
    event: CalendarEvent,
    after: DateLike,
    *,
    tz: Optional[tzinfo] = None,
    max_iterations: Optional[int] = None,
) -> Optional[datetime]:
    """Find the first occurrence start whose day is strictly after ``after``'s day.

    An occurrence on the same local day as ``after`` does not count and is
    stepped past. Non-recurring events have one candidate, their own start.
    The walk starts at the template start, so an ``after`` more than
    ``max_iterations`` occurrences away yields None.

    Args:
        event: Event template
        after: Reference instant or date
        tz: Zone for day comparisons
        max_iterations: Candidate ceiling, DEFAULT_MAX_ITERATIONS when None

    Returns:
        Occurrence start, or None if the rule or the ceiling is exhausted first
    """
    limit = DEFAULT_MAX_ITERATIONS if max_iterations is None else max(1, max_iterations)
    after_day = local_date(after, tz)

    for iteration, (_, candidate) in enumerate(iter_occurrence_starts(event, tz)):
        if iteration >= limit:
            logger.debug(
                "Next occurrence search for event %s stopped at the %d iteration ceiling",
                event.id,
                limit,
            )
            return None
        if local_date(candidate, tz) > after_day:
            return candidate
    return None


def occurrences_in_range(
    event: CalendarEvent,
    range_start: DateLike,
    range_end: DateLike,
    *,
    tz: Optional[tzinfo] = None,
    max_iterations: Optional[int] = None,
) -> list[datetime]:
    """Collect occurrence starts whose day lies in ``[range_start, range_end]``.

    Walks from the template start one occurrence at a time and stops at the
    first candidate past ``range_end``'s day, when the rule is exhausted, or
    after ``max_iterations`` candidates. Hitting the ceiling truncates the
    result silently; page long ``never`` rules over shorter ranges.

    Args:
        event: Event template
        range_start: First day of the range (inclusive)
        range_end: Last day of the range (inclusive)
        tz: Zone for day comparisons
        max_iterations: Candidate ceiling, DEFAULT_MAX_ITERATIONS when None

    Returns:
        Strictly increasing list of occurrence starts
    """
    limit = DEFAULT_MAX_ITERATIONS if max_iterations is None else max(1, max_iterations)
    first_day = local_date(range_start, tz)
    last_day = local_date(range_end, tz)
    found: list[datetime] = []

    if last_day < first_day:
        return found

    for iteration, (_, candidate) in enumerate(iter_occurrence_starts(event, tz)):
        if iteration >= limit:
            logger.debug(
                "Occurrence walk for event %s stopped at the %d iteration ceiling",
                event.id,
                limit,
            )
            break

        day = local_date(candidate, tz)
        if day > last_day:
            break
        if day >= first_day:
            found.append(candidate)
    else:
        if event.is_recurring:
            logger.debug("Recurrence rule for event %s exhausted", event.id)

    return found


def materialize_occurrence(event: CalendarEvent, start: datetime) -> CalendarEvent:
    """Copy ``event`` with its span moved to begin at ``start``.

    The template's exact elapsed duration is preserved; all-day spans are not
    re-snapped to day boundaries.
    """
    if start == event.start:
        return event.model_copy(deep=True)
    end = shift_by_duration(start, duration_between(event.start, event.end))
    return event.model_copy(update={"start": start, "end": end}, deep=True)


def events_for_range(
    events: Iterable[CalendarEvent],
    range_start: DateLike,
    range_end: DateLike,
    *,
    tz: Optional[tzinfo] = None,
    max_iterations: Optional[int] = None,
) -> list[CalendarEvent]:
    """Expand ``events`` into occurrences whose day lies in the inclusive range.

    Results are grouped by source event in input order, each group in time
    order. They are not sorted across events.
    """
    occurrences: list[CalendarEvent] = []
    for event in events:
        for start in occurrences_in_range(
            event, range_start, range_end, tz=tz, max_iterations=max_iterations
        ):
            occurrences.append(materialize_occurrence(event, start))
    return occurrences


def events_for_day(
    events: Iterable[CalendarEvent],
    day: DateLike,
    *,
    tz: Optional[tzinfo] = None,
    max_iterations: Optional[int] = None,
) -> list[CalendarEvent]:
    """Expand ``events`` into the occurrences falling on ``day``."""
    return events_for_range(events, day, day, tz=tz, max_iterations=max_iterations)


@dataclass(frozen=True)
class RecurrenceEngine:
    """Recurrence queries bound to a zone and an iteration ceiling.

    Convenience wrapper over the module functions for callers that carry
    settings around.
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tz: Optional[tzinfo] = None

    @classmethod
    def from_settings(cls, settings: Any) -> "RecurrenceEngine":
        """Build an engine from a settings object.

        Args:
            settings: Object exposing ``max_iterations`` and ``tzinfo``

        Returns:
            RecurrenceEngine with values from settings or defaults
        """
        return cls(
            max_iterations=getattr(settings, "max_iterations", DEFAULT_MAX_ITERATIONS),
            tz=getattr(settings, "tzinfo", None),
        )

    def next_occurrence_after(self, event: CalendarEvent, after: DateLike) -> Optional[datetime]:
        return next_occurrence_after(
            event, after, tz=self.tz, max_iterations=self.max_iterations
        )

    def occurrences_in_range(
        self, event: CalendarEvent, range_start: DateLike, range_end: DateLike
    ) -> list[datetime]:
        return occurrences_in_range(
            event, range_start, range_end, tz=self.tz, max_iterations=self.max_iterations
        )

    def events_for_day(self, events: Iterable[CalendarEvent], day: DateLike) -> list[CalendarEvent]:
        return events_for_day(events, day, tz=self.tz, max_iterations=self.max_iterations)

    def events_for_range(
        self, events: Iterable[CalendarEvent], range_start: DateLike, range_end: DateLike
    ) -> list[CalendarEvent]:
        return events_for_range(
            events, range_start, range_end, tz=self.tz, max_iterations=self.max_iterations
        )
