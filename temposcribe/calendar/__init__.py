"""Calendar event models and the recurrence expansion engine."""

from .models import (
    EVENT_COLORS,
    CalendarEvent,
    CompletionStatus,
    ContactPerson,
    CountEnd,
    EventType,
    NeverEnd,
    RecurrenceEnd,
    RecurrenceFrequency,
    RecurrenceRule,
    UntilEnd,
)
from .recurrence import (
    DEFAULT_MAX_ITERATIONS,
    RecurrenceEngine,
    events_for_day,
    events_for_range,
    next_occurrence_after,
    occurrences_in_range,
)

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "EVENT_COLORS",
    "CalendarEvent",
    "CompletionStatus",
    "ContactPerson",
    "CountEnd",
    "EventType",
    "NeverEnd",
    "RecurrenceEnd",
    "RecurrenceEngine",
    "RecurrenceFrequency",
    "RecurrenceRule",
    "UntilEnd",
    "events_for_day",
    "events_for_range",
    "next_occurrence_after",
    "occurrences_in_range",
]
