"""temposcribe - recurrence expansion for a personal calendar and task planner.

Pure functions over in-memory events: give the engine a list of
CalendarEvent templates and a day or day range, get back concrete occurrences.
"""

__version__ = "0.1.0"

from .calendar import (
    CalendarEvent,
    RecurrenceEngine,
    RecurrenceFrequency,
    RecurrenceRule,
    events_for_day,
    events_for_range,
    next_occurrence_after,
    occurrences_in_range,
)

__all__ = [
    "CalendarEvent",
    "RecurrenceEngine",
    "RecurrenceFrequency",
    "RecurrenceRule",
    "__version__",
    "events_for_day",
    "events_for_range",
    "next_occurrence_after",
    "occurrences_in_range",
]
