"""Shared fixtures for temposcribe tests."""

from collections.abc import Generator
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

import pytest

from temposcribe.calendar.models import (
    CalendarEvent,
    NeverEnd,
    RecurrenceEnd,
    RecurrenceFrequency,
    RecurrenceRule,
)
from temposcribe.settings import reset_settings


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Clear TEMPOSCRIBE_* variables and the settings singleton around each test."""
    import os

    for key in list(os.environ):
        if key.upper().startswith("TEMPOSCRIBE_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """Factory for CalendarEvent templates.

    Defaults to a one-hour, non-repeating event starting 2024-01-01 09:00
    (a Monday). Pass ``frequency``/``interval``/``end`` to build a rule.
    """

    def _make(
        start: datetime = datetime(2024, 1, 1, 9, 0),
        duration: timedelta = timedelta(hours=1),
        frequency: RecurrenceFrequency = RecurrenceFrequency.NONE,
        interval: int = 1,
        end: Optional[RecurrenceEnd] = None,
        event_id: str = "event-1",
        **fields: Any,
    ) -> CalendarEvent:
        rule = RecurrenceRule(frequency=frequency, interval=interval, end=end or NeverEnd())
        return CalendarEvent(
            id=event_id,
            title=fields.pop("title", "Standup"),
            start=start,
            end=fields.pop("end_time", start + duration),
            recurrence=rule,
            **fields,
        )

    return _make
