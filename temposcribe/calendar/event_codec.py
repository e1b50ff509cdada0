"""JSON codec for calendar events and calendar export envelopes.

The persisted form uses camelCase keys (``allDay``, ``daysOfWeek``,
``contactPersons``) and ISO-8601 strings for every date. Decoding turns those
strings back into datetimes and normalizes recurrence rules so the recurrence
engine only ever sees well-formed input.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime, time
from typing import Any, Optional

from dateutil.parser import isoparse
from pydantic import BaseModel, Field, ValidationError

from ..exceptions import EventDecodeError, TemposcribeError
from .models import CalendarEvent

logger = logging.getLogger(__name__)

EXPORT_FORMAT_VERSION = "1.0"

# Persisted (camelCase) key -> model field
_EVENT_KEYS: dict[str, str] = {
    "allDay": "all_day",
    "contactPersons": "contact_persons",
}
_RECURRENCE_KEYS: dict[str, str] = {
    "daysOfWeek": "days_of_week",
}
_EXPORTED_USER_FIELDS = ("firstName", "lastName", "email", "preferences")


class ImportResult(BaseModel):
    """Outcome of importing an exported calendar document."""

    success: bool
    message: str
    events: list[CalendarEvent] = Field(default_factory=list, description="Imported events")


def _parse_datetime(value: Any, field: str) -> datetime:
    """Parse an ISO-8601 string (or pass through a datetime) for ``field``."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        try:
            return isoparse(value)
        except ValueError as e:
            raise EventDecodeError(f"Invalid {field} value {value!r}") from e
    raise EventDecodeError(f"Invalid {field} value {value!r}")


def _rename_keys(data: Mapping[str, Any], renames: Mapping[str, str]) -> dict[str, Any]:
    return {renames.get(key, key): value for key, value in data.items()}


def _normalize_recurrence(raw: Any) -> dict[str, Any]:
    """Default and repair a persisted recurrence rule.

    Missing rules become non-repeating, intervals below 1 become 1, and an
    ``until``/``count`` end missing its payload becomes ``never``.
    """
    if not isinstance(raw, Mapping):
        return {}

    rule = _rename_keys(raw, _RECURRENCE_KEYS)
    rule["frequency"] = rule.get("frequency") or "none"

    try:
        interval = int(rule.get("interval") or 1)
    except (TypeError, ValueError) as e:
        raise EventDecodeError(f"Invalid recurrence interval {rule.get('interval')!r}") from e
    if interval < 1:
        logger.debug("Normalizing recurrence interval %d to 1", interval)
        interval = 1
    rule["interval"] = interval

    end = rule.get("end")
    end_type = end.get("type") if isinstance(end, Mapping) else None
    if end_type == "until" and end.get("until"):
        rule["end"] = {"type": "until", "until": _parse_datetime(end["until"], "recurrence.end.until")}
    elif end_type == "count" and end.get("count"):
        rule["end"] = {"type": "count", "count": end["count"]}
    else:
        rule["end"] = {"type": "never"}

    return rule


def event_from_dict(data: Mapping[str, Any]) -> CalendarEvent:
    """Build a CalendarEvent from its persisted mapping.

    Accepts camelCase or snake_case keys.

    Raises:
        EventDecodeError: If dates cannot be parsed or the event fails validation
    """
    if not isinstance(data, Mapping):
        raise EventDecodeError(f"Event must be a mapping, got {type(data).__name__}")

    payload = _rename_keys(data, _EVENT_KEYS)
    for field in ("start", "end"):
        if field not in payload:
            raise EventDecodeError(f"Event {payload.get('id')!r} is missing {field}")
        payload[field] = _parse_datetime(payload[field], field)
    if payload.get("deadline"):
        payload["deadline"] = _parse_datetime(payload["deadline"], "deadline")
    else:
        payload.pop("deadline", None)
    payload["recurrence"] = _normalize_recurrence(payload.get("recurrence"))

    try:
        return CalendarEvent.model_validate(payload)
    except ValidationError as e:
        raise EventDecodeError(f"Invalid event {payload.get('id')!r}: {e}") from e


def _invert(renames: Mapping[str, str]) -> dict[str, str]:
    return {value: key for key, value in renames.items()}


def event_to_dict(event: CalendarEvent) -> dict[str, Any]:
    """Serialize an event to its persisted camelCase mapping."""
    data = event.model_dump(mode="json", exclude_none=True)
    data["recurrence"] = _rename_keys(data["recurrence"], _invert(_RECURRENCE_KEYS))
    return _rename_keys(data, _invert(_EVENT_KEYS))


def events_to_json(events: Iterable[CalendarEvent], indent: Optional[int] = None) -> str:
    """Serialize events to a JSON array."""
    return json.dumps([event_to_dict(event) for event in events], indent=indent)


def events_from_json(text: str) -> list[CalendarEvent]:
    """Parse a JSON array of persisted events.

    Raises:
        EventDecodeError: If the text is not a JSON array or any event is invalid
    """
    try:
        raw = json.loads(text)
    except ValueError as e:
        raise EventDecodeError(f"Invalid events JSON: {e}") from e
    if not isinstance(raw, list):
        raise EventDecodeError("Events JSON must be an array")
    return [event_from_dict(item) for item in raw]


def export_calendar_data(
    events: Iterable[CalendarEvent],
    user: Optional[Mapping[str, Any]] = None,
    exported_at: Optional[datetime] = None,
) -> str:
    """Build the JSON export document for ``events``.

    Args:
        events: Events to export
        user: Optional user profile; only name, email and preferences are kept
        exported_at: Export timestamp, current UTC time when omitted

    Returns:
        Pretty-printed JSON document
    """
    exported_user = None
    if user is not None:
        exported_user = {field: user.get(field) for field in _EXPORTED_USER_FIELDS}

    document = {
        "events": [event_to_dict(event) for event in events],
        "user": exported_user,
        "exportDate": (exported_at or datetime.now(UTC)).isoformat(),
        "version": EXPORT_FORMAT_VERSION,
    }
    logger.debug("Exporting %d events", len(document["events"]))
    return json.dumps(document, indent=2)


def import_calendar_data(text: str) -> ImportResult:
    """Parse an exported calendar document.

    Never raises for bad input; failures are reported on the result.
    """
    try:
        document = json.loads(text)
        raw_events = document.get("events") if isinstance(document, dict) else None
        if not isinstance(raw_events, list):
            logger.warning("Calendar import rejected: events array missing")
            return ImportResult(success=False, message="Invalid data format: events array missing")

        events = [event_from_dict(item) for item in raw_events]
    except (ValueError, TemposcribeError) as e:
        logger.warning("Calendar import failed: %s", e)
        return ImportResult(success=False, message=f"Import failed: {e}")

    logger.info("Imported %d events", len(events))
    return ImportResult(success=True, message="Data imported successfully", events=events)
