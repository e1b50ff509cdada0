"""Task completion status derived from deadlines."""

from datetime import datetime

from .models import CalendarEvent, CompletionStatus


def _comparable(now: datetime, deadline: datetime) -> tuple[datetime, datetime]:
    """Align awareness so ``now`` and ``deadline`` can be compared.

    A naive value is wall-clock time, so it is read in the other value's zone.
    """
    if now.tzinfo is None and deadline.tzinfo is not None:
        return now.replace(tzinfo=deadline.tzinfo), deadline
    if now.tzinfo is not None and deadline.tzinfo is None:
        return now, deadline.replace(tzinfo=now.tzinfo)
    return now, deadline


def resolve_status(event: CalendarEvent, now: datetime) -> CompletionStatus:
    """Work out the status a task should display at ``now``.

    A pending (or unset) task whose deadline has passed is overdue. A task
    flagged ``completed`` without an explicit status counts as completed.
    Completed and abandoned statuses are never overridden.
    """
    status = event.status
    if status is None:
        status = CompletionStatus.COMPLETED if event.completed else CompletionStatus.PENDING

    if status == CompletionStatus.PENDING and event.deadline is not None:
        current, deadline = _comparable(now, event.deadline)
        if current > deadline:
            return CompletionStatus.OVERDUE
    return status


def is_overdue(event: CalendarEvent, now: datetime) -> bool:
    """Check if the task is overdue at ``now``."""
    return resolve_status(event, now) == CompletionStatus.OVERDUE


def with_resolved_status(event: CalendarEvent, now: datetime) -> CalendarEvent:
    """Copy of ``event`` carrying its resolved status."""
    return event.model_copy(update={"status": resolve_status(event, now)})
