"""Data models for calendar events and recurrence rules."""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EventType(str, Enum):
    """Kind of calendar entry."""

    EVENT = "event"
    TASK = "task"
    APPOINTMENT = "appointment"


class RecurrenceFrequency(str, Enum):
    """How often an event repeats."""

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class CompletionStatus(str, Enum):
    """Completion status for tasks."""

    PENDING = "pending"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    ABANDONED = "abandoned"


class EventColor(BaseModel):
    """Display color available for events."""

    id: str
    name: str
    hex: str

    model_config = ConfigDict(frozen=True)


EVENT_COLORS: tuple[EventColor, ...] = (
    EventColor(id="event-1", name="Purple", hex="#8B5CF6"),
    EventColor(id="event-2", name="Green", hex="#10B981"),
    EventColor(id="event-3", name="Orange", hex="#F97316"),
    EventColor(id="event-4", name="Blue", hex="#0EA5E9"),
    EventColor(id="event-5", name="Pink", hex="#D946EF"),
    EventColor(id="event-6", name="Red", hex="#EF4444"),
    EventColor(id="event-7", name="Teal", hex="#14B8A6"),
    EventColor(id="event-8", name="Amber", hex="#F59E0B"),
)


# Recurrence termination variants


class NeverEnd(BaseModel):
    """Unbounded recurrence."""

    type: Literal["never"] = "never"

    model_config = ConfigDict(frozen=True)


class UntilEnd(BaseModel):
    """Recurrence ending on the last occurrence whose day is on or before ``until``."""

    type: Literal["until"] = "until"
    until: Union[datetime, date] = Field(..., description="Last permitted occurrence day")

    model_config = ConfigDict(frozen=True)


class CountEnd(BaseModel):
    """Recurrence ending after ``count`` occurrences, the first one included."""

    type: Literal["count"] = "count"
    count: int = Field(..., ge=1, description="Total number of occurrences")

    model_config = ConfigDict(frozen=True)


RecurrenceEnd = Annotated[Union[NeverEnd, UntilEnd, CountEnd], Field(discriminator="type")]


class RecurrenceRule(BaseModel):
    """Repetition rule attached to an event template."""

    frequency: RecurrenceFrequency = Field(
        default=RecurrenceFrequency.NONE, description="Repeat cadence"
    )
    # Not validated here; the engine treats values below 1 as 1.
    interval: int = Field(default=1, description="Step multiplier for the frequency unit")
    days_of_week: Optional[list[int]] = Field(
        default=None, description="Weekdays (0 = Sunday) kept for presentation"
    )
    end: RecurrenceEnd = Field(default_factory=NeverEnd, description="Termination condition")

    model_config = ConfigDict(frozen=True)

    @property
    def is_recurring(self) -> bool:
        """True when the rule produces more than the template occurrence."""
        return self.frequency != RecurrenceFrequency.NONE


class ContactPerson(BaseModel):
    """Contact attached to an event."""

    id: str = Field(..., description="Contact ID")
    name: str = Field(..., description="Contact name")
    email: Optional[str] = Field(default=None, description="Email address")
    phone: Optional[str] = Field(default=None, description="Phone number")

    model_config = ConfigDict(frozen=True)


class CalendarEvent(BaseModel):
    """Event template as supplied by the event store.

    Occurrences produced by the recurrence engine share this shape with
    ``start`` and ``end`` replaced.
    """

    # Core properties
    id: str = Field(..., description="Event ID")
    title: str = Field(..., description="Event title")
    description: Optional[str] = Field(default=None, description="Event description")
    type: EventType = Field(default=EventType.EVENT, description="Entry kind")
    color: str = Field(default="event-1", description="Color id from EVENT_COLORS")

    # Time information
    start: datetime = Field(..., description="Start of the first occurrence")
    end: datetime = Field(..., description="End of the first occurrence")
    all_day: bool = Field(default=False, description="All-day event flag")

    # Recurrence
    recurrence: RecurrenceRule = Field(
        default_factory=RecurrenceRule, description="Repetition rule"
    )

    # Task tracking
    completed: Optional[bool] = Field(default=None, description="Task completion flag")
    deadline: Optional[datetime] = Field(default=None, description="Task deadline")
    status: Optional[CompletionStatus] = Field(default=None, description="Task status")

    # Details
    location: Optional[str] = Field(default=None, description="Event location")
    contact_persons: list[ContactPerson] = Field(
        default_factory=list, description="People attached to the event"
    )

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_span(self) -> "CalendarEvent":
        if (self.start.tzinfo is None) != (self.end.tzinfo is None):
            raise ValueError("start and end must both be timezone-aware or both naive")
        if self.end < self.start:
            raise ValueError("end must not be earlier than start")
        return self

    @property
    def is_recurring(self) -> bool:
        """Check if the event repeats."""
        return self.recurrence.is_recurring
