"""Data models for calendar event templates and their instances."""

from __future__ import annotations

import dataclasses
import enum
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from ._serialization import decode_date_or_datetime, decode_datetime, encode_timestamp
from .exceptions import MalformedTemplateError, UnknownColorError


class EventColor(str, enum.Enum):
    """Fixed colour palette for events."""

    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    YELLOW = "yellow"

    @classmethod
    def parse(cls, value: Any) -> EventColor:
        """Parse a colour value, failing fast on anything outside the palette."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as err:
            raise UnknownColorError(f"Unknown event colour: {value!r}") from err


class RecurrenceType(str, enum.Enum):
    """Recurrence cadence.

    ``CUSTOM`` is reserved for a weekday/day-of-month cadence and currently
    expands exactly like ``DAILY``.
    """

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Reminder:
    """A reminder fired ``minutes_before`` the start of an event."""

    id: str
    minutes_before: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Reminder:
        """Construct from a decamelized record.

        Older records store the offset under ``time``.
        """
        minutes = data.get("minutes_before", data.get("time", 0))
        return cls(id=str(data.get("id") or uuid.uuid4().hex), minutes_before=max(int(minutes), 0))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "minutes_before": self.minutes_before}


@dataclass(frozen=True)
class RecurrenceRule:
    """Cadence, step and termination of a recurring event.

    ``end_date`` and ``occurrences`` are normally mutually exclusive, but when
    both are set each bound is enforced on its own.
    """

    type: RecurrenceType = RecurrenceType.NONE
    interval: int = 1
    end_date: date | datetime | None = None
    occurrences: int | None = None
    days_of_week: tuple[int, ...] = field(default_factory=tuple)
    day_of_month: int | None = None

    @property
    def step(self) -> int:
        """The interval coerced to a positive integer."""
        try:
            step = int(self.interval)
        except (TypeError, ValueError):
            return 1
        return max(step, 1)

    @property
    def is_recurring(self) -> bool:
        return self.type is not RecurrenceType.NONE

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> RecurrenceRule:
        """Construct from a decamelized record; a missing record means no recurrence."""
        if not data:
            return cls()
        try:
            rec_type = RecurrenceType(data.get("type") or "none")
        except ValueError as err:
            raise MalformedTemplateError(f"Unknown recurrence type: {data.get('type')!r}") from err
        occurrences = data.get("occurrences")
        return cls(
            type=rec_type,
            interval=data.get("interval") or 1,
            end_date=decode_date_or_datetime(data.get("end_date")),
            occurrences=int(occurrences) if occurrences is not None else None,
            days_of_week=tuple(data.get("days_of_week") or ()),
            day_of_month=data.get("day_of_month"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "interval": self.interval,
            "end_date": encode_timestamp(self.end_date),
            "occurrences": self.occurrences,
            "days_of_week": list(self.days_of_week),
            "day_of_month": self.day_of_month,
        }


@dataclass(frozen=True)
class EventTemplate:
    """A persisted event definition, recurring or not.

    Materialised occurrences share this shape: they carry a fresh ``id``
    and point back at their template through ``parent_id``.
    """

    id: str
    title: str
    start: datetime
    end: datetime
    description: str = ""
    location: str | None = None
    color: EventColor = EventColor.BLUE
    reminders: tuple[Reminder, ...] = field(default_factory=tuple)
    recurrence: RecurrenceRule = field(default_factory=RecurrenceRule)
    parent_id: str | None = None
    is_deleted: bool = False

    @classmethod
    def create(
        cls,
        *,
        title: str,
        start: datetime,
        end: datetime,
        **kwargs: Any,
    ) -> EventTemplate:
        """Build a brand-new template with a fresh identifier."""
        kwargs.setdefault("id", uuid.uuid4().hex)
        kwargs["is_deleted"] = False
        kwargs["parent_id"] = None
        return cls(title=title, start=start, end=end, **kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventTemplate:
        """Construct from a decamelized persisted record.

        Raises:
            MalformedTemplateError: If required fields are missing or unreadable.
        """
        event_id = data.get("id")
        if not event_id:
            raise MalformedTemplateError("Event record has no id")
        try:
            start = decode_datetime(data["start"])
            end = decode_datetime(data["end"])
            return cls(
                id=str(event_id),
                title=data.get("title") or "",
                start=start,
                end=end,
                description=data.get("description") or "",
                location=data.get("location"),
                color=EventColor.parse(data.get("color") or EventColor.BLUE),
                reminders=tuple(Reminder.from_dict(r) for r in data.get("reminders") or ()),
                recurrence=RecurrenceRule.from_dict(data.get("recurrence")),
                parent_id=data.get("parent_id"),
                is_deleted=bool(data.get("is_deleted", False)),
            )
        except MalformedTemplateError as err:
            err.event_id = str(event_id)
            raise
        except (KeyError, TypeError, ValueError) as err:
            raise MalformedTemplateError(
                f"Unreadable event record {event_id}: {err}", event_id=str(event_id)
            ) from err

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "start": encode_timestamp(self.start),
            "end": encode_timestamp(self.end),
            "location": self.location,
            "color": self.color.value,
            "reminders": [r.to_dict() for r in self.reminders],
            "recurrence": self.recurrence.to_dict(),
            "parent_id": self.parent_id,
            "is_deleted": self.is_deleted,
        }

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_recurring(self) -> bool:
        return self.recurrence.is_recurring

    @property
    def is_instance(self) -> bool:
        """Whether this is a materialised occurrence rather than a template."""
        return self.parent_id is not None

    def replace(self, **changes: Any) -> EventTemplate:
        """Return a copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)


# Occurrences are structurally identical to templates.
EventInstance = EventTemplate
