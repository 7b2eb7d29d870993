"""Colour to style-token mapping and human-readable recurrence text."""

from __future__ import annotations

from datetime import date, datetime
from types import MappingProxyType
from typing import Any

from .models import EventColor, RecurrenceRule, RecurrenceType

COLOR_STYLES = MappingProxyType(
    {
        EventColor.BLUE: "bg-blue-500",
        EventColor.GREEN: "bg-green-500",
        EventColor.RED: "bg-red-500",
        EventColor.YELLOW: "bg-yellow-500",
    }
)

_UNIT_NAMES = {
    RecurrenceType.DAILY: ("day", "days"),
    RecurrenceType.WEEKLY: ("week", "weeks"),
    RecurrenceType.MONTHLY: ("month", "months"),
}


def style_for(color: Any) -> str:
    """Return the style token for a colour.

    Raises:
        UnknownColorError: If ``color`` is not part of the palette.
    """
    return COLOR_STYLES[EventColor.parse(color)]


def _format_day(value: date | datetime) -> str:
    return f"{value.day} {value.strftime('%B %Y')}"


def describe_recurrence(rule: RecurrenceRule) -> str:
    """Describe a rule the way the event details panel shows it.

    >>> describe_recurrence(RecurrenceRule(RecurrenceType.WEEKLY, interval=2))
    'Every 2 weeks'
    """
    if rule.type is RecurrenceType.NONE:
        return "Does not repeat"

    if rule.type is RecurrenceType.CUSTOM:
        text = "Custom"
    else:
        singular, plural = _UNIT_NAMES[rule.type]
        text = f"Every {singular}" if rule.step == 1 else f"Every {rule.step} {plural}"

    if rule.end_date is not None:
        text += f" until {_format_day(rule.end_date)}"
    elif rule.occurrences:
        text += f", {rule.occurrences} times"
    return text
