"""Conversion between RFC 5545 RRULE text and RecurrenceRule."""

from __future__ import annotations

from datetime import date, datetime, timezone

from dateutil import parser as dtparser

from .exceptions import UnsupportedRecurrenceError
from .models import RecurrenceRule, RecurrenceType

_FREQ_TYPES = {
    "DAILY": RecurrenceType.DAILY,
    "WEEKLY": RecurrenceType.WEEKLY,
    "MONTHLY": RecurrenceType.MONTHLY,
}
_TYPE_FREQS = {rec_type: freq for freq, rec_type in _FREQ_TYPES.items()}


def _parse_until(value: str) -> date | datetime:
    """Parse an UNTIL value; bare dates like ``20240110`` stay dates."""
    if "T" not in value:
        return dtparser.parse(value).date()
    return dtparser.parse(value)


def parse_rrule(text: str) -> RecurrenceRule:
    """Parse an RRULE string such as ``FREQ=WEEKLY;INTERVAL=2;COUNT=3``.

    Only the parts the month grid can represent are honoured: FREQ
    (DAILY, WEEKLY, MONTHLY), INTERVAL, COUNT and UNTIL. Other parts are
    ignored.

    Raises:
        UnsupportedRecurrenceError: If FREQ is missing or unsupported, or
            a value cannot be parsed.
    """
    if not text or not text.strip():
        raise UnsupportedRecurrenceError("Empty RRULE string")

    body = text.strip()
    if body.upper().startswith("RRULE:"):
        body = body[len("RRULE:"):]

    parts: dict[str, str] = {}
    for part in body.split(";"):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        parts[key.strip().upper()] = value.strip()

    freq = parts.get("FREQ", "").upper()
    if freq not in _FREQ_TYPES:
        raise UnsupportedRecurrenceError(f"Unsupported RRULE frequency: {freq or '<missing>'}")

    try:
        interval = int(parts.get("INTERVAL", "1"))
        occurrences = int(parts["COUNT"]) if "COUNT" in parts else None
        end_date = _parse_until(parts["UNTIL"]) if "UNTIL" in parts else None
    except (ValueError, OverflowError) as err:
        raise UnsupportedRecurrenceError(f"Invalid RRULE: {text}") from err

    return RecurrenceRule(
        type=_FREQ_TYPES[freq],
        interval=interval,
        end_date=end_date,
        occurrences=occurrences,
    )


def _format_until(value: date | datetime) -> str:
    if not isinstance(value, datetime):
        return value.strftime("%Y%m%d")
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return value.strftime("%Y%m%dT%H%M%S")


def format_rrule(rule: RecurrenceRule) -> str | None:
    """Render a rule as RRULE text, or None for non-recurring rules.

    Raises:
        UnsupportedRecurrenceError: For ``custom`` rules, which have no
            faithful RRULE form yet.
    """
    if rule.type is RecurrenceType.NONE:
        return None
    if rule.type not in _TYPE_FREQS:
        raise UnsupportedRecurrenceError(f"Cannot express {rule.type.value} recurrence as RRULE")

    parts = [f"FREQ={_TYPE_FREQS[rule.type]}"]
    if rule.step != 1:
        parts.append(f"INTERVAL={rule.step}")
    if rule.occurrences is not None:
        parts.append(f"COUNT={rule.occurrences}")
    if rule.end_date is not None:
        parts.append(f"UNTIL={_format_until(rule.end_date)}")
    return ";".join(parts)
