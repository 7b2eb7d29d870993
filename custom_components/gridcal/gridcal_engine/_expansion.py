"""Expansion of recurring event templates into concrete occurrences."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime

from ._ranges import TimeUnit, advance
from .const import SAFETY_CAP
from .exceptions import MalformedTemplateError
from .models import EventInstance, EventTemplate, RecurrenceRule, RecurrenceType

_LOGGER = logging.getLogger(__name__)

# TODO: give CUSTOM its own cadence built from days_of_week/day_of_month once
# the product behaviour for those fields is settled; it steps by days for now.
_CADENCE_UNITS: dict[RecurrenceType, TimeUnit] = {
    RecurrenceType.DAILY: TimeUnit.DAY,
    RecurrenceType.WEEKLY: TimeUnit.WEEK,
    RecurrenceType.MONTHLY: TimeUnit.MONTH,
    RecurrenceType.CUSTOM: TimeUnit.DAY,
}


def validate_template(template: EventTemplate) -> None:
    """Check that a template has a usable time span.

    Raises:
        MalformedTemplateError: If ``start``/``end`` are missing, not
            datetimes, or ``end`` precedes ``start``.
    """
    if not isinstance(template.start, datetime) or not isinstance(template.end, datetime):
        raise MalformedTemplateError(
            f"Event {template.id} has no usable start/end", event_id=template.id
        )
    try:
        inverted = template.end < template.start
    except TypeError as err:
        # naive vs aware
        raise MalformedTemplateError(
            f"Event {template.id} mixes naive and aware timestamps", event_id=template.id
        ) from err
    if inverted:
        raise MalformedTemplateError(
            f"Event {template.id} ends before it starts", event_id=template.id
        )


def series_limit(rule: RecurrenceRule) -> int:
    """Maximum number of occurrences one expansion pass may walk."""
    if rule.occurrences is None:
        return SAFETY_CAP
    return max(min(rule.occurrences, SAFETY_CAP), 0)


def _past_end_date(occurrence_start: datetime, end_date: date | datetime | None) -> bool:
    if end_date is None:
        return False
    if isinstance(end_date, datetime):
        return occurrence_start > end_date
    # A bare date bounds by calendar day, inclusive.
    return occurrence_start.date() > end_date


def expand(
    template: EventTemplate,
    window_start: datetime,
    window_end: datetime,
) -> list[EventInstance]:
    """Materialise the occurrences of a recurring template inside a window.

    The series is walked from the template's own start, so ``occurrences``
    caps the true series length rather than the visible subset. Occurrences
    are emitted when they end on or after ``window_start``; the walk stops
    at the first occurrence starting after ``window_end``, after
    ``recurrence.end_date``, or once the series limit is reached.

    Callers are expected to pass only non-deleted, recurring templates.

    Raises:
        MalformedTemplateError: If the template's time span is unusable or an
            occurrence falls outside the representable date range.
    """
    validate_template(template)
    rule = template.recurrence
    unit = _CADENCE_UNITS.get(rule.type, TimeUnit.DAY)
    duration = template.duration
    limit = series_limit(rule)

    instances: list[EventInstance] = []
    cursor = template.start
    count = 0
    while count < limit:
        if _past_end_date(cursor, rule.end_date):
            break
        if rule.occurrences is not None and count >= rule.occurrences:
            break
        if cursor > window_end:
            break

        try:
            cursor_end = cursor + duration
        except OverflowError as err:
            raise MalformedTemplateError(
                f"Event {template.id} runs past the last representable date",
                event_id=template.id,
            ) from err
        if cursor_end >= window_start:
            instances.append(
                template.replace(
                    id=uuid.uuid4().hex,
                    parent_id=template.id,
                    start=cursor,
                    end=cursor_end,
                    is_deleted=False,
                )
            )

        count += 1
        # Step from the series start so month clamping never drifts.
        try:
            cursor = advance(template.start, unit, count * rule.step)
        except (OverflowError, ValueError) as err:
            raise MalformedTemplateError(
                f"Event {template.id} recurs past the last representable date",
                event_id=template.id,
            ) from err

    _LOGGER.debug(
        "Expanded %s into %d instance(s) after walking %d occurrence(s)",
        template.id, len(instances), count,
    )
    return instances
