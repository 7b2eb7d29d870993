"""Assembly of the flat instance list shown on the month grid."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from ._expansion import expand, validate_template
from ._ranges import month_window, overlaps
from .exceptions import GridCalError
from .models import EventInstance, EventTemplate

_LOGGER = logging.getLogger(__name__)


def partition_templates(
    templates: Iterable[EventTemplate],
) -> tuple[list[EventTemplate], list[EventTemplate]]:
    """Split active templates into ``(plain, recurring)``.

    Deleted templates and stray instances (records carrying a
    ``parent_id``) land in neither group.
    """
    plain: list[EventTemplate] = []
    recurring: list[EventTemplate] = []
    for template in templates:
        if template.is_deleted:
            continue
        if template.parent_id:
            _LOGGER.debug("Ignoring stray instance %s of %s", template.id, template.parent_id)
            continue
        if template.is_recurring:
            recurring.append(template)
        else:
            plain.append(template)
    return plain, recurring


def _in_window(template: EventTemplate, window_start: datetime, window_end: datetime) -> bool:
    return overlaps(template.start, template.end, window_start, window_end)


def instances_between(
    templates: Iterable[EventTemplate],
    window_start: datetime,
    window_end: datetime,
) -> list[EventInstance]:
    """Return every visible occurrence between two instants.

    Plain templates that touch the window are returned as-is; recurring
    templates are replaced by their expanded instances. Malformed templates
    are logged and skipped so one bad record cannot blank the grid.
    """
    plain, recurring = partition_templates(templates)

    visible: list[EventInstance] = []
    for template in plain:
        try:
            validate_template(template)
            if _in_window(template, window_start, window_end):
                visible.append(template)
        except (GridCalError, OverflowError, TypeError, ValueError):
            _LOGGER.warning("Skipping event %s (%s)", template.id, template.title, exc_info=True)

    for template in recurring:
        try:
            visible.extend(expand(template, window_start, window_end))
        except (GridCalError, OverflowError, TypeError, ValueError):
            _LOGGER.warning(
                "Skipping recurring event %s (%s)", template.id, template.title, exc_info=True
            )

    return visible


def build_visible_instances(
    templates: Iterable[EventTemplate],
    anchor: date | datetime,
) -> list[EventInstance]:
    """Return the instances to render for the month grid around ``anchor``."""
    window_start, window_end = month_window(anchor)
    return instances_between(templates, window_start, window_end)


def events_on_day(instances: Sequence[EventInstance], day: date) -> list[EventInstance]:
    """Instances starting on ``day``, in their list order."""
    return [instance for instance in instances if instance.start.date() == day]
