"""Recurring-event expansion engine for a month-grid calendar."""

from .const import REMINDER_PRESETS, SAFETY_CAP, __version__
from ._codec import decode_state, decode_templates, encode_state, encode_templates
from ._expansion import expand, series_limit, validate_template
from ._lifecycle import CalendarState, add, delete, find, undo_delete, update
from ._ranges import TimeUnit, advance, is_within, month_window, overlaps
from ._reminders import DueReminder, due_reminders
from ._rrule import format_rrule, parse_rrule
from ._styles import COLOR_STYLES, describe_recurrence, style_for
from ._view import (
    build_visible_instances,
    events_on_day,
    instances_between,
    partition_templates,
)
from .exceptions import (
    GridCalError,
    MalformedTemplateError,
    UnknownColorError,
    UnsupportedRecurrenceError,
)
from .models import (
    EventColor,
    EventInstance,
    EventTemplate,
    RecurrenceRule,
    RecurrenceType,
    Reminder,
)

__all__ = [
    "__version__",
    "REMINDER_PRESETS",
    "SAFETY_CAP",
    "COLOR_STYLES",
    "CalendarState",
    "DueReminder",
    "EventColor",
    "EventInstance",
    "EventTemplate",
    "GridCalError",
    "MalformedTemplateError",
    "RecurrenceRule",
    "RecurrenceType",
    "Reminder",
    "TimeUnit",
    "UnknownColorError",
    "UnsupportedRecurrenceError",
    "add",
    "advance",
    "build_visible_instances",
    "decode_state",
    "decode_templates",
    "delete",
    "describe_recurrence",
    "due_reminders",
    "encode_state",
    "encode_templates",
    "events_on_day",
    "expand",
    "find",
    "format_rrule",
    "instances_between",
    "is_within",
    "month_window",
    "overlaps",
    "parse_rrule",
    "partition_templates",
    "series_limit",
    "style_for",
    "undo_delete",
    "update",
    "validate_template",
]
