"""Persisted representation of the calendar state."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ._lifecycle import CalendarState
from ._serialization import camelize, decamelize
from .exceptions import MalformedTemplateError
from .models import EventTemplate

_LOGGER = logging.getLogger(__name__)


def encode_templates(templates: Iterable[EventTemplate]) -> list[dict[str, Any]]:
    """Convert templates to JSON-compatible records with camelCase keys."""
    return [camelize(template.to_dict()) for template in templates]


def decode_templates(raw: Any) -> list[EventTemplate]:
    """Decode persisted records, skipping any that cannot be read.

    Anything other than a list decodes to an empty list.
    """
    if not isinstance(raw, list):
        if raw is not None:
            _LOGGER.warning("Ignoring persisted events of type %s", type(raw).__name__)
        return []

    templates: list[EventTemplate] = []
    for record in raw:
        if not isinstance(record, dict):
            _LOGGER.debug("Skipping non-object event record: %r", record)
            continue
        try:
            templates.append(EventTemplate.from_dict(decamelize(record)))
        except MalformedTemplateError as err:
            _LOGGER.warning("Skipping unreadable event %s: %s", err.event_id, err)
    return templates


def encode_state(state: CalendarState) -> dict[str, Any]:
    return {
        "events": encode_templates(state.templates),
        "pendingRestoration": state.pending_restoration,
    }


def decode_state(raw: Any) -> CalendarState:
    """Decode a stored state document; unusable documents yield an empty state.

    A bare list is read as the event list of an older document.
    """
    if isinstance(raw, list):
        return CalendarState(templates=tuple(decode_templates(raw)))
    if not isinstance(raw, dict):
        if raw is not None:
            _LOGGER.warning("Ignoring persisted state of type %s", type(raw).__name__)
        return CalendarState()

    templates = tuple(decode_templates(raw.get("events")))
    pending = raw.get("pendingRestoration")
    if pending is not None and not any(t.id == pending for t in templates):
        pending = None
    return CalendarState(templates=templates, pending_restoration=pending)
