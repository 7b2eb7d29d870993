"""Create, edit, soft-delete and undo operations on the template list."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .exceptions import GridCalError
from .models import EventTemplate

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarState:
    """The full template list plus the single pending undo target.

    ``pending_restoration`` holds the id of the most recently deleted
    template. A second delete overwrites it; a successful undo clears it.
    """

    templates: tuple[EventTemplate, ...] = field(default_factory=tuple)
    pending_restoration: str | None = None


def find(state: CalendarState, event_id: str) -> EventTemplate | None:
    """Return the stored template with ``event_id``, deleted or not."""
    for template in state.templates:
        if template.id == event_id:
            return template
    return None


def _set_deleted(state: CalendarState, event_id: str, deleted: bool) -> tuple[EventTemplate, ...]:
    return tuple(
        t.replace(is_deleted=deleted) if t.id == event_id else t
        for t in state.templates
    )


def add(state: CalendarState, template: EventTemplate) -> CalendarState:
    """Append a new template.

    Raises:
        GridCalError: If ``template`` is a materialised instance or its id
            is already taken.
    """
    if template.is_instance:
        raise GridCalError(f"Cannot store instance {template.id} of {template.parent_id}")
    if find(state, template.id) is not None:
        raise GridCalError(f"Event {template.id} already exists")
    return CalendarState(
        templates=(*state.templates, template.replace(is_deleted=False)),
        pending_restoration=state.pending_restoration,
    )


def update(
    state: CalendarState,
    edited: EventTemplate,
    *,
    whole_series: bool = False,
) -> CalendarState:
    """Apply an edit coming back from the event form.

    A series edit (``whole_series`` on an instance) copies only the
    descriptive fields onto the parent; its times and rule stay put.
    Otherwise the template sharing ``edited.id`` is replaced outright.
    Unknown ids leave the state unchanged.
    """
    if whole_series and edited.parent_id:
        target_id = edited.parent_id
        parent = find(state, target_id)
        if parent is None:
            _LOGGER.debug("Series edit for unknown parent %s ignored", target_id)
            return state
        replacement = parent.replace(
            title=edited.title,
            description=edited.description,
            location=edited.location,
            color=edited.color,
            reminders=edited.reminders,
            is_deleted=False,
        )
    else:
        target_id = edited.id
        if find(state, target_id) is None:
            _LOGGER.debug("Edit for unknown event %s ignored", target_id)
            return state
        replacement = edited.replace(is_deleted=False)

    return CalendarState(
        templates=tuple(replacement if t.id == target_id else t for t in state.templates),
        pending_restoration=state.pending_restoration,
    )


def delete(
    state: CalendarState,
    event_id: str,
    parent_id: str | None = None,
) -> CalendarState:
    """Soft-delete the selected event.

    Selecting an occurrence of a recurring series (``parent_id`` set)
    deletes the whole series. The deleted template becomes the pending
    undo target.
    """
    target_id = parent_id or event_id
    if find(state, target_id) is None:
        _LOGGER.debug("Delete for unknown event %s ignored", target_id)
        return state
    return CalendarState(
        templates=_set_deleted(state, target_id, True),
        pending_restoration=target_id,
    )


def undo_delete(state: CalendarState) -> CalendarState:
    """Restore the most recently deleted template, if any."""
    target_id = state.pending_restoration
    if target_id is None:
        return state
    return CalendarState(
        templates=_set_deleted(state, target_id, False),
        pending_restoration=None,
    )
