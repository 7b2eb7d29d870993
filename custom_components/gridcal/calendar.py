"""Calendar entity for the GridCal integration."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any

from dateutil.parser import parse as dtparse
from homeassistant.components.calendar import (
    CalendarEntity,
    CalendarEntityFeature,
    CalendarEvent,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import entity_platform
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity
from homeassistant.util import dt as dt_util

from .gridcal_engine import (
    EventInstance,
    EventTemplate,
    GridCalError,
    RecurrenceRule,
    describe_recurrence,
    parse_rrule,
    style_for,
)

from .const import DOMAIN, SERVICE_UNDO_DELETE
from .coordinator import GridCalCoordinator
from .models import GridCalRuntimeData

_LOGGER = logging.getLogger(__name__)

LOOK_AHEAD = timedelta(days=30)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the GridCal calendar entity from a config entry."""
    runtime_data: GridCalRuntimeData = entry.runtime_data
    async_add_entities([GridCalCalendarEntity(runtime_data.coordinator)])

    platform = entity_platform.async_get_current_platform()
    platform.async_register_entity_service(
        SERVICE_UNDO_DELETE, {}, "async_undo_delete"
    )


class GridCalCalendarEntity(CoordinatorEntity[GridCalCoordinator], CalendarEntity):
    """A calendar entity rendering one GridCal calendar."""

    _attr_has_entity_name = True
    _attr_supported_features = (
        CalendarEntityFeature.CREATE_EVENT
        | CalendarEntityFeature.DELETE_EVENT
        | CalendarEntityFeature.UPDATE_EVENT
    )

    def __init__(self, coordinator: GridCalCoordinator) -> None:
        super().__init__(coordinator)
        self._attr_unique_id = f"{DOMAIN}_{coordinator.config_entry.entry_id}"
        self._attr_name = coordinator.calendar_name

    def _next_instance(self) -> EventInstance | None:
        now = dt_util.now()
        upcoming = [
            instance
            for instance in self.coordinator.instances_between(now, now + LOOK_AHEAD)
            if instance.end > now
        ]
        if not upcoming:
            return None
        return min(upcoming, key=lambda instance: instance.start)

    @property
    def event(self) -> CalendarEvent | None:
        """Return the current or next upcoming event."""
        instance = self._next_instance()
        if instance is None:
            return None
        try:
            return _map_instance(instance)
        except (HomeAssistantError, ValueError):
            _LOGGER.debug("Skipping event %s in state", instance.id, exc_info=True)
            return None

    @property
    def extra_state_attributes(self) -> dict[str, Any] | None:
        instance = self._next_instance()
        if instance is None:
            return None
        return _instance_attributes(instance)

    async def async_get_events(
        self,
        hass: HomeAssistant,
        start_date: datetime,
        end_date: datetime,
    ) -> list[CalendarEvent]:
        """Return events within the requested time range."""
        events: list[CalendarEvent] = []
        for instance in self.coordinator.instances_between(start_date, end_date):
            try:
                events.append(_map_instance(instance))
            except (HomeAssistantError, ValueError):
                _LOGGER.warning(
                    "Failed to map event %s (%s)",
                    instance.id, instance.title, exc_info=True,
                )

        events.sort(key=lambda ev: ev.start)
        return events

    async def async_create_event(self, **kwargs: Any) -> None:
        """Create a new event on this calendar."""
        _LOGGER.debug("async_create_event called with kwargs: %s", kwargs)
        try:
            template = _kwargs_to_template(kwargs)
            await self.coordinator.async_add_template(template)
        except (GridCalError, ValueError) as err:
            raise HomeAssistantError(f"Cannot create event: {err}") from err

    async def async_update_event(
        self,
        uid: str,
        event: dict[str, Any],
        recurrence_id: str | None = None,
        recurrence_range: str | None = None,
    ) -> None:
        """Update an event.

        Editing an occurrence (``recurrence_id`` set) updates the title,
        description and location of the whole series; editing a template
        replaces it.
        """
        existing = self.coordinator.get_template(uid)
        if existing is None:
            raise HomeAssistantError(f"Unknown event: {uid}")
        try:
            edited = _kwargs_to_template(event, base=existing)
        except (GridCalError, ValueError) as err:
            raise HomeAssistantError(f"Cannot update event: {err}") from err

        if recurrence_id is not None:
            await self.coordinator.async_update_template(
                edited.replace(id=recurrence_id, parent_id=uid), whole_series=True
            )
        else:
            await self.coordinator.async_update_template(edited)

    async def async_delete_event(
        self,
        uid: str,
        recurrence_id: str | None = None,
        recurrence_range: str | None = None,
    ) -> None:
        """Soft-delete an event; deleting an occurrence deletes its series."""
        if self.coordinator.get_template(uid) is None:
            raise HomeAssistantError(f"Unknown event: {uid}")
        if recurrence_id is not None:
            await self.coordinator.async_delete(recurrence_id, parent_id=uid)
        else:
            await self.coordinator.async_delete(uid)

    async def async_undo_delete(self) -> None:
        """Restore the most recently deleted event."""
        await self.coordinator.async_undo_delete()


# --------------------------------------------------------------------------- #
#  Mapping helpers
# --------------------------------------------------------------------------- #


def _to_local(value: date | datetime) -> datetime:
    """Normalise a service-call date or datetime to a local aware datetime.

    Dates become local midnight; naive datetimes are taken as local time.
    """
    if not isinstance(value, datetime):
        return dt_util.start_of_local_day(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=dt_util.get_default_time_zone())
    return dt_util.as_local(value)


def _map_instance(instance: EventInstance) -> CalendarEvent:
    """Map a template or occurrence to a HA CalendarEvent.

    Occurrences carry their series id as ``uid`` and their own id as
    ``recurrence_id``, so edits and deletes can find the template again.
    """
    if instance.parent_id:
        uid, recurrence_id = instance.parent_id, instance.id
    else:
        uid, recurrence_id = instance.id, None
    return CalendarEvent(
        summary=instance.title,
        start=_to_local(instance.start),
        end=_to_local(instance.end),
        description=instance.description or None,
        location=instance.location,
        uid=uid,
        recurrence_id=recurrence_id,
    )


def _instance_attributes(instance: EventInstance) -> dict[str, Any]:
    return {
        "color": instance.color.value,
        "style": style_for(instance.color),
        "recurrence": describe_recurrence(instance.recurrence),
        "series_id": instance.parent_id,
    }


def _pick(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key):
            return data[key]
    return None


def _kwargs_to_template(
    data: dict[str, Any], *, base: EventTemplate | None = None
) -> EventTemplate:
    """Convert HA calendar service call data to an EventTemplate.

    HA passes different keys depending on the source:
    - UI/service call: start_date_time / end_date_time (timed)
                       start_date / end_date (all-day)
    - Automation:      dtstart / dtend  OR  start / end

    All-day events become local-midnight spans. When ``base`` is given,
    fields the service call cannot express (id, colour, reminders, and the
    recurrence when no ``rrule`` key is present) are taken from it.

    Raises:
        ValueError: If start/end are missing, unparsable or inverted.
        UnsupportedRecurrenceError: If the RRULE cannot be represented.
    """
    dtstart = _pick(data, "start_date_time", "start_date", "dtstart", "start")
    dtend = _pick(data, "end_date_time", "end_date", "dtend", "end")

    if isinstance(dtstart, str):
        dtstart = dtparse(dtstart)
    if isinstance(dtend, str):
        dtend = dtparse(dtend)
    if not isinstance(dtstart, date) or not isinstance(dtend, date):
        msg = f"Expected start and end, got {type(dtstart).__name__}/{type(dtend).__name__}"
        raise ValueError(msg)

    start = _to_local(dtstart)
    end = _to_local(dtend)
    if end < start:
        raise ValueError("Event end must not be before its start")

    if "rrule" in data:
        rrule = data.get("rrule")
        recurrence = parse_rrule(rrule) if rrule else RecurrenceRule()
    else:
        recurrence = base.recurrence if base is not None else RecurrenceRule()

    fields: dict[str, Any] = {
        "title": data.get("summary", ""),
        "start": start,
        "end": end,
        "description": data.get("description") or "",
        "location": data.get("location"),
        "recurrence": recurrence,
    }
    if base is None:
        return EventTemplate.create(**fields)
    return base.replace(**fields)
