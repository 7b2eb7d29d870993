"""Periodic reminder notifications for GridCal calendars."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers.event import async_track_time_interval
from homeassistant.util import dt as dt_util

from .gridcal_engine import DueReminder, due_reminders

from .const import EVENT_REMINDER, REMINDER_POLL_INTERVAL
from .coordinator import GridCalCoordinator

_LOGGER = logging.getLogger(__name__)


def reminder_event_data(due: DueReminder, calendar_name: str) -> dict[str, object]:
    """Build the payload of a ``gridcal_reminder`` bus event."""
    instance = due.instance
    return {
        "calendar": calendar_name,
        "event_id": instance.id,
        "parent_id": instance.parent_id,
        "title": instance.title,
        "start": instance.start.isoformat(),
        "minutes_before": due.reminder.minutes_before,
        "message": due.message,
    }


class ReminderNotifier:
    """Polls the visible instances of a calendar for reminders that came due.

    Each poll looks at the interval that just elapsed. Delivery is
    at-least-once: listeners of ``gridcal_reminder`` should tolerate a
    repeat for the same reminder.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: GridCalCoordinator,
        interval: timedelta = REMINDER_POLL_INTERVAL,
        now: Callable[[], datetime] = dt_util.now,
    ) -> None:
        self._hass = hass
        self._coordinator = coordinator
        self._interval = interval
        self._now = now
        self._unsub: CALLBACK_TYPE | None = None

    @callback
    def async_start(self) -> None:
        if self._unsub is None:
            self._unsub = async_track_time_interval(
                self._hass, self._async_poll, self._interval
            )

    @callback
    def async_stop(self) -> None:
        if self._unsub is not None:
            self._unsub()
            self._unsub = None

    @callback
    def async_check(self) -> list[DueReminder]:
        """Fire a bus event for every reminder due in the last interval."""
        now = dt_util.as_local(self._now())
        instances = self._coordinator.visible_instances(now)
        due = due_reminders(instances, now, self._interval)
        for item in due:
            _LOGGER.debug("%s", item.message)
            self._hass.bus.async_fire(
                EVENT_REMINDER,
                reminder_event_data(item, self._coordinator.calendar_name),
            )
        return due

    async def _async_poll(self, _now: datetime) -> None:
        self.async_check()
