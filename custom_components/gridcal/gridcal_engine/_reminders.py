"""Scan of visible instances for reminders that just came due."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from .const import REMINDER_POLL_SECONDS
from .models import EventInstance, Reminder


@dataclass(frozen=True)
class DueReminder:
    """A reminder whose fire time fell inside the last poll interval."""

    instance: EventInstance
    reminder: Reminder
    fire_at: datetime

    @property
    def message(self) -> str:
        return (
            f"Reminder: {self.instance.title} starts in "
            f"{self.reminder.minutes_before} minutes"
        )


def due_reminders(
    instances: Iterable[EventInstance],
    now: datetime,
    interval: timedelta = timedelta(seconds=REMINDER_POLL_SECONDS),
) -> list[DueReminder]:
    """Return reminders whose fire time lies in ``(now - interval, now]``.

    The scan is stateless: polling twice inside the same interval reports
    the same reminders again, and de-duplication is left to the caller.
    """
    window_start = now - interval
    due: list[DueReminder] = []
    for instance in instances:
        for reminder in instance.reminders:
            fire_at = instance.start - timedelta(minutes=reminder.minutes_before)
            if window_start < fire_at <= now:
                due.append(DueReminder(instance=instance, reminder=reminder, fire_at=fire_at))
    due.sort(key=lambda d: d.fire_at)
    return due
