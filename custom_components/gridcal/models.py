"""Runtime data models for the GridCal integration."""

from __future__ import annotations

from dataclasses import dataclass

from .coordinator import GridCalCoordinator
from .reminders import ReminderNotifier
from .store import GridCalStore


@dataclass
class GridCalRuntimeData:
    """Data stored in config_entry.runtime_data."""

    store: GridCalStore
    coordinator: GridCalCoordinator
    notifier: ReminderNotifier
