"""The GridCal integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant

from .const import CONF_CALENDAR_NAME, DEFAULT_CALENDAR_NAME
from .coordinator import GridCalCoordinator
from .models import GridCalRuntimeData
from .reminders import ReminderNotifier
from .store import GridCalStore

PLATFORMS: list[Platform] = [Platform.CALENDAR]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up a GridCal calendar from a config entry."""
    store = GridCalStore(hass, entry.entry_id)
    coordinator = GridCalCoordinator(
        hass,
        store,
        entry,
        calendar_name=entry.data.get(CONF_CALENDAR_NAME, DEFAULT_CALENDAR_NAME),
    )
    await coordinator.async_config_entry_first_refresh()

    notifier = ReminderNotifier(hass, coordinator)
    notifier.async_start()

    entry.runtime_data = GridCalRuntimeData(
        store=store, coordinator=coordinator, notifier=notifier
    )

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a GridCal config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        runtime_data: GridCalRuntimeData = entry.runtime_data
        runtime_data.notifier.async_stop()
    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Delete the stored events when the calendar is removed."""
    await GridCalStore(hass, entry.entry_id).async_remove()
