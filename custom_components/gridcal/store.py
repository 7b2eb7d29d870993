"""Persistence of the calendar state in Home Assistant storage."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from .gridcal_engine import CalendarState, decode_state, encode_state

from .const import STORAGE_KEY_TEMPLATE, STORAGE_VERSION

_LOGGER = logging.getLogger(__name__)


class GridCalStore:
    """Reads and writes the full template list of one calendar.

    The whole state is rewritten after every mutation; there is no
    incremental persistence.
    """

    def __init__(self, hass: HomeAssistant, entry_id: str) -> None:
        self._store: Store[dict[str, Any]] = Store(
            hass, STORAGE_VERSION, STORAGE_KEY_TEMPLATE.format(entry_id=entry_id)
        )

    async def async_load(self) -> CalendarState:
        """Load the stored state, falling back to an empty calendar on failure."""
        try:
            raw = await self._store.async_load()
        except (HomeAssistantError, OSError, ValueError):
            _LOGGER.warning("Could not read stored events, starting empty", exc_info=True)
            return CalendarState()
        return decode_state(raw)

    async def async_save(self, state: CalendarState) -> None:
        await self._store.async_save(encode_state(state))

    async def async_remove(self) -> None:
        await self._store.async_remove()
