"""DataUpdateCoordinator holding the state of a single GridCal calendar."""

from __future__ import annotations

import logging
from datetime import date, datetime

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import gridcal_engine as engine
from .gridcal_engine import CalendarState, EventInstance, EventTemplate

from .const import DOMAIN
from .store import GridCalStore

_LOGGER = logging.getLogger(__name__)


class GridCalCoordinator(DataUpdateCoordinator[CalendarState]):
    """Coordinator that owns the template list of one calendar.

    Storage is read once on the first refresh. Every mutation swaps in a
    new immutable ``CalendarState``, writes it back in full and notifies
    listeners, which recompute their visible instances from scratch.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        store: GridCalStore,
        config_entry: ConfigEntry,
        calendar_name: str,
    ) -> None:
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=f"{DOMAIN}_{calendar_name}",
            update_interval=None,
        )
        self._store = store
        self._calendar_name = calendar_name

    @property
    def calendar_name(self) -> str:
        return self._calendar_name

    @property
    def state(self) -> CalendarState:
        return self.data or CalendarState()

    async def _async_update_data(self) -> CalendarState:
        """Load the stored templates."""
        state = await self._store.async_load()
        _LOGGER.debug(
            "Loaded %d event(s) for %s", len(state.templates), self._calendar_name
        )
        return state

    # ------------------------------------------------------------------ #
    #  Views
    # ------------------------------------------------------------------ #

    def visible_instances(self, anchor: date | datetime) -> list[EventInstance]:
        """Instances on the month grid around ``anchor``."""
        return engine.build_visible_instances(self.state.templates, anchor)

    def instances_between(self, start: datetime, end: datetime) -> list[EventInstance]:
        return engine.instances_between(self.state.templates, start, end)

    def get_template(self, event_id: str) -> EventTemplate | None:
        return engine.find(self.state, event_id)

    # ------------------------------------------------------------------ #
    #  Mutations
    # ------------------------------------------------------------------ #

    async def async_add_template(self, template: EventTemplate) -> None:
        """Store a new template.

        Raises:
            GridCalError: If the template cannot be stored.
        """
        await self._async_commit(engine.add(self.state, template))

    async def async_update_template(
        self, edited: EventTemplate, *, whole_series: bool = False
    ) -> None:
        await self._async_commit(
            engine.update(self.state, edited, whole_series=whole_series)
        )

    async def async_delete(self, event_id: str, parent_id: str | None = None) -> None:
        """Soft-delete an event, or the whole series of a selected occurrence."""
        await self._async_commit(engine.delete(self.state, event_id, parent_id))

    async def async_undo_delete(self) -> bool:
        """Restore the most recently deleted event.

        Returns True if an event was restored.
        """
        pending = self.state.pending_restoration
        if pending is None:
            _LOGGER.debug("Nothing to undo for %s", self._calendar_name)
            return False
        await self._async_commit(engine.undo_delete(self.state))
        _LOGGER.debug("Restored event %s", pending)
        return True

    async def _async_commit(self, state: CalendarState) -> None:
        if state is self.state:
            return
        await self._store.async_save(state)
        self.async_set_updated_data(state)
