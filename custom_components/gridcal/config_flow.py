"""Config flow for the GridCal integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.util import slugify

from .const import CONF_CALENDAR_NAME, DEFAULT_CALENDAR_NAME, DOMAIN

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_CALENDAR_NAME, default=DEFAULT_CALENDAR_NAME): vol.All(
            str, vol.Strip, vol.Length(min=1)
        ),
    }
)


class GridCalConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for GridCal."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        if user_input is not None:
            name = user_input[CONF_CALENDAR_NAME]
            await self.async_set_unique_id(slugify(name))
            self._abort_if_unique_id_configured()
            _LOGGER.debug("Creating calendar %s", name)
            return self.async_create_entry(
                title=name,
                data={CONF_CALENDAR_NAME: name},
            )

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
        )
