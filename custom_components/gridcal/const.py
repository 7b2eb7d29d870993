"""Constants for the GridCal integration."""

from datetime import timedelta
from typing import Final

from .gridcal_engine.const import REMINDER_POLL_SECONDS

DOMAIN: Final = "gridcal"

CONF_CALENDAR_NAME: Final = "calendar_name"
DEFAULT_CALENDAR_NAME: Final = "Calendar"

STORAGE_VERSION: Final = 1
STORAGE_KEY_TEMPLATE: Final = f"{DOMAIN}.{{entry_id}}"

EVENT_REMINDER: Final = f"{DOMAIN}_reminder"
SERVICE_UNDO_DELETE: Final = "undo_delete"

REMINDER_POLL_INTERVAL: Final = timedelta(seconds=REMINDER_POLL_SECONDS)
