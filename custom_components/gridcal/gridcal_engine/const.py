"""Constants for the GridCal engine."""

from dateutil.relativedelta import SA, SU

__version__ = "0.1.0"

# Hard ceiling on occurrences generated per template per expansion pass.
SAFETY_CAP = 100

WEEK_START = SU
WEEK_END = SA

REMINDER_POLL_SECONDS = 60

# Minutes-before values offered by the event form.
REMINDER_PRESETS = (0, 5, 10, 15, 30, 60, 120, 1440)
