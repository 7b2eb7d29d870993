"""Exception hierarchy for the GridCal engine."""

from __future__ import annotations


class GridCalError(Exception):
    """Base exception for all GridCal engine errors."""


class MalformedTemplateError(GridCalError):
    """An event template has an unusable shape.

    Attributes:
        event_id: Identifier of the offending template, if known.
    """

    def __init__(self, message: str, *, event_id: str | None = None) -> None:
        super().__init__(message)
        self.event_id = event_id


class UnknownColorError(GridCalError, ValueError):
    """A colour value outside the fixed palette."""


class UnsupportedRecurrenceError(GridCalError):
    """A recurrence rule the engine cannot represent."""
