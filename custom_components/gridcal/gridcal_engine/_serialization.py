"""Key and timestamp transformation for persisted event records."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from dateutil import parser as dtparser

_CAMEL_TO_SNAKE = re.compile(r"(?<=[a-z0-9])([A-Z])")
_SNAKE_TO_CAMEL = re.compile(r"_([a-z])")
_BARE_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _to_snake(name: str) -> str:
    return _CAMEL_TO_SNAKE.sub(r"_\1", name).lower()


def _to_camel(name: str) -> str:
    return _SNAKE_TO_CAMEL.sub(lambda m: m.group(1).upper(), name)


def decamelize(data: Any) -> Any:
    """Recursively convert all dict keys from camelCase to snake_case."""
    if isinstance(data, dict):
        return {_to_snake(k): decamelize(v) for k, v in data.items()}
    if isinstance(data, list):
        return [decamelize(item) for item in data]
    return data


def camelize(data: Any) -> Any:
    """Recursively convert all dict keys from snake_case to camelCase."""
    if isinstance(data, dict):
        return {_to_camel(k): camelize(v) for k, v in data.items()}
    if isinstance(data, list):
        return [camelize(item) for item in data]
    return data


def encode_timestamp(value: date | datetime | None) -> str | None:
    """Encode a timestamp as ISO 8601 without losing precision.

    Pure dates are written as ``YYYY-MM-DD`` so they decode back to dates.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat(timespec="microseconds")
    return value.isoformat()


def decode_datetime(value: Any) -> datetime:
    """Decode a persisted timestamp into a datetime.

    Raises:
        ValueError: If the value is missing or not an ISO 8601 string.
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        raise ValueError(f"Expected an ISO 8601 timestamp, got {value!r}")
    return dtparser.isoparse(value)


def decode_date_or_datetime(value: Any) -> date | datetime | None:
    """Decode an optional bound that may be a bare date or a full timestamp."""
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str) and _BARE_DATE.match(value):
        return date.fromisoformat(value)
    return decode_datetime(value)
