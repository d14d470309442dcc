"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum


class Slot(StrEnum):
    """Observable view-model slots."""

    CITY = "city"
    CURRENT_WEATHER = "current_weather"
    FORECAST = "forecast"
    LAST_ERROR = "last_error"


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()
