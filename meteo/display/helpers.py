"""Pure lookup and formatting helpers used when rendering weather."""

from datetime import datetime, tzinfo

# Inclusive code ranges, first match wins.
ICON_RANGES: list[tuple[int, int, str]] = [
    (200, 232, "storm"),
    (300, 321, "drizzle"),
    (500, 531, "rain"),
    (600, 622, "snow"),
    (701, 771, "haze/mist"),
    (781, 781, "tornado"),
    (800, 800, "clear"),
    (801, 801, "partly-cloudy"),
    (802, 804, "cloudy"),
]
UNKNOWN_ICON = "unknown"

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def icon_for(condition_code: int) -> str:
    """Map a provider condition code to a symbolic icon name."""
    for low, high, icon in ICON_RANGES:
        if low <= condition_code <= high:
            return icon
    return UNKNOWN_ICON


def compass_direction(degrees: int) -> str:
    """Bucket a wind bearing into one of 16 compass labels.

    The bearing is taken modulo 360 first, so negative or >= 360 inputs
    land on the same label as their normalized bearing.
    """
    bearing = degrees % 360
    index = int((bearing + 11.25) // 22.5) % 16
    return COMPASS_POINTS[index]


def format_hour_label(unix_seconds: int, tz: tzinfo | None = None) -> str:
    """Format a Unix timestamp as ``HH:mm``, in local time unless ``tz`` is given."""
    return datetime.fromtimestamp(unix_seconds, tz=tz).strftime("%H:%M")
