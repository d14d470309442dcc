"""Text and JSON renderings of a weather snapshot."""

import json
from datetime import tzinfo

from meteo.display.helpers import compass_direction, format_hour_label, icon_for
from meteo.models.weather import CurrentWeather, Forecast

MS_TO_KMH = 3.6
DEFAULT_FORECAST_WINDOW = 12


def wind_speed_kmh(speed_ms: float) -> float:
    return speed_ms * MS_TO_KMH


def format_current_text(w: CurrentWeather, tz: tzinfo | None = None) -> str:
    """Plain text rendering of current conditions."""
    condition = w.condition
    wind = (
        f"{compass_direction(w.wind.deg)} "
        f"{int(wind_speed_kmh(w.wind.speed))} km/h"
    )
    sun = (
        f"{format_hour_label(w.sunrise, tz)} - "
        f"{format_hour_label(w.sunset, tz)}"
    )
    lines = [
        f"=== {w.name}, {w.country} ===",
        f"[{icon_for(condition.id)}] {int(w.main.temp)}°C "
        f"(feels like {int(w.main.feels_like)}°C)",
        condition.description.title(),
        f"Wind: {wind}",
        f"Sunrise - Sunset: {sun}",
        f"Humidity: {int(w.main.humidity)}%",
        f"Pressure: {int(w.main.pressure)} hPa",
    ]
    return "\n".join(lines)


def format_forecast_text(
    forecast: Forecast,
    hours: int = DEFAULT_FORECAST_WINDOW,
    tz: tzinfo | None = None,
) -> str:
    """One line per forecast entry in the display window."""
    lines = []
    for entry in forecast.window(hours):
        lines.append(
            f"{format_hour_label(entry.dt, tz)}  "
            f"{icon_for(entry.condition.id):<13} "
            f"{int(entry.main.temp)}°C"
        )
    if not lines:
        return "No forecast entries"
    return "\n".join(lines)


def format_snapshot_json(
    current: CurrentWeather | None,
    forecast: Forecast | None,
    hours: int = DEFAULT_FORECAST_WINDOW,
    tz: tzinfo | None = None,
) -> str:
    """JSON rendering for programmatic consumption."""
    data: dict = {"current": None, "forecast": None}
    if current is not None:
        data["current"] = {
            "city": current.name,
            "country": current.country,
            "icon": icon_for(current.condition.id),
            "description": current.condition.description,
            "temperature_c": current.main.temp,
            "feels_like_c": current.main.feels_like,
            "humidity_pct": current.main.humidity,
            "pressure_hpa": current.main.pressure,
            "wind_speed_kmh": round(wind_speed_kmh(current.wind.speed), 1),
            "wind_direction": compass_direction(current.wind.deg),
            "sunrise": format_hour_label(current.sunrise, tz),
            "sunset": format_hour_label(current.sunset, tz),
        }
    if forecast is not None:
        data["forecast"] = [
            {
                "dt": entry.dt,
                "hour": format_hour_label(entry.dt, tz),
                "icon": icon_for(entry.condition.id),
                "temperature_c": entry.main.temp,
            }
            for entry in forecast.window(hours)
        ]
    return json.dumps(data, indent=2, ensure_ascii=False)
