"""Weather screen state: the selected city and the latest fetched snapshots.

Selecting a city issues the current-weather and forecast fetches together;
each one applies its result independently when it completes. A failed fetch
is logged and recorded in ``last_error`` while the previously fetched data
stays in place.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from meteo.config.schema import MeteoConfig
from meteo.ingest.errors import MeteoError
from meteo.ingest.forecast_client import ForecastClient
from meteo.ingest.weather_client import WeatherClient
from meteo.models.common import Slot, utc_now_iso
from meteo.models.weather import CurrentWeather, Forecast

logger = logging.getLogger(__name__)

Listener = Callable[[Slot, Any], None]


@dataclass(frozen=True)
class FetchFailure:
    slot: Slot
    city: str
    error: MeteoError
    occurred_at: str = field(default_factory=utc_now_iso)


class WeatherViewModel:
    def __init__(
        self,
        weather_client: WeatherClient,
        forecast_client: ForecastClient,
        cities: list[str],
        default_city: str,
        discard_stale_responses: bool = True,
    ):
        self.weather_client = weather_client
        self.forecast_client = forecast_client
        self.cities = list(cities)
        self.default_city = default_city
        self.discard_stale_responses = discard_stale_responses
        self._city = default_city
        self._current_weather: CurrentWeather | None = None
        self._forecast: Forecast | None = None
        self._last_error: FetchFailure | None = None
        self._listeners: list[Listener] = []

    @property
    def city(self) -> str:
        return self._city

    @property
    def current_weather(self) -> CurrentWeather | None:
        return self._current_weather

    @property
    def forecast(self) -> Forecast | None:
        return self._forecast

    @property
    def last_error(self) -> FetchFailure | None:
        return self._last_error

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a slot-change listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def on_app_start(self) -> None:
        await self.on_city_selected(self.default_city)

    async def on_city_selected(self, city: str) -> None:
        """Select ``city`` and refresh both slots concurrently."""
        if city != self._city:
            self._city = city
            self._notify(Slot.CITY, city)
        logger.info("Refreshing weather for %s", city)
        await asyncio.gather(
            self._refresh_current_weather(city),
            self._refresh_forecast(city),
        )

    async def _refresh_current_weather(self, city: str) -> None:
        try:
            weather = await self.weather_client.fetch_current_weather(city)
        except MeteoError as e:
            self._record_failure(Slot.CURRENT_WEATHER, city, e)
            return
        if self._accepts(Slot.CURRENT_WEATHER, city):
            self._current_weather = weather
            self._applied(Slot.CURRENT_WEATHER, weather)

    async def _refresh_forecast(self, city: str) -> None:
        try:
            forecast = await self.forecast_client.fetch_forecast(city)
        except MeteoError as e:
            self._record_failure(Slot.FORECAST, city, e)
            return
        if self._accepts(Slot.FORECAST, city):
            self._forecast = forecast
            self._applied(Slot.FORECAST, forecast)

    def _accepts(self, slot: Slot, city: str) -> bool:
        if self.discard_stale_responses and city != self._city:
            logger.info(
                "Discarding stale %s for %s (selected: %s)", slot, city, self._city
            )
            return False
        return True

    def _applied(self, slot: Slot, value: Any) -> None:
        self._notify(slot, value)
        if self._last_error is not None and self._last_error.slot == slot:
            self._last_error = None
            self._notify(Slot.LAST_ERROR, None)

    def _record_failure(self, slot: Slot, city: str, error: MeteoError) -> None:
        logger.error("Failed to fetch %s for %s: %s", slot, city, error)
        if not self._accepts(slot, city):
            return
        self._last_error = FetchFailure(slot=slot, city=city, error=error)
        self._notify(Slot.LAST_ERROR, self._last_error)

    def _notify(self, slot: Slot, value: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(slot, value)
            except Exception:
                logger.exception("Listener failed for slot %s", slot)


def build_view_model(
    config: MeteoConfig, http: httpx.AsyncClient, api_key: str
) -> WeatherViewModel:
    """Wire both clients onto one shared transport and credential."""
    client_kwargs = {
        "http": http,
        "api_key": api_key,
        "base_url": config.api.base_url,
        "units": config.api.units,
    }
    return WeatherViewModel(
        weather_client=WeatherClient(**client_kwargs),
        forecast_client=ForecastClient(**client_kwargs),
        cities=config.cities,
        default_city=config.default_city,
        discard_stale_responses=config.behavior.discard_stale_responses,
    )
