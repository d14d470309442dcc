"""Client for the OpenWeatherMap 3-hourly forecast endpoint."""

from pydantic import TypeAdapter

from meteo.ingest.owm_client import OpenWeatherMapClient
from meteo.models.weather import Forecast

_FORECAST = TypeAdapter(Forecast)


class ForecastClient(OpenWeatherMapClient):
    endpoint = "forecast"

    async def fetch_forecast(self, city: str) -> Forecast:
        """Fetch the full forecast for ``city`` in provider order.

        The list is returned untruncated; see ``Forecast.window`` for the
        bounded strip a display shows.
        """
        raw = await self._get_json(city)
        return self._decode(_FORECAST, raw, city)
