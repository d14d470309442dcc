"""Client for the OpenWeatherMap current-weather endpoint."""

from pydantic import TypeAdapter

from meteo.ingest.owm_client import OpenWeatherMapClient
from meteo.models.weather import CurrentWeather

_CURRENT_WEATHER = TypeAdapter(CurrentWeather)


class WeatherClient(OpenWeatherMapClient):
    endpoint = "weather"

    async def fetch_current_weather(self, city: str) -> CurrentWeather:
        """Fetch and decode current conditions for ``city``.

        Raises InvalidInputError for an empty city, NetworkError on transport
        failure or non-2xx status, DecodeError on an unexpected body.
        """
        raw = await self._get_json(city)
        return self._decode(_CURRENT_WEATHER, raw, city)
