"""Shared plumbing for OpenWeatherMap 2.5 endpoints."""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from meteo.ingest.errors import DecodeError, InvalidInputError, NetworkError

logger = logging.getLogger(__name__)

OWM_BASE_URL = "https://api.openweathermap.org/data/2.5"
DEFAULT_UNITS = "metric"

T = TypeVar("T")


class OpenWeatherMapClient:
    """Issues one GET per call against an OpenWeatherMap endpoint.

    The transport and the API key are injected so that a single configured
    ``httpx.AsyncClient`` can be shared across clients and swapped in tests.
    No retries and no caching: each call is a single attempt.
    """

    endpoint: str = ""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        base_url: str = OWM_BASE_URL,
        units: str = DEFAULT_UNITS,
    ):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.units = units

    def _params(self, city: str) -> dict[str, str]:
        return {"q": city, "appid": self.api_key, "units": self.units}

    async def _get_json(self, city: str) -> Any:
        if not city or not city.strip():
            raise InvalidInputError("city must be a non-empty string")

        url = f"{self.base_url}/{self.endpoint}"
        try:
            resp = await self.http.get(url, params=self._params(city))
        except httpx.RequestError as e:
            logger.error("OWM %s request failed for city=%s: %s", self.endpoint, city, e)
            raise NetworkError(f"Request failed: {e}", cause=e) from e

        if not resp.is_success:
            status_error = httpx.HTTPStatusError(
                f"HTTP {resp.status_code}", request=resp.request, response=resp
            )
            logger.error(
                "OWM %s returned %d for city=%s",
                self.endpoint, resp.status_code, city,
            )
            raise NetworkError(
                f"HTTP {resp.status_code} from {self.endpoint}",
                cause=status_error,
                status_code=resp.status_code,
            ) from status_error

        try:
            return resp.json()
        except ValueError as e:
            logger.warning("OWM %s body is not JSON for city=%s", self.endpoint, city)
            raise DecodeError(f"Invalid JSON from {self.endpoint}: {e}", cause=e) from e

    def _decode(self, adapter: TypeAdapter[T], raw: Any, city: str) -> T:
        try:
            return adapter.validate_python(raw)
        except ValidationError as e:
            logger.warning(
                "OWM %s payload for city=%s did not validate: %d error(s)",
                self.endpoint, city, e.error_count(),
            )
            raise DecodeError(f"Unexpected payload from {self.endpoint}", cause=e) from e
