"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, model_validator

from meteo.ingest.owm_client import DEFAULT_UNITS, OWM_BASE_URL


class ApiConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = OWM_BASE_URL
    api_key_env: str = "OPENWEATHERMAP_API_KEY"
    units: str = DEFAULT_UNITS
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    forecast_window: int = Field(default=12, ge=1, le=40)


class BehaviorConfig(BaseModel):
    model_config = {"extra": "forbid"}

    # Drop responses for a city that is no longer selected.
    discard_stale_responses: bool = True


class MeteoConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api: ApiConfig = ApiConfig()
    display: DisplayConfig = DisplayConfig()
    behavior: BehaviorConfig = BehaviorConfig()
    cities: list[str] = []
    default_city: str = ""

    @model_validator(mode="after")
    def _check_default_city(self) -> "MeteoConfig":
        if any(not c.strip() for c in self.cities):
            raise ValueError("city names must be non-empty")
        if self.default_city and self.cities and self.default_city not in self.cities:
            raise ValueError(
                f"default_city {self.default_city!r} is not one of {self.cities}"
            )
        return self
