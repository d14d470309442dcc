"""OpenWeatherMap current-weather and forecast data models."""

from dataclasses import dataclass
from typing import Annotated

from pydantic import Field


@dataclass(frozen=True)
class ConditionEntry:
    id: int  # provider condition code, e.g. 800 = clear sky
    main: str
    description: str


Conditions = Annotated[tuple[ConditionEntry, ...], Field(min_length=1)]


@dataclass(frozen=True)
class Main:
    temp: float
    feels_like: float
    pressure: float
    humidity: float


@dataclass(frozen=True)
class Wind:
    speed: float  # m/s with metric units
    deg: int


@dataclass(frozen=True)
class Sys:
    country: str
    sunrise: int
    sunset: int


@dataclass(frozen=True)
class CurrentWeather:
    name: str
    sys: Sys
    weather: Conditions
    main: Main
    wind: Wind

    @property
    def country(self) -> str:
        return self.sys.country

    @property
    def sunrise(self) -> int:
        return self.sys.sunrise

    @property
    def sunset(self) -> int:
        return self.sys.sunset

    @property
    def condition(self) -> ConditionEntry:
        return self.weather[0]


@dataclass(frozen=True)
class ForecastEntry:
    dt: int
    main: Main
    weather: Conditions

    @property
    def condition(self) -> ConditionEntry:
        return self.weather[0]


@dataclass(frozen=True)
class Forecast:
    """Forecast entries in provider order (ascending ``dt``)."""

    list: tuple[ForecastEntry, ...]

    @property
    def entries(self) -> tuple[ForecastEntry, ...]:
        return self.list

    def window(self, size: int) -> tuple[ForecastEntry, ...]:
        """First ``size`` entries, for displays that show a bounded strip."""
        if size < 0:
            raise ValueError(f"window size must be >= 0, got {size}")
        return self.list[:size]

    def __len__(self) -> int:
        return len(self.list)
