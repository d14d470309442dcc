"""Tests for the weather view-model: concurrent refresh, errors, stale responses."""

import asyncio
from dataclasses import replace

import httpx
import pytest
import respx
from pydantic import TypeAdapter

from meteo.app.view_model import WeatherViewModel, build_view_model
from meteo.config.schema import MeteoConfig
from meteo.ingest.errors import DecodeError, NetworkError
from meteo.models.common import Slot
from meteo.models.weather import CurrentWeather, Forecast

TEST_BASE_URL = "https://test-owm.example.com/data/2.5"
CITIES = ["Montreal", "Toronto", "Vancouver"]


class GatedClient:
    """Fake weather+forecast client whose responses wait on per-city gates."""

    def __init__(self, weather: dict[str, CurrentWeather], forecast: dict[str, Forecast]):
        self.weather = weather
        self.forecast_by_city = forecast
        self.gates = {city: asyncio.Event() for city in weather}
        self.calls: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    def release(self, city: str) -> None:
        self.gates[city].set()

    async def fetch_current_weather(self, city: str) -> CurrentWeather:
        self.calls.append(("weather", city))
        await self.gates[city].wait()
        if self.fail_with is not None:
            raise self.fail_with
        return self.weather[city]

    async def fetch_forecast(self, city: str) -> Forecast:
        self.calls.append(("forecast", city))
        await self.gates[city].wait()
        if self.fail_with is not None:
            raise self.fail_with
        return self.forecast_by_city[city]


@pytest.fixture
def weather(montreal_weather: dict) -> CurrentWeather:
    return TypeAdapter(CurrentWeather).validate_python(montreal_weather)


@pytest.fixture
def forecast(montreal_forecast: dict) -> Forecast:
    return TypeAdapter(Forecast).validate_python(montreal_forecast)


@pytest.fixture
def fake(weather: CurrentWeather, forecast: Forecast) -> GatedClient:
    by_city_weather = {c: replace(weather, name=c) for c in CITIES}
    by_city_forecast = {
        c: Forecast(list=forecast.entries[: i + 1]) for i, c in enumerate(CITIES)
    }
    return GatedClient(by_city_weather, by_city_forecast)


def _vm(fake: GatedClient, discard_stale: bool = True) -> WeatherViewModel:
    return WeatherViewModel(
        weather_client=fake,  # type: ignore[arg-type]
        forecast_client=fake,  # type: ignore[arg-type]
        cities=CITIES,
        default_city="Montreal",
        discard_stale_responses=discard_stale,
    )


class TestRefresh:
    @pytest.mark.asyncio
    async def test_app_start_fetches_default_city(self, fake: GatedClient):
        vm = _vm(fake)
        fake.release("Montreal")
        await vm.on_app_start()

        assert vm.city == "Montreal"
        assert vm.current_weather is not None
        assert vm.current_weather.name == "Montreal"
        assert vm.forecast is not None
        assert len(vm.forecast) == 1
        assert sorted(fake.calls) == [("forecast", "Montreal"), ("weather", "Montreal")]

    @pytest.mark.asyncio
    async def test_fetches_are_issued_together(self, fake: GatedClient):
        vm = _vm(fake)
        task = asyncio.create_task(vm.on_city_selected("Toronto"))
        for _ in range(3):
            await asyncio.sleep(0)

        # Both requests in flight before either completes
        assert ("weather", "Toronto") in fake.calls
        assert ("forecast", "Toronto") in fake.calls
        assert vm.current_weather is None

        fake.release("Toronto")
        await task
        assert vm.current_weather is not None
        assert vm.current_weather.name == "Toronto"

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_data(self, fake: GatedClient):
        vm = _vm(fake)
        fake.release("Montreal")
        await vm.on_app_start()
        before = vm.current_weather

        fake.fail_with = NetworkError("HTTP 500", status_code=500)
        await vm.on_city_selected("Montreal")

        assert vm.current_weather is before
        assert vm.last_error is not None
        assert isinstance(vm.last_error.error, NetworkError)
        assert vm.last_error.city == "Montreal"

    @pytest.mark.asyncio
    async def test_success_clears_last_error(self, fake: GatedClient):
        vm = _vm(fake)
        fake.release("Montreal")
        fake.fail_with = DecodeError("bad body")
        await vm.on_app_start()
        assert vm.last_error is not None
        assert vm.current_weather is None

        fake.fail_with = None
        await vm.on_city_selected("Montreal")
        assert vm.last_error is None
        assert vm.current_weather is not None


class TestStaleResponses:
    async def _select_slow_then_fast(self, vm: WeatherViewModel, fake: GatedClient) -> None:
        slow = asyncio.create_task(vm.on_city_selected("Vancouver"))
        await asyncio.sleep(0)
        fast = asyncio.create_task(vm.on_city_selected("Toronto"))
        await asyncio.sleep(0)

        fake.release("Toronto")
        await fast
        fake.release("Vancouver")
        await slow

    @pytest.mark.asyncio
    async def test_last_completion_wins_without_guard(self, fake: GatedClient):
        vm = _vm(fake, discard_stale=False)
        await self._select_slow_then_fast(vm, fake)

        assert vm.city == "Toronto"
        assert vm.current_weather is not None
        assert vm.current_weather.name == "Vancouver"
        assert vm.forecast is not None
        assert len(vm.forecast) == 3

    @pytest.mark.asyncio
    async def test_guard_discards_other_city(self, fake: GatedClient):
        vm = _vm(fake, discard_stale=True)
        await self._select_slow_then_fast(vm, fake)

        assert vm.city == "Toronto"
        assert vm.current_weather is not None
        assert vm.current_weather.name == "Toronto"
        assert vm.forecast is not None
        assert len(vm.forecast) == 2

    @pytest.mark.asyncio
    async def test_guard_ignores_stale_failures(self, fake: GatedClient):
        vm = _vm(fake, discard_stale=True)
        slow = asyncio.create_task(vm.on_city_selected("Vancouver"))
        await asyncio.sleep(0)
        fast = asyncio.create_task(vm.on_city_selected("Toronto"))
        await asyncio.sleep(0)
        fake.release("Toronto")
        await fast

        fake.fail_with = NetworkError("late failure")
        fake.release("Vancouver")
        await slow
        assert vm.last_error is None
        assert vm.current_weather is not None
        assert vm.current_weather.name == "Toronto"


class TestListeners:
    @pytest.mark.asyncio
    async def test_notifications(self, fake: GatedClient):
        vm = _vm(fake)
        events: list[Slot] = []
        vm.subscribe(lambda slot, value: events.append(slot))

        fake.release("Toronto")
        await vm.on_city_selected("Toronto")

        assert events[0] == Slot.CITY
        assert Slot.CURRENT_WEATHER in events
        assert Slot.FORECAST in events

    @pytest.mark.asyncio
    async def test_unsubscribe(self, fake: GatedClient):
        vm = _vm(fake)
        events: list[Slot] = []
        unsubscribe = vm.subscribe(lambda slot, value: events.append(slot))
        unsubscribe()

        fake.release("Montreal")
        await vm.on_app_start()
        assert events == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_refresh(self, fake: GatedClient):
        vm = _vm(fake)

        def _boom(slot, value):
            raise RuntimeError("listener bug")

        vm.subscribe(_boom)
        fake.release("Montreal")
        await vm.on_app_start()
        assert vm.current_weather is not None


class TestBuildViewModel:
    @pytest.mark.asyncio
    @respx.mock
    async def test_select_city_hits_both_endpoints(
        self, http: httpx.AsyncClient, montreal_weather: dict, montreal_forecast: dict
    ):
        montreal_weather["name"] = "Toronto"
        weather_route = respx.get(f"{TEST_BASE_URL}/weather").mock(
            return_value=httpx.Response(200, json=montreal_weather)
        )
        forecast_route = respx.get(f"{TEST_BASE_URL}/forecast").mock(
            return_value=httpx.Response(200, json=montreal_forecast)
        )
        config = MeteoConfig(
            api={"base_url": TEST_BASE_URL},
            cities=CITIES,
            default_city="Montreal",
        )

        vm = build_view_model(config, http, api_key="test-key")
        await vm.on_city_selected("Toronto")

        assert weather_route.calls[0].request.url.params["q"] == "Toronto"
        assert forecast_route.calls[0].request.url.params["q"] == "Toronto"
        assert vm.current_weather is not None
        assert vm.current_weather.name == "Toronto"
        assert vm.forecast is not None
        assert len(vm.forecast) == 14
        assert vm.last_error is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_recorded(self, http: httpx.AsyncClient, montreal_forecast: dict):
        respx.get(f"{TEST_BASE_URL}/weather").mock(return_value=httpx.Response(500))
        respx.get(f"{TEST_BASE_URL}/forecast").mock(
            return_value=httpx.Response(200, json=montreal_forecast)
        )
        config = MeteoConfig(api={"base_url": TEST_BASE_URL}, cities=CITIES)

        vm = build_view_model(config, http, api_key="test-key")
        await vm.on_city_selected("Montreal")

        assert vm.current_weather is None
        assert vm.forecast is not None
        assert vm.last_error is not None
        assert vm.last_error.slot == Slot.CURRENT_WEATHER
