"""Shared test fixtures."""

import json
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
import yaml

from meteo.config.defaults import DEFAULT_CITIES
from meteo.config.schema import MeteoConfig

FIXTURE_DIR = Path(__file__).parent / "fixtures"
TEST_BASE_URL = "https://test-owm.example.com/data/2.5"


def load_fixture(name: str) -> dict:
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def default_config() -> MeteoConfig:
    """Return default MeteoConfig with default cities."""
    return MeteoConfig(cities=DEFAULT_CITIES, default_city=DEFAULT_CITIES[0])


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "api": {"base_url": TEST_BASE_URL},
        "display": {"forecast_window": 12},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def montreal_weather() -> dict:
    return load_fixture("owm_weather_montreal.json")


@pytest.fixture
def montreal_forecast() -> dict:
    return load_fixture("owm_forecast_montreal.json")


@pytest_asyncio.fixture
async def http():
    async with httpx.AsyncClient() as client:
        yield client
