"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import yaml

from weatherhub.config.defaults import DEFAULT_PROVIDERS
from weatherhub.config.env import WeatherEnv
from weatherhub.config.schema import AppConfig
from weatherhub.models.common import utc_now_iso
from weatherhub.models.weather import (
    CurrentWeather,
    Location,
    WeatherAPIResponse,
    WeatherCondition,
    WeatherData,
)

FIXTURE_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str):
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


def make_current(temp_c: float, temp_f: float | None = None) -> CurrentWeather:
    return CurrentWeather(
        temp_c=temp_c,
        temp_f=temp_f if temp_f is not None else temp_c * 9 / 5 + 32,
        condition=WeatherCondition(text="Clear", icon="https://example.com/clear.png", code=800),
        humidity=50,
        wind_kph=10.0,
        wind_mph=6.2,
        wind_degree=180,
        wind_dir="S",
        pressure_mb=1015,
        pressure_in=29.97,
        feelslike_c=temp_c,
        feelslike_f=temp_c * 9 / 5 + 32,
        uv=0,
        visibility_km=10.0,
        visibility_miles=6.2,
    )


def make_success(
    source: str, temp_c: float, temp_f: float | None = None
) -> WeatherAPIResponse:
    return WeatherAPIResponse.ok(
        WeatherData(
            location=Location(name="New York", country="US", lat=40.7128, lon=-74.006),
            current=make_current(temp_c, temp_f),
            forecast=[],
            source=source,
            timestamp=utc_now_iso(),
        )
    )


@pytest.fixture
def nyc() -> Location:
    return Location(name="Unknown", country="Unknown", lat=40.7128, lon=-74.006)


@pytest.fixture
def empty_env() -> WeatherEnv:
    """Environment with no keys, ignoring any local .env file."""
    return WeatherEnv(
        _env_file=None,
        openweather_api_key="",
        weatherapi_key="",
        accuweather_api_key="",
        port=None,
    )


@pytest.fixture
def keyed_config() -> AppConfig:
    """Default providers with fake keys, all three enabled."""
    providers = [
        p.model_copy(update={"api_key": f"test-{p.name}", "enabled": True})
        for p in DEFAULT_PROVIDERS
    ]
    return AppConfig(providers=providers)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "server": {"port": 8080},
        "providers": [
            {"name": "weatherapi", "api_key": "yaml-key"},
            {"name": "openweather"},
        ],
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
def payload():
    """Loader for provider JSON payloads in fixtures/."""
    return load_fixture


@pytest.fixture
def reading():
    """Factory for successful WeatherAPIResponse objects."""
    return make_success
