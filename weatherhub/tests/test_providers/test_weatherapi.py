"""Tests for the WeatherAPI adapter with mocked httpx."""

import asyncio

import httpx
import pytest
import respx

from weatherhub.providers.weatherapi import WeatherAPIAdapter, icon_url

BASE = "https://test-wapi.example.com"


@pytest.fixture
def adapter() -> WeatherAPIAdapter:
    return WeatherAPIAdapter(api_key="test-key", base_url=BASE)


class TestGetWeather:
    @respx.mock
    def test_success(self, adapter, nyc, payload):
        route = respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=payload("weatherapi_forecast.json"))
        )

        result = asyncio.run(adapter.get_weather(nyc))
        assert result.success
        assert result.source == "WeatherAPI"
        params = route.calls[0].request.url.params
        assert params["q"] == "40.7128,-74.006"
        assert params["days"] == "5"
        assert params["aqi"] == "no"
        assert params["key"] == "test-key"

    @respx.mock
    def test_location_mapping(self, adapter, nyc, payload):
        respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=payload("weatherapi_forecast.json"))
        )

        loc = asyncio.run(adapter.get_weather(nyc)).data.location
        assert loc.name == "New York"
        assert loc.region == "New York"
        assert loc.country == "United States of America"
        assert loc.timezone == "America/New_York"
        assert (loc.lat, loc.lon) == (40.71, -74.01)

    @respx.mock
    def test_current_passthrough(self, adapter, nyc, payload):
        respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=payload("weatherapi_forecast.json"))
        )

        current = asyncio.run(adapter.get_weather(nyc)).data.current
        assert current.temp_c == 22.0
        assert current.temp_f == 71.6
        assert current.uv == 4.0
        assert current.visibility_km == 16.0
        assert current.wind_dir == "SSW"
        assert current.condition.code == 1003
        assert current.condition.icon == "https://cdn.weatherapi.com/weather/64x64/day/116.png"

    @respx.mock
    def test_forecast_days_and_hours(self, adapter, nyc, payload):
        respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=payload("weatherapi_forecast.json"))
        )

        forecast = asyncio.run(adapter.get_weather(nyc)).data.forecast
        assert [d.date for d in forecast] == ["2026-02-11", "2026-02-12"]
        assert forecast[0].day.maxtemp_c == 24.0
        assert forecast[0].hour[0].dewpoint_c == 10.5
        assert forecast[0].hour[0].condition.icon.startswith("https://cdn.weatherapi.com/")
        assert forecast[1].hour == []
        assert forecast[1].day.totalprecip_mm == 4.2

    @respx.mock
    def test_missing_current(self, adapter, nyc, payload):
        data = payload("weatherapi_forecast.json")
        del data["current"]
        respx.get(f"{BASE}/forecast.json").mock(return_value=httpx.Response(200, json=data))

        result = asyncio.run(adapter.get_weather(nyc))
        assert not result.success
        assert result.error == "No current weather data in WeatherAPI response"

    @respx.mock
    def test_missing_location(self, adapter, nyc, payload):
        data = payload("weatherapi_forecast.json")
        del data["location"]
        respx.get(f"{BASE}/forecast.json").mock(return_value=httpx.Response(200, json=data))

        result = asyncio.run(adapter.get_weather(nyc))
        assert not result.success
        assert result.error == "No location data in WeatherAPI response"

    @respx.mock
    def test_list_body(self, adapter, nyc):
        respx.get(f"{BASE}/forecast.json").mock(
            return_value=httpx.Response(200, json=[{"x": 1}])
        )

        result = asyncio.run(adapter.get_weather(nyc))
        assert result.success is False
        assert result.error == "Malformed WeatherAPI response: expected a JSON object"

    @respx.mock
    def test_null_condition(self, adapter, nyc, payload):
        data = payload("weatherapi_forecast.json")
        data["current"]["condition"] = None
        respx.get(f"{BASE}/forecast.json").mock(return_value=httpx.Response(200, json=data))

        result = asyncio.run(adapter.get_weather(nyc))
        assert result.success is False
        assert result.error.startswith("Malformed WeatherAPI response")

    @respx.mock
    def test_null_forecast_day(self, adapter, nyc, payload):
        data = payload("weatherapi_forecast.json")
        data["forecast"]["forecastday"][0]["day"] = None
        respx.get(f"{BASE}/forecast.json").mock(return_value=httpx.Response(200, json=data))

        result = asyncio.run(adapter.get_weather(nyc))
        assert result.success is False
        assert result.error.startswith("Malformed WeatherAPI response")

    @respx.mock
    def test_zero_coordinates_kept(self, adapter, nyc, payload):
        data = payload("weatherapi_forecast.json")
        data["location"]["lat"] = 0.0
        data["location"]["lon"] = 0.0
        respx.get(f"{BASE}/forecast.json").mock(return_value=httpx.Response(200, json=data))

        loc = asyncio.run(adapter.get_weather(nyc)).data.location
        assert (loc.lat, loc.lon) == (0.0, 0.0)

    @respx.mock
    def test_server_error(self, adapter, nyc):
        respx.get(f"{BASE}/forecast.json").mock(return_value=httpx.Response(503))

        result = asyncio.run(adapter.get_weather(nyc))
        assert not result.success
        assert result.error == "WeatherAPI returned HTTP 503"

    def test_missing_key(self, nyc):
        adapter = WeatherAPIAdapter(api_key="", base_url=BASE)
        with respx.mock(assert_all_called=False) as mock:
            result = asyncio.run(adapter.get_weather(nyc))
            assert not mock.calls
        assert not result.success
        assert result.error == "WeatherAPI API key not configured"


class TestIconUrl:
    def test_protocol_relative(self):
        assert icon_url("//cdn.weatherapi.com/x.png") == "https://cdn.weatherapi.com/x.png"

    def test_missing_falls_back_to_sunny(self):
        assert icon_url(None) == "https://cdn.weatherapi.com/weather/64x64/day/113.png"
