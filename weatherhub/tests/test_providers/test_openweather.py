"""Tests for the OpenWeather adapter with mocked httpx."""

import asyncio

import httpx
import pytest
import respx

from weatherhub.providers.openweather import OpenWeatherAdapter, icon_url

BASE = "https://test-ow.example.com"


@pytest.fixture
def adapter() -> OpenWeatherAdapter:
    return OpenWeatherAdapter(api_key="test-key", base_url=BASE)


def _mock_both(payload, current=None, forecast=None):
    current_route = respx.get(f"{BASE}/weather").mock(
        return_value=httpx.Response(200, json=current or payload("openweather_current.json"))
    )
    forecast_route = respx.get(f"{BASE}/forecast").mock(
        return_value=httpx.Response(200, json=forecast or payload("openweather_forecast.json"))
    )
    return current_route, forecast_route


class TestGetWeather:
    @respx.mock
    def test_success(self, adapter, nyc, payload):
        _mock_both(payload)

        result = asyncio.run(adapter.get_weather(nyc))
        assert result.success
        assert result.source == "OpenWeather"
        assert result.error is None
        assert result.data.source == "OpenWeather"
        assert result.data.location.name == "New York"
        assert result.data.location.country == "US"
        assert result.data.location.timezone == "UTC-05:00"

    @respx.mock
    def test_request_params(self, adapter, nyc, payload):
        current_route, forecast_route = _mock_both(payload)

        asyncio.run(adapter.get_weather(nyc))
        request = current_route.calls[0].request
        assert request.url.params["appid"] == "test-key"
        assert request.url.params["units"] == "metric"
        assert request.url.params["lat"] == "40.7128"
        assert forecast_route.call_count == 1

    @respx.mock
    def test_current_conversions(self, adapter, nyc, payload):
        _mock_both(payload)

        current = asyncio.run(adapter.get_weather(nyc)).data.current
        assert current.temp_c == 20.0
        assert current.temp_f == pytest.approx(68.0)
        assert current.feelslike_f == pytest.approx(19.5 * 9 / 5 + 32)
        assert current.wind_kph == pytest.approx(18.0)
        assert current.wind_mph == pytest.approx(11.185)
        assert current.wind_dir == "SSW"
        assert current.pressure_in == pytest.approx(1015 * 0.02953)
        assert current.visibility_km == pytest.approx(10.0)
        assert current.visibility_miles == pytest.approx(6.21371)
        assert current.uv == 0
        assert current.condition.code == 800
        assert current.condition.icon == "https://openweathermap.org/img/wn/01d@2x.png"

    def test_missing_key_makes_no_request(self, nyc):
        adapter = OpenWeatherAdapter(api_key="", base_url=BASE)
        with respx.mock(assert_all_called=False) as mock:
            result = asyncio.run(adapter.get_weather(nyc))
            assert not mock.calls
        assert not result.success
        assert result.error == "OpenWeather API key not configured"
        assert result.data is None

    @respx.mock
    def test_unauthorized(self, adapter, nyc):
        respx.get(f"{BASE}/weather").mock(
            return_value=httpx.Response(401, json={"cod": 401, "message": "Invalid API key"})
        )

        result = asyncio.run(adapter.get_weather(nyc))
        assert not result.success
        assert result.error == "OpenWeather returned HTTP 401"

    @respx.mock
    def test_network_error(self, adapter, nyc):
        respx.get(f"{BASE}/weather").mock(side_effect=httpx.ConnectError("boom"))

        result = asyncio.run(adapter.get_weather(nyc))
        assert not result.success
        assert "request failed" in result.error

    @respx.mock
    def test_malformed_payload(self, adapter, nyc, payload):
        current = payload("openweather_current.json")
        del current["main"]
        _mock_both(payload, current=current)

        result = asyncio.run(adapter.get_weather(nyc))
        assert not result.success
        assert result.error.startswith("Malformed OpenWeather response")

    @pytest.mark.parametrize("section", ["wind", "main", "weather"])
    def test_null_section(self, adapter, nyc, payload, section):
        current = payload("openweather_current.json")
        current[section] = None
        with respx.mock:
            _mock_both(payload, current=current)
            result = asyncio.run(adapter.get_weather(nyc))
        assert result.success is False
        assert result.data is None
        assert result.error.startswith("Malformed OpenWeather response")

    @respx.mock
    def test_null_wind_in_forecast_sample(self, adapter, nyc, payload):
        forecast = payload("openweather_forecast.json")
        forecast["list"][0]["wind"] = None
        _mock_both(payload, forecast=forecast)

        result = asyncio.run(adapter.get_weather(nyc))
        assert result.success is False
        assert result.error.startswith("Malformed OpenWeather response")

    @respx.mock
    def test_list_body(self, adapter, nyc, payload):
        _mock_both(payload, current=[{"x": 1}])

        result = asyncio.run(adapter.get_weather(nyc))
        assert result.success is False
        assert result.error == "Malformed OpenWeather response: expected a JSON object"


class TestForecastGrouping:
    @respx.mock
    def test_groups_by_utc_date(self, adapter, nyc, payload):
        _mock_both(payload)

        forecast = asyncio.run(adapter.get_weather(nyc)).data.forecast
        assert [d.date for d in forecast] == ["2026-02-11", "2026-02-12"]
        assert [len(d.hour) for d in forecast] == [2, 2]

    @respx.mock
    def test_day_aggregates(self, adapter, nyc, payload):
        _mock_both(payload)

        day = asyncio.run(adapter.get_weather(nyc)).data.forecast[0].day
        assert day.maxtemp_c == 15.0
        assert day.mintemp_c == 9.0
        assert day.avgtemp_c == pytest.approx(12.0)
        assert day.maxtemp_f == pytest.approx(59.0)
        assert day.maxwind_kph == pytest.approx(21.6)
        assert day.totalprecip_mm == pytest.approx(1.5)
        assert day.totalprecip_in == pytest.approx(1.5 * 0.0393701)
        assert day.avghumidity == pytest.approx(60.0)
        assert day.avgvis_km == 10.0

    @respx.mock
    def test_day_condition_is_first_sample(self, adapter, nyc, payload):
        _mock_both(payload)

        day = asyncio.run(adapter.get_weather(nyc)).data.forecast[0].day
        # second sample of the day is Clear; the first one wins
        assert day.condition.text == "Rain"
        assert day.condition.code == 500

    @respx.mock
    def test_hour_fields(self, adapter, nyc, payload):
        _mock_both(payload)

        hours = asyncio.run(adapter.get_weather(nyc)).data.forecast[0].hour
        assert hours[0].time == "2026-02-11T12:00:00+00:00"
        assert hours[0].will_it_rain == 1
        assert hours[0].chance_of_rain == 80
        assert hours[0].gust_kph == pytest.approx(25.2)
        assert hours[0].dewpoint_c == 0
        assert hours[1].will_it_rain == 0
        assert hours[1].precip_mm == 0

    @respx.mock
    def test_empty_forecast_list(self, adapter, nyc, payload):
        _mock_both(payload, forecast={"cod": "200", "list": []})

        result = asyncio.run(adapter.get_weather(nyc))
        assert result.success
        assert result.data.forecast == []


class TestIconUrl:
    def test_known_icon(self):
        assert icon_url("10n") == "https://openweathermap.org/img/wn/10n@2x.png"

    def test_missing_icon_falls_back_to_clear(self):
        assert icon_url(None) == "https://openweathermap.org/img/wn/01d@2x.png"
