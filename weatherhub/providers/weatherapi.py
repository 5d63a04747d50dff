"""WeatherAPI.com adapter.

The forecast endpoint already returns current conditions, daily summaries
and hourly entries in both unit systems, so the mapping is mostly 1:1.
"""

import logging

import httpx

from weatherhub.models.common import utc_now_iso
from weatherhub.models.weather import (
    CurrentWeather,
    DayForecast,
    ForecastDay,
    HourForecast,
    Location,
    WeatherCondition,
    WeatherData,
)
from weatherhub.providers.base import ProviderError, WeatherAdapter

logger = logging.getLogger(__name__)

WEATHERAPI_BASE_URL = "https://api.weatherapi.com/v1"
DEFAULT_ICON = "//cdn.weatherapi.com/weather/64x64/day/113.png"  # sunny
FORECAST_DAYS = 5


class WeatherAPIAdapter(WeatherAdapter):
    name = "weatherapi"
    source = "WeatherAPI"
    default_base_url = WEATHERAPI_BASE_URL

    async def _fetch(self, client: httpx.AsyncClient, location: Location) -> WeatherData:
        data = await self._get_json(
            client,
            "/forecast.json",
            {
                "key": self.api_key,
                "q": f"{location.lat},{location.lon}",
                "days": FORECAST_DAYS,
                "aqi": "no",
            },
        )
        if not data:
            raise ProviderError("No data received from WeatherAPI")
        if not isinstance(data, dict):
            raise ProviderError("Malformed WeatherAPI response: expected a JSON object")
        if not data.get("location"):
            raise ProviderError("No location data in WeatherAPI response")
        if not data.get("current"):
            raise ProviderError("No current weather data in WeatherAPI response")

        loc = data["location"]
        logger.debug("WeatherAPI resolved %s, %s", loc.get("name"), loc.get("country"))
        return WeatherData(
            location=Location(
                name=loc.get("name") or location.name,
                region=loc.get("region") or None,
                country=loc.get("country") or location.country,
                lat=loc["lat"] if loc.get("lat") is not None else location.lat,
                lon=loc["lon"] if loc.get("lon") is not None else location.lon,
                timezone=loc.get("tz_id") or None,
                zip_code=location.zip_code,
            ),
            current=transform_current(data["current"]),
            forecast=transform_forecast(data.get("forecast") or {}),
            source=self.source,
            timestamp=utc_now_iso(),
        )


def transform_current(data: dict) -> CurrentWeather:
    return CurrentWeather(
        temp_c=data["temp_c"],
        temp_f=data["temp_f"],
        condition=_condition(data["condition"]),
        humidity=data["humidity"],
        wind_kph=data["wind_kph"],
        wind_mph=data["wind_mph"],
        wind_degree=data["wind_degree"],
        wind_dir=data["wind_dir"],
        pressure_mb=data["pressure_mb"],
        pressure_in=data["pressure_in"],
        feelslike_c=data["feelslike_c"],
        feelslike_f=data["feelslike_f"],
        uv=data.get("uv", 0.0),
        visibility_km=data["vis_km"],
        visibility_miles=data["vis_miles"],
    )


def transform_forecast(data: dict) -> list[ForecastDay]:
    days = []
    for entry in data.get("forecastday", []):
        d = entry["day"]
        day = DayForecast(
            maxtemp_c=d["maxtemp_c"],
            maxtemp_f=d["maxtemp_f"],
            mintemp_c=d["mintemp_c"],
            mintemp_f=d["mintemp_f"],
            avgtemp_c=d["avgtemp_c"],
            avgtemp_f=d["avgtemp_f"],
            maxwind_kph=d["maxwind_kph"],
            maxwind_mph=d["maxwind_mph"],
            totalprecip_mm=d["totalprecip_mm"],
            totalprecip_in=d["totalprecip_in"],
            avgvis_km=d["avgvis_km"],
            avgvis_miles=d["avgvis_miles"],
            avghumidity=d["avghumidity"],
            condition=_condition(d["condition"]),
            uv=d.get("uv", 0.0),
        )
        days.append(
            ForecastDay(
                date=entry["date"],
                day=day,
                hour=[transform_hour(h) for h in entry.get("hour", [])],
            )
        )
    return days


def transform_hour(h: dict) -> HourForecast:
    return HourForecast(
        time=h["time"],
        temp_c=h["temp_c"],
        temp_f=h["temp_f"],
        condition=_condition(h["condition"]),
        wind_kph=h["wind_kph"],
        wind_mph=h["wind_mph"],
        wind_degree=h["wind_degree"],
        wind_dir=h["wind_dir"],
        pressure_mb=h["pressure_mb"],
        pressure_in=h["pressure_in"],
        precip_mm=h["precip_mm"],
        precip_in=h["precip_in"],
        humidity=h["humidity"],
        cloud=h["cloud"],
        feelslike_c=h["feelslike_c"],
        feelslike_f=h["feelslike_f"],
        windchill_c=h.get("windchill_c", h["feelslike_c"]),
        windchill_f=h.get("windchill_f", h["feelslike_f"]),
        heatindex_c=h.get("heatindex_c", h["feelslike_c"]),
        heatindex_f=h.get("heatindex_f", h["feelslike_f"]),
        dewpoint_c=h.get("dewpoint_c", 0.0),
        dewpoint_f=h.get("dewpoint_f", 0.0),
        will_it_rain=h.get("will_it_rain", 0),
        chance_of_rain=h.get("chance_of_rain", 0),
        will_it_snow=h.get("will_it_snow", 0),
        chance_of_snow=h.get("chance_of_snow", 0),
        vis_km=h["vis_km"],
        vis_miles=h["vis_miles"],
        gust_kph=h.get("gust_kph", 0.0),
        gust_mph=h.get("gust_mph", 0.0),
        uv=h.get("uv", 0.0),
    )


def icon_url(icon: str | None) -> str:
    """WeatherAPI icons are protocol-relative (``//cdn...``)."""
    icon = icon or DEFAULT_ICON
    if icon.startswith("//"):
        return f"https:{icon}"
    return icon


def _condition(c: dict) -> WeatherCondition:
    return WeatherCondition(
        text=c.get("text", "Unknown"),
        icon=icon_url(c.get("icon")),
        code=int(c.get("code", 1000)),
    )
