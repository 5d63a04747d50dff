"""OpenWeather adapter (current weather + 5 day / 3 hour forecast APIs).

OpenWeather reports metric units only, so every imperial field is derived
here. The forecast endpoint returns 3-hourly samples with no daily summary;
samples are grouped into days by the UTC date of their timestamp.
"""

import logging
from datetime import UTC, datetime
from statistics import fmean
from typing import Any

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
from weatherhub.providers.units import (
    c_to_f,
    compass_direction,
    hpa_to_inhg,
    km_to_mi,
    mm_to_in,
    ms_to_kph,
    ms_to_mph,
)

logger = logging.getLogger(__name__)

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"
DEFAULT_ICON = "01d"  # clear sky, day
DEFAULT_VISIBILITY_KM = 10.0
DEFAULT_VISIBILITY_MILES = 6.2


class OpenWeatherAdapter(WeatherAdapter):
    name = "openweather"
    source = "OpenWeather"
    default_base_url = OPENWEATHER_BASE_URL

    async def _fetch(self, client: httpx.AsyncClient, location: Location) -> WeatherData:
        params = {
            "lat": location.lat,
            "lon": location.lon,
            "appid": self.api_key,
            "units": "metric",
        }
        current = await self._get_json(client, "/weather", params)
        forecast = await self._get_json(client, "/forecast", params)
        if not isinstance(current, dict) or not isinstance(forecast, dict):
            raise ProviderError("Malformed OpenWeather response: expected a JSON object")

        return WeatherData(
            location=Location(
                name=current.get("name") or location.name,
                country=current.get("sys", {}).get("country") or location.country,
                lat=current["coord"]["lat"],
                lon=current["coord"]["lon"],
                timezone=_format_utc_offset(current.get("timezone")),
                zip_code=location.zip_code,
            ),
            current=transform_current(current),
            forecast=transform_forecast(forecast),
            source=self.source,
            timestamp=utc_now_iso(),
        )


def transform_current(data: dict) -> CurrentWeather:
    main = data["main"]
    wind = data.get("wind", {})
    temp = float(main["temp"])
    feels_like = float(main.get("feels_like", temp))
    speed = float(wind.get("speed", 0.0))
    degree = float(wind.get("deg", 0.0))
    pressure = float(main.get("pressure", 0.0))
    visibility_km = float(data.get("visibility", DEFAULT_VISIBILITY_KM * 1000)) / 1000

    return CurrentWeather(
        temp_c=temp,
        temp_f=c_to_f(temp),
        condition=_condition(data),
        humidity=float(main.get("humidity", 0.0)),
        wind_kph=ms_to_kph(speed),
        wind_mph=ms_to_mph(speed),
        wind_degree=degree,
        wind_dir=compass_direction(degree),
        pressure_mb=pressure,
        pressure_in=hpa_to_inhg(pressure),
        feelslike_c=feels_like,
        feelslike_f=c_to_f(feels_like),
        uv=0.0,  # not in the free tier
        visibility_km=visibility_km,
        visibility_miles=km_to_mi(visibility_km),
    )


def transform_forecast(data: dict) -> list[ForecastDay]:
    by_date: dict[str, list[dict]] = {}
    for item in data.get("list", []):
        date = datetime.fromtimestamp(item["dt"], UTC).date().isoformat()
        by_date.setdefault(date, []).append(item)

    days = []
    for date, items in by_date.items():
        temps = [float(i["main"]["temp"]) for i in items]
        max_c = max(float(i["main"].get("temp_max", i["main"]["temp"])) for i in items)
        min_c = min(float(i["main"].get("temp_min", i["main"]["temp"])) for i in items)
        avg_c = fmean(temps)
        max_wind = max(float(i.get("wind", {}).get("speed", 0.0)) for i in items)
        precip_mm = sum(_rain_3h(i) for i in items)

        day = DayForecast(
            maxtemp_c=max_c,
            maxtemp_f=c_to_f(max_c),
            mintemp_c=min_c,
            mintemp_f=c_to_f(min_c),
            avgtemp_c=avg_c,
            avgtemp_f=c_to_f(avg_c),
            maxwind_kph=ms_to_kph(max_wind),
            maxwind_mph=ms_to_mph(max_wind),
            totalprecip_mm=precip_mm,
            totalprecip_in=mm_to_in(precip_mm),
            avgvis_km=DEFAULT_VISIBILITY_KM,
            avgvis_miles=DEFAULT_VISIBILITY_MILES,
            avghumidity=fmean(float(i["main"].get("humidity", 0.0)) for i in items),
            condition=_condition(items[0]),
            uv=0.0,
        )
        days.append(
            ForecastDay(date=date, day=day, hour=[transform_hour(i) for i in items])
        )
    logger.debug("OpenWeather forecast grouped into %d days", len(days))
    return days


def transform_hour(item: dict) -> HourForecast:
    main = item["main"]
    wind = item.get("wind", {})
    temp = float(main["temp"])
    feels_like = float(main.get("feels_like", temp))
    speed = float(wind.get("speed", 0.0))
    gust = float(wind.get("gust", 0.0))
    degree = float(wind.get("deg", 0.0))
    pressure = float(main.get("pressure", 0.0))
    rain = _rain_3h(item)
    pop = float(item.get("pop", 0.0))

    return HourForecast(
        time=datetime.fromtimestamp(item["dt"], UTC).isoformat(),
        temp_c=temp,
        temp_f=c_to_f(temp),
        condition=_condition(item),
        wind_kph=ms_to_kph(speed),
        wind_mph=ms_to_mph(speed),
        wind_degree=degree,
        wind_dir=compass_direction(degree),
        pressure_mb=pressure,
        pressure_in=hpa_to_inhg(pressure),
        precip_mm=rain,
        precip_in=mm_to_in(rain),
        humidity=float(main.get("humidity", 0.0)),
        cloud=float(item.get("clouds", {}).get("all", 0.0)),
        feelslike_c=feels_like,
        feelslike_f=c_to_f(feels_like),
        windchill_c=feels_like,
        windchill_f=c_to_f(feels_like),
        heatindex_c=feels_like,
        heatindex_f=c_to_f(feels_like),
        dewpoint_c=0.0,
        dewpoint_f=0.0,
        will_it_rain=1 if pop > 0.5 else 0,
        chance_of_rain=round(pop * 100),
        will_it_snow=0,
        chance_of_snow=0,
        vis_km=DEFAULT_VISIBILITY_KM,
        vis_miles=DEFAULT_VISIBILITY_MILES,
        gust_kph=ms_to_kph(gust),
        gust_mph=ms_to_mph(gust),
        uv=0.0,
    )


def icon_url(icon: str | None) -> str:
    return ICON_URL.format(icon=icon or DEFAULT_ICON)


def _condition(item: dict) -> WeatherCondition:
    weather = item["weather"][0]
    return WeatherCondition(
        text=weather.get("main", "Unknown"),
        icon=icon_url(weather.get("icon")),
        code=int(weather.get("id", 800)),
    )


def _rain_3h(item: dict) -> float:
    return float((item.get("rain") or {}).get("3h", 0.0))


def _format_utc_offset(offset_seconds: Any) -> str | None:
    if offset_seconds is None:
        return None
    total = int(offset_seconds)
    sign = "+" if total >= 0 else "-"
    hours, remainder = divmod(abs(total), 3600)
    return f"UTC{sign}{hours:02d}:{remainder // 60:02d}"
