"""AccuWeather adapter.

AccuWeather is keyed by its own location ids, so each reading takes three
sequential calls: geoposition search, current conditions, 5-day forecast.
The daily forecast is requested in metric units; imperial values are
derived here. No hourly breakdown is available on this tier.
"""

import logging
from typing import Any

import httpx

from weatherhub.models.common import utc_now_iso
from weatherhub.models.weather import (
    CurrentWeather,
    DayForecast,
    ForecastDay,
    Location,
    WeatherCondition,
    WeatherData,
)
from weatherhub.providers.base import ProviderError, WeatherAdapter
from weatherhub.providers.units import c_to_f, km_to_mi, mm_to_in

logger = logging.getLogger(__name__)

ACCUWEATHER_BASE_URL = "https://dataservice.accuweather.com"
ICON_URL = "https://developer.accuweather.com/sites/default/files/{code:02d}-s.png"
DEFAULT_ICON_CODE = 1  # sunny
ICON_CODES = frozenset([*range(1, 9), *range(11, 27), *range(29, 45)])


class AccuWeatherAdapter(WeatherAdapter):
    name = "accuweather"
    source = "AccuWeather"
    default_base_url = ACCUWEATHER_BASE_URL

    async def _fetch(self, client: httpx.AsyncClient, location: Location) -> WeatherData:
        place = await self._location_key(client, location)
        key = place["Key"]

        current = await self._get_json(
            client,
            f"/currentconditions/v1/{key}",
            {"apikey": self.api_key, "details": "true"},
        )
        forecast = await self._get_json(
            client,
            f"/forecasts/v1/daily/5day/{key}",
            {"apikey": self.api_key, "details": "true", "metric": "true"},
        )

        geo = place.get("GeoPosition") or {}
        return WeatherData(
            location=Location(
                name=place.get("EnglishName") or location.name,
                country=(place.get("Country") or {}).get("EnglishName") or location.country,
                lat=geo["Latitude"] if geo.get("Latitude") is not None else location.lat,
                lon=geo["Longitude"] if geo.get("Longitude") is not None else location.lon,
                region=(place.get("AdministrativeArea") or {}).get("EnglishName"),
                timezone=(place.get("TimeZone") or {}).get("Name"),
                zip_code=location.zip_code,
            ),
            current=transform_current(current[0]),
            forecast=transform_forecast(forecast),
            source=self.source,
            timestamp=utc_now_iso(),
        )

    async def _location_key(self, client: httpx.AsyncClient, location: Location) -> dict:
        try:
            data = await self._get_json(
                client,
                "/locations/v1/cities/geoposition/search",
                {"apikey": self.api_key, "q": f"{location.lat},{location.lon}"},
            )
        except httpx.HTTPStatusError as e:
            logger.error(
                "AccuWeather location lookup returned HTTP %d", e.response.status_code
            )
            if e.response.status_code == 401:
                raise ProviderError("AccuWeather API key is invalid or expired") from e
            raise ProviderError("Unable to get location key from AccuWeather") from e
        except (httpx.RequestError, ValueError) as e:
            raise ProviderError("Unable to get location key from AccuWeather") from e

        if not isinstance(data, dict) or not data.get("Key"):
            raise ProviderError("Unable to get location key from AccuWeather")
        logger.debug("AccuWeather location key %s (%s)", data["Key"], data.get("EnglishName"))
        return data


def transform_current(data: dict) -> CurrentWeather:
    wind = data["Wind"]
    return CurrentWeather(
        temp_c=data["Temperature"]["Metric"]["Value"],
        temp_f=data["Temperature"]["Imperial"]["Value"],
        condition=WeatherCondition(
            text=data["WeatherText"],
            icon=icon_url(data.get("WeatherIcon")),
            code=int(data.get("WeatherIcon") or DEFAULT_ICON_CODE),
        ),
        humidity=data["RelativeHumidity"],
        wind_kph=wind["Speed"]["Metric"]["Value"],
        wind_mph=wind["Speed"]["Imperial"]["Value"],
        wind_degree=wind["Direction"]["Degrees"],
        wind_dir=wind["Direction"]["English"],
        pressure_mb=data["Pressure"]["Metric"]["Value"],
        pressure_in=data["Pressure"]["Imperial"]["Value"],
        feelslike_c=data["ApparentTemperature"]["Metric"]["Value"],
        feelslike_f=data["ApparentTemperature"]["Imperial"]["Value"],
        uv=data.get("UVIndex") or 0,
        visibility_km=data["Visibility"]["Metric"]["Value"],
        visibility_miles=data["Visibility"]["Imperial"]["Value"],
    )


def transform_forecast(data: Any) -> list[ForecastDay]:
    if not isinstance(data, dict) or not isinstance(data.get("DailyForecasts"), list):
        logger.error("AccuWeather: no DailyForecasts in response")
        return []

    days = []
    for index, entry in enumerate(data["DailyForecasts"]):
        try:
            days.append(_transform_day(entry))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("AccuWeather: malformed forecast day %d: %s", index, e)
            days.append(_placeholder_day(entry))
    return days


def _transform_day(entry: dict) -> ForecastDay:
    max_c = float(_value(entry, "Temperature", "Maximum", "Value"))
    min_c = float(_value(entry, "Temperature", "Minimum", "Value"))
    avg_c = (max_c + min_c) / 2
    wind_kph = float(_value(entry, "Day", "Wind", "Speed", "Value"))
    precip_mm = float(_value(entry, "Day", "TotalLiquid", "Value"))
    vis_km = float(_value(entry, "Day", "Visibility", "Value"))
    icon = int(_value(entry, "Day", "Icon", default=DEFAULT_ICON_CODE))

    uv = 0.0
    for item in entry.get("AirAndPollen") or []:
        if item.get("Name") == "UVIndex":
            uv = float(item.get("Value") or 0)
            break

    return ForecastDay(
        date=entry["Date"],
        day=DayForecast(
            maxtemp_c=max_c,
            maxtemp_f=c_to_f(max_c),
            mintemp_c=min_c,
            mintemp_f=c_to_f(min_c),
            avgtemp_c=avg_c,
            avgtemp_f=c_to_f(avg_c),
            maxwind_kph=wind_kph,
            maxwind_mph=km_to_mi(wind_kph),
            totalprecip_mm=precip_mm,
            totalprecip_in=mm_to_in(precip_mm),
            avgvis_km=vis_km,
            avgvis_miles=km_to_mi(vis_km),
            avghumidity=float(_value(entry, "Day", "RelativeHumidity", "Average")),
            condition=WeatherCondition(
                text=_value(entry, "Day", "IconPhrase", default="Unknown"),
                icon=icon_url(icon),
                code=icon,
            ),
            uv=uv,
        ),
        hour=[],
    )


def _placeholder_day(entry: Any) -> ForecastDay:
    date = entry.get("Date") if isinstance(entry, dict) else None
    return ForecastDay(
        date=date or utc_now_iso(),
        day=DayForecast(
            maxtemp_c=0.0,
            maxtemp_f=32.0,
            mintemp_c=0.0,
            mintemp_f=32.0,
            avgtemp_c=0.0,
            avgtemp_f=32.0,
            maxwind_kph=0.0,
            maxwind_mph=0.0,
            totalprecip_mm=0.0,
            totalprecip_in=0.0,
            avgvis_km=0.0,
            avgvis_miles=0.0,
            avghumidity=0.0,
            condition=WeatherCondition(
                text="Unknown",
                icon=icon_url(DEFAULT_ICON_CODE),
                code=DEFAULT_ICON_CODE,
            ),
            uv=0.0,
        ),
        hour=[],
    )


def icon_url(code: Any) -> str:
    """Map an AccuWeather icon number to its image; unknown codes show sunny."""
    try:
        code = int(code)
    except (TypeError, ValueError):
        code = DEFAULT_ICON_CODE
    if code not in ICON_CODES:
        code = DEFAULT_ICON_CODE
    return ICON_URL.format(code=code)


def _value(data: dict, *path: str, default: Any = 0) -> Any:
    """Walk nested dicts, returning default for any missing or falsy step."""
    node: Any = data
    for key in path:
        node = node.get(key) if node else None
    return node or default
