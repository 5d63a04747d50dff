"""Normalized weather models shared by every provider adapter.

Each provider's JSON is mapped into these shapes. Dual-unit pairs
(``*_c``/``*_f``, ``*_kph``/``*_mph`` and so on) are filled in by the
adapter that builds them and are not re-validated afterwards.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

from weatherhub.models.common import ProviderSource


@dataclass(frozen=True)
class Location:
    name: str
    country: str
    lat: float
    lon: float
    region: str | None = None
    timezone: str | None = None
    zip_code: str | None = None

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.lat, self.lon)


@dataclass(frozen=True)
class WeatherCondition:
    text: str
    icon: str
    code: int  # provider-specific, not comparable across providers


@dataclass(frozen=True)
class CurrentWeather:
    temp_c: float
    temp_f: float
    condition: WeatherCondition
    humidity: float
    wind_kph: float
    wind_mph: float
    wind_degree: float
    wind_dir: str
    pressure_mb: float
    pressure_in: float
    feelslike_c: float
    feelslike_f: float
    uv: float
    visibility_km: float
    visibility_miles: float


@dataclass(frozen=True)
class DayForecast:
    maxtemp_c: float
    maxtemp_f: float
    mintemp_c: float
    mintemp_f: float
    avgtemp_c: float
    avgtemp_f: float
    maxwind_kph: float
    maxwind_mph: float
    totalprecip_mm: float
    totalprecip_in: float
    avgvis_km: float
    avgvis_miles: float
    avghumidity: float
    condition: WeatherCondition
    uv: float


@dataclass(frozen=True)
class HourForecast:
    time: str
    temp_c: float
    temp_f: float
    condition: WeatherCondition
    wind_kph: float
    wind_mph: float
    wind_degree: float
    wind_dir: str
    pressure_mb: float
    pressure_in: float
    precip_mm: float
    precip_in: float
    humidity: float
    cloud: float
    feelslike_c: float
    feelslike_f: float
    windchill_c: float
    windchill_f: float
    heatindex_c: float
    heatindex_f: float
    dewpoint_c: float
    dewpoint_f: float
    will_it_rain: int
    chance_of_rain: int
    will_it_snow: int
    chance_of_snow: int
    vis_km: float
    vis_miles: float
    gust_kph: float
    gust_mph: float
    uv: float


@dataclass(frozen=True)
class ForecastDay:
    date: str  # YYYY-MM-DD or provider-supplied ISO timestamp
    day: DayForecast
    hour: list[HourForecast] = field(default_factory=list)


@dataclass(frozen=True)
class WeatherData:
    location: Location
    current: CurrentWeather
    source: ProviderSource
    timestamp: str  # request time, not observation time
    forecast: list[ForecastDay] | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WeatherAPIResponse:
    """Outcome of one adapter call: ``data`` is set iff ``success``."""

    success: bool
    source: ProviderSource
    data: WeatherData | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: WeatherData) -> "WeatherAPIResponse":
        return cls(success=True, source=data.source, data=data)

    @classmethod
    def failure(cls, source: ProviderSource, error: str) -> "WeatherAPIResponse":
        return cls(success=False, source=source, error=error)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success, "source": self.source}
        if self.success and self.data is not None:
            out["data"] = self.data.to_dict()
        else:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class ConsensusWeatherData:
    location: Location
    current: CurrentWeather
    sources: list[ProviderSource]
    consensus_temp_c: float
    consensus_temp_f: float
    timestamp: str
    forecast: list[ForecastDay] | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
