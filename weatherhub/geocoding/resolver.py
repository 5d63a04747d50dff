"""Resolve postal codes and place names to coordinates via OpenWeather geocoding."""

import logging

import httpx

from weatherhub.config.schema import AppConfig
from weatherhub.models.common import ProviderName
from weatherhub.models.weather import Location

logger = logging.getLogger(__name__)

GEOCODING_BASE_URL = "https://api.openweathermap.org/geo/1.0"


class LocationResolutionError(RuntimeError):
    """Raised when a zip code or place name cannot be resolved."""


class LocationResolver:
    def __init__(
        self,
        api_key: str,
        base_url: str = GEOCODING_BASE_URL,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: AppConfig) -> "LocationResolver":
        openweather = config.provider(ProviderName.OPENWEATHER)
        return cls(
            api_key=openweather.api_key if openweather else "",
            base_url=config.geocoding.base_url,
            timeout=config.geocoding.timeout_seconds,
        )

    async def resolve_zip(self, zip_code: str, country: str = "US") -> Location:
        """Single lookup against /zip. No retry, no fallback."""
        try:
            data = await self._get("/zip", {"zip": f"{zip_code},{country}"})
            return Location(
                name=data["name"],
                country=data["country"],
                lat=float(data["lat"]),
                lon=float(data["lon"]),
                zip_code=zip_code,
            )
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.error("Zip lookup failed for %s,%s: %s", zip_code, country, e)
            raise LocationResolutionError("Unable to get location from zip code") from e

    async def resolve_name(self, name: str, country: str = "US") -> Location:
        """Best match from /direct for "name,country"."""
        try:
            data = await self._get("/direct", {"q": f"{name},{country}", "limit": 1})
            if not data:
                raise ValueError(f"no match for {name!r}")
            match = data[0]
            return Location(
                name=match.get("name") or name,
                country=match.get("country") or country,
                region=match.get("state"),
                lat=float(match["lat"]),
                lon=float(match["lon"]),
            )
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.error("Name lookup failed for %s,%s: %s", name, country, e)
            raise LocationResolutionError("Unable to get location from name") from e

    async def _get(self, path: str, params: dict) -> dict | list:
        if not self.api_key:
            raise ValueError("geocoding API key not configured")
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
            resp = await client.get(path, params={**params, "appid": self.api_key})
            resp.raise_for_status()
            return resp.json()
