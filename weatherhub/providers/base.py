"""Async adapter base: one provider, one API key, one transform to WeatherData."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from weatherhub.config.schema import ProviderConfig
from weatherhub.models.weather import Location, WeatherAPIResponse, WeatherData

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Raised inside an adapter; converted to a failed response at its boundary."""


class WeatherAdapter(ABC):
    """Base class for provider adapters.

    Subclasses implement ``_fetch``, which may raise freely. ``get_weather``
    never raises: configuration, transport, HTTP status and payload errors
    all come back as ``WeatherAPIResponse.failure``.

    Instances hold only immutable settings, so one adapter can serve many
    concurrent requests.
    """

    name: str  # config slug
    source: str  # display name reported in responses
    default_base_url: str

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.base_url = base_url or self.default_base_url
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ProviderConfig) -> "WeatherAdapter":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
        )

    async def get_weather(self, location: Location) -> WeatherAPIResponse:
        if not self.api_key:
            logger.warning("%s skipped: no API key configured", self.source)
            return WeatherAPIResponse.failure(
                self.source, f"{self.source} API key not configured"
            )

        logger.info(
            "%s: fetching weather for %.4f,%.4f",
            self.source, location.lat, location.lon,
        )
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout
            ) as client:
                data = await self._fetch(client, location)
        except ProviderError as e:
            logger.warning("%s failed: %s", self.source, e)
            return WeatherAPIResponse.failure(self.source, str(e))
        except httpx.HTTPStatusError as e:
            logger.error(
                "%s API error: HTTP %d", self.source, e.response.status_code
            )
            return WeatherAPIResponse.failure(
                self.source,
                f"{self.source} returned HTTP {e.response.status_code}",
            )
        except httpx.RequestError as e:
            logger.error("%s request failed: %s", self.source, e)
            return WeatherAPIResponse.failure(
                self.source, f"{self.source} request failed: {e}"
            )
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.exception("Failed to parse %s response", self.source)
            return WeatherAPIResponse.failure(
                self.source, f"Malformed {self.source} response: {e!r}"
            )

        logger.info(
            "%s: %.1f°C, %s",
            self.source, data.current.temp_c, data.current.condition.text,
        )
        return WeatherAPIResponse.ok(data)

    @abstractmethod
    async def _fetch(self, client: httpx.AsyncClient, location: Location) -> WeatherData:
        """Call the provider and build WeatherData. May raise."""

    async def _get_json(
        self, client: httpx.AsyncClient, path: str, params: dict[str, Any]
    ) -> Any:
        logger.debug("%s GET %s", self.source, path)
        resp = await client.get(path, params=params)
        resp.raise_for_status()
        return resp.json()
