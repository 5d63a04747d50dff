"""Fan-out to every active adapter and reduce the readings to a consensus."""

import asyncio
import dataclasses
import logging
import math

from weatherhub.geocoding.resolver import LocationResolver
from weatherhub.models.common import utc_now_iso
from weatherhub.models.weather import (
    ConsensusWeatherData,
    Location,
    WeatherAPIResponse,
)
from weatherhub.providers.base import WeatherAdapter
from weatherhub.providers.units import round_half_away

logger = logging.getLogger(__name__)


class WeatherAggregator:
    def __init__(self, adapters: list[WeatherAdapter], resolver: LocationResolver):
        if not adapters:
            raise ValueError("WeatherAggregator needs at least one adapter")
        self.adapters = adapters
        self.resolver = resolver

    async def get_weather_by_location(self, location: Location) -> list[WeatherAPIResponse]:
        """Query all adapters concurrently.

        Waits for every adapter to finish. Results follow adapter order,
        not completion order, and failures are returned as entries.
        """
        results = await asyncio.gather(
            *(adapter.get_weather(location) for adapter in self.adapters),
            return_exceptions=True,
        )

        responses: list[WeatherAPIResponse] = []
        for adapter, result in zip(self.adapters, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error(
                    "%s raised instead of returning a failure: %r",
                    adapter.source, result,
                )
                result = WeatherAPIResponse.failure(adapter.source, str(result) or repr(result))
            responses.append(result)

        ok = sum(1 for r in responses if r.success)
        logger.info("Collected %d/%d provider readings", ok, len(responses))
        return responses

    async def get_weather_by_coordinates(self, lat: float, lon: float) -> list[WeatherAPIResponse]:
        location = Location(name="Unknown", country="Unknown", lat=lat, lon=lon)
        return await self.get_weather_by_location(location)

    async def get_weather_by_zip_code(
        self, zip_code: str, country: str = "US"
    ) -> list[WeatherAPIResponse]:
        location = await self.resolver.resolve_zip(zip_code, country)
        return await self.get_weather_by_location(location)

    async def get_weather_by_name(self, name: str, country: str = "US") -> list[WeatherAPIResponse]:
        location = await self.resolver.resolve_name(name, country)
        return await self.get_weather_by_location(location)

    def calculate_consensus(
        self, responses: list[WeatherAPIResponse]
    ) -> ConsensusWeatherData | None:
        return calculate_consensus(responses)


def calculate_consensus(responses: list[WeatherAPIResponse]) -> ConsensusWeatherData | None:
    """Average current temperature across successful readings.

    Celsius and Fahrenheit are averaged independently from each provider's
    own values, so the two may differ slightly from a pure conversion.
    Everything other than temperature is taken from the first successful
    reading. Returns None when nothing succeeded.
    """
    successful = [r for r in responses if r.success and r.data is not None]
    if not successful:
        return None

    readings = [r.data.current for r in successful]
    consensus_c = round_half_away(_mean([c.temp_c for c in readings]))
    consensus_f = round_half_away(_mean([c.temp_f for c in readings]))
    first = successful[0].data

    return ConsensusWeatherData(
        location=first.location,
        current=dataclasses.replace(first.current, temp_c=consensus_c, temp_f=consensus_f),
        forecast=first.forecast,
        sources=[r.source for r in successful],
        consensus_temp_c=consensus_c,
        consensus_temp_f=consensus_f,
        timestamp=utc_now_iso(),
    )


def _mean(values: list[float]) -> float:
    # fsum is exact, so the mean does not depend on input order
    return math.fsum(values) / len(values)
