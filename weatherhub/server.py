"""Weather consensus API: FastAPI app over the provider aggregator."""

import logging
import math
import re
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from weatherhub.aggregation.aggregator import WeatherAggregator
from weatherhub.config.schema import AppConfig
from weatherhub.geocoding.resolver import LocationResolver
from weatherhub.models.common import utc_now_iso
from weatherhub.models.weather import WeatherAPIResponse
from weatherhub.providers.registry import build_adapters

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch weather data"

# plain decimal or exponent notation only; rejects "1_0", "inf", "nan"
NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def build_aggregator(config: AppConfig) -> WeatherAggregator:
    return WeatherAggregator(
        adapters=build_adapters(config),
        resolver=LocationResolver.from_config(config),
    )


def create_app(config: AppConfig, aggregator: WeatherAggregator | None = None) -> FastAPI:
    app = FastAPI(title="Weather Consensus API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.aggregator = aggregator or build_aggregator(config)

    async def respond(
        label: str, fetch: Callable[[], Awaitable[list[WeatherAPIResponse]]]
    ) -> JSONResponse:
        try:
            individual = await fetch()
            consensus = app.state.aggregator.calculate_consensus(individual)
        except Exception:
            logger.exception("Error fetching weather by %s", label)
            return JSONResponse(status_code=500, content={"error": FETCH_FAILED})
        return JSONResponse(
            content={
                "success": True,
                "data": {
                    "individual": [r.to_dict() for r in individual],
                    "consensus": consensus.to_dict() if consensus else None,
                },
            }
        )

    # ── Weather endpoints ───────────────────────────────────────────

    @app.get("/api/weather/coordinates")
    async def weather_by_coordinates(lat: str | None = None, lon: str | None = None):
        """Consensus and per-provider weather for a lat/lon pair."""
        if not lat or not lon:
            return _bad_request("Latitude and longitude are required")
        lat_num, lon_num = _parse_coordinate(lat), _parse_coordinate(lon)
        if lat_num is None or lon_num is None:
            return _bad_request("Invalid latitude or longitude")

        return await respond(
            "coordinates",
            lambda: app.state.aggregator.get_weather_by_coordinates(lat_num, lon_num),
        )

    @app.get("/api/weather/zipcode")
    async def weather_by_zipcode(
        zip_code: str | None = Query(default=None, alias="zip"), country: str = "US"
    ):
        """Resolve a postal code first, then fan out."""
        if not zip_code:
            return _bad_request("Zip code is required")
        return await respond(
            "zip code",
            lambda: app.state.aggregator.get_weather_by_zip_code(zip_code, country),
        )

    @app.get("/api/weather/location")
    async def weather_by_location(name: str | None = None, country: str = "US"):
        if not name:
            return _bad_request("Location name is required")
        return await respond(
            "location",
            lambda: app.state.aggregator.get_weather_by_name(name, country),
        )

    # ── Health ──────────────────────────────────────────────────────

    @app.get("/health")
    def health():
        return {"status": "OK", "timestamp": utc_now_iso()}

    return app


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


def _parse_coordinate(value: str) -> float | None:
    value = value.strip()
    if not NUMBER_RE.fullmatch(value):
        return None
    number = float(value)
    return number if math.isfinite(number) else None
