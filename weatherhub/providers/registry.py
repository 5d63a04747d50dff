"""Closed registry of provider adapters, built in configured order."""

import logging

from weatherhub.config.schema import AppConfig
from weatherhub.models.common import ProviderName
from weatherhub.providers.accuweather import AccuWeatherAdapter
from weatherhub.providers.base import WeatherAdapter
from weatherhub.providers.openweather import OpenWeatherAdapter
from weatherhub.providers.weatherapi import WeatherAPIAdapter

logger = logging.getLogger(__name__)

ADAPTERS: dict[ProviderName, type[WeatherAdapter]] = {
    ProviderName.OPENWEATHER: OpenWeatherAdapter,
    ProviderName.WEATHERAPI: WeatherAPIAdapter,
    ProviderName.ACCUWEATHER: AccuWeatherAdapter,
}


def build_adapters(config: AppConfig) -> list[WeatherAdapter]:
    """Instantiate every enabled provider, preserving config order."""
    adapters = []
    for provider in config.enabled_providers:
        adapter = ADAPTERS[provider.name].from_config(provider)
        if not provider.api_key:
            logger.warning("%s enabled without an API key", adapter.source)
        adapters.append(adapter)
    logger.info("Active providers: %s", ", ".join(a.source for a in adapters))
    return adapters
