"""Default provider registry: OpenWeather and WeatherAPI on, AccuWeather off."""

from weatherhub.config.schema import ProviderConfig
from weatherhub.models.common import ProviderName

DEFAULT_PROVIDERS: list[ProviderConfig] = [
    ProviderConfig(name=ProviderName.OPENWEATHER),
    ProviderConfig(name=ProviderName.WEATHERAPI),
    ProviderConfig(name=ProviderName.ACCUWEATHER, enabled=False),
]
