from pydantic_settings import BaseSettings, SettingsConfigDict


class WeatherEnv(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    openweather_api_key: str = ""
    weatherapi_key: str = ""
    accuweather_api_key: str = ""
    port: int | None = None
    weatherhub_log_level: str = "INFO"

    def api_key_for(self, provider: str) -> str:
        return {
            "openweather": self.openweather_api_key,
            "weatherapi": self.weatherapi_key,
            "accuweather": self.accuweather_api_key,
        }.get(provider, "")
