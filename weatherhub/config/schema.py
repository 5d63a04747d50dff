"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field, field_validator

from weatherhub.models.common import ProviderName


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    name: ProviderName
    enabled: bool = True
    base_url: str | None = None  # None means the adapter's public endpoint
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    api_key: str = ""


class ServerConfig(BaseModel):
    model_config = {"extra": "forbid"}

    host: str = "0.0.0.0"
    port: int = Field(default=3001, ge=1, le=65535)
    cors_origins: list[str] = ["*"]


class GeocodingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.openweathermap.org/geo/1.0"
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    server: ServerConfig = ServerConfig()
    geocoding: GeocodingConfig = GeocodingConfig()
    providers: list[ProviderConfig] = []

    @field_validator("providers")
    @classmethod
    def _unique_providers(cls, providers: list[ProviderConfig]) -> list[ProviderConfig]:
        seen: set[str] = set()
        for p in providers:
            if p.name in seen:
                raise ValueError(f"Provider listed twice: {p.name}")
            seen.add(p.name)
        if providers and not any(p.enabled for p in providers):
            raise ValueError("At least one provider must be enabled")
        return providers

    def provider(self, name: str) -> ProviderConfig | None:
        for p in self.providers:
            if p.name == name:
                return p
        return None

    @property
    def enabled_providers(self) -> list[ProviderConfig]:
        return [p for p in self.providers if p.enabled]
