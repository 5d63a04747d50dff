"""YAML config loader with environment overlay for secrets and port."""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError
import yaml

from weatherhub.config.defaults import DEFAULT_PROVIDERS
from weatherhub.config.env import WeatherEnv
from weatherhub.config.schema import AppConfig


class ConfigError(RuntimeError):
    """Raised when the config file cannot be read or fails validation."""


def load_config(path: str | Path | None = None, env: WeatherEnv | None = None) -> AppConfig:
    """Load and validate config from a YAML file, then apply the environment.

    If no providers are specified in the YAML, injects DEFAULT_PROVIDERS.
    API keys left empty in YAML are taken from the environment, and
    ``PORT`` overrides ``server.port``.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"Config root must be a mapping: {path}")

    if "providers" not in raw or not raw["providers"]:
        raw["providers"] = [p.model_dump() for p in DEFAULT_PROVIDERS]

    try:
        config = AppConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path or 'defaults'}: {e}") from e
    return apply_env(config, env if env is not None else WeatherEnv())


def apply_env(config: AppConfig, env: WeatherEnv) -> AppConfig:
    """Return a copy of config with environment keys and port filled in."""
    providers = [
        p if p.api_key else p.model_copy(update={"api_key": env.api_key_for(p.name)})
        for p in config.providers
    ]
    update: dict[str, Any] = {"providers": providers}
    if env.port is not None:
        update["server"] = config.server.model_copy(update={"port": env.port})
    return config.model_copy(update=update)


def redacted_json(config: AppConfig) -> str:
    """Dump config as JSON with API keys masked."""
    data = json.loads(config.model_dump_json())
    for p in data.get("providers", []):
        key = p.get("api_key") or ""
        p["api_key"] = f"***{key[-4:]}" if len(key) > 8 else ("***" if key else "")
    return json.dumps(data, indent=2)
