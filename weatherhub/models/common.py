"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import TypeAlias

ProviderSource: TypeAlias = str


class ProviderName(StrEnum):
    OPENWEATHER = "openweather"
    WEATHERAPI = "weatherapi"
    ACCUWEATHER = "accuweather"


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()
