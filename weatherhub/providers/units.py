"""Unit conversion helpers used by the provider adapters."""

import math
from decimal import ROUND_HALF_UP, Decimal

KPH_PER_MS = 3.6
MPH_PER_MS = 2.237
INHG_PER_HPA = 0.02953
IN_PER_MM = 0.0393701
MI_PER_KM = 0.621371

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def c_to_f(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def ms_to_kph(speed_ms: float) -> float:
    return speed_ms * KPH_PER_MS


def ms_to_mph(speed_ms: float) -> float:
    return speed_ms * MPH_PER_MS


def hpa_to_inhg(pressure_hpa: float) -> float:
    return pressure_hpa * INHG_PER_HPA


def mm_to_in(mm: float) -> float:
    return mm * IN_PER_MM


def km_to_mi(km: float) -> float:
    return km * MI_PER_KM


def compass_direction(degrees: float) -> str:
    """Map a bearing in degrees to a 16-point compass label."""
    index = math.floor(degrees / 22.5 + 0.5) % 16
    return COMPASS_POINTS[index]


def round_half_away(value: float, places: int = 1) -> float:
    """Round with ties going away from zero (20.05 -> 20.1, -20.05 -> -20.1)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
