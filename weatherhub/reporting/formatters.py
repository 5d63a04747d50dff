"""Output formatters for consensus and per-provider weather readings."""

import json
from datetime import date, datetime

from weatherhub.models.weather import (
    ConsensusWeatherData,
    CurrentWeather,
    ForecastDay,
    Location,
    WeatherAPIResponse,
    WeatherData,
)

FORECAST_DAYS = 5
COLUMN_WIDTH = 14


def temp_label(celsius: float, fahrenheit: float, use_fahrenheit: bool) -> str:
    if use_fahrenheit:
        return f"{fahrenheit:.1f}°F"
    return f"{celsius:.1f}°C"


def format_consensus_text(c: ConsensusWeatherData, fahrenheit: bool = False) -> str:
    """Consensus card: averaged temperature plus contributing sources."""
    temp = c.consensus_temp_f if fahrenheit else c.consensus_temp_c
    unit = "F" if fahrenheit else "C"
    lines = [
        f"=== Consensus | {_place(c.location)} ===",
        f"Temperature: {temp:.1f}°{unit} (average from {len(c.sources)} sources)",
        f"Sources: {', '.join(c.sources)}",
    ]
    lines.extend(_current_lines(c.current, fahrenheit, include_temp=False))
    if c.forecast:
        lines.append("")
        lines.append(format_forecast_grid(c.forecast, fahrenheit))
    return "\n".join(lines)


def format_weather_text(w: WeatherData, fahrenheit: bool = False) -> str:
    """Single-provider card."""
    lines = [f"=== {w.source} | {_place(w.location)} ==="]
    lines.extend(_current_lines(w.current, fahrenheit, include_temp=True))
    if w.forecast:
        lines.append("")
        lines.append(format_forecast_grid(w.forecast, fahrenheit))
    return "\n".join(lines)


def format_failure_text(r: WeatherAPIResponse) -> str:
    return f"=== {r.source} | unavailable ===\nError: {r.error or 'Unknown error'}"


def format_forecast_grid(forecast: list[ForecastDay], fahrenheit: bool = False) -> str:
    """Five-column forecast grid: date, condition, high, low, wind, rain."""
    days = forecast[:FORECAST_DAYS]
    speed_unit = "mph" if fahrenheit else "km/h"

    rows = {
        "": [_short_date(d.date) for d in days],
        "Sky": [d.day.condition.text for d in days],
        "High": [temp_label(d.day.maxtemp_c, d.day.maxtemp_f, fahrenheit) for d in days],
        "Low": [temp_label(d.day.mintemp_c, d.day.mintemp_f, fahrenheit) for d in days],
        "Wind": [
            f"{round(d.day.maxwind_mph if fahrenheit else d.day.maxwind_kph)} {speed_unit}"
            for d in days
        ],
    }
    if any(d.day.totalprecip_mm > 0 for d in days):
        rows["Rain"] = [
            f"{round(d.day.totalprecip_mm)}mm" if d.day.totalprecip_mm > 0 else "-"
            for d in days
        ]

    lines = [f"{len(days)}-Day Forecast"]
    for label, cells in rows.items():
        cols = "".join(_cell(c) for c in cells)
        lines.append(f"{label:<6}{cols}".rstrip())
    return "\n".join(lines)


def format_report_json(
    individual: list[WeatherAPIResponse], consensus: ConsensusWeatherData | None
) -> str:
    """Same shape the HTTP API returns, for programmatic consumption."""
    data = {
        "success": True,
        "data": {
            "individual": [r.to_dict() for r in individual],
            "consensus": consensus.to_dict() if consensus else None,
        },
    }
    return json.dumps(data, indent=2)


def _current_lines(cur: CurrentWeather, fahrenheit: bool, include_temp: bool) -> list[str]:
    lines = []
    if include_temp:
        lines.append(f"Temperature: {temp_label(cur.temp_c, cur.temp_f, fahrenheit)}")
    if fahrenheit:
        wind = f"{cur.wind_mph:.0f} mph"
        visibility = f"{cur.visibility_miles:.1f} mi"
        pressure = f"{cur.pressure_in:.2f} inHg"
    else:
        wind = f"{cur.wind_kph:.0f} km/h"
        visibility = f"{cur.visibility_km:.1f} km"
        pressure = f"{cur.pressure_mb:.0f} mb"
    lines.extend([
        f"Condition: {cur.condition.text}",
        f"Feels like: {temp_label(cur.feelslike_c, cur.feelslike_f, fahrenheit)}",
        f"Humidity: {cur.humidity:.0f}% | Wind: {wind} {cur.wind_dir} | UV: {cur.uv:g}",
        f"Pressure: {pressure} | Visibility: {visibility}",
    ])
    return lines


def _place(loc: Location) -> str:
    parts = [loc.name, loc.region, loc.country]
    return ", ".join(p for p in parts if p)


def _short_date(value: str) -> str:
    """'2026-02-11' or a full ISO timestamp -> 'Wed Feb 11'."""
    try:
        if len(value) == 10:
            parsed: date = date.fromisoformat(value)
        else:
            parsed = datetime.fromisoformat(value).date()
    except ValueError:
        return value[:10]
    return parsed.strftime("%a %b %d").replace(" 0", " ")


def _cell(text: str) -> str:
    if len(text) > COLUMN_WIDTH - 1:
        text = text[: COLUMN_WIDTH - 2] + "…"
    return f"{text:<{COLUMN_WIDTH}}"
