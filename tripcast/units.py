"""Temperature unit helpers shared by providers and the command line."""
from __future__ import annotations

from typing import Optional

from .entities import DailyForecast, TemperatureUnit


def format_temperature(value: float, unit: TemperatureUnit) -> str:
    """Render a temperature as shown in trip cards, e.g. ``24°C``."""
    return f"{int(round(value))}{unit.symbol}"


def format_percent(fraction: float) -> str:
    return f"{int(round(fraction * 100))}%"


def describe(forecast: DailyForecast, unit: TemperatureUnit) -> str:
    """One-line summary, e.g. ``H 24°C / L 17°C, rain 30%``."""
    return (
        f"H {format_temperature(forecast.high, unit)} / L {format_temperature(forecast.low, unit)}, "
        f"rain {format_percent(forecast.precipitation_probability)}"
    )


def parse_unit(value: Optional[str]) -> TemperatureUnit:
    """Accept ``metric``/``imperial`` as well as the ``c``/``f`` shorthands."""
    normalized = (value or "").strip().lower()
    if normalized in ("", "metric", "c", "celsius"):
        return TemperatureUnit.METRIC
    if normalized in ("imperial", "f", "fahrenheit"):
        return TemperatureUnit.IMPERIAL
    raise ValueError(f"unknown temperature unit: {value!r}")


# Query parameter values per provider.
OPENWEATHER_UNITS = {
    TemperatureUnit.METRIC: "metric",
    TemperatureUnit.IMPERIAL: "imperial",
}

OPENMETEO_UNITS = {
    TemperatureUnit.METRIC: "celsius",
    TemperatureUnit.IMPERIAL: "fahrenheit",
}


__all__ = [
    "OPENMETEO_UNITS",
    "OPENWEATHER_UNITS",
    "describe",
    "format_percent",
    "format_temperature",
    "parse_unit",
]
