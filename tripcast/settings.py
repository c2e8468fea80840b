"""Environment driven settings for the forecast service."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError


FORECAST_PROVIDERS = ("openweather", "openmeteo")
GEOCODERS = ("openweather", "openmeteo")


def env(name: str, default: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    source = os.environ if environ is None else environ
    value = source.get(name, default)
    if value is None:
        raise ConfigurationError(f"Environment variable {name} is required")
    return value


def _number(name: str, default: str, environ: Mapping[str, str], cast=float):
    raw = env(name, default, environ)
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {raw!r}")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative")
    return value


def _choice(name: str, default: str, choices, environ: Mapping[str, str]) -> str:
    value = env(name, default, environ).strip().lower()
    if value not in choices:
        raise ConfigurationError(f"{name} must be one of {', '.join(choices)}, got {value!r}")
    return value


@dataclass(frozen=True)
class Settings:
    openweather_api_key: str = ""
    forecast_provider: str = "openweather"
    geocoder: str = "openweather"
    forecast_ttl: float = 3600
    place_cache_size: int = 256
    request_timeout: float = 10.0
    reverse_debounce: float = 0.35
    log_level: str = "INFO"

    @property
    def needs_openweather_key(self) -> bool:
        return "openweather" in (self.forecast_provider, self.geocoder)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    source = os.environ if environ is None else environ
    settings = Settings(
        openweather_api_key=env("OPENWEATHER_API_KEY", "", source).strip(),
        forecast_provider=_choice("TRIPCAST_FORECAST_PROVIDER", "openweather", FORECAST_PROVIDERS, source),
        geocoder=_choice("TRIPCAST_GEOCODER", "openweather", GEOCODERS, source),
        forecast_ttl=_number("TRIPCAST_FORECAST_TTL", "3600", source),
        place_cache_size=_number("TRIPCAST_PLACE_CACHE_SIZE", "256", source, cast=int),
        request_timeout=_number("TRIPCAST_REQUEST_TIMEOUT", "10", source),
        reverse_debounce=_number("TRIPCAST_REVERSE_DEBOUNCE", "0.35", source),
        log_level=env("TRIPCAST_LOG_LEVEL", "INFO", source).upper(),
    )
    if settings.needs_openweather_key and not settings.openweather_api_key:
        raise ConfigurationError("OPENWEATHER_API_KEY is required for the openweather backends")
    if settings.place_cache_size == 0:
        raise ConfigurationError("TRIPCAST_PLACE_CACHE_SIZE must be positive")
    return settings


__all__ = ["Settings", "env", "load_settings"]
