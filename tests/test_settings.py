from __future__ import annotations

import pytest

from tripcast.exceptions import ConfigurationError
from tripcast.factory import build_reverse_geocoder, build_service
from tripcast.providers.geocoding import OpenMeteoGeocoder, OpenWeatherGeocoder
from tripcast.providers.openmeteo import OpenMeteoProvider
from tripcast.providers.openweather import OneCallProvider
from tripcast.settings import Settings, env, load_settings


def test_defaults_require_openweather_key() -> None:
    with pytest.raises(ConfigurationError):
        load_settings({})


def test_load_settings_reads_environment() -> None:
    settings = load_settings(
        {
            "OPENWEATHER_API_KEY": " secret ",
            "TRIPCAST_FORECAST_TTL": "120",
            "TRIPCAST_PLACE_CACHE_SIZE": "16",
            "TRIPCAST_REQUEST_TIMEOUT": "2.5",
            "TRIPCAST_LOG_LEVEL": "debug",
        }
    )

    assert settings.openweather_api_key == "secret"
    assert settings.forecast_ttl == 120
    assert settings.place_cache_size == 16
    assert settings.request_timeout == 2.5
    assert settings.log_level == "DEBUG"
    assert settings.forecast_provider == "openweather"


def test_openmeteo_backends_need_no_key() -> None:
    settings = load_settings({"TRIPCAST_FORECAST_PROVIDER": "OpenMeteo", "TRIPCAST_GEOCODER": "openmeteo"})

    assert settings.forecast_provider == "openmeteo"
    assert settings.needs_openweather_key is False


@pytest.mark.parametrize(
    "environ",
    [
        {"OPENWEATHER_API_KEY": "k", "TRIPCAST_FORECAST_TTL": "soon"},
        {"OPENWEATHER_API_KEY": "k", "TRIPCAST_FORECAST_TTL": "-1"},
        {"OPENWEATHER_API_KEY": "k", "TRIPCAST_FORECAST_TTL": "nan"},
        {"OPENWEATHER_API_KEY": "k", "TRIPCAST_REQUEST_TIMEOUT": "inf"},
        {"OPENWEATHER_API_KEY": "k", "TRIPCAST_PLACE_CACHE_SIZE": "0"},
        {"OPENWEATHER_API_KEY": "k", "TRIPCAST_FORECAST_PROVIDER": "yandex"},
    ],
)
def test_invalid_values_rejected(environ) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(environ)


def test_env_helper() -> None:
    assert env("A", environ={"A": "1"}) == "1"
    assert env("B", "fallback", environ={}) == "fallback"
    with pytest.raises(ConfigurationError):
        env("C", environ={})


def test_build_service_openweather_chain() -> None:
    service = build_service(Settings(openweather_api_key="k", forecast_ttl=60, place_cache_size=8))

    providers = service.fetcher.providers
    assert [type(provider) for provider in providers] == [OneCallProvider, OneCallProvider]
    assert [provider.version for provider in providers] == ["3.0", "2.5"]
    assert isinstance(service.resolver.backend, OpenWeatherGeocoder)
    assert service.cache.ttl == 60
    assert service.resolver.cache.max_size == 8
    assert service.resolver.cancel_superseded is False


def test_build_service_openmeteo() -> None:
    service = build_service(Settings(forecast_provider="openmeteo", geocoder="openmeteo"))

    assert [type(provider) for provider in service.fetcher.providers] == [OpenMeteoProvider]
    assert isinstance(service.resolver.backend, OpenMeteoGeocoder)


def test_build_service_returns_isolated_instances() -> None:
    settings = Settings(openweather_api_key="k")

    assert build_service(settings).cache is not build_service(settings).cache


def test_reverse_geocoder_needs_key() -> None:
    with pytest.raises(ConfigurationError):
        build_reverse_geocoder(Settings(forecast_provider="openmeteo", geocoder="openmeteo"))

    geocoder = build_reverse_geocoder(Settings(openweather_api_key="k", reverse_debounce=0.1))
    assert geocoder.debounce == 0.1
