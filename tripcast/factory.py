"""Wire a forecast service from settings.

Every call builds fresh objects; there is no shared module-level instance.
"""
from __future__ import annotations

from typing import List, Optional

import requests

from .abstractions import ForecastProvider, PlaceSearch
from .cache import ForecastCache, PlaceCache
from .exceptions import ConfigurationError
from .health import HealthRegistry
from .providers.base import RequestConfig
from .providers.geocoding import OpenMeteoGeocoder, OpenWeatherGeocoder
from .providers.openmeteo import OpenMeteoProvider
from .providers.openweather import onecall_chain
from .services.places import PlaceResolver, ReverseGeocoder
from .services.weather import ForecastFetcher, ForecastService
from .settings import Settings, load_settings


def build_forecast_providers(settings: Settings, session: requests.Session) -> List[ForecastProvider]:
    config = RequestConfig(timeout=settings.request_timeout)
    if settings.forecast_provider == "openmeteo":
        return [OpenMeteoProvider(session=session, request_config=config)]
    return list(onecall_chain(settings.openweather_api_key, session=session, request_config=config))


def build_place_search(settings: Settings, session: requests.Session) -> PlaceSearch:
    config = RequestConfig(timeout=settings.request_timeout)
    if settings.geocoder == "openmeteo":
        return OpenMeteoGeocoder(session=session, request_config=config)
    return OpenWeatherGeocoder(settings.openweather_api_key, session=session, request_config=config)


def build_service(
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
    *,
    cancel_superseded: bool = False,
) -> ForecastService:
    """A service that may be shared by threads working on unrelated trips.

    Pass ``cancel_superseded=True`` for a single interactive search box, where
    only the newest place lookup matters.
    """
    settings = settings or load_settings()
    session = session or requests.Session()
    resolver = PlaceResolver(
        build_place_search(settings, session),
        PlaceCache(max_size=settings.place_cache_size),
        cancel_superseded=cancel_superseded,
    )
    fetcher = ForecastFetcher(build_forecast_providers(settings, session), health=HealthRegistry())
    return ForecastService(
        resolver=resolver,
        fetcher=fetcher,
        cache=ForecastCache(ttl=settings.forecast_ttl),
    )


def build_reverse_geocoder(
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
) -> ReverseGeocoder:
    settings = settings or load_settings()
    if not settings.openweather_api_key:
        raise ConfigurationError("Reverse lookup needs OPENWEATHER_API_KEY")
    backend = OpenWeatherGeocoder(
        settings.openweather_api_key,
        session=session or requests.Session(),
        request_config=RequestConfig(timeout=settings.request_timeout),
    )
    return ReverseGeocoder(backend, debounce=settings.reverse_debounce, max_size=settings.place_cache_size)


__all__ = ["build_forecast_providers", "build_place_search", "build_reverse_geocoder", "build_service"]
