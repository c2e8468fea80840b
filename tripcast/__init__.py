"""Weather for upcoming trips: place resolution, forecast fetching and caching."""
from .cache import ForecastCache, PlaceCache
from .entities import CacheKey, Coordinate, DailyForecast, ForecastSeries, Place, TemperatureUnit, TripLocation
from .exceptions import (
    ConfigurationError,
    InvalidQuery,
    LookupFailed,
    LookupSuperseded,
    NotFound,
    TripcastError,
)
from .factory import build_reverse_geocoder, build_service
from .services import ForecastFetcher, ForecastService, PlaceResolver, ReverseGeocoder

__all__ = [
    "CacheKey",
    "ConfigurationError",
    "Coordinate",
    "DailyForecast",
    "ForecastCache",
    "ForecastFetcher",
    "ForecastSeries",
    "ForecastService",
    "InvalidQuery",
    "LookupFailed",
    "LookupSuperseded",
    "NotFound",
    "Place",
    "PlaceCache",
    "PlaceResolver",
    "ReverseGeocoder",
    "TemperatureUnit",
    "TripLocation",
    "TripcastError",
    "build_reverse_geocoder",
    "build_service",
]
