from .places import PlaceResolver, ReverseGeocoder
from .weather import ForecastFetcher, ForecastService

__all__ = ["ForecastFetcher", "ForecastService", "PlaceResolver", "ReverseGeocoder"]
