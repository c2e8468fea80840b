from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional

from ..abstractions import ForecastProvider
from ..cache import ForecastCache
from ..entities import Coordinate, DailyForecast, ForecastSeries, TemperatureUnit, TripLocation
from ..health import HealthRegistry
from ..providers.base import ProviderError, QuotaExceeded
from .places import PlaceResolver


class ForecastFetcher:
    """Fetch a daily series, falling through the providers in order.

    The first provider that answers wins. When every provider fails the error
    of the last attempt is raised.
    """

    def __init__(
        self,
        providers: Iterable[ForecastProvider],
        health: Optional[HealthRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.providers: List[ForecastProvider] = list(providers)
        if not self.providers:
            raise ValueError("at least one forecast provider is required")
        self.health = health if health is not None else HealthRegistry()
        self._log = logger or logging.getLogger(self.__class__.__name__)

    def fetch_daily(self, coordinate: Coordinate, unit: TemperatureUnit) -> ForecastSeries:
        last_error: Optional[ProviderError] = None
        for provider in self.providers:
            name = getattr(provider, "name", provider.__class__.__name__)
            try:
                series = provider.daily(coordinate, unit)
            except QuotaExceeded as exc:
                self._log.warning("Provider %s quota exceeded", name)
                self.health.record_provider_error(name, exc)
                last_error = exc
                continue
            except ProviderError as exc:
                self._log.error("Provider %s failed: %s", name, exc)
                self.health.record_provider_error(name, exc)
                last_error = exc
                continue
            self.health.record_provider_success(name)
            return series
        if last_error is None:
            raise ProviderError("all providers failed")
        raise last_error

    def fetch_day(self, coordinate: Coordinate, unit: TemperatureUnit, day: date) -> Optional[DailyForecast]:
        """Best available day: the matching local day, else the first one returned."""
        return self.fetch_daily(coordinate, unit).for_day_or_first(day)


class ForecastService:
    """Resolve a trip's place, then serve its day from cache or the fetcher."""

    def __init__(
        self,
        *,
        resolver: PlaceResolver,
        fetcher: ForecastFetcher,
        cache: Optional[ForecastCache] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.resolver = resolver
        self.fetcher = fetcher
        self.cache = cache if cache is not None else ForecastCache()
        self._log = logger or logging.getLogger(self.__class__.__name__)

    @property
    def health(self) -> HealthRegistry:
        return self.fetcher.health

    # Public API ---------------------------------------------------------
    def daily_forecast(self, trip: TripLocation, unit: TemperatureUnit) -> ForecastSeries:
        coordinate = self.resolver.resolve(trip)
        anchor_day = trip.anchor_day
        cached = self.cache.get(coordinate, unit, anchor_day)
        if cached is not None:
            self._log.debug("Forecast cache hit for %s on %s", coordinate, anchor_day)
            series = cached
        else:
            self._log.debug("Forecast cache miss for %s on %s", coordinate, anchor_day)
            series = self.fetcher.fetch_daily(coordinate, unit)
            self.cache.put(coordinate, unit, anchor_day, series)
        self.health.set_cache_stats(self.cache.stats())
        return series

    def forecast_for_date(self, trip: TripLocation, unit: TemperatureUnit) -> Optional[DailyForecast]:
        """The forecast for the trip's calendar day, or ``None`` if the series has no such day."""
        series = self.daily_forecast(trip, unit)
        forecast = series.for_day(trip.anchor_day)
        if forecast is None:
            self._log.info("No forecast for %s on %s", trip.display_name, trip.anchor_day)
        return forecast


__all__ = ["ForecastFetcher", "ForecastService"]
