"""Core abstractions for the forecast domain."""
from __future__ import annotations

from typing import List, Protocol

from .entities import Coordinate, ForecastSeries, Place, TemperatureUnit


class ForecastProvider(Protocol):
    """A data source capable of returning a short-range daily forecast."""

    name: str

    def daily(self, coordinate: Coordinate, unit: TemperatureUnit) -> ForecastSeries:
        """Fetch the full daily series for the coordinate, temperatures in ``unit``."""
        ...


class PlaceSearch(Protocol):
    """Forward place search: free text to an ordered list of places."""

    def search(self, query: str) -> List[Place]:
        ...


class ReverseLookup(Protocol):
    """Reverse lookup: coordinate to the nearest places, closest first."""

    def reverse(self, coordinate: Coordinate) -> List[Place]:
        ...
