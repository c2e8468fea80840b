"""Place resolution: trip names to coordinates, and coordinates back to labels."""
from __future__ import annotations

import logging
import time
from collections import OrderedDict
from threading import Lock
from typing import Callable, Optional, Tuple

from ..abstractions import PlaceSearch, ReverseLookup
from ..cache import PlaceCache
from ..entities import Coordinate, TripLocation
from ..exceptions import InvalidQuery, LookupFailed, LookupSuperseded, NotFound
from ..providers.base import ProviderError


logger = logging.getLogger(__name__)


class PlaceResolver:
    """Turn a trip into exactly one coordinate.

    Explicit coordinates win outright. Otherwise the trip's query text (custom
    name, city, then location name) is searched once, and the first result is
    memoized under the trimmed, case-folded query.

    With ``cancel_superseded`` (the default here) only the newest backend
    search counts: one that is overtaken by a newer search raises
    :class:`LookupSuperseded` when it returns and leaves the cache alone.
    Turn it off when lookups for unrelated trips run concurrently on the same
    resolver, as :func:`tripcast.factory.build_service` does.
    """

    def __init__(
        self,
        backend: PlaceSearch,
        cache: Optional[PlaceCache] = None,
        *,
        cancel_superseded: bool = True,
    ) -> None:
        self.backend = backend
        self.cache = cache if cache is not None else PlaceCache()
        self.cancel_superseded = cancel_superseded
        # Seed for map pickers; callers may also set it directly.
        self.last_resolved: Optional[Coordinate] = None
        self._generation = 0
        self._lock = Lock()

    def resolve(self, trip: TripLocation) -> Coordinate:
        coordinate = trip.coordinate
        if coordinate is not None:
            self.last_resolved = coordinate
            return coordinate
        return self.geocode(trip.query)

    def geocode(self, text: Optional[str]) -> Coordinate:
        query = (text or "").strip()
        if not query:
            raise InvalidQuery("Invalid or empty location query.")

        cached = self.cache.get(query)
        if cached is not None:
            logger.debug("Place cache hit for %r", query)
            self.last_resolved = cached
            return cached

        with self._lock:
            self._generation += 1
            generation = self._generation

        logger.debug("Searching place %r", query)
        try:
            places = self.backend.search(query)
        except ProviderError as exc:
            logger.warning("Place search for %r failed: %s", query, exc)
            raise LookupFailed(query, exc) from exc

        with self._lock:
            if self.cancel_superseded and generation != self._generation:
                logger.debug("Place search for %r superseded", query)
                raise LookupSuperseded(query)
            if not places:
                raise NotFound(query)
            coordinate = places[0].coordinate
            self.cache.set(query, coordinate)
            self.last_resolved = coordinate
        return coordinate


class ReverseGeocoder:
    """Nearest place label for a coordinate, debounced for map panning.

    Each call waits ``debounce`` seconds first; if another call arrived in the
    meantime this one raises :class:`LookupSuperseded` without touching the
    backend. Labels are cached by the same ~0.01° bucket the forecast cache
    uses.
    """

    UNKNOWN = "Unknown location"

    def __init__(
        self,
        backend: ReverseLookup,
        *,
        debounce: float = 0.35,
        sleep_func: Callable[[float], None] = time.sleep,
        max_size: int = PlaceCache.DEFAULT_SIZE,
    ) -> None:
        self.backend = backend
        self.debounce = debounce
        self.max_size = max_size
        self._sleep = sleep_func
        self._labels: "OrderedDict[Tuple[int, int], str]" = OrderedDict()
        self._generation = 0
        self._lock = Lock()

    def nearest_place_name(self, coordinate: Coordinate) -> str:
        tag = f"{coordinate.latitude:.5f},{coordinate.longitude:.5f}"
        with self._lock:
            self._generation += 1
            generation = self._generation

        if self.debounce > 0:
            self._sleep(self.debounce)

        bucket = coordinate.bucket()
        with self._lock:
            if generation != self._generation:
                raise LookupSuperseded(tag)
            cached = self._labels.get(bucket)
        if cached is not None:
            return cached

        try:
            places = self.backend.reverse(coordinate)
        except ProviderError as exc:
            logger.warning("Reverse lookup for %s failed: %s", tag, exc)
            raise LookupFailed(tag, exc) from exc

        label = next((place.label for place in places if place.label), "")
        with self._lock:
            if generation != self._generation:
                raise LookupSuperseded(tag)
            if not label:
                return self.UNKNOWN
            self._labels[bucket] = label
            self._labels.move_to_end(bucket)
            while len(self._labels) > self.max_size:
                self._labels.popitem(last=False)
        return label


__all__ = ["PlaceResolver", "ReverseGeocoder"]
