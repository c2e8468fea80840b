from __future__ import annotations

import time
from collections import OrderedDict
from datetime import date, datetime
from threading import Lock
from typing import Callable, Dict, Optional, Tuple, Union

from .entities import CacheKey, Coordinate, ForecastSeries, TemperatureUnit
from .health import CacheStats


class ForecastCache:
    """In-memory forecast store keyed by (day, ~0.01° coordinate bucket, unit).

    An entry older than ``ttl`` seconds is treated exactly like a missing one.
    """

    DEFAULT_TTL = 60 * 60

    def __init__(self, ttl: float = DEFAULT_TTL, time_func: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._time_func = time_func
        self._storage: Dict[CacheKey, Tuple[float, ForecastSeries]] = {}
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    def get(
        self,
        coordinate: Coordinate,
        unit: TemperatureUnit,
        anchor_day: Union[date, datetime],
    ) -> Optional[ForecastSeries]:
        key = CacheKey.build(coordinate, unit, anchor_day)
        with self._lock:
            item = self._storage.get(key)
            if item is None:
                self._misses += 1
                return None
            inserted_at, value = item
            if self._time_func() - inserted_at >= self.ttl:
                self._storage.pop(key, None)
                self._misses += 1
                return None
            self._hits += 1
            return value

    def put(
        self,
        coordinate: Coordinate,
        unit: TemperatureUnit,
        anchor_day: Union[date, datetime],
        series: ForecastSeries,
    ) -> None:
        key = CacheKey.build(coordinate, unit, anchor_day)
        with self._lock:
            now = self._time_func()
            self._purge_locked(now)
            self._storage[key] = (now, series)

    def purge(self) -> int:
        """Drop every stale entry and return how many were removed."""
        with self._lock:
            return self._purge_locked(self._time_func())

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(hits=self._hits, misses=self._misses, keys=len(self._storage))

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)

    def _purge_locked(self, now: float) -> int:
        stale = [key for key, (inserted_at, _) in self._storage.items() if now - inserted_at >= self.ttl]
        for key in stale:
            del self._storage[key]
        return len(stale)


class PlaceCache:
    """Normalized place query -> coordinate, bounded to ``max_size`` entries (LRU)."""

    DEFAULT_SIZE = 256

    def __init__(self, max_size: int = DEFAULT_SIZE) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._storage: "OrderedDict[str, Coordinate]" = OrderedDict()
        self._lock = Lock()

    @staticmethod
    def normalize(query: str) -> str:
        return query.strip().casefold()

    def get(self, query: str) -> Optional[Coordinate]:
        key = self.normalize(query)
        with self._lock:
            value = self._storage.get(key)
            if value is not None:
                self._storage.move_to_end(key)
            return value

    def set(self, query: str, coordinate: Coordinate) -> None:
        key = self.normalize(query)
        with self._lock:
            self._storage[key] = coordinate
            self._storage.move_to_end(key)
            while len(self._storage) > self.max_size:
                self._storage.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._storage.clear()

    def __contains__(self, query: str) -> bool:
        with self._lock:
            return self.normalize(query) in self._storage

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)


__all__ = ["ForecastCache", "PlaceCache"]
