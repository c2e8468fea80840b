from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple, Union


class TemperatureUnit(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def symbol(self) -> str:
        return "°C" if self is TemperatureUnit.METRIC else "°F"


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"coordinate must be finite, got ({self.latitude}, {self.longitude})")

    def bucket(self) -> Tuple[int, int]:
        """Round to ~0.01° (about 1 km) so jitter maps to one cache slot."""
        return _round_half_away(self.latitude * 100), _round_half_away(self.longitude * 100)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


@dataclass
class TripLocation:
    """The part of a trip the forecast lookup needs.

    ``date`` may be a plain date or a datetime; only its calendar day is used.
    """

    location_name: str
    date: Union[date, datetime]
    custom_name: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(self.latitude, self.longitude)

    @property
    def query(self) -> str:
        """Place-search text: custom name, then city, then the raw location name."""
        if self.custom_name and _clean(self.custom_name):
            return self.custom_name
        if self.city and _clean(self.city):
            return self.city
        return self.location_name

    @property
    def display_name(self) -> str:
        return _clean(self.query) or self.location_name

    @property
    def anchor_day(self) -> date:
        if isinstance(self.date, datetime):
            return self.date.date()
        return self.date


@dataclass(frozen=True)
class Place:
    coordinate: Coordinate
    name: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    @property
    def label(self) -> str:
        parts = [_clean(part) for part in (self.name, self.state, self.country)]
        return ", ".join(part for part in parts if part)


def clamp_probability(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


@dataclass(frozen=True)
class DailyForecast:
    """One day of forecast.

    Temperatures are in the unit the series was requested in; the
    precipitation probability is always a fraction in [0, 1].
    """

    date: date
    high: float
    low: float
    precipitation_probability: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "precipitation_probability", clamp_probability(self.precipitation_probability))

    @property
    def precipitation_percent(self) -> int:
        return int(round(self.precipitation_probability * 100))


@dataclass(frozen=True)
class ForecastSeries:
    days: Tuple[DailyForecast, ...] = field(default_factory=tuple)
    utc_offset_seconds: int = 0
    source: str = ""

    def __len__(self) -> int:
        return len(self.days)

    def for_day(self, day: date) -> Optional[DailyForecast]:
        for forecast in self.days:
            if forecast.date == day:
                return forecast
        return None

    def for_day_or_first(self, day: date) -> Optional[DailyForecast]:
        match = self.for_day(day)
        if match is not None:
            return match
        return self.days[0] if self.days else None


@dataclass(frozen=True)
class CacheKey:
    day: str
    lat_bucket: int
    lon_bucket: int
    unit: TemperatureUnit

    @classmethod
    def build(cls, coordinate: Coordinate, unit: TemperatureUnit, anchor_day: Union[date, datetime]) -> "CacheKey":
        if isinstance(anchor_day, datetime):
            anchor_day = anchor_day.date()
        lat_bucket, lon_bucket = coordinate.bucket()
        return cls(day=anchor_day.isoformat(), lat_bucket=lat_bucket, lon_bucket=lon_bucket, unit=unit)


__all__ = [
    "CacheKey",
    "Coordinate",
    "DailyForecast",
    "ForecastSeries",
    "Place",
    "TemperatureUnit",
    "TripLocation",
    "clamp_probability",
]
