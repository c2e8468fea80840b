from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from .base import DecodeError, HttpProvider, safe_float
from ..entities import Coordinate, DailyForecast, ForecastSeries, TemperatureUnit
from ..units import OPENMETEO_UNITS


DAILY_FIELDS = ["temperature_2m_max", "temperature_2m_min", "precipitation_probability_max"]


class OpenMeteoProvider(HttpProvider):
    name = "open-meteo"
    base_url = "https://api.open-meteo.com/v1/forecast"

    def __init__(self, base_url: Optional[str] = None, days: int = 7, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url
        self.days = days

    def daily(self, coordinate: Coordinate, unit: TemperatureUnit) -> ForecastSeries:
        params = {
            "latitude": coordinate.latitude,
            "longitude": coordinate.longitude,
            "daily": ",".join(DAILY_FIELDS),
            "timezone": "auto",
            "forecast_days": self.days,
            "temperature_unit": OPENMETEO_UNITS[unit],
        }
        response = self._request("GET", self.base_url, params=params)
        data = self._json(response)
        if not isinstance(data, dict):
            raise DecodeError("unexpected payload")
        daily = data.get("daily") or {}
        dates = daily.get("time") or []
        if not dates:
            raise DecodeError("missing daily data")
        temps_max = daily.get("temperature_2m_max") or []
        temps_min = daily.get("temperature_2m_min") or []
        # Open-Meteo reports percent; the series always carries fractions.
        probabilities = daily.get("precipitation_probability_max") or []
        result: List[DailyForecast] = []
        for idx, date_str in enumerate(dates):
            high = _safe_index(temps_max, idx)
            low = _safe_index(temps_min, idx)
            if high is None or low is None:
                raise DecodeError(f"missing temperatures for {date_str}")
            percent = _safe_index(probabilities, idx)
            result.append(
                DailyForecast(
                    date=self._parse_date(date_str),
                    high=high,
                    low=low,
                    precipitation_probability=(percent or 0.0) / 100.0,
                )
            )
        offset = int(safe_float(data.get("utc_offset_seconds")) or 0)
        return ForecastSeries(days=tuple(result), utc_offset_seconds=offset, source=self.name)

    def _parse_date(self, value: Any) -> date:
        try:
            return date.fromisoformat(str(value)[:10])
        except ValueError as exc:
            raise DecodeError(f"invalid date {value!r}") from exc


def _safe_index(values: List[Any], index: int) -> Optional[float]:
    try:
        value = values[index]
    except (IndexError, TypeError):
        return None
    return safe_float(value)


__all__ = ["OpenMeteoProvider"]
