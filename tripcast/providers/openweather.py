"""OpenWeather One Call daily forecast provider."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from .base import DecodeError, HttpProvider, safe_float
from ..entities import Coordinate, DailyForecast, ForecastSeries, TemperatureUnit
from ..exceptions import ConfigurationError
from ..units import OPENWEATHER_UNITS


ONECALL_URL = "https://api.openweathermap.org/data/{version}/onecall"
EXCLUDE = "minutely,hourly,alerts,current"


class OneCallProvider(HttpProvider):
    """Daily aggregates from the One Call API (``3.0`` or the older ``2.5``).

    ``dt`` of each day is a UTC timestamp; the calendar date stored on each
    :class:`DailyForecast` is the date at the location, computed with the
    ``timezone_offset`` the API reports (UTC when it is missing).
    """

    def __init__(
        self,
        api_key: str,
        version: str = "3.0",
        base_url: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if not api_key:
            raise ConfigurationError("Missing OpenWeather API key")
        self.api_key = api_key
        self.version = version
        self.base_url = base_url or ONECALL_URL.format(version=version)
        self.name = f"openweather:onecall-{version}"

    def daily(self, coordinate: Coordinate, unit: TemperatureUnit) -> ForecastSeries:
        params = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "exclude": EXCLUDE,
            "units": OPENWEATHER_UNITS[unit],
            "appid": self.api_key,
        }
        response = self._request("GET", self.base_url, params=params)
        data = self._json(response)
        if not isinstance(data, dict):
            raise DecodeError("unexpected payload")
        daily = data.get("daily")
        if not isinstance(daily, list) or not daily:
            raise DecodeError("missing daily data")
        try:
            offset = int(safe_float(data.get("timezone_offset")) or 0)
        except (OverflowError, ValueError) as exc:
            raise DecodeError("invalid timezone_offset") from exc
        days = tuple(self._build_day(item, offset) for item in daily)
        return ForecastSeries(days=days, utc_offset_seconds=offset, source=self.name)

    def _build_day(self, item: Any, offset: int) -> DailyForecast:
        if not isinstance(item, dict):
            raise DecodeError("daily entry is not an object")
        timestamp = safe_float(item.get("dt"))
        temp = item.get("temp") if isinstance(item.get("temp"), dict) else {}
        high = safe_float(temp.get("max"))
        low = safe_float(temp.get("min"))
        if timestamp is None or high is None or low is None:
            raise DecodeError("daily entry missing dt/temp")
        try:
            local = datetime.fromtimestamp(timestamp + offset, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise DecodeError(f"daily entry has out-of-range dt {timestamp!r}") from exc
        return DailyForecast(
            date=local.date(),
            high=high,
            low=low,
            precipitation_probability=safe_float(item.get("pop")) or 0.0,
        )


def onecall_chain(api_key: str, versions: Optional[List[str]] = None, **kwargs: Any) -> List[OneCallProvider]:
    """Providers for the newest One Call version first, older ones as fallbacks."""
    return [OneCallProvider(api_key, version=version, **kwargs) for version in (versions or ["3.0", "2.5"])]


__all__ = ["OneCallProvider", "onecall_chain"]
