"""Forward place search and reverse lookup backends."""
from __future__ import annotations

from typing import Any, List, Optional

from .base import DecodeError, HttpProvider, safe_float
from ..entities import Coordinate, Place
from ..exceptions import ConfigurationError


class OpenWeatherGeocoder(HttpProvider):
    """OpenWeather geocoding API (``/geo/1.0/direct`` and ``/geo/1.0/reverse``)."""

    name = "openweather:geo"
    base_url = "https://api.openweathermap.org/geo/1.0"

    def __init__(self, api_key: str, base_url: Optional[str] = None, limit: int = 1, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not api_key:
            raise ConfigurationError("Missing OpenWeather API key")
        self.api_key = api_key
        self.base_url = (base_url or self.base_url).rstrip("/")
        self.limit = limit

    def search(self, query: str) -> List[Place]:
        params = {"q": query, "limit": self.limit, "appid": self.api_key}
        response = self._request("GET", f"{self.base_url}/direct", params=params)
        return self._places(self._json(response))

    def reverse(self, coordinate: Coordinate) -> List[Place]:
        params = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "limit": self.limit,
            "appid": self.api_key,
        }
        response = self._request("GET", f"{self.base_url}/reverse", params=params)
        return self._places(self._json(response))

    def _places(self, data: Any) -> List[Place]:
        if not isinstance(data, list):
            raise DecodeError("expected a list of places")
        return [
            _build_place(item, lat_key="lat", lon_key="lon", state_key="state")
            for item in data
        ]


class OpenMeteoGeocoder(HttpProvider):
    """Open-Meteo geocoding search. It has no reverse endpoint."""

    name = "open-meteo:geo"
    base_url = "https://geocoding-api.open-meteo.com/v1/search"

    def __init__(self, base_url: Optional[str] = None, limit: int = 1, language: str = "en", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url
        self.limit = limit
        self.language = language

    def search(self, query: str) -> List[Place]:
        params = {"name": query, "count": self.limit, "language": self.language, "format": "json"}
        response = self._request("GET", self.base_url, params=params)
        data = self._json(response)
        if not isinstance(data, dict):
            raise DecodeError("unexpected payload")
        results = data.get("results") or []
        if not isinstance(results, list):
            raise DecodeError("results is not a list")
        return [
            _build_place(item, lat_key="latitude", lon_key="longitude", state_key="admin1")
            for item in results
        ]


def _build_place(item: Any, *, lat_key: str, lon_key: str, state_key: str) -> Place:
    if not isinstance(item, dict):
        raise DecodeError("place entry is not an object")
    latitude = safe_float(item.get(lat_key))
    longitude = safe_float(item.get(lon_key))
    if latitude is None or longitude is None:
        raise DecodeError("place entry missing coordinates")
    try:
        coordinate = Coordinate(latitude, longitude)
    except ValueError as exc:
        raise DecodeError(str(exc)) from exc
    return Place(
        coordinate=coordinate,
        name=item.get("name"),
        state=item.get(state_key),
        country=item.get("country"),
    )


__all__ = ["OpenMeteoGeocoder", "OpenWeatherGeocoder"]
