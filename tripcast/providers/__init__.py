from .base import (
    BadResponse,
    DecodeError,
    HttpProvider,
    ProviderError,
    QuotaExceeded,
    RequestConfig,
    TransportError,
)
from .geocoding import OpenMeteoGeocoder, OpenWeatherGeocoder
from .openmeteo import OpenMeteoProvider
from .openweather import OneCallProvider, onecall_chain

__all__ = [
    "BadResponse",
    "DecodeError",
    "HttpProvider",
    "OneCallProvider",
    "OpenMeteoGeocoder",
    "OpenMeteoProvider",
    "OpenWeatherGeocoder",
    "ProviderError",
    "QuotaExceeded",
    "RequestConfig",
    "TransportError",
    "onecall_chain",
]
