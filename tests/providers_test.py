from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
import requests

from tripcast.entities import Coordinate, TemperatureUnit
from tripcast.exceptions import ConfigurationError
from tripcast.providers.base import BadResponse, DecodeError, QuotaExceeded, TransportError
from tripcast.providers.geocoding import OpenMeteoGeocoder, OpenWeatherGeocoder
from tripcast.providers.openmeteo import OpenMeteoProvider
from tripcast.providers.openweather import OneCallProvider, onecall_chain


ONECALL_V3 = "https://api.openweathermap.org/data/3.0/onecall"
TOKYO = Coordinate(35.6762, 139.6503)


def ts(*args: int) -> int:
    return int(datetime(*args, tzinfo=timezone.utc).timestamp())


def test_onecall_daily_normalization(requests_mock) -> None:
    provider = OneCallProvider(api_key="test")
    requests_mock.get(
        ONECALL_V3,
        json={
            "timezone_offset": 32400,
            "daily": [
                {"dt": ts(2025, 10, 6, 3), "temp": {"min": 17.3, "max": 24.1}, "pop": 0.3},
                {"dt": ts(2025, 10, 7, 3), "temp": {"min": 16.0, "max": 22.5}},
            ],
        },
    )

    series = provider.daily(TOKYO, TemperatureUnit.METRIC)

    assert series.utc_offset_seconds == 32400
    assert series.source == "openweather:onecall-3.0"
    assert [day.date for day in series.days] == [date(2025, 10, 6), date(2025, 10, 7)]
    assert series.days[0].high == 24.1
    assert series.days[0].low == 17.3
    assert series.days[0].precipitation_probability == 0.3
    assert series.days[1].precipitation_probability == 0.0

    query = requests_mock.last_request.qs
    assert query["exclude"] == ["minutely,hourly,alerts,current"]
    assert query["units"] == ["metric"]
    assert query["appid"] == ["test"]
    assert float(query["lat"][0]) == pytest.approx(35.6762)


def test_onecall_forwards_imperial_units(requests_mock) -> None:
    provider = OneCallProvider(api_key="test")
    requests_mock.get(ONECALL_V3, json={"daily": [{"dt": ts(2025, 10, 6, 12), "temp": {"min": 60, "max": 75}}]})

    series = provider.daily(TOKYO, TemperatureUnit.IMPERIAL)

    assert requests_mock.last_request.qs["units"] == ["imperial"]
    assert series.days[0].high == 75.0
    assert series.utc_offset_seconds == 0


def test_onecall_clamps_precipitation_probability(requests_mock) -> None:
    provider = OneCallProvider(api_key="test")
    body = (
        '{"daily": ['
        f'{{"dt": {ts(2025, 10, 6, 12)}, "temp": {{"min": 1, "max": 2}}, "pop": 1.4}}, '
        f'{{"dt": {ts(2025, 10, 7, 12)}, "temp": {{"min": 1, "max": 2}}, "pop": -0.2}}, '
        f'{{"dt": {ts(2025, 10, 8, 12)}, "temp": {{"min": 1, "max": 2}}, "pop": NaN}}'
        "]}"
    )
    requests_mock.get(ONECALL_V3, text=body)

    series = provider.daily(TOKYO, TemperatureUnit.METRIC)

    assert [day.precipitation_probability for day in series.days] == [1.0, 0.0, 0.0]


def test_onecall_local_date_uses_timezone_offset(requests_mock) -> None:
    provider = OneCallProvider(api_key="test")
    requests_mock.get(
        ONECALL_V3,
        json={"timezone_offset": -18000, "daily": [{"dt": ts(2025, 10, 7, 2), "temp": {"min": 5, "max": 9}}]},
    )

    series = provider.daily(Coordinate(40.71, -74.0), TemperatureUnit.METRIC)

    assert series.days[0].date == date(2025, 10, 6)


def test_onecall_version_selects_endpoint() -> None:
    providers = onecall_chain("test")

    assert [provider.base_url for provider in providers] == [
        "https://api.openweathermap.org/data/3.0/onecall",
        "https://api.openweathermap.org/data/2.5/onecall",
    ]


def test_onecall_requires_api_key() -> None:
    with pytest.raises(ConfigurationError):
        OneCallProvider(api_key="")


def test_onecall_bad_status(requests_mock) -> None:
    provider = OneCallProvider(api_key="test")
    requests_mock.get(ONECALL_V3, status_code=401, text="Invalid API key")

    with pytest.raises(BadResponse) as excinfo:
        provider.daily(TOKYO, TemperatureUnit.METRIC)

    assert excinfo.value.status_code == 401
    assert excinfo.value.body == "Invalid API key"


def test_onecall_quota_exceeded(requests_mock) -> None:
    provider = OneCallProvider(api_key="test")
    requests_mock.get(ONECALL_V3, status_code=429, text="quota exceeded")

    with pytest.raises(QuotaExceeded):
        provider.daily(TOKYO, TemperatureUnit.METRIC)


@pytest.mark.parametrize(
    "payload",
    [
        {"text": "<html>oops</html>"},
        {"json": {"daily": []}},
        {"json": {"current": {}}},
        {"json": {"daily": [{"dt": 1759719600, "temp": {"max": 3}}]}},
        {"json": [1, 2, 3]},
        {"json": {"daily": [{"dt": 1e20, "temp": {"min": 1, "max": 2}}]}},
        {"text": '{"timezone_offset": Infinity, "daily": [{"dt": 1759719600, "temp": {"min": 1, "max": 2}}]}'},
        {"text": '{"timezone_offset": NaN, "daily": [{"dt": 1759719600, "temp": {"min": 1, "max": 2}}]}'},
    ],
)
def test_onecall_decode_errors(requests_mock, payload) -> None:
    provider = OneCallProvider(api_key="test")
    requests_mock.get(ONECALL_V3, **payload)

    with pytest.raises(DecodeError):
        provider.daily(TOKYO, TemperatureUnit.METRIC)


def test_transport_errors_are_wrapped(requests_mock) -> None:
    provider = OneCallProvider(api_key="test")
    requests_mock.get(ONECALL_V3, exc=requests.exceptions.ConnectTimeout)

    with pytest.raises(TransportError) as excinfo:
        provider.daily(TOKYO, TemperatureUnit.METRIC)

    assert isinstance(excinfo.value.__cause__, requests.exceptions.ConnectTimeout)

    requests_mock.get(ONECALL_V3, exc=requests.exceptions.ConnectionError)
    with pytest.raises(TransportError):
        provider.daily(TOKYO, TemperatureUnit.METRIC)


def test_openmeteo_daily_normalization(requests_mock) -> None:
    provider = OpenMeteoProvider(base_url="https://openmeteo.test")
    requests_mock.get(
        "https://openmeteo.test",
        json={
            "utc_offset_seconds": 32400,
            "daily": {
                "time": ["2025-10-06", "2025-10-07"],
                "temperature_2m_max": [24.1, 22.0],
                "temperature_2m_min": [17.3, 15.5],
                "precipitation_probability_max": [30, None],
            },
        },
    )

    series = provider.daily(TOKYO, TemperatureUnit.IMPERIAL)

    assert series.source == "open-meteo"
    assert series.utc_offset_seconds == 32400
    assert series.days[0].date == date(2025, 10, 6)
    assert series.days[0].precipitation_probability == pytest.approx(0.3)
    assert series.days[1].precipitation_probability == 0.0
    query = requests_mock.last_request.qs
    assert query["temperature_unit"] == ["fahrenheit"]
    assert query["timezone"] == ["auto"]


def test_openmeteo_missing_daily_data(requests_mock) -> None:
    provider = OpenMeteoProvider(base_url="https://openmeteo.test")
    requests_mock.get("https://openmeteo.test", json={"daily": {"time": []}})

    with pytest.raises(DecodeError):
        provider.daily(TOKYO, TemperatureUnit.METRIC)


def test_openweather_geocoder_search_and_reverse(requests_mock) -> None:
    geocoder = OpenWeatherGeocoder(api_key="test", base_url="https://geo.test/geo/1.0")
    requests_mock.get(
        "https://geo.test/geo/1.0/direct",
        json=[{"name": "Tokyo", "lat": 35.6762, "lon": 139.6503, "country": "JP"}],
    )
    requests_mock.get(
        "https://geo.test/geo/1.0/reverse",
        json=[{"name": "Shinjuku", "lat": 35.69, "lon": 139.70, "state": "Tokyo", "country": "JP"}],
    )

    places = geocoder.search("Tokyo")
    assert places[0].coordinate == TOKYO
    assert "Tokyo" in requests_mock.last_request.url

    nearby = geocoder.reverse(Coordinate(35.69, 139.70))
    assert nearby[0].label == "Shinjuku, Tokyo, JP"


def test_openweather_geocoder_rejects_malformed_payload(requests_mock) -> None:
    geocoder = OpenWeatherGeocoder(api_key="test", base_url="https://geo.test/geo/1.0")
    requests_mock.get("https://geo.test/geo/1.0/direct", json={"cod": 400})

    with pytest.raises(DecodeError):
        geocoder.search("Tokyo")


def test_openmeteo_geocoder_handles_missing_results(requests_mock) -> None:
    geocoder = OpenMeteoGeocoder(base_url="https://geocoding.test/v1/search")
    requests_mock.get("https://geocoding.test/v1/search", json={"generationtime_ms": 0.5})

    assert geocoder.search("Atlantis") == []

    requests_mock.get(
        "https://geocoding.test/v1/search",
        json={"results": [{"name": "Paris", "latitude": 48.8566, "longitude": 2.3522, "admin1": "Île-de-France", "country": "France"}]},
    )
    places = geocoder.search("Paris")
    assert places[0].label == "Paris, Île-de-France, France"
