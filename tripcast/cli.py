"""Command line entry point: print the forecast for one trip as JSON."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import date
from typing import IO, Optional, Sequence

from .entities import DailyForecast, TemperatureUnit, TripLocation
from .exceptions import TripcastError
from .factory import build_service
from .services.weather import ForecastService
from .settings import load_settings
from .units import describe, parse_unit


class CommandError(Exception):
    """Raised for invalid command usage; reported without a traceback."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tripcast", description="Fetch the forecast for a trip date")
    parser.add_argument("--date", required=True, type=date.fromisoformat, help="Trip date (YYYY-MM-DD)")
    parser.add_argument("--lat", type=float, help="Latitude")
    parser.add_argument("--lon", type=float, help="Longitude")
    parser.add_argument("--city", type=str, help="City or place name")
    parser.add_argument("--name", type=str, help="Custom trip name, searched before --city")
    parser.add_argument("--unit", type=parse_unit, default=TemperatureUnit.METRIC, help="metric or imperial")
    return parser


def trip_from_args(options: argparse.Namespace) -> TripLocation:
    has_coordinate = options.lat is not None and options.lon is not None
    if (options.lat is None) != (options.lon is None):
        raise CommandError("--lat and --lon must be given together")
    if not has_coordinate and not (options.city or options.name):
        raise CommandError("--lat and --lon are required unless --city or --name is given")
    return TripLocation(
        location_name=options.city or options.name or "",
        date=options.date,
        custom_name=options.name,
        city=options.city,
        latitude=options.lat,
        longitude=options.lon,
    )


def serialize_forecast(forecast: Optional[DailyForecast], unit: TemperatureUnit) -> dict:
    if forecast is None:
        return {"forecast": None}
    payload = asdict(forecast)
    payload["date"] = forecast.date.isoformat()
    payload["unit"] = unit.value
    payload["summary"] = describe(forecast, unit)
    return {"forecast": payload}


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    service: Optional[ForecastService] = None,
    stdout: IO[str] = sys.stdout,
    stderr: IO[str] = sys.stderr,
) -> int:
    options = build_parser().parse_args(argv)
    try:
        trip = trip_from_args(options)
        if service is None:
            settings = load_settings()
            logging.basicConfig(level=settings.log_level)
            service = build_service(settings)
        forecast = service.forecast_for_date(trip, options.unit)
    except (CommandError, TripcastError) as exc:
        stderr.write(f"error: {exc}\n")
        return 1
    stdout.write(json.dumps(serialize_forecast(forecast, options.unit)) + "\n")
    return 0


__all__ = ["CommandError", "build_parser", "main", "serialize_forecast", "trip_from_args"]
