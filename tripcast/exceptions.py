from __future__ import annotations

from typing import Optional


class TripcastError(Exception):
    """Base class for every error raised by tripcast."""


class ConfigurationError(TripcastError):
    """A required setting (usually an API key) is missing or invalid."""


class InvalidQuery(TripcastError):
    """The place query is empty after trimming and no coordinate was given."""


class NotFound(TripcastError):
    """The place search succeeded but returned no results."""

    def __init__(self, query: str) -> None:
        super().__init__(f"no place found for {query!r}")
        self.query = query


class LookupFailed(TripcastError):
    """A place lookup failed below the resolver (transport, status or decoding).

    The original provider error is available as ``__cause__``.
    """

    def __init__(self, query: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"place lookup failed for {query!r}: {cause}")
        self.query = query
        self.cause = cause


class LookupSuperseded(TripcastError):
    """A newer lookup started on the same resolver while this one was running."""

    def __init__(self, query: str) -> None:
        super().__init__(f"lookup for {query!r} was superseded")
        self.query = query


__all__ = [
    "ConfigurationError",
    "InvalidQuery",
    "LookupFailed",
    "LookupSuperseded",
    "NotFound",
    "TripcastError",
]
