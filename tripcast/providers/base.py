from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import requests
from requests import Response

from ..exceptions import TripcastError


class ProviderError(TripcastError):
    """Base provider error."""


class BadResponse(ProviderError):
    """The provider answered with a non-success HTTP status."""

    def __init__(self, status_code: Optional[int], body: str = "") -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class QuotaExceeded(BadResponse):
    """Raised when a provider reports a quota/usage limit issue."""


class DecodeError(ProviderError):
    """The provider payload could not be decoded into the expected shape."""


class TransportError(ProviderError):
    """The request never produced an HTTP response (timeout, DNS, connection)."""


@dataclass
class RequestConfig:
    timeout: float = 10.0


class HttpProvider:
    """Base class that adds timeouts, status checks and JSON decoding for HTTP providers."""

    name = "http"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)
        self._testing_mode = os.environ.get("TESTING_MODE", "0") == "1"

    def _handle_response(self, response: Response) -> Response:
        if response.status_code == 429:
            self._log.warning("Quota exceeded: %s", response.text)
            raise QuotaExceeded(response.status_code, response.text)
        if not 200 <= response.status_code < 300:
            self._log.error("Provider returned %s: %s", response.status_code, response.text)
            raise BadResponse(response.status_code, response.text)
        return response

    def _request(self, method: str, url: str, **kwargs: Any) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise TransportError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise TransportError("request failed") from exc
        self._log_response(response)
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise DecodeError("invalid json") from exc

    def _log_response(self, response: Response) -> None:
        if not self._testing_mode:
            return
        self._log.info(
            "%s request",
            self.name,
            extra={"url": _redact(response.url), "status": response.status_code, "body": response.text[:500]},
        )


def _redact(url: Optional[str]) -> str:
    if not url or "appid=" not in url:
        return url or ""
    head, _, tail = url.partition("appid=")
    _, amp, rest = tail.partition("&")
    return f"{head}appid=***{amp}{rest}"


def safe_float(value: Optional[object]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


__all__ = [
    "BadResponse",
    "DecodeError",
    "HttpProvider",
    "ProviderError",
    "QuotaExceeded",
    "RequestConfig",
    "TransportError",
    "safe_float",
]
