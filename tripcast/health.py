"""In-memory health registry for the forecast service.

Counts provider failures per provider name, remembers when each provider
last answered and why it last failed, and keeps the latest forecast cache
counters. A snapshot is a plain dict that can be serialized as JSON.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, Optional


@dataclass(frozen=True)
class CacheStats:
    """Forecast cache counters at one point in time."""

    hits: int = 0
    misses: int = 0
    keys: int = 0

    @property
    def lookups(self) -> int:
        return self.hits + self.misses

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class HealthRegistry:
    """Provider outcomes and the forecast cache counters, guarded by one lock."""

    def __init__(self) -> None:
        self._failures: Dict[str, int] = {}
        self._last_error: Dict[str, str] = {}
        self._last_ok: Dict[str, str] = {}
        self._cache_stats = CacheStats()
        self._lock = Lock()

    # -- Provider outcomes --------------------------------------------------
    def record_provider_error(self, provider: str, error: Optional[BaseException] = None) -> None:
        if not provider:
            raise ValueError("provider must be provided")
        with self._lock:
            self._failures[provider] = self._failures.get(provider, 0) + 1
            if error is not None:
                self._last_error[provider] = str(error) or error.__class__.__name__

    def record_provider_success(self, provider: str, when: Optional[datetime] = None) -> None:
        if not provider:
            raise ValueError("provider must be provided")
        stamp = self._format_datetime(when or datetime.now(timezone.utc))
        with self._lock:
            self._last_ok[provider] = stamp

    def provider_errors(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._failures)

    # -- Cache stats --------------------------------------------------------
    def set_cache_stats(self, stats: Optional[CacheStats]) -> None:
        with self._lock:
            self._cache_stats = stats if stats is not None else CacheStats()

    # -- Snapshot -----------------------------------------------------------
    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            return {
                "providers": dict(self._failures),
                "last_error": dict(self._last_error),
                "last_success": dict(self._last_ok),
                "cache": self._cache_stats.as_dict(),
            }

    @staticmethod
    def _format_datetime(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()


__all__ = ["CacheStats", "HealthRegistry"]
