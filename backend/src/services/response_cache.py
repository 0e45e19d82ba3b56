"""TTL-bounded response cache owned by the remote store client."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    fetched_at: float


class ResponseCache:
    """
    Map of resolved request URL -> decoded response payload.

    Entries older than ``ttl_seconds`` are never returned; they are dropped on
    lookup and swept from the whole map on every insert. The clock is
    injectable so expiry can be tested without sleeping.
    """

    def __init__(self, ttl_seconds: float = 90.0, clock: Optional[Clock] = None) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock: Clock = clock or time.monotonic
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("cache miss: %s", key)
            return None
        age = self._clock() - entry.fetched_at
        if age >= self.ttl_seconds:
            logger.debug("cache expired (%.1fs): %s", age, key)
            del self._entries[key]
            return None
        logger.debug("cache hit (%.1fs): %s", age, key)
        return entry.value

    def put(self, key: str, value: Any) -> None:
        now = self._clock()
        self._sweep(now)
        self._entries[key] = CacheEntry(key=key, value=value, fetched_at=now)

    def _sweep(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if now - e.fetched_at >= self.ttl_seconds]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("cache swept %d expired entries", len(expired))

    def clear(self) -> None:
        if self._entries:
            logger.debug("cache cleared (%d entries)", len(self._entries))
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


__all__ = ["ResponseCache", "CacheEntry", "Clock"]
