"""In-memory TTL store with a size bound and hit/miss counters.

Entries carry a monotonic creation time and expiration time (milliseconds).
Expired entries are dropped lazily when observed, or in bulk by cleanup().
When the store is full, the entry with the oldest creation time is evicted.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, Generic, Optional, TypeVar

from core.models import CacheStats

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _now_ms() -> float:
    # time.monotonic so wall-clock changes never expire entries
    return time.monotonic() * 1000.0


def _hit_rate(hits: int, total: int) -> float:
    # Percent with 2 decimals, halves rounded up; integer math avoids float ties
    if total <= 0:
        return 0.0
    hundredths = (hits * 20000 + total) // (2 * total)
    return hundredths / 100


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    value: T
    expires_at: float  # ms, monotonic
    created_at: float  # ms, monotonic

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class CacheStore(Generic[T]):
    def __init__(self, *, default_ttl_ms: float, max_size: int) -> None:
        self._default_ttl_ms = float(default_ttl_ms)
        self._max_size = max(1, int(max_size))
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._hits = 0
        self._misses = 0
        self._lock = threading.RLock()

    @property
    def default_ttl_ms(self) -> float:
        return self._default_ttl_ms

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if entry.is_expired(_now_ms()):
                del self._entries[key]
                self._misses += 1
                return None

            self._hits += 1
            return entry.value

    def set(self, key: str, value: T, *, ttl_ms: Optional[float] = None) -> bool:
        with self._lock:
            now = _now_ms()
            ttl = self._default_ttl_ms if ttl_ms is None else float(ttl_ms)

            if len(self._entries) >= self._max_size:
                self._evict_oldest()

            self._entries[key] = CacheEntry(value=value, expires_at=now + ttl, created_at=now)
            return True

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if entry.is_expired(_now_ms()):
                del self._entries[key]
                return False
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> bool:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            return True

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                size=len(self._entries),
                hit_rate=_hit_rate(self._hits, self._hits + self._misses),
            )

    def cleanup(self) -> int:
        """Remove every entry expiring at or before now; returns how many were removed."""
        with self._lock:
            now = _now_ms()
            expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def _evict_oldest(self) -> None:
        # min() keeps the first entry on ties, i.e. the earliest inserted
        oldest_key = min(self._entries, key=lambda k: self._entries[k].created_at, default=None)
        if oldest_key is not None:
            del self._entries[oldest_key]
            logger.debug("Evicted oldest cache entry %s", oldest_key)
