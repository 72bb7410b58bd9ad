"""Cache facade used by the interceptor, the users client and the tools.

Wraps a CacheStore and its CleanupSweeper behind one object owned by the
application root. Lookups and writes are synchronous; clear, get_stats and
cleanup are coroutines so they compose with the rest of the async API.
"""

from __future__ import annotations

import json
from typing import Any, Generic, Mapping, Optional, TypeVar

from core.cache import CacheStore
from core.models import CacheConfig, CacheStats
from core.sweeper import CleanupSweeper

T = TypeVar("T")


def generate_key(base: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Build a deterministic key: base?name=<json>&... with names sorted."""
    if not params:
        return base
    query = "&".join(
        f"{name}={json.dumps(params[name], separators=(',', ':'), ensure_ascii=False)}"
        for name in sorted(params)
    )
    return f"{base}?{query}"


class CacheService(Generic[T]):
    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        *,
        store: Optional[CacheStore[T]] = None,
    ) -> None:
        self._config = config or CacheConfig()
        # Explicit None check: an empty store is falsy (__len__ == 0)
        if store is None:
            store = CacheStore(
                default_ttl_ms=self._config.default_ttl_ms,
                max_size=self._config.max_size,
            )
        self._store: CacheStore[T] = store
        self._sweeper = CleanupSweeper(
            self._store,
            interval_seconds=self._config.cleanup_interval_seconds,
        )

    @property
    def store(self) -> CacheStore[T]:
        return self._store

    @property
    def sweeper(self) -> CleanupSweeper:
        return self._sweeper

    # --- Synchronous operations ---

    def get(self, key: str) -> Optional[T]:
        return self._store.get(key)

    def set(self, key: str, value: T, *, ttl_ms: Optional[float] = None) -> bool:
        return self._store.set(key, value, ttl_ms=ttl_ms)

    def has(self, key: str) -> bool:
        return self._store.has(key)

    def delete(self, key: str) -> bool:
        return self._store.delete(key)

    def generate_key(self, base: str, params: Optional[Mapping[str, Any]] = None) -> str:
        return generate_key(base, params)

    # --- Async operations ---

    async def clear(self) -> bool:
        return self._store.clear()

    async def get_stats(self) -> CacheStats:
        return self._store.stats()

    async def cleanup(self) -> int:
        return self._store.cleanup()

    # --- Lifecycle ---

    def start_cleanup(self) -> None:
        self._sweeper.start()

    async def stop_cleanup(self) -> None:
        await self._sweeper.stop()

    async def close(self) -> None:
        await self._sweeper.stop()
        self._store.clear()
