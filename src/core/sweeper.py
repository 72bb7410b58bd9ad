"""
Periodic cleanup of expired cache entries.

Runs store.cleanup() on the current asyncio loop at a fixed interval.
Nothing starts on construction: call start() inside a running loop and
await stop() on shutdown. run_once() performs a single pass synchronously.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol


logger = logging.getLogger(__name__)


class _Cleanable(Protocol):
    def cleanup(self) -> int:
        ...


class CleanupSweeper:
    def __init__(self, store: _Cleanable, *, interval_seconds: float = 60.0) -> None:
        self._store = store
        self._interval = max(0.0, float(interval_seconds))
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        # Idempotent; a second start while running keeps the existing task.
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def run_once(self) -> int:
        removed = self._store.cleanup()
        if removed:
            logger.debug("Cache sweep removed %d expired entries", removed)
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.run_once()
            except Exception:
                logger.exception("Cache sweep failed")
