"""Utility to turn server-side throttling signals into a retry delay.

- Honor Retry-After (delta seconds) on 429 and 503 responses.
- Fall back to a fixed delay for every other retryable failure.
- Bound the delay to a configurable maximum to avoid long blocking.
"""

from __future__ import annotations

import asyncio
from typing import Mapping, Optional

import httpx


_RETRY_AFTER_STATUSES = frozenset({429, 503})


class RateLimiter:
    def __init__(self, *, max_sleep_seconds: float = 60.0) -> None:
        self._max_sleep_seconds = float(max_sleep_seconds)

    def retry_delay(self, response: Optional[httpx.Response], *, default: float) -> float:
        delay = float(default)
        if response is not None and response.status_code in _RETRY_AFTER_STATUSES:
            retry_after = self._parse_int_header(response.headers, "Retry-After")
            if retry_after is not None:
                delay = float(retry_after)
        return max(0.0, min(delay, self._max_sleep_seconds))

    async def sleep_before_retry(self, response: Optional[httpx.Response], *, default: float) -> None:
        delay = self.retry_delay(response, default=default)
        if delay > 0:
            await asyncio.sleep(delay)

    def _parse_int_header(self, headers: Mapping[str, str], name: str) -> Optional[int]:
        value = headers.get(name)
        if not value:
            return None
        value = value.strip()
        if not value.isdigit():
            return None
        return int(value)
