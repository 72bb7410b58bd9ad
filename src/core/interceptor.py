"""Read-through caching for outbound httpx requests.

CachingInterceptor serves repeated GET requests from a CacheService and
stores successful responses after a miss. CachingTransport plugs the
interceptor into httpx so any AsyncClient built on it gets the behavior.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from core.cache_service import CacheService
from core.interfaces import CallNext
from core.models import CachedResponse


logger = logging.getLogger(__name__)

_CACHEABLE_METHODS = frozenset({"GET"})


def request_cache_key(cache: CacheService[Any], request: httpx.Request) -> str:
    # Key covers the resolved URL plus its query, independent of parameter order
    base = str(request.url.copy_with(query=None))
    params: Dict[str, Any] = {}
    for name in request.url.params.keys():
        values = request.url.params.get_list(name)
        params[name] = values[0] if len(values) == 1 else values
    return cache.generate_key(base, params)


class CachingInterceptor:
    def __init__(self, cache: CacheService[CachedResponse]) -> None:
        self._cache = cache

    async def intercept(self, request: httpx.Request, call_next: CallNext) -> httpx.Response:
        if request.method.upper() not in _CACHEABLE_METHODS:
            return await call_next(request)

        key = request_cache_key(self._cache, request)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached.to_response(request)

        logger.debug("Cache miss for %s", key)
        # Exceptions from call_next propagate untouched and leave the cache alone
        response = await call_next(request)

        if isinstance(response, httpx.Response) and response.is_success:
            await response.aread()
            self._cache.set(key, CachedResponse.from_response(response))

        return response


class CachingTransport(httpx.AsyncBaseTransport):
    def __init__(
        self,
        interceptor: CachingInterceptor,
        inner: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._interceptor = interceptor
        self._inner = inner or httpx.AsyncHTTPTransport()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._interceptor.intercept(request, self._inner.handle_async_request)

    async def aclose(self) -> None:
        await self._inner.aclose()
