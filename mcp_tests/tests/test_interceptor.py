import httpx
import pytest

from core.cache_service import CacheService
from core.interceptor import CachingInterceptor, CachingTransport, request_cache_key
from core.models import CacheConfig


class Continuation:
    """Records calls and returns a canned response (or raises)."""

    def __init__(self, response=None, exc=None):
        self._response = response
        self._exc = exc
        self.calls = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self._exc is not None:
            raise self._exc
        return self._response


@pytest.fixture
def cache():
    return CacheService(CacheConfig(default_ttl_ms=60_000, max_size=10))


@pytest.mark.asyncio
async def test_get_miss_calls_through_once_then_serves_from_cache(cache):
    nxt = Continuation(httpx.Response(200, json={"data": [1, 2]}, headers={"X-Test": "yes"}))
    interceptor = CachingInterceptor(cache)

    req = httpx.Request("GET", "https://api.test/users?page=1")
    first = await interceptor.intercept(req, nxt)
    second = await interceptor.intercept(httpx.Request("GET", "https://api.test/users?page=1"), nxt)

    assert len(nxt.calls) == 1
    assert first.json() == {"data": [1, 2]}
    assert second.status_code == 200
    assert second.json() == {"data": [1, 2]}
    assert second.headers["X-Test"] == "yes"
    assert second is not first

    stats = await cache.get_stats()
    assert (stats.hits, stats.misses, stats.size) == (1, 1, 1)


@pytest.mark.asyncio
async def test_each_hit_returns_a_fresh_response(cache):
    nxt = Continuation(httpx.Response(200, content=b"body"))
    interceptor = CachingInterceptor(cache)

    await interceptor.intercept(httpx.Request("GET", "https://api.test/x"), nxt)
    a = await interceptor.intercept(httpx.Request("GET", "https://api.test/x"), nxt)
    b = await interceptor.intercept(httpx.Request("GET", "https://api.test/x"), nxt)

    assert a is not b
    assert a.content == b.content == b"body"


@pytest.mark.asyncio
async def test_query_parameter_order_does_not_change_key(cache):
    nxt = Continuation(httpx.Response(200, json={"ok": True}))
    interceptor = CachingInterceptor(cache)

    await interceptor.intercept(httpx.Request("GET", "https://api.test/users?a=1&b=2"), nxt)
    await interceptor.intercept(httpx.Request("GET", "https://api.test/users?b=2&a=1"), nxt)

    assert len(nxt.calls) == 1


@pytest.mark.asyncio
async def test_different_query_is_a_different_entry(cache):
    nxt = Continuation(httpx.Response(200, json={"ok": True}))
    interceptor = CachingInterceptor(cache)

    await interceptor.intercept(httpx.Request("GET", "https://api.test/users?page=1"), nxt)
    await interceptor.intercept(httpx.Request("GET", "https://api.test/users?page=2"), nxt)

    assert len(nxt.calls) == 2


@pytest.mark.asyncio
async def test_post_always_passes_through_and_never_touches_cache(cache):
    nxt = Continuation(httpx.Response(201, json={"id": "7"}))
    interceptor = CachingInterceptor(cache)

    for _ in range(3):
        resp = await interceptor.intercept(
            httpx.Request("POST", "https://api.test/users", json={"name": "a"}), nxt
        )
        assert resp.status_code == 201

    assert len(nxt.calls) == 3
    stats = await cache.get_stats()
    assert (stats.hits, stats.misses, stats.size) == (0, 0, 0)


@pytest.mark.asyncio
async def test_post_does_not_read_cached_get(cache):
    get_next = Continuation(httpx.Response(200, json={"cached": True}))
    post_next = Continuation(httpx.Response(201, json={"cached": False}))
    interceptor = CachingInterceptor(cache)

    await interceptor.intercept(httpx.Request("GET", "https://api.test/users"), get_next)
    resp = await interceptor.intercept(httpx.Request("POST", "https://api.test/users"), post_next)

    assert resp.json() == {"cached": False}
    assert len(post_next.calls) == 1


@pytest.mark.asyncio
async def test_errors_propagate_and_are_not_cached(cache):
    boom = httpx.ConnectError("down")
    failing = Continuation(exc=boom)
    interceptor = CachingInterceptor(cache)

    with pytest.raises(httpx.ConnectError) as ei:
        await interceptor.intercept(httpx.Request("GET", "https://api.test/users"), failing)
    assert ei.value is boom

    ok = Continuation(httpx.Response(200, json={"ok": True}))
    await interceptor.intercept(httpx.Request("GET", "https://api.test/users"), ok)
    assert len(ok.calls) == 1


@pytest.mark.asyncio
async def test_non_success_response_is_returned_but_not_cached(cache):
    nxt = Continuation(httpx.Response(503, text="busy"))
    interceptor = CachingInterceptor(cache)

    r1 = await interceptor.intercept(httpx.Request("GET", "https://api.test/users"), nxt)
    r2 = await interceptor.intercept(httpx.Request("GET", "https://api.test/users"), nxt)

    assert r1.status_code == 503
    assert r2.status_code == 503
    assert len(nxt.calls) == 2
    assert (await cache.get_stats()).size == 0


@pytest.mark.asyncio
async def test_expired_entry_calls_through_again(clock):
    cache = CacheService(CacheConfig(default_ttl_ms=1000, max_size=10))
    nxt = Continuation(httpx.Response(200, json={"ok": True}))
    interceptor = CachingInterceptor(cache)

    await interceptor.intercept(httpx.Request("GET", "https://api.test/users"), nxt)
    clock["now"] = 2000.0
    await interceptor.intercept(httpx.Request("GET", "https://api.test/users"), nxt)

    assert len(nxt.calls) == 2


def test_request_cache_key_uses_generate_key(cache):
    req = httpx.Request("GET", "https://api.test/users?b=2&a=1&a=3")
    assert request_cache_key(cache, req) == 'https://api.test/users?a=["1","3"]&b="2"'


@pytest.mark.asyncio
async def test_caching_transport_with_async_client(cache):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"n": len(calls)})

    interceptor = CachingInterceptor(cache)
    transport = CachingTransport(interceptor, httpx.MockTransport(handler))

    async with httpx.AsyncClient(base_url="https://api.test", transport=transport) as client:
        r1 = await client.get("/users", params={"page": 2})
        r2 = await client.get("/users", params={"page": 2})
        r3 = await client.post("/users", json={"name": "x"})

    assert r1.json() == {"n": 1}
    assert r2.json() == {"n": 1}
    assert r3.json() == {"n": 2}
    assert len(calls) == 2
