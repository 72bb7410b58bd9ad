"""Users API client: list, read and create users with caching and retries.

This module provides an async client for the reqres.in users API. Every
request goes through a CachingTransport, so repeated GETs are answered
from the shared CacheService without touching the network. Failed calls
are retried a fixed number of times, then the public methods log the
error and return a safe fallback (empty list or None).
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

import httpx

from core.cache_service import CacheService
from core.errors import ExternalServiceError, NotFoundError, ValidationError
from core.interceptor import CachingInterceptor, CachingTransport
from core.models import CachedResponse, User, UserPayload, UsersPage
from core.rate_limiter import RateLimiter


logger = logging.getLogger(__name__)


class UsersClient:
    """Async client for the users API.

    Purpose:
      - get_users(page=None) -> List[User]          ([] on failure)
      - get_user_by_id(user_id) -> Optional[User]   (None on failure or 404)
      - create_user(payload) -> Optional[User]      (None on failure)

    Key behavior:
      - GET responses are cached by the CachingInterceptor (default TTL).
      - Transport errors and non-2xx responses are retried with a fixed delay;
        Retry-After is honored via RateLimiter.
      - 404 is never retried.
    """

    JSON_CONTENT_TYPE = "application/json"

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        cache: CacheService[CachedResponse],
        timeout: float = 20.0,
        verify: bool = True,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._api_key = api_key
        self._timeout = float(timeout)
        self._verify = bool(verify)
        self._retry_attempts = max(0, int(retry_attempts))
        self._retry_delay = max(0.0, float(retry_delay))
        self._rate_limiter = rate_limiter or RateLimiter()
        self._transport = transport

        self._interceptor = CachingInterceptor(cache)

    async def get_users(
        self,
        page: Optional[int] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_attempts: Optional[int] = None,
    ) -> List[User]:
        """List users (optionally a single page); always returns a list."""
        params = {"page": int(page)} if page is not None else None
        try:
            resp = await self._send(
                "GET",
                "/users",
                params=params,
                headers=headers,
                retry_attempts=retry_attempts,
            )
            return UsersPage.from_dict(self._json(resp, context="get_users")).data
        except (ExternalServiceError, NotFoundError) as e:
            return self._fallback("get_users", e, [])

    async def get_user_by_id(
        self,
        user_id: int,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_attempts: Optional[int] = None,
    ) -> Optional[User]:
        if int(user_id) <= 0:
            raise ValidationError("user_id must be positive")

        try:
            resp = await self._send(
                "GET",
                f"/users/{int(user_id)}",
                headers=headers,
                retry_attempts=retry_attempts,
            )
            body = self._json(resp, context="get_user_by_id")
        except NotFoundError:
            return None
        except ExternalServiceError as e:
            return self._fallback("get_user_by_id", e, None)

        data = body.get("data")
        if not isinstance(data, Mapping):
            return None
        return User.from_dict(data)

    async def create_user(
        self,
        payload: UserPayload,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_attempts: Optional[int] = None,
    ) -> Optional[User]:
        body = payload.to_json()
        if not body:
            raise ValidationError("User payload is empty")

        try:
            resp = await self._send(
                "POST",
                "/users",
                json=body,
                headers=headers,
                retry_attempts=retry_attempts,
            )
            created = self._json(resp, context="create_user")
        except (ExternalServiceError, NotFoundError) as e:
            return self._fallback("create_user", e, None)

        # The API echoes the submitted fields and adds an id
        return User.from_dict({**body, **created, "id": _as_int(created.get("id"))})

    # --- HTTP helpers ---

    def _build_headers(self, custom_headers: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        headers = {
            "Content-Type": self.JSON_CONTENT_TYPE,
            "x-api-key": self._api_key,
        }
        headers.update(dict(custom_headers or {}))
        return headers

    def _create_client(self, custom_headers: Optional[Mapping[str, str]] = None) -> httpx.AsyncClient:
        # Fresh inner transport per client; AsyncClient closes it on exit
        inner = self._transport or httpx.AsyncHTTPTransport(verify=self._verify)
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._build_headers(custom_headers),
            timeout=self._timeout,
            transport=CachingTransport(self._interceptor, inner),
        )

    def _external(self, context: str, err: Any) -> ExternalServiceError:
        return ExternalServiceError(f"Users API request failed ({context}): {err}")

    def _json(self, resp: httpx.Response, *, context: str) -> dict:
        try:
            body = resp.json()
        except ValueError as e:
            raise self._external(context, "invalid JSON body") from e
        if not isinstance(body, dict):
            raise self._external(context, "unexpected JSON shape")
        return body

    def _fallback(self, operation: str, err: BaseException, value: Any) -> Any:
        logger.error("UsersClient.%s failed: %s", operation, err)
        return value

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        retry_attempts: Optional[int] = None,
    ) -> httpx.Response:
        """Send a request with bounded retries; returns the first 2xx response."""
        retries = self._retry_attempts if retry_attempts is None else max(0, int(retry_attempts))
        attempts = retries + 1
        context = f"{method} {url}"

        for attempt in range(attempts):
            last = attempt == attempts - 1
            resp: Optional[httpx.Response] = None

            try:
                async with self._create_client(headers) as client:
                    resp = await client.request(method, url, params=params, json=json)
            except httpx.HTTPError as e:
                if last:
                    raise self._external(context, e) from e
                logger.warning("%s failed (attempt %d/%d): %s", context, attempt + 1, attempts, e)
                await self._rate_limiter.sleep_before_retry(None, default=self._retry_delay)
                continue

            if resp.status_code == 404:
                raise NotFoundError(f"Resource not found: {url}")
            if resp.is_success:
                return resp
            if last:
                raise self._external(context, f"HTTP {resp.status_code}")

            logger.warning(
                "%s returned HTTP %d (attempt %d/%d)", context, resp.status_code, attempt + 1, attempts
            )
            await self._rate_limiter.sleep_before_retry(resp, default=self._retry_delay)

        raise RuntimeError("Unreachable: _send did not return a response")


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
