"""Immutable dataclasses shared by the cache, the users client and the tools.

Includes the cache configuration and statistics (CacheConfig, CacheStats),
the response snapshot stored by the interceptor (CachedResponse) and the
reqres.in user models (User, UserPayload, UsersPage).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx


# Headers describing the wire encoding; the snapshot stores decoded bytes.
_TRANSFER_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


@dataclass(frozen=True)
class CacheConfig:
    """Construction-time cache settings.

    Field groups:
    - Expiry: default_ttl_ms
    - Size bound: max_size
    - Background sweep: cleanup_interval_seconds
    """

    default_ttl_ms: int = 10 * 60 * 1000
    max_size: int = 100
    cleanup_interval_seconds: float = 60.0


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int
    size: int
    hit_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "size": self.size,
            "hitRate": self.hit_rate,
        }


@dataclass(frozen=True)
class CachedResponse:
    """Snapshot of a completed HTTP response; rebuilt into a fresh Response on every hit."""

    status_code: int
    headers: Tuple[Tuple[str, str], ...]
    content: bytes

    @classmethod
    def from_response(cls, response: httpx.Response) -> "CachedResponse":
        # Caller must have read the body already (response.content)
        headers = tuple(
            (k, v) for k, v in response.headers.multi_items() if k.lower() not in _TRANSFER_HEADERS
        )
        return cls(status_code=response.status_code, headers=headers, content=response.content)

    def to_response(self, request: Optional[httpx.Request] = None) -> httpx.Response:
        return httpx.Response(
            self.status_code,
            headers=list(self.headers),
            content=self.content,
            request=request,
        )


@dataclass(frozen=True)
class User:
    id: int
    email: str
    first_name: str
    last_name: str
    avatar: str

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "User":
        # Normalize missing or null fields so callers always get a full record
        return cls(
            id=int(raw.get("id") or 0),
            email=str(raw.get("email") or ""),
            first_name=str(raw.get("first_name") or ""),
            last_name=str(raw.get("last_name") or ""),
            avatar=str(raw.get("avatar") or ""),
        )


@dataclass(frozen=True)
class UserPayload:
    """Body for creating a user; None fields are left out of the request."""

    name: Optional[str] = None
    job: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def to_json(self) -> Dict[str, str]:
        out = {
            "name": self.name,
            "job": self.job,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }
        return {k: v for k, v in out.items() if v is not None}


@dataclass(frozen=True)
class UsersPage:
    page: Optional[int] = None
    per_page: Optional[int] = None
    total: Optional[int] = None
    total_pages: Optional[int] = None
    data: List[User] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "UsersPage":
        items = raw.get("data") or []
        return cls(
            page=raw.get("page"),
            per_page=raw.get("per_page"),
            total=raw.get("total"),
            total_pages=raw.get("total_pages"),
            data=[User.from_dict(item) for item in items if isinstance(item, Mapping)],
        )
