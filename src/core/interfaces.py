"""Core protocol and interface definitions.

Defines the continuation signature wrapped by the caching interceptor and
the UsersSource protocol the tools depend on, so any client (real or fake)
can be injected.
"""

from __future__ import annotations

from typing import Awaitable, Callable, List, Mapping, Optional, Protocol

import httpx

from core.models import User, UserPayload


CallNext = Callable[[httpx.Request], Awaitable[httpx.Response]]


class UsersSource(Protocol):
    """Contract for anything that can fetch and create users."""
    async def get_users(
        self,
        page: Optional[int] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_attempts: Optional[int] = None,
    ) -> List[User]:
        ...

    async def get_user_by_id(
        self,
        user_id: int,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_attempts: Optional[int] = None,
    ) -> Optional[User]:
        ...

    async def create_user(
        self,
        payload: UserPayload,
        *,
        headers: Optional[Mapping[str, str]] = None,
        retry_attempts: Optional[int] = None,
    ) -> Optional[User]:
        ...
