"""MCP tools that present users fetched from the remote API.

Registers 'list_users', 'get_user' and 'create_user'. Reads go through the
injected UsersSource, whose GET requests are served from the shared cache
when possible.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from core.interfaces import UsersSource
from core.models import UserPayload


def register(mcp: FastMCP, *, users_client: UsersSource) -> None:
    @mcp.tool(name="list_users")
    async def list_users(page: Optional[int] = None) -> List[Dict[str, Any]]:
        """List users from the users API.

        Parameters:
          - page: optional 1-based page number; omit for the API default page.

        Returns:
          A list of user dicts (id, email, first_name, last_name, avatar).
          The list is empty when the API is unreachable after retries.
        """
        if page is not None and page <= 0:
            raise ValidationError("page must be positive")

        users = await users_client.get_users(page)
        return [asdict(u) for u in users]

    @mcp.tool(name="get_user")
    async def get_user(user_id: int) -> Optional[Dict[str, Any]]:
        """Fetch one user by id; returns null when missing or unavailable."""
        if user_id <= 0:
            raise ValidationError("user_id must be positive")

        user = await users_client.get_user_by_id(user_id)
        return asdict(user) if user is not None else None

    @mcp.tool(name="create_user")
    async def create_user(
        name: Optional[str] = None,
        job: Optional[str] = None,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Create a user. At least one field is required.

        POST requests bypass the cache entirely.
        """
        payload = UserPayload(
            name=name,
            job=job,
            email=email,
            first_name=first_name,
            last_name=last_name,
        )
        if not payload.to_json():
            raise ValidationError("At least one user field is required")

        user = await users_client.create_user(payload)
        return asdict(user) if user is not None else None
