"""Server bootstrap for the users cache MCP service.

Builds the shared cache and users client, creates the FastMCP instance
with a lifespan that runs the cache sweep, registers the tools and starts
the MCP server (stdio transport).
"""

from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from clients.users_client import UsersClient
from config import (
    CACHE_CLEANUP_INTERVAL,
    CACHE_DEFAULT_TTL_MS,
    CACHE_MAX_SIZE,
    HTTP_VERIFY,
    LOG_LEVEL,
    USERS_API_BASE_URL,
    USERS_API_KEY,
    USERS_API_TIMEOUT,
    USERS_RETRY_ATTEMPTS,
    USERS_RETRY_DELAY,
)
from core.cache_service import CacheService
from core.logging import configure_logging
from core.models import CacheConfig

from tools.cache_admin import register as register_cache_admin
from tools.users import register as register_users

cache = CacheService(
    CacheConfig(
        default_ttl_ms=CACHE_DEFAULT_TTL_MS,
        max_size=CACHE_MAX_SIZE,
        cleanup_interval_seconds=CACHE_CLEANUP_INTERVAL,
    )
)


@asynccontextmanager
async def lifespan(_server):
    cache.start_cleanup()
    try:
        yield
    finally:
        await cache.close()


mcp = FastMCP("users-cache-mcp", lifespan=lifespan)


def register_tools() -> None:
    users_client = UsersClient(
        base_url=USERS_API_BASE_URL,
        api_key=USERS_API_KEY,
        cache=cache,
        timeout=USERS_API_TIMEOUT,
        verify=HTTP_VERIFY,
        retry_attempts=USERS_RETRY_ATTEMPTS,
        retry_delay=USERS_RETRY_DELAY,
    )

    register_users(mcp, users_client=users_client)
    register_cache_admin(mcp, cache=cache)


register_tools()


def main() -> None:
    configure_logging(LOG_LEVEL)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
