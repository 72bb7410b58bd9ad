"""MCP tools exposing cache statistics and maintenance."""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from core.cache_service import CacheService


def register(mcp: FastMCP, *, cache: CacheService[Any]) -> None:
    @mcp.tool(name="cache_stats")
    async def cache_stats() -> Dict[str, Any]:
        """Return cache hits, misses, current size and hit rate (percent, 2 decimals)."""
        stats = await cache.get_stats()
        return stats.to_dict()

    @mcp.tool(name="clear_cache")
    async def clear_cache() -> bool:
        """Drop every cached response and reset the hit/miss counters."""
        return await cache.clear()

    @mcp.tool(name="cleanup_cache")
    async def cleanup_cache() -> int:
        """Remove expired entries now; returns how many were removed."""
        return await cache.cleanup()
