"""MCP tools that manage the gateway's cache and session.

Registers 'invalidate_cache' and 'logout'.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from clients.backend.client import BackendClient


def register(mcp: FastMCP, *, backend_client: BackendClient) -> None:
    @mcp.tool(name="invalidate_cache")
    async def invalidate_cache(pattern: Optional[str] = None) -> Dict[str, int]:
        """Drop cached GET responses.

        Params:
          - pattern: substring of the cache keys to drop; omit to drop all.

        Returns:
          {"removed": <number of entries dropped>}
        """
        removed = backend_client.invalidate((pattern or "").strip() or None)
        return {"removed": removed}

    @mcp.tool(name="logout")
    async def logout() -> Any:
        """Log out of the backend. The stored token is cleared even if the call fails."""
        return await backend_client.logout()
