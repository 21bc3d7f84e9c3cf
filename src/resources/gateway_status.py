from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP

from clients.backend.client import BackendClient


def register_resources(mcp: FastMCP, *, backend_client: BackendClient) -> None:
    """
    Register read-only gateway diagnostics for the MCP server.
    """

    @mcp.resource(
        "cupo://cache/stats",
        mime_type="application/json",
        description="Size and keys of the gateway's response cache"
    )
    def cache_stats() -> str:
        return json.dumps(backend_client.cache.stats())

    @mcp.resource(
        "cupo://session/status",
        mime_type="application/json",
        description="Whether an auth token is stored and how many requests are in flight"
    )
    def session_status() -> str:
        return json.dumps(
            {
                "authenticated": backend_client.get_token() is not None,
                "in_flight": len(backend_client.in_flight),
            }
        )
