"""MCP tool that sends a request to the Cupo backend through the gateway.

Registers 'api_request', which validates inputs and delegates to the
shared BackendClient so agents get the same caching, coalescing and
session handling as every other consumer.
"""

from __future__ import annotations

from typing import Any, List, Optional

from mcp.server.fastmcp import FastMCP

from clients.backend.client import BackendClient
from core.errors import ValidationError


def register(mcp: FastMCP, *, backend_client: BackendClient) -> None:
    @mcp.tool(name="api_request")
    async def api_request(
        endpoint: str,
        method: str = "GET",
        body: Optional[Any] = None,
        invalidate: Optional[List[str]] = None,
    ) -> Any:
        """Call a backend endpoint and return its parsed JSON response.

        Params:
          - endpoint: backend-relative path, e.g. "/viajes/my-trips" (required).
          - method: GET, POST, PUT, PATCH or DELETE (default: "GET").
          - body: JSON body for mutations (optional).
          - invalidate: cache patterns to drop after a successful mutation,
            e.g. ["viajes"] after publishing a trip (optional).

        Returns:
          The backend's JSON payload. GET responses may come from the cache.

        Raises:
          ValidationError for invalid inputs; ConnectivityError,
          AuthenticationError or BackendError when the call fails.
        """
        if not endpoint or not endpoint.strip():
            raise ValidationError("Missing endpoint")

        if invalidate and (method or "GET").strip().upper() == "GET":
            raise ValidationError("invalidate only applies to mutations")

        return await backend_client.request(
            endpoint,
            method=method,
            body=body,
            invalidate=invalidate,
        )
