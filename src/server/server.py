"""Server bootstrap for the Cupo gateway MCP service.

Creates the FastMCP instance, wires one shared BackendClient into the
tools and resources, registers prompts, and starts the MCP server
(stdio transport).
"""

import logging
import sys
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from clients.backend.client import BackendClient
from config import (
    API_BASE_URL,
    API_CACHE_TTL,
    CACHE_MAXSIZE,
    CACHE_SWEEP_INTERVAL,
    FEDERATED_ISSUER,
    HTTP_VERIFY,
    LOG_LEVEL,
    REQUEST_TIMEOUT,
    TOKEN_EXCHANGE_FALLBACK_PATH,
    TOKEN_EXCHANGE_PATH,
    TOKEN_STORE_PATH,
)
from core.cache import TTLCache
from core.token_store import FileTokenStore

from tools.api_request import register as register_api_request
from tools.session import register as register_session

from resources.gateway_status import register_resources
from prompts.backend_prompt import register_prompts


def build_backend_client() -> BackendClient:
    cache = TTLCache(
        ttl_seconds=API_CACHE_TTL,
        maxsize=CACHE_MAXSIZE,
        sweep_interval=CACHE_SWEEP_INTERVAL,
    )
    return BackendClient(
        base_url=API_BASE_URL,
        timeout=REQUEST_TIMEOUT,
        verify=HTTP_VERIFY,
        token_store=FileTokenStore(path=TOKEN_STORE_PATH),
        cache=cache,
        cache_ttl_seconds=API_CACHE_TTL,
        federated_issuer=FEDERATED_ISSUER,
        exchange_paths=(TOKEN_EXCHANGE_PATH, TOKEN_EXCHANGE_FALLBACK_PATH),
    )


backend_client = build_backend_client()


@asynccontextmanager
async def lifespan(_server):
    backend_client.start()
    try:
        yield
    finally:
        await backend_client.aclose()


mcp = FastMCP("cupo-gateway", lifespan=lifespan)


def register_tools() -> None:
    register_api_request(mcp, backend_client=backend_client)
    register_session(mcp, backend_client=backend_client)


def register_all() -> None:
    register_tools()
    register_resources(mcp, backend_client=backend_client)
    register_prompts(mcp)


register_all()


def main() -> None:
    # stdout carries the stdio transport; logs go to stderr
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
