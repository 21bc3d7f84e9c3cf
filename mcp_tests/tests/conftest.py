import httpx
import pytest

from clients.backend.client import BackendClient
from core.cache import TTLCache
from core.token_store import MemoryTokenStore


BASE_URL = "https://backend.example"


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool/resource registration."""

    def __init__(self) -> None:
        self.tools = {}
        self.resources = {}
        self.prompts = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator

    def resource(self, uri: str, **_kwargs):
        def _decorator(fn):
            self.resources[uri] = fn
            return fn
        return _decorator

    def prompt(self, *, name: str, **_kwargs):
        def _decorator(fn):
            self.prompts[name] = fn
            return fn
        return _decorator


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def patch_backend_transport(monkeypatch, client: BackendClient, handler):
    """Patch BackendClient._create_client() to use httpx.MockTransport."""
    transport = httpx.MockTransport(handler)

    def _create_client():
        return httpx.AsyncClient(
            base_url=BASE_URL,
            headers={"Accept": client.JSON_ACCEPT},
            timeout=client._timeout,
            verify=client._verify,
            transport=transport,
        )

    monkeypatch.setattr(client, "_create_client", _create_client)


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_backend(monkeypatch):
    """Build a BackendClient wired to a mock handler."""
    created = []

    def _make(handler, *, token=None, timeout=5.0, cache=None, **kwargs):
        client = BackendClient(
            base_url=BASE_URL,
            timeout=timeout,
            verify=False,
            token_store=MemoryTokenStore(token),
            cache=cache if cache is not None else TTLCache(ttl_seconds=120.0),
            **kwargs,
        )
        patch_backend_transport(monkeypatch, client, handler)
        created.append(client)
        return client

    yield _make

    for client in created:
        client.cache.destroy()
