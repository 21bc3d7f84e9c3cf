import pytest

from core.errors import ValidationError
from tools import api_request as api_request_tool


class FakeBackend:
    def __init__(self, out):
        self._out = out
        self.calls = []

    async def request(self, endpoint, **kwargs):
        self.calls.append((endpoint, kwargs))
        return self._out


@pytest.mark.asyncio
async def test_api_request_tool_validates_missing_endpoint(dummy_mcp):
    api_request_tool.register(dummy_mcp, backend_client=FakeBackend(out=None))
    fn = dummy_mcp.tools["api_request"]

    with pytest.raises(ValidationError):
        await fn(endpoint="  ")


@pytest.mark.asyncio
async def test_api_request_tool_rejects_invalidate_on_get(dummy_mcp):
    api_request_tool.register(dummy_mcp, backend_client=FakeBackend(out=None))
    fn = dummy_mcp.tools["api_request"]

    with pytest.raises(ValidationError):
        await fn(endpoint="/viajes", invalidate=["viajes"])


@pytest.mark.asyncio
async def test_api_request_tool_delegates_to_backend(dummy_mcp):
    fake = FakeBackend(out={"id": 5})
    api_request_tool.register(dummy_mcp, backend_client=fake)
    fn = dummy_mcp.tools["api_request"]

    out = await fn(endpoint="/viajes/publish", method="POST", body={"seats": 3}, invalidate=["viajes"])

    assert out == {"id": 5}
    assert fake.calls == [
        ("/viajes/publish", {"method": "POST", "body": {"seats": 3}, "invalidate": ["viajes"]}),
    ]


@pytest.mark.asyncio
async def test_api_request_tool_end_to_end(dummy_mcp, make_backend):
    import httpx

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"path": request.url.path})

    client = make_backend(handler, token="tok")
    api_request_tool.register(dummy_mcp, backend_client=client)
    fn = dummy_mcp.tools["api_request"]

    assert await fn(endpoint="/viajes/my-trips") == {"path": "/viajes/my-trips"}
    assert client.cache.has("/viajes/my-trips")
