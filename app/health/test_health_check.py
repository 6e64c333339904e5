import httpx
import pytest

from app.health.health_check import is_geocoding_available, is_usgs_available
from app.models.health import ServiceStatus


def patch_client(monkeypatch, handler):
    monkeypatch.setattr(
        "app.health.health_check.http_client",
        lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.mark.asyncio
async def test_usgs_available(monkeypatch):
    def handler(request):
        assert request.url.path == "/fdsnws/event/1/version"
        return httpx.Response(200, text="1.14.1")

    patch_client(monkeypatch, handler)
    assert await is_usgs_available() == ServiceStatus.available


@pytest.mark.asyncio
async def test_geocoding_bad_status(monkeypatch):
    patch_client(monkeypatch, lambda request: httpx.Response(503))
    assert await is_geocoding_available() == ServiceStatus.not_available


@pytest.mark.asyncio
async def test_geocoding_unreachable(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    patch_client(monkeypatch, handler)
    assert await is_geocoding_available() == ServiceStatus.not_available
