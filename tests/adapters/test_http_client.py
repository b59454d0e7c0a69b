"""Construcción del cliente httpx.

Invariantes:
    - Headers por defecto de la configuración, con extras opcionales
    - Sin http_timeout_seconds no hay timeout
    - Sin cliente inyectado, cada execute usa un cliente propio y lo cierra
"""

import httpx
import pytest

import adapters.request_engine as request_engine
from adapters.http_client import build_async_client
from adapters.request_engine import RequestEngine


@pytest.mark.asyncio
async def test_client_defaults(settings):
    async with build_async_client(settings, extra_headers={"X-Device-Id": "abc"}) as client:
        assert client.headers["X-Application"] == "life360-web-client"
        assert client.headers["X-Device-Id"] == "abc"
        assert client.timeout.connect is None
        assert client.timeout.read is None


@pytest.mark.asyncio
async def test_configured_timeout(settings):
    cfg = settings.model_copy(update={"http_timeout_seconds": 2.5})
    async with build_async_client(cfg) as client:
        assert client.timeout.read == 2.5


@pytest.mark.asyncio
async def test_engine_builds_and_closes_a_client_per_call(settings, monkeypatch):
    built = []

    def fake_builder(cfg):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": True})),
        )
        built.append(client)
        return client

    monkeypatch.setattr(request_engine, "build_async_client", fake_builder)
    engine = RequestEngine(settings)

    assert await engine.execute("/v3/users/me") == {"ok": True}
    assert await engine.execute("/v3/users/me") == {"ok": True}

    assert len(built) == 2
    assert all(client.is_closed for client in built)


@pytest.mark.asyncio
async def test_injected_client_is_not_closed(make_engine):
    engine = make_engine(lambda request: httpx.Response(200, json=[]))
    await engine.execute("/v3/circles")
    assert engine._client.is_closed is False
