"""Conftest raíz: configuración compartida de tests.

- Los settings nunca leen `.env` del proyecto ni del usuario.
- Ninguna request sale a la red: el motor recibe un cliente con MockTransport.
"""

from __future__ import annotations

import httpx
import pytest

from adapters.request_engine import RequestEngine
from core.config import AppSettings


@pytest.fixture
def settings(monkeypatch) -> AppSettings:
    for name in ("LIFE360_DEBUG", "LIFE360_HOSTNAME", "LIFE360_DEFAULT_ENCODING"):
        monkeypatch.delenv(name, raising=False)
    return AppSettings(_env_file=None)


@pytest.fixture
def make_engine(settings):
    """Fábrica: motor cuyo cliente responde con `handler(request)`."""

    def _make(handler, **overrides) -> RequestEngine:
        cfg = settings.model_copy(update=overrides) if overrides else settings
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return RequestEngine(cfg, client=client)

    return _make
