"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeout y headers por defecto para todas las requests.
- Facilita testeo: el motor acepta un `httpx.AsyncClient` inyectado
  (p.ej. con `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults de la configuración.

    Sin `http_timeout_seconds` no hay timeout: si hace falta, lo impone el llamador.
    """

    settings = settings or AppSettings()
    headers = settings.default_headers()
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
    )
