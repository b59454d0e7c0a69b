"""Contrato de la credencial de sesión.

Por qué Protocol:
- El motor HTTP solo necesita leer scheme + token; no le importa quién hizo
  el login ni dónde se guarda la sesión.
- `core.domain.models.Session` lo cumple, pero cualquier objeto con esos dos
  atributos sirve (p.ej. un token cargado de disco por la aplicación).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SessionCredential(Protocol):
    """Credencial de fallback cuando la request no trae `auth` explícito.

    Reglas:
    - `token_type` vacío o None se interpreta como `Bearer`.
    - `access_token` vacío o None significa "sin sesión".
    """

    token_type: Any
    access_token: Any
