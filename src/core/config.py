"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar los adaptadores.
- El motor HTTP y el modelo de recursos leen config de forma consistente.
- Reemplaza el flag global de debug por un valor explícito que se inyecta
  al construir el motor.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "life360-client"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "life360-client"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "life360-client"
    return Path.home() / ".config" / "life360-client"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central del cliente.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para el motor HTTP y quien lo embeba.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIFE360_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    hostname: str = Field(
        default="api-cloudfront.life360.com",
        min_length=1,
        description="Host por defecto de la API.",
    )
    default_encoding: str = Field(
        default="utf-8",
        min_length=1,
        description="Charset por defecto si la respuesta no declara uno.",
    )

    accept: str = Field(default="application/json", min_length=1)
    x_application: str = Field(default="life360-web-client", min_length=1)
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/78.0.3904.108 Safari/537.36"
        ),
        min_length=1,
        description="User-Agent enviado en cada request.",
    )

    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por request (segundos). None: el motor no impone timeout.",
    )
    debug: bool = Field(
        default=False,
        description="Si está activo, un `errorMessage` en la respuesta no se eleva como ApiError.",
    )

    log_level: str = Field(default="INFO", min_length=1)
    log_format: str = Field(
        default="json",
        pattern="^(json|text)$",
        description="Formato de logs: json (producción) o text (desarrollo).",
    )

    def default_headers(self) -> dict[str, str]:
        """Headers que se envían en todas las requests salvo override explícito."""

        return {
            "Accept": self.accept,
            "X-Application": self.x_application,
            "User-Agent": self.user_agent,
        }
