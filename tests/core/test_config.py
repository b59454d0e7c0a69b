"""Configuración del cliente.

Invariantes:
    - Defaults: host de la API, Accept JSON, X-Application y User-Agent
    - Variables LIFE360_* pisan los defaults
    - debug es un valor explícito de configuración (sin flag global)
"""

import pytest
from pydantic import ValidationError

from core.config import AppSettings, get_user_config_dir, get_user_env_file


def test_defaults(settings):
    assert settings.hostname == "api-cloudfront.life360.com"
    assert settings.default_encoding == "utf-8"
    assert settings.debug is False
    assert settings.http_timeout_seconds is None


def test_default_headers(settings):
    headers = settings.default_headers()
    assert set(headers) == {"Accept", "X-Application", "User-Agent"}
    assert headers["Accept"] == "application/json"
    assert headers["X-Application"] == "life360-web-client"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LIFE360_DEBUG", "true")
    monkeypatch.setenv("LIFE360_HOSTNAME", "android.life360.com")
    cfg = AppSettings(_env_file=None)
    assert cfg.debug is True
    assert cfg.hostname == "android.life360.com"


def test_invalid_log_format_is_rejected():
    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, log_format="xml")


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, http_timeout_seconds=0)


def test_user_config_dir_honours_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr("core.config.sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert get_user_config_dir() == tmp_path / "life360-client"
    assert get_user_env_file() == tmp_path / "life360-client" / ".env"
