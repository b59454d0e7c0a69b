"""Logging estructurado.

Invariantes:
- Todo log incluye timestamp, nivel, logger y mensaje.
- Los campos extra de una request (method, url, status_code, elapsed_ms,
  error_code) aparecen solo si están presentes.
- Nunca se loguean credenciales: el motor no pasa headers como extra.

Nota: `setup_logging` lo llama una vez la aplicación que embebe el cliente;
la librería solo crea loggers con `logging.getLogger(__name__)`.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

_EXTRA_KEYS = ("method", "url", "status_code", "elapsed_ms", "error_code")


class JSONFormatter(logging.Formatter):
    """Formatea cada registro como un objeto JSON en una línea."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configura el root logger y devuelve el handler instalado."""

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
