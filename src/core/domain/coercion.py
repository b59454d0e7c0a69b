"""Coerción best-effort de campos con tipado poco fiable.

La API a veces manda números como números y a veces como strings, booleanos
como "1"/"yes"/"true", y fechas en segundos o en milisegundos.

Reglas comunes:
- Un valor que ya tiene el tipo correcto se devuelve tal cual (idempotente).
- Un string que cumple la gramática del tipo destino se convierte.
- Cualquier otra cosa se devuelve sin tocar. Nunca lanzan: validar es
  responsabilidad del llamador.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

_DIGITS_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(r"-?[0-9]+(?:[.,][0-9]*)?")

_TRUE_LITERALS = ("1", 1, "yes", "true")
_FALSE_LITERALS = ("0", 0, "no", "false")

# Por debajo de este valor un epoch se interpreta en segundos. Cualquier
# timestamp en milisegundos posterior a 1973 lo supera.
SECONDS_THRESHOLD = 100_000_000_000


def as_int(x: Any) -> Any:
    """Convierte strings compuestos solo por dígitos ASCII a int."""

    if isinstance(x, str) and _DIGITS_RE.fullmatch(x):
        try:
            return int(x)
        except ValueError:
            # Más dígitos que el límite de conversión del intérprete.
            return x
    return x


def as_float(x: Any) -> Any:
    """Convierte strings tipo `-12` o `3.5` a float.

    Con coma decimal solo cuenta la parte entera: `"3,5"` -> `3.0`.
    """

    if isinstance(x, str) and _FLOAT_RE.fullmatch(x):
        return float(x.partition(",")[0])
    return x


def as_bool(x: Any) -> Any:
    """Lookup literal de 6 valores; no es un cast de truthiness."""

    if isinstance(x, bool):
        return x
    if x in _TRUE_LITERALS:
        return True
    if x in _FALSE_LITERALS:
        return False
    return x


def as_timestamp(x: Any) -> Any:
    """Convierte epoch (s o ms) o ISO-8601 a `datetime` UTC.

    Los enteros por debajo de `SECONDS_THRESHOLD` se tratan como segundos.
    Strings ISO sin zona horaria se asumen en UTC.
    """

    if x is None or isinstance(x, (datetime, bool)):
        return x

    try:
        value = as_int(x)
        if isinstance(value, (int, float)):
            millis = value * 1000 if value < SECONDS_THRESHOLD else value
            return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
        if isinstance(value, str):
            parsed = datetime.fromisoformat(value.strip())
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    except (ValueError, OverflowError, OSError):
        return x
    return x


def as_epoch_seconds(x: Any) -> Any:
    """Normaliza un instante a epoch en segundos (params `since`/`time`).

    Acepta `datetime` o cualquier cosa que `as_timestamp` sepa convertir.
    Lo que no se reconoce como instante se devuelve tal cual.
    """

    value = as_timestamp(x)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    return x
