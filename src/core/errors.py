"""Jerarquía de errores del cliente.

Invariantes:
- Todo error lleva un `code` estable (str) además del mensaje humano.
- Los errores se reportan al llamador inmediato: el Core no reintenta ni silencia.
- Las funciones de coerción nunca lanzan; no tienen error asociado.

Por qué una sola base:
- El código de integración puede capturar `Life360Error` sin conocer cada
  variante, y los logs usan `code` como campo estructurado.
"""

from __future__ import annotations

from typing import Any


class Life360Error(Exception):
    """Base de todos los errores del cliente."""

    code = "LIFE360_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Representación plana para diagnóstico/logging."""

        return {"code": self.code, "message": self.message}


class TransportError(Life360Error):
    """Status HTTP distinto de 200 o fallo de red.

    `status_code` es None cuando la request ni siquiera obtuvo respuesta.
    """

    code = "TRANSPORT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        data["reason"] = self.reason
        return data


class ApiError(TransportError):
    """La API respondió un cuerpo estructurado con `errorMessage`.

    Hereda de TransportError: una respuesta no-200 siempre se puede capturar
    como fallo de transporte, lleve o no mensaje de la API.
    """

    code = "API_ERROR"

    def __init__(
        self,
        error_message: Any,
        *,
        body: Any = None,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(
            f"API responded with {error_message}",
            status_code=status_code,
            reason=reason,
        )
        self.error_message = error_message
        self.body = body


class DecodingError(Life360Error):
    """Respuesta declarada como JSON que no se pudo decodificar."""

    code = "DECODING_ERROR"

    def __init__(
        self,
        message: str,
        *,
        content_type: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.content_type = content_type
        self.cause = cause


class EncodingError(Life360Error):
    """La request no se pudo armar: body inválido para su content-type u
    opciones con forma incorrecta (p.ej. `type` o `headers` de otro tipo).
    """

    code = "ENCODING_ERROR"

    def __init__(
        self,
        message: str,
        *,
        body_type: str | None = None,
        content_type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.body_type = body_type
        self.content_type = content_type

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["body_type"] = self.body_type
        data["content_type"] = self.content_type
        return data


class AuthorizationShapeError(Life360Error):
    """La opción auth/authorization no es string ni credencial estructurada."""

    code = "AUTHORIZATION_SHAPE_ERROR"


class CoordinateParseError(Life360Error, ValueError):
    """No se pudo resolver latitud/longitud a partir del valor recibido."""

    code = "COORDINATE_PARSE_ERROR"
