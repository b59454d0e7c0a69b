"""Motor de requests de la API.

Flujo:
    `execute(path, options)` -> `prepare` (normaliza la bolsa de opciones en un
    `httpx.Request`) -> envío -> `decode_response` (sniff de content-type,
    JSON vs binario, mapeo de errores).

Reglas:
- Headers: defaults de la configuración + headers explícitos (merge case-sensitive).
- Body: `json`, `form-urlencoded` (default) o un MIME arbitrario (solo str/bytes).
- Auth: string, credencial estructurada o, en su defecto, la sesión configurada.
- Sin reintentos ni caché: cada llamada es independiente y terminal.
"""

from __future__ import annotations

import base64
import json
import logging
import time
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.errors import (
    ApiError,
    AuthorizationShapeError,
    DecodingError,
    EncodingError,
    Life360Error,
    TransportError,
)
from core.interfaces.credentials import SessionCredential

logger = logging.getLogger(__name__)

JSON_TYPE = "json"
FORM_TYPE = "form-urlencoded"

_AUTH_SCHEMES = {"basic": "Basic", "bearer": "Bearer", "digest": "Digest"}


class Credential(BaseModel):
    """Credencial estructurada: scheme + valor en base64 (o crudo a codificar)."""

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    base64: str | None = None
    value: str | bytes | None = None

    def header_value(self) -> str:
        encoded = self.base64
        if self.value is not None:
            raw = self.value.encode("utf-8") if isinstance(self.value, str) else self.value
            encoded = base64.b64encode(raw).decode("ascii")
        if not encoded:
            raise AuthorizationShapeError("Credential requires a base64 or value entry")

        scheme = "Basic"
        if self.type:
            scheme = _AUTH_SCHEMES.get(self.type.lower(), self.type)
        return f"{scheme} {encoded}"


class RequestOptions(BaseModel):
    """Bolsa de opciones de una request. Keys desconocidas se ignoran."""

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)

    path: str | None = None
    hostname: str | None = None
    method: str | None = None
    headers: dict[str, Any] | None = None
    params: Any = None
    body: Any = None
    type: str | None = None
    auth: Any = None
    authorization: Any = None


class RawBody(bytes):
    """Cuerpo no-JSON: bytes + el content-type y charset detectados."""

    def __new__(
        cls,
        data: bytes,
        *,
        content_type: str | None = None,
        charset: str = "utf-8",
    ) -> RawBody:
        obj = super().__new__(cls, data)
        obj.content_type = content_type
        obj.charset = charset
        return obj

    def text(self, errors: str = "strict") -> str:
        return self.decode(self.charset, errors)


def _form_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return [_form_value(v) for v in value]
    return value


def form_encode(data: Mapping[str, Any]) -> str:
    """urlencode estilo querystring: None se descarta, secuencias se repiten."""

    pairs = {k: _form_value(v) for k, v in data.items() if v is not None}
    return urlencode(pairs, doseq=True)


def _to_bytes(payload: str | bytes | bytearray) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)


def encode_body(body: Any, body_type: str) -> tuple[bytes, str]:
    """Serializa el body según su tipo. Devuelve (payload, content-type)."""

    if body_type == JSON_TYPE:
        try:
            text = json.dumps(body, separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise EncodingError(
                f"Body of type {type(body).__name__} is not JSON serializable",
                body_type=type(body).__name__,
                content_type="application/json",
            ) from exc
        return text.encode("utf-8"), "application/json"

    if body_type == FORM_TYPE:
        content_type = "application/x-www-form-urlencoded"
        if isinstance(body, Mapping):
            return _to_bytes(form_encode(body)), content_type
        if isinstance(body, (str, bytes, bytearray)):
            return _to_bytes(body), content_type
        raise EncodingError(
            "A url encoded body must be a mapping or a string",
            body_type=type(body).__name__,
            content_type=content_type,
        )

    content_type = body_type if "/" in body_type else f"application/{body_type}"
    if not isinstance(body, (str, bytes, bytearray)):
        raise EncodingError(
            f"Body for {content_type} must already be a string or bytes",
            body_type=type(body).__name__,
            content_type=content_type,
        )
    return _to_bytes(body), content_type


def sniff_content_type(header: str | None, default_charset: str) -> tuple[str | None, str]:
    """Separa `mime; charset=...`. Devuelve (mime en minúsculas, charset)."""

    if not header:
        return None, default_charset
    parts = header.split(";")
    mime = parts[0].strip().lower() or None
    charset = default_charset
    for part in parts[1:]:
        name, _, value = part.partition("=")
        if name.strip().lower() == "charset" and value.strip():
            charset = value.strip().strip('"').strip("'")
    return mime, charset


class RequestEngine:
    """Construye, envía e interpreta requests contra la API.

    Por qué una clase:
    - Agrupa los defaults configurados (host, headers, debug) y la sesión
      actual; no guarda otro estado entre llamadas.
    - Varias llamadas a `execute` pueden estar en vuelo a la vez: cada una
      arma su propio request y lee su propio buffer de respuesta.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        session: SessionCredential | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client
        self.session = session

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def debug(self) -> bool:
        return self._settings.debug

    def use_session(self, credential: SessionCredential) -> None:
        self.session = credential

    def clear_session(self) -> None:
        self.session = None

    def prepare(
        self,
        path: str | None = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> httpx.Request:
        """Normaliza path + opciones en un `httpx.Request` listo para enviar."""

        opts = self._normalize_options(options)

        path = path if path is not None else opts.path
        if not path:
            path = "/"
        if not path.startswith("/"):
            path = "/" + path

        query = self._encode_params(opts.params)
        if query:
            path += ("&" if "?" in path else "?") + query

        headers: dict[str, str] = dict(self._settings.default_headers())
        if opts.headers:
            for key, value in opts.headers.items():
                headers[key] = str(value)

        if opts.method:
            method = opts.method.upper()
        else:
            method = "POST" if opts.body is not None else "GET"

        content: bytes | None = None
        if opts.body is not None:
            content, content_type = encode_body(opts.body, opts.type or FORM_TYPE)
            headers["Content-Type"] = content_type
            headers["Content-Length"] = str(len(content))

        authorization = self._resolve_authorization(opts)
        if authorization is not None:
            headers["Authorization"] = authorization

        hostname = opts.hostname or self._settings.hostname
        return httpx.Request(method, f"https://{hostname}{path}", headers=headers, content=content)

    async def execute(
        self,
        path: str | None = None,
        options: RequestOptions | Mapping[str, Any] | None = None,
    ) -> Any:
        """Ejecuta la request y devuelve el JSON decodificado, `RawBody` o None."""

        request = self.prepare(path, options)
        log_extra = {"method": request.method, "url": f"{request.url.host}{request.url.path}"}

        started = time.perf_counter()
        try:
            if self._client is not None:
                response = await self._client.send(request)
            else:
                async with build_async_client(self._settings) as client:
                    response = await client.send(request)
        except httpx.TransportError as exc:
            logger.warning(
                "request failed before a response was received",
                extra={**log_extra, "error_code": TransportError.code},
            )
            raise TransportError(f"Request failed: {exc}", cause=exc) from exc

        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
        logger.debug(
            "request completed",
            extra={**log_extra, "status_code": response.status_code, "elapsed_ms": elapsed_ms},
        )

        try:
            return self.decode_response(response)
        except Life360Error as exc:
            logger.warning(
                "request returned an error: %s",
                exc.message,
                extra={**log_extra, "status_code": response.status_code, "error_code": exc.code},
            )
            raise

    def decode_response(self, response: httpx.Response) -> Any:
        """Decodifica el cuerpo y mapea la respuesta a valor o error."""

        status = response.status_code
        reason = response.reason_phrase
        try:
            body = self._decode_body(response)
        except DecodingError as exc:
            if status != 200:
                raise TransportError(
                    f"Server responded with a {status}, {reason}",
                    status_code=status,
                    reason=reason,
                    cause=exc,
                ) from exc
            raise

        if not self.debug and isinstance(body, dict) and "errorMessage" in body:
            raise ApiError(body["errorMessage"], body=body, status_code=status, reason=reason)
        if status != 200:
            raise TransportError(
                f"Server responded with a {status}, {reason}",
                status_code=status,
                reason=reason,
            )
        return body

    def _decode_body(self, response: httpx.Response) -> Any:
        mime, charset = sniff_content_type(
            response.headers.get("content-type"),
            self._settings.default_encoding,
        )
        raw = response.content
        if not raw:
            return None
        if mime == "application/json":
            try:
                return json.loads(raw.decode(charset))
            except (UnicodeDecodeError, LookupError, ValueError) as exc:
                raise DecodingError(
                    f"Invalid JSON body: {exc}",
                    content_type=mime,
                    cause=exc,
                ) from exc
        return RawBody(raw, content_type=mime, charset=charset)

    @staticmethod
    def _normalize_options(options: RequestOptions | Mapping[str, Any] | None) -> RequestOptions:
        if options is None:
            return RequestOptions()
        if isinstance(options, RequestOptions):
            return options
        if not isinstance(options, Mapping):
            raise EncodingError(f"Request options must be a mapping, got {type(options).__name__}")
        try:
            return RequestOptions.model_validate(dict(options))
        except ValidationError as exc:
            raise EncodingError(f"Invalid request options: {exc}") from exc

    @staticmethod
    def _encode_params(params: Any) -> str:
        if params is None:
            return ""
        if isinstance(params, Mapping):
            return form_encode(params)
        return str(params)

    def _resolve_authorization(self, opts: RequestOptions) -> str | None:
        auth = opts.auth if opts.auth not in (None, "") else opts.authorization
        if auth in (None, ""):
            return self._session_authorization()

        if isinstance(auth, str):
            return auth if " " in auth else f"Basic {auth}"
        if isinstance(auth, Credential):
            return auth.header_value()
        if isinstance(auth, Mapping):
            try:
                credential = Credential.model_validate(dict(auth))
            except ValidationError as exc:
                raise AuthorizationShapeError(f"Invalid structured credential: {exc}") from exc
            return credential.header_value()
        raise AuthorizationShapeError(
            f"Invalid authorization type: {type(auth).__name__}"
        )

    def _session_authorization(self) -> str | None:
        session = self.session
        if session is None:
            return None
        token = getattr(session, "access_token", None)
        if not token:
            return None
        scheme = getattr(session, "token_type", None) or "Bearer"
        return f"{scheme} {token}"
