"""Adaptadores de I/O (HTTP)."""

from adapters.request_engine import Credential, RawBody, RequestEngine, RequestOptions

__all__ = [
    "Credential",
    "RawBody",
    "RequestEngine",
    "RequestOptions",
]
