"""Extracción de coordenadas desde valores de forma variable.

Formas aceptadas (una función de decodificación por forma):
- PAIR: secuencia de 2 elementos. Un valor fuera de [-90, 90] es la longitud.
- SINGLETON: secuencia de 1 elemento, se desenvuelve recursivamente.
- MAPPING: objeto con lat/latitude/y y lon/longitude/lng/long/x.

Los valores se devuelven tal cual los dio el llamador; solo se usa `as_float`
para decidir si un elemento cae fuera del rango de latitud.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, NamedTuple

from core.domain.coercion import as_float
from core.errors import CoordinateParseError

LAT_MIN = -90
LAT_MAX = 90

# Orden de prioridad: una key posterior presente pisa a las anteriores.
_LAT_KEYS = ("lat", "latitude", "y")
_LON_KEYS = ("lon", "longitude", "lng", "long", "x")


class LatLon(NamedTuple):
    lat: Any
    lon: Any


class CoordinateShape(str, Enum):
    """Formas de entrada reconocidas por `extract_lat_lon`."""

    PAIR = "pair"
    SINGLETON = "singleton"
    MAPPING = "mapping"


def classify_coordinates(x: Any) -> CoordinateShape:
    if isinstance(x, Mapping):
        return CoordinateShape.MAPPING
    if isinstance(x, Sequence) and not isinstance(x, (str, bytes, bytearray)):
        if len(x) == 2:
            return CoordinateShape.PAIR
        if len(x) == 1:
            return CoordinateShape.SINGLETON
    raise CoordinateParseError(f"Unable to parse coordinates from {type(x).__name__}")


def _out_of_lat_range(value: Any) -> bool:
    number = as_float(value)
    if isinstance(number, bool) or not isinstance(number, (int, float)):
        return False
    return number > LAT_MAX or number < LAT_MIN


def _decode_pair(x: Sequence[Any]) -> LatLon:
    a, b = x[0], x[1]
    if _out_of_lat_range(a):
        return LatLon(lat=b, lon=a)
    return LatLon(lat=a, lon=b)


def _decode_singleton(x: Sequence[Any]) -> LatLon:
    return extract_lat_lon(x[0])


def _decode_mapping(x: Mapping[str, Any]) -> LatLon:
    lat = None
    lon = None
    for key in _LAT_KEYS:
        if x.get(key) is not None:
            lat = x[key]
    for key in _LON_KEYS:
        if x.get(key) is not None:
            lon = x[key]

    if lat is None:
        raise CoordinateParseError("Unable to find latitude from coordinates")
    if lon is None:
        raise CoordinateParseError("Unable to find longitude from coordinates")
    return LatLon(lat=lat, lon=lon)


_DECODERS = {
    CoordinateShape.PAIR: _decode_pair,
    CoordinateShape.SINGLETON: _decode_singleton,
    CoordinateShape.MAPPING: _decode_mapping,
}


def extract_lat_lon(x: Any) -> LatLon:
    """Resuelve `LatLon` o lanza `CoordinateParseError`."""

    return _DECODERS[classify_coordinates(x)](x)


def bounding_box_params(top_left: Any, bottom_right: Any) -> dict[str, Any]:
    """Query params `boundingBox[...]` usados por crímenes y ofensores."""

    tl = extract_lat_lon(top_left)
    br = extract_lat_lon(bottom_right)
    return {
        "boundingBox[topLeftLatitude]": tl.lat,
        "boundingBox[topLeftLongitude]": tl.lon,
        "boundingBox[bottomRightLatitude]": br.lat,
        "boundingBox[bottomRightLongitude]": br.lon,
    }


def center_point_params(center: Any) -> dict[str, Any]:
    """Query params `centerPoint[...]` usados por safety points."""

    point = extract_lat_lon(center)
    return {
        "centerPoint[latitude]": point.lat,
        "centerPoint[longitude]": point.lon,
    }
