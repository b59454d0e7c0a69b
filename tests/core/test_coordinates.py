"""Extracción de coordenadas.

Invariantes:
    - Pares: un valor fuera de [-90, 90] se toma como longitud
    - Singletons se desenvuelven recursivamente
    - Mappings: la última key presente en el orden de prioridad gana
    - Formas no soportadas o sin lat/lon -> CoordinateParseError
"""

import pytest

from core.domain.coordinates import (
    CoordinateShape,
    LatLon,
    bounding_box_params,
    center_point_params,
    classify_coordinates,
    extract_lat_lon,
)
from core.errors import CoordinateParseError


def test_pair_in_range_is_lat_then_lon():
    assert extract_lat_lon([10, 95]) == LatLon(lat=10, lon=95)


def test_pair_out_of_lat_range_first_is_longitude():
    result = extract_lat_lon([95, 10])
    assert result.lat == 10
    assert result.lon == 95


def test_pair_negative_out_of_range():
    assert extract_lat_lon((-122.4, 37.7)) == LatLon(lat=37.7, lon=-122.4)


def test_pair_with_numeric_strings_uses_float_for_range_check():
    assert extract_lat_lon(["-122.4", "37.7"]) == LatLon(lat="37.7", lon="-122.4")


def test_singleton_is_unwrapped_recursively():
    assert extract_lat_lon([[[40.7, -74.0]]]) == LatLon(lat=40.7, lon=-74.0)


def test_mapping_with_long_names():
    assert extract_lat_lon({"latitude": 40.7, "longitude": -74.0}) == LatLon(lat=40.7, lon=-74.0)


def test_mapping_later_keys_overwrite_earlier_ones():
    result = extract_lat_lon({"lat": 1, "latitude": 2, "y": 3, "lon": 4, "lng": 5, "x": 6})
    assert result == LatLon(lat=3, lon=6)


def test_mapping_zero_is_a_present_value():
    assert extract_lat_lon({"lat": 0, "lon": 0}) == LatLon(lat=0, lon=0)


def test_mapping_none_values_are_absent():
    assert extract_lat_lon({"lat": 5, "y": None, "long": 7}) == LatLon(lat=5, lon=7)


def test_empty_mapping_fails():
    with pytest.raises(CoordinateParseError):
        extract_lat_lon({})


def test_mapping_without_longitude_fails():
    with pytest.raises(CoordinateParseError, match="longitude"):
        extract_lat_lon({"lat": 1})


@pytest.mark.parametrize("value", [[1, 2, 3], [], 42, "40.7,-74.0", None, b"ab"])
def test_unsupported_shapes_fail(value):
    with pytest.raises(CoordinateParseError):
        extract_lat_lon(value)


def test_coordinate_parse_error_is_a_value_error():
    with pytest.raises(ValueError):
        extract_lat_lon(7)


def test_classify_coordinates():
    assert classify_coordinates([1, 2]) is CoordinateShape.PAIR
    assert classify_coordinates([[1, 2]]) is CoordinateShape.SINGLETON
    assert classify_coordinates({"lat": 1}) is CoordinateShape.MAPPING


def test_bounding_box_params_accept_any_shape():
    params = bounding_box_params([37.8, -122.5], {"latitude": 37.7, "lng": -122.3})
    assert params == {
        "boundingBox[topLeftLatitude]": 37.8,
        "boundingBox[topLeftLongitude]": -122.5,
        "boundingBox[bottomRightLatitude]": 37.7,
        "boundingBox[bottomRightLongitude]": -122.3,
    }


def test_center_point_params():
    assert center_point_params([[-122.4, 37.7]]) == {
        "centerPoint[latitude]": 37.7,
        "centerPoint[longitude]": -122.4,
    }
