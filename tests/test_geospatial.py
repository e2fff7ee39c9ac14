import math

import pytest

from src.delivery_engine.models.domain import UNKNOWN_DISTANCE, GeoPoint
from src.delivery_engine.services.geospatial import (
    EARTH_RADIUS_KM,
    distance_km,
    format_distance,
    has_coordinates,
)


def _north_of(origin: GeoPoint, km: float) -> GeoPoint:
    return GeoPoint(origin.latitude + math.degrees(km / EARTH_RADIUS_KM), origin.longitude)


@pytest.mark.parametrize(
    "a, b",
    [
        (GeoPoint(27.7172, 85.3240), GeoPoint(27.6398805, 85.3303725)),
        (GeoPoint(40.7128, -74.0060), GeoPoint(34.0522, -118.2437)),
        (GeoPoint(-33.8688, 151.2093), GeoPoint(51.5074, -0.1278)),
        (GeoPoint(0.0, 179.9), GeoPoint(0.0, -179.9)),
    ],
)
def test_distance_is_symmetric(a: GeoPoint, b: GeoPoint):
    assert distance_km(a, b) == distance_km(b, a)


def test_distance_to_same_point_is_zero():
    point = GeoPoint(27.7172, 85.3240)
    assert distance_km(point, point) == 0.0


def test_five_km_along_meridian():
    origin = GeoPoint(27.7172, 85.3240)
    assert distance_km(origin, _north_of(origin, 5.0)) == pytest.approx(5.0, rel=0.01)


def test_kathmandu_regression_fixture():
    shopper = GeoPoint(27.6398805, 85.3303725)
    vendor = GeoPoint(27.66424179701499, 85.3465231243003)
    # Straight-line distance; the 5.1 km quoted by map apps is a road distance.
    assert distance_km(shopper, vendor) == pytest.approx(3.14, abs=0.02)


def test_new_york_to_los_angeles():
    assert distance_km(GeoPoint(40.7128, -74.0060), GeoPoint(34.0522, -118.2437)) == pytest.approx(3936, rel=0.005)


def test_antipodal_points_are_half_circumference():
    distance = distance_km(GeoPoint(0.0, 0.0), GeoPoint(0.0, 180.0))
    assert distance == pytest.approx(math.pi * EARTH_RADIUS_KM, rel=1e-9)
    assert distance == pytest.approx(20015, abs=1)


def test_has_coordinates_rejects_missing_and_non_finite():
    assert has_coordinates(GeoPoint(27.7, 85.3))
    assert not has_coordinates(None)
    assert not has_coordinates(GeoPoint(float("nan"), 85.3))
    assert not has_coordinates(GeoPoint(27.7, float("inf")))


def test_format_distance():
    assert format_distance(5.14) == "5.1 km"
    assert format_distance(0.0) == "0.0 km"
    assert format_distance(5.14159, decimals=2) == "5.14 km"
    assert format_distance(UNKNOWN_DISTANCE) == "N/A"
