"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..models.domain import UNKNOWN_DISTANCE, Distance, GeoPoint

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push ``a`` a hair above 1 for antipodal points.
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two finite points, unrounded.

    Callers must handle missing or non-finite coordinates before calling; this
    function always returns a number.
    """

    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def has_coordinates(point: GeoPoint | None) -> bool:
    return point is not None and point.is_finite


def format_distance(distance: Distance, decimals: int = 1) -> str:
    """Render a distance for display ("5.1 km"), or "N/A" when unknown."""

    if distance is UNKNOWN_DISTANCE:
        return "N/A"
    return f"{distance:.{decimals}f} km"
