"""Vendor delivery eligibility for a shopper location."""

from __future__ import annotations

import math

from ..models.domain import UNKNOWN_DISTANCE, EligibilityResult, GeoPoint, Vendor
from .geospatial import distance_km, has_coordinates


def resolve_radius_km(vendor: Vendor, default_radius_km: float | None = None) -> float:
    """Return the radius a vendor serves.

    The vendor's own radius wins, then the platform default. With neither set the
    radius is unbounded and never excludes a shopper.
    """

    if vendor.delivery_radius_km is not None:
        return float(vendor.delivery_radius_km)
    if default_radius_km is not None:
        return float(default_radius_km)
    return math.inf


def is_eligible(
    shopper: GeoPoint | None,
    vendor: Vendor,
    *,
    default_radius_km: float | None = None,
) -> EligibilityResult:
    """Decide whether ``vendor`` delivers to ``shopper``.

    Offline vendors are never eligible. When either side has no usable
    coordinates the distance is ``UNKNOWN_DISTANCE`` and the vendor is assumed
    to deliver.
    """

    if not vendor.is_online:
        distance = (
            distance_km(shopper, vendor.location)
            if has_coordinates(shopper) and has_coordinates(vendor.location)
            else UNKNOWN_DISTANCE
        )
        return EligibilityResult(eligible=False, distance_km=distance)

    if not has_coordinates(shopper) or not has_coordinates(vendor.location):
        return EligibilityResult(eligible=True, distance_km=UNKNOWN_DISTANCE)

    distance = distance_km(shopper, vendor.location)
    radius = resolve_radius_km(vendor, default_radius_km)
    return EligibilityResult(eligible=distance <= radius, distance_km=distance)
