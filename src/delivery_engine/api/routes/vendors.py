"""Vendor deliverability endpoints backed by the marketplace API."""

from __future__ import annotations

import math

from fastapi import APIRouter, HTTPException, Query, status

from ...config import settings
from ...data import platform_radius
from ...models.domain import GeoPoint
from ...services.eligibility import is_eligible, resolve_radius_km
from ...services.geospatial import format_distance

router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.get("/{vendor_id}/deliverability", status_code=status.HTTP_200_OK)
def vendor_deliverability(
    vendor_id: str,
    latitude: float | None = Query(default=None, ge=-90, le=90),
    longitude: float | None = Query(default=None, ge=-180, le=180),
) -> dict:
    """Check whether a vendor delivers to the given shopper location."""
    try:
        client = platform_radius.get_marketplace_client()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    try:
        vendor = client.fetch_vendor(vendor_id)
    except (ConnectionError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    if vendor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Vendor '{vendor_id}' not found")

    shopper = None
    if latitude is not None and longitude is not None:
        shopper = GeoPoint(latitude=latitude, longitude=longitude)

    default_radius = platform_radius.platform_default_radius_km(client)
    result = is_eligible(shopper, vendor, default_radius_km=default_radius)
    radius = resolve_radius_km(vendor, default_radius)
    return {
        "vendor_id": vendor.id,
        "is_online": vendor.is_online,
        "eligible": result.eligible,
        "distance_known": result.distance_known,
        "distance_km": result.distance_km if result.distance_known else None,
        "distance_display": format_distance(result.distance_km, settings.distance_display_decimals),
        "delivery_radius_km": None if math.isinf(radius) else radius,
    }
