"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/config", status_code=status.HTTP_200_OK)
def health_config() -> dict:
    """Report the delivery policy settings in effect."""
    return {
        "default_delivery_radius_km": settings.default_delivery_radius_km,
        "order_location_policy": settings.order_location_policy,
        "marketplace_api_configured": bool(settings.marketplace_api_base_url),
    }
