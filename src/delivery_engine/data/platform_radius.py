"""Platform-wide default delivery radius shared by every browsing surface."""

from __future__ import annotations

import logging
from functools import lru_cache

from ..config import settings
from .marketplace_client import MarketplaceClient


@lru_cache()
def get_marketplace_client() -> MarketplaceClient:
    return MarketplaceClient()


def platform_default_radius_km(client: MarketplaceClient | None = None) -> float | None:
    """Radius applied to vendors that declare none.

    Order: the configured ``default_delivery_radius_km``, then the marketplace's
    ``delivery-radius/`` value, then None (unbounded). An unreachable or broken
    marketplace API also yields None.
    """

    if settings.default_delivery_radius_km is not None:
        return settings.default_delivery_radius_km
    if client is None:
        if not settings.marketplace_api_base_url:
            return None
        client = get_marketplace_client()
    try:
        return client.fetch_global_delivery_radius()
    except (ConnectionError, ValueError) as exc:
        logging.warning(f"Global delivery radius unavailable: {exc}")
        return None
