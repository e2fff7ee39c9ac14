"""Browsing helpers: annotate, filter and sort product listings by deliverability."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Literal, Mapping

from ..config import settings
from ..models.domain import DeliveryFeeResult, EligibilityResult, GeoPoint, Product, Vendor
from .eligibility import is_eligible
from .fees import FeeBadge, describe_fee, resolve
from .geospatial import format_distance

SortKey = Literal["distance", "price_low", "price_high"]


@dataclass(slots=True)
class Listing:
    product: Product
    vendor: Vendor
    eligibility: EligibilityResult
    fee: DeliveryFeeResult
    fee_badge: FeeBadge
    distance_display: str

    @property
    def sort_distance(self) -> float:
        # Unknown distances sort after every measured one.
        return self.eligibility.distance_km if self.eligibility.distance_known else math.inf


def _vendor_for(product: Product, vendors: Mapping[str, Vendor]) -> Vendor:
    vendor = vendors.get(product.vendor_id)
    if vendor is None:
        # Nothing known about the vendor: online, no location, no radius.
        return Vendor(id=product.vendor_id)
    return vendor


def annotate_listing(
    product: Product,
    vendor: Vendor,
    shopper: GeoPoint | None,
    *,
    default_radius_km: float | None = None,
) -> Listing:
    eligibility = is_eligible(shopper, vendor, default_radius_km=default_radius_km)
    fee = resolve(product)
    return Listing(
        product=product,
        vendor=vendor,
        eligibility=eligibility,
        fee=fee,
        fee_badge=describe_fee(fee),
        distance_display=format_distance(eligibility.distance_km, settings.distance_display_decimals),
    )


def sort_listings(listings: list[Listing], sort_by: SortKey = "distance") -> list[Listing]:
    if sort_by == "price_low":
        return sorted(listings, key=lambda listing: listing.product.price)
    if sort_by == "price_high":
        return sorted(listings, key=lambda listing: listing.product.price, reverse=True)
    return sorted(listings, key=lambda listing: listing.sort_distance)


def filter_deliverable(
    products: Iterable[Product],
    vendors: Mapping[str, Vendor],
    shopper: GeoPoint | None,
    *,
    default_radius_km: float | None = None,
    sort_by: SortKey = "distance",
    include_out_of_stock: bool = True,
) -> list[Listing]:
    """Keep the products a shopper can get delivered, annotated for display."""

    kept: list[Listing] = []
    for product in products:
        if not include_out_of_stock and not product.in_stock:
            continue
        listing = annotate_listing(
            product,
            _vendor_for(product, vendors),
            shopper,
            default_radius_km=default_radius_km,
        )
        if not listing.eligibility.eligible:
            logging.debug(
                f"Excluding product '{product.id}' from vendor '{product.vendor_id}' "
                f"(online={listing.vendor.is_online}, distance={listing.distance_display})"
            )
            continue
        kept.append(listing)
    return sort_listings(kept, sort_by)
