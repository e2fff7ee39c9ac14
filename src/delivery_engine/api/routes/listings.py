"""Listing endpoints for browsing surfaces."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...data.platform_radius import platform_default_radius_km
from ...schemas.catalog import DeliveryBadgeModel, vendors_by_id
from ...schemas.listings import ListingFilterRequest, ListingFilterResponse, ListingModel
from ...services.listings import Listing, filter_deliverable

router = APIRouter(prefix="/listings", tags=["listings"])


def listing_to_model(listing: Listing) -> ListingModel:
    eligibility = listing.eligibility
    return ListingModel(
        product_id=listing.product.id,
        vendor_id=listing.vendor.id,
        name=listing.product.name,
        vendor_name=listing.vendor.name,
        price=listing.product.price,
        in_stock=listing.product.in_stock,
        distance_km=eligibility.distance_km if eligibility.distance_known else None,
        distance_display=listing.distance_display,
        delivery=DeliveryBadgeModel(
            kind=listing.fee_badge.kind,
            amount=listing.fee_badge.amount,
            display_text=listing.fee_badge.display_text,
        ),
    )


@router.post("/deliverable", response_model=ListingFilterResponse, status_code=status.HTTP_200_OK)
def deliverable_listings(payload: ListingFilterRequest) -> ListingFilterResponse:
    try:
        listings = filter_deliverable(
            [product.to_domain() for product in payload.products],
            vendors_by_id(payload.vendors),
            payload.shopper.to_domain() if payload.shopper else None,
            default_radius_km=platform_default_radius_km(),
            sort_by=payload.sort_by,
            include_out_of_stock=payload.include_out_of_stock,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error filtering listings: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to filter listings: {str(exc)}",
        ) from exc

    return ListingFilterResponse(
        total_candidates=len(payload.products),
        total_deliverable=len(listings),
        items=[listing_to_model(listing) for listing in listings],
    )
