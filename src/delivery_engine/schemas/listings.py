"""Listing request/response schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .catalog import DeliveryBadgeModel, GeoPointModel, ProductModel, VendorModel


class ListingFilterRequest(BaseModel):
    shopper: Optional[GeoPointModel] = Field(
        default=None,
        description="Shopper location. When absent every online vendor is treated as deliverable.",
    )
    vendors: List[VendorModel] = Field(default_factory=list)
    products: List[ProductModel] = Field(default_factory=list)
    sort_by: Literal["distance", "price_low", "price_high"] = "distance"
    include_out_of_stock: bool = True


class ListingModel(BaseModel):
    product_id: str
    vendor_id: str
    name: Optional[str] = None
    vendor_name: Optional[str] = None
    price: Decimal
    in_stock: bool
    distance_km: Optional[float] = Field(None, description="Null when the distance could not be measured.")
    distance_display: str
    delivery: DeliveryBadgeModel


class ListingFilterResponse(BaseModel):
    total_candidates: int
    total_deliverable: int
    items: List[ListingModel]
