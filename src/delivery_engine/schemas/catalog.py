"""Catalog input schemas shared by browsing and checkout endpoints."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from ..models.domain import CartLine, GeoPoint, Product, Vendor


class GeoPointModel(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_domain(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)


class VendorModel(BaseModel):
    id: str
    name: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    delivery_radius_km: Optional[float] = Field(None, ge=0)
    is_online: bool = True

    def to_domain(self) -> Vendor:
        location = None
        if self.latitude is not None and self.longitude is not None:
            location = GeoPoint(latitude=self.latitude, longitude=self.longitude)
        return Vendor(
            id=self.id,
            location=location,
            delivery_radius_km=self.delivery_radius_km,
            is_online=self.is_online,
            name=self.name,
        )


class ProductModel(BaseModel):
    id: str
    vendor_id: str
    name: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    free_delivery: bool = False
    custom_delivery_fee_enabled: bool = False
    custom_delivery_fee: Optional[Decimal] = Field(None, ge=0)

    def to_domain(self) -> Product:
        return Product(
            id=self.id,
            vendor_id=self.vendor_id,
            price=self.price,
            stock_quantity=self.stock_quantity,
            free_delivery=self.free_delivery,
            custom_delivery_fee_enabled=self.custom_delivery_fee_enabled,
            custom_delivery_fee=self.custom_delivery_fee,
            name=self.name,
        )


class CartLineModel(BaseModel):
    product: ProductModel
    quantity: int = Field(default=1, ge=1)

    def to_domain(self) -> CartLine:
        return CartLine(product=self.product.to_domain(), quantity=self.quantity)


class DeliveryBadgeModel(BaseModel):
    kind: str
    amount: Optional[Decimal] = None
    display_text: str


def vendors_by_id(vendors: list[VendorModel]) -> dict[str, Vendor]:
    return {vendor.id: vendor.to_domain() for vendor in vendors}
