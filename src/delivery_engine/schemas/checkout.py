"""Checkout request/response schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .catalog import CartLineModel, DeliveryBadgeModel, GeoPointModel, VendorModel


class CheckoutSummaryRequest(BaseModel):
    lines: List[CartLineModel] = Field(..., min_length=1)


class LineFeeModel(BaseModel):
    product_id: str
    quantity: int
    line_total: Decimal
    delivery: DeliveryBadgeModel


class OrderSummaryResponse(BaseModel):
    subtotal: Decimal
    delivery_determined: Decimal
    has_undetermined: bool
    total: Decimal
    delivery_display: str
    lines: List[LineFeeModel]


class LocationValidationRequest(BaseModel):
    point: GeoPointModel
    lines: List[CartLineModel] = Field(..., min_length=1)
    vendors: List[VendorModel] = Field(default_factory=list)
    policy: Optional[Literal["all_vendors", "first_vendor"]] = None


class VendorLocationCheckModel(BaseModel):
    vendor_id: Optional[str]
    valid: bool
    distance_km: float
    max_radius_km: Optional[float]
    message: str


class LocationValidationResponse(BaseModel):
    valid: bool
    policy: str
    checks: List[VendorLocationCheckModel]


class OrderRequestModel(BaseModel):
    point: Optional[GeoPointModel] = None
    lines: List[CartLineModel] = Field(..., min_length=1)
    vendors: List[VendorModel] = Field(default_factory=list)
    policy: Optional[Literal["all_vendors", "first_vendor"]] = None
    delivery_name: str = "Customer"
    delivery_phone: Optional[str] = None
    delivery_address: Optional[str] = None
    delivery_instructions: Optional[str] = None
    payment_method: str = "cash_on_delivery"


class OrderItemModel(BaseModel):
    product_id: str
    quantity: int
    price: Decimal
    delivery_fee: Decimal


class OrderRequestResponse(BaseModel):
    items: List[OrderItemModel]
    delivery_latitude: float
    delivery_longitude: float
    delivery_name: str
    delivery_phone: Optional[str]
    delivery_address: Optional[str]
    delivery_instructions: Optional[str]
    payment_method: str
    notes: Optional[str]
    summary: OrderSummaryResponse
