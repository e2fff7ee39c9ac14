"""Checkout orchestration: gate on the delivery point, then build the order request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from ..config import settings
from ..models.domain import CartLine, GeoPoint, Vendor
from .cart import OrderItem, OrderSummary, build_order_items, summarize_order
from .location import LocationPolicy, OrderLocationValidation, validate_order_location


@dataclass(slots=True)
class DeliveryDetails:
    name: str = "Customer"
    phone: Optional[str] = None
    address: Optional[str] = None
    instructions: Optional[str] = None
    payment_method: str = "cash_on_delivery"


@dataclass(slots=True)
class OrderRequest:
    items: list[OrderItem]
    delivery_latitude: float
    delivery_longitude: float
    summary: OrderSummary
    location: OrderLocationValidation
    details: DeliveryDetails = field(default_factory=DeliveryDetails)
    notes: Optional[str] = None

    def to_payload(self) -> dict:
        """JSON body for the order placement service."""
        return {
            "items": [
                {
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "price": str(item.price),
                    "delivery_fee": str(item.delivery_fee),
                }
                for item in self.items
            ],
            "delivery_name": self.details.name,
            "delivery_phone": self.details.phone,
            "delivery_address": self.details.address,
            "delivery_latitude": self.delivery_latitude,
            "delivery_longitude": self.delivery_longitude,
            "delivery_instructions": self.details.instructions,
            "payment_method": self.details.payment_method,
            "notes": self.notes,
        }


def _distance_note(validation: OrderLocationValidation) -> str | None:
    reference = validation.reference
    if reference is None or not reference.checked:
        return None
    return f"Distance: {reference.distance_km:.{settings.distance_display_decimals}f}km from vendor"


def prepare_order_request(
    point: GeoPoint | None,
    lines: Sequence[CartLine],
    vendors: Mapping[str, Vendor],
    *,
    details: DeliveryDetails | None = None,
    policy: LocationPolicy | None = None,
) -> OrderRequest:
    if not lines:
        raise ValueError("Cart is empty.")
    if point is None or not point.is_finite:
        raise ValueError("Please select a delivery location.")

    validation = validate_order_location(point, lines, vendors, policy=policy)
    if not validation.valid:
        failure = validation.failures[0]
        decimals = settings.distance_display_decimals
        raise ValueError(
            "Selected location is outside delivery range "
            f"({failure.distance_km:.{decimals}f}km > {failure.max_radius_km:g}km)"
        )

    return OrderRequest(
        items=build_order_items(lines),
        delivery_latitude=point.latitude,
        delivery_longitude=point.longitude,
        summary=summarize_order(lines),
        location=validation,
        details=details or DeliveryDetails(),
        notes=_distance_note(validation),
    )

