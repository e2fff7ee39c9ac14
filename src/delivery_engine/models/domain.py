"""Domain models for vendors, products, cart lines and delivery results."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class DistanceState(Enum):
    """Marker for a distance that could not be measured."""

    UNKNOWN = "unknown"


# Either endpoint lacked coordinates; never compared against a radius.
UNKNOWN_DISTANCE = DistanceState.UNKNOWN

Distance = Union[float, DistanceState]


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """WGS84 coordinate pair in degrees."""

    latitude: float
    longitude: float

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.latitude) and math.isfinite(self.longitude)


@dataclass(slots=True)
class Vendor:
    """A seller with a storefront location and a service radius."""

    id: str
    location: Optional[GeoPoint] = None
    delivery_radius_km: Optional[float] = None
    is_online: bool = True
    name: Optional[str] = None


@dataclass(slots=True)
class Product:
    """A catalog item and the delivery flags its vendor configured."""

    id: str
    vendor_id: str
    price: Decimal
    stock_quantity: int = 0
    free_delivery: bool = False
    custom_delivery_fee_enabled: bool = False
    custom_delivery_fee: Optional[Decimal] = None
    name: Optional[str] = None

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0


@dataclass(slots=True)
class CartLine:
    product: Product
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"Cart line quantity must be >= 1 (got {self.quantity}).")

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


@dataclass(frozen=True, slots=True)
class Free:
    """Delivery costs the shopper nothing."""


@dataclass(frozen=True, slots=True)
class Fixed:
    """Delivery is charged at a known flat amount."""

    amount: Decimal


@dataclass(frozen=True, slots=True)
class Undetermined:
    """Delivery will be priced later; carries no amount."""


DeliveryFeeResult = Union[Free, Fixed, Undetermined]


@dataclass(frozen=True, slots=True)
class EligibilityResult:
    eligible: bool
    distance_km: Distance

    @property
    def distance_known(self) -> bool:
        return self.distance_km is not UNKNOWN_DISTANCE


@dataclass(frozen=True, slots=True)
class OrderFeeSummary:
    """Delivery fees across an order.

    ``determined_total`` only sums free and fixed lines; undetermined lines are
    excluded from it and reported through ``has_undetermined`` instead.
    """

    determined_total: Decimal
    has_undetermined: bool
