"""Delivery point validation against vendor service radii."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Mapping, Sequence

from ..config import settings
from ..models.domain import CartLine, GeoPoint, Vendor
from .geospatial import distance_km, has_coordinates

LocationPolicy = Literal["all_vendors", "first_vendor"]


def _format_km(value: float, decimals: int | None = None) -> str:
    if decimals is None:
        return f"{value:g}km"
    return f"{value:.{decimals}f}km"


@dataclass(frozen=True, slots=True)
class LocationValidation:
    valid: bool
    distance_km: float
    max_radius_km: float | None
    vendor_id: str | None = None

    @property
    def checked(self) -> bool:
        """False when the vendor had no location or radius to check against."""
        return self.max_radius_km is not None

    def message(self) -> str:
        decimals = settings.distance_display_decimals
        if not self.valid:
            return (
                f"This location is {_format_km(self.distance_km, decimals)} away. "
                f"Maximum delivery range is {_format_km(self.max_radius_km)}."
            )
        return f"Delivery location set ({_format_km(self.distance_km, decimals)} from vendor)"


@dataclass(frozen=True, slots=True)
class OrderLocationValidation:
    valid: bool
    policy: LocationPolicy
    checks: list[LocationValidation] = field(default_factory=list)

    @property
    def failures(self) -> list[LocationValidation]:
        return [check for check in self.checks if not check.valid]

    @property
    def reference(self) -> LocationValidation | None:
        """Check used for user-facing distance text: first failure, else first check."""
        failures = self.failures
        if failures:
            return failures[0]
        return self.checks[0] if self.checks else None


def validate(point: GeoPoint, vendor: Vendor) -> LocationValidation:
    """Check that ``point`` lies within ``vendor``'s delivery radius.

    A vendor without a location or a radius cannot be checked; the point passes
    with a distance of 0.
    """

    if not point.is_finite:
        raise ValueError(f"Delivery point has non-finite coordinates: {point}")

    if not has_coordinates(vendor.location) or vendor.delivery_radius_km is None:
        return LocationValidation(valid=True, distance_km=0.0, max_radius_km=None, vendor_id=vendor.id)

    distance = distance_km(point, vendor.location)
    radius = float(vendor.delivery_radius_km)
    return LocationValidation(
        valid=distance <= radius,
        distance_km=distance,
        max_radius_km=radius,
        vendor_id=vendor.id,
    )


def _order_vendor_ids(lines: Sequence[CartLine]) -> list[str]:
    seen: dict[str, None] = {}
    for line in lines:
        seen.setdefault(line.product.vendor_id, None)
    return list(seen)


def validate_order_location(
    point: GeoPoint,
    lines: Sequence[CartLine],
    vendors: Mapping[str, Vendor],
    *,
    policy: LocationPolicy | None = None,
) -> OrderLocationValidation:
    """Validate a delivery point for every vendor an order touches.

    ``all_vendors`` rejects the point if any vendor in the order is out of range.
    ``first_vendor`` only checks the vendor of the first cart line.
    """

    policy = policy or settings.order_location_policy
    vendor_ids = _order_vendor_ids(lines)
    if policy == "first_vendor":
        vendor_ids = vendor_ids[:1]

    checks: list[LocationValidation] = []
    for vendor_id in vendor_ids:
        vendor = vendors.get(vendor_id)
        if vendor is None:
            logging.warning(f"Vendor '{vendor_id}' not supplied; delivery location not checked for it")
            checks.append(LocationValidation(valid=True, distance_km=0.0, max_radius_km=None, vendor_id=vendor_id))
            continue
        checks.append(validate(point, vendor))

    result = OrderLocationValidation(
        valid=all(check.valid for check in checks),
        policy=policy,
        checks=checks,
    )
    if not result.valid:
        for failure in result.failures:
            logging.info(
                f"Delivery point rejected for vendor '{failure.vendor_id}': "
                f"{failure.distance_km:.3f} km > {failure.max_radius_km} km"
            )
    return result
