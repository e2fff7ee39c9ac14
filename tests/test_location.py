import math
from decimal import Decimal

import pytest

from src.delivery_engine.models.domain import CartLine, GeoPoint, Product, Vendor
from src.delivery_engine.services.checkout import DeliveryDetails, prepare_order_request
from src.delivery_engine.services.geospatial import EARTH_RADIUS_KM
from src.delivery_engine.services.location import validate, validate_order_location

POINT = GeoPoint(27.70, 85.30)


def _north_of(origin: GeoPoint, km: float) -> GeoPoint:
    return GeoPoint(origin.latitude + math.degrees(km / EARTH_RADIUS_KM), origin.longitude)


def _vendor(vid: str, km_away: float | None, radius: float | None = 5.0) -> Vendor:
    location = _north_of(POINT, km_away) if km_away is not None else None
    return Vendor(id=vid, location=location, delivery_radius_km=radius)


def _line(pid: str, vendor_id: str, fee: str | None = None) -> CartLine:
    product = Product(
        id=pid,
        vendor_id=vendor_id,
        price=Decimal("100"),
        stock_quantity=3,
        custom_delivery_fee_enabled=fee is not None,
        custom_delivery_fee=Decimal(fee) if fee is not None else None,
    )
    return CartLine(product)


def test_point_within_radius_is_valid():
    result = validate(POINT, _vendor("NEAR", 2.0))

    assert result.valid is True
    assert result.distance_km == pytest.approx(2.0, rel=1e-6)
    assert result.max_radius_km == 5.0
    assert result.message() == "Delivery location set (2.0km from vendor)"


def test_point_outside_radius_is_invalid():
    result = validate(POINT, _vendor("FAR", 6.2))

    assert result.valid is False
    assert result.message() == "This location is 6.2km away. Maximum delivery range is 5km."


@pytest.mark.parametrize("vendor", [_vendor("NO_RADIUS", 50.0, radius=None), _vendor("NO_LOCATION", None)])
def test_missing_vendor_data_passes_with_zero_distance(vendor):
    result = validate(POINT, vendor)

    assert result.valid is True
    assert result.distance_km == 0.0
    assert result.max_radius_km is None
    assert result.checked is False


def test_non_finite_point_is_rejected():
    with pytest.raises(ValueError):
        validate(GeoPoint(float("nan"), 85.30), _vendor("NEAR", 1.0))


def test_all_vendors_policy_rejects_when_any_vendor_is_out_of_range():
    vendors = {"NEAR": _vendor("NEAR", 1.0), "FAR": _vendor("FAR", 8.0)}
    lines = [_line("P1", "NEAR"), _line("P2", "FAR"), _line("P3", "NEAR")]

    result = validate_order_location(POINT, lines, vendors, policy="all_vendors")

    assert result.valid is False
    assert [check.vendor_id for check in result.checks] == ["NEAR", "FAR"]
    assert [check.vendor_id for check in result.failures] == ["FAR"]


def test_first_vendor_policy_only_checks_first_line_vendor():
    vendors = {"NEAR": _vendor("NEAR", 1.0), "FAR": _vendor("FAR", 8.0)}

    near_first = validate_order_location(POINT, [_line("P1", "NEAR"), _line("P2", "FAR")], vendors, policy="first_vendor")
    far_first = validate_order_location(POINT, [_line("P2", "FAR"), _line("P1", "NEAR")], vendors, policy="first_vendor")

    assert near_first.valid is True
    assert len(near_first.checks) == 1
    assert far_first.valid is False


def test_default_policy_comes_from_settings(monkeypatch):
    from src.delivery_engine.services import location as location_service

    monkeypatch.setattr(location_service.settings, "order_location_policy", "first_vendor")
    vendors = {"NEAR": _vendor("NEAR", 1.0), "FAR": _vendor("FAR", 8.0)}

    result = validate_order_location(POINT, [_line("P1", "NEAR"), _line("P2", "FAR")], vendors)

    assert result.policy == "first_vendor"
    assert result.valid is True


def test_unknown_vendor_is_not_a_blocker():
    result = validate_order_location(POINT, [_line("P1", "GHOST")], {}, policy="all_vendors")

    assert result.valid is True
    assert result.checks[0].vendor_id == "GHOST"
    assert result.checks[0].checked is False


def test_prepare_order_request_builds_placement_payload():
    vendors = {"NEAR": _vendor("NEAR", 1.0)}
    lines = [_line("P1", "NEAR", fee="40"), _line("P2", "NEAR")]

    request = prepare_order_request(
        POINT,
        lines,
        vendors,
        details=DeliveryDetails(name="Sita", phone="9812345678", address="Thamel"),
    )
    payload = request.to_payload()

    assert request.notes == "Distance: 1.0km from vendor"
    assert request.summary.has_undetermined is True
    assert payload["delivery_latitude"] == POINT.latitude
    assert payload["delivery_name"] == "Sita"
    assert [item["delivery_fee"] for item in payload["items"]] == ["40", "0"]


def test_prepare_order_request_requires_location():
    with pytest.raises(ValueError, match="delivery location"):
        prepare_order_request(None, [_line("P1", "NEAR")], {"NEAR": _vendor("NEAR", 1.0)})


def test_prepare_order_request_requires_items():
    with pytest.raises(ValueError, match="empty"):
        prepare_order_request(POINT, [], {})


def test_prepare_order_request_rejects_out_of_range_location():
    vendors = {"FAR": _vendor("FAR", 6.2)}

    with pytest.raises(ValueError, match=r"outside delivery range \(6\.2km > 5km\)"):
        prepare_order_request(POINT, [_line("P1", "FAR")], vendors, policy="all_vendors")
