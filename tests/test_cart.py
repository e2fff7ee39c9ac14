from decimal import Decimal

import pytest

from src.delivery_engine.models.domain import CartLine, Product
from src.delivery_engine.services.cart import (
    TO_BE_DETERMINED,
    aggregate,
    build_order_items,
    summarize_order,
)


def _product(pid: str, price: str = "100", fee: str | None = None, free: bool = False) -> Product:
    return Product(
        id=pid,
        vendor_id="V1",
        price=Decimal(price),
        stock_quantity=10,
        free_delivery=free,
        custom_delivery_fee_enabled=fee is not None,
        custom_delivery_fee=Decimal(fee) if fee is not None else None,
    )


def _mixed_cart() -> list[CartLine]:
    return [
        CartLine(_product("FREE", "100", free=True)),
        CartLine(_product("FIXED", "200", fee="40")),
        CartLine(_product("TBD", "150")),
    ]


def test_undetermined_lines_are_excluded_from_total_but_flagged():
    lines = [
        CartLine(_product("A", free=True)),
        CartLine(_product("B", fee="30")),
        CartLine(_product("C")),
    ]

    summary = aggregate(lines)

    assert summary.determined_total == Decimal("30")
    assert summary.has_undetermined is True


def test_aggregate_is_idempotent():
    lines = _mixed_cart()

    assert aggregate(lines) == aggregate(lines)


def test_fee_is_charged_once_per_line_regardless_of_quantity():
    single = aggregate([CartLine(_product("A", fee="40"), quantity=1)])
    bulk = aggregate([CartLine(_product("A", fee="40"), quantity=5)])

    assert single.determined_total == bulk.determined_total == Decimal("40")


def test_empty_cart():
    summary = aggregate([])

    assert summary.determined_total == Decimal("0")
    assert summary.has_undetermined is False


def test_order_summary_with_undetermined_delivery():
    summary = summarize_order(_mixed_cart(), currency_symbol="₹")

    assert summary.subtotal == Decimal("450")
    assert summary.delivery_determined == Decimal("40")
    assert summary.has_undetermined is True
    assert summary.total == Decimal("490")
    assert summary.delivery_display == TO_BE_DETERMINED
    assert "₹40" not in summary.delivery_display


def test_order_summary_subtotal_uses_quantity():
    summary = summarize_order([CartLine(_product("A", "25", fee="10"), quantity=4)], currency_symbol="₹")

    assert summary.subtotal == Decimal("100")
    assert summary.total == Decimal("110")
    assert summary.delivery_display == "₹10.00"


def test_all_free_delivery_displays_free():
    summary = summarize_order([CartLine(_product("A", free=True)), CartLine(_product("B", free=True))])

    assert summary.delivery_display == "Free"
    assert summary.total == summary.subtotal


def test_order_items_map_undetermined_fee_to_zero():
    items = build_order_items(_mixed_cart())

    assert [item.product_id for item in items] == ["FREE", "FIXED", "TBD"]
    assert [item.delivery_fee for item in items] == [Decimal("0"), Decimal("40"), Decimal("0")]
    assert items[1].price == Decimal("200")


@pytest.mark.parametrize("quantity", [0, -2])
def test_cart_line_rejects_non_positive_quantity(quantity):
    with pytest.raises(ValueError):
        CartLine(_product("A"), quantity=quantity)
