"""Order-level delivery fee aggregation and checkout totals."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from ..models.domain import CartLine, Fixed, OrderFeeSummary, Undetermined
from .fees import ZERO, format_money, placement_fee, resolve

TO_BE_DETERMINED = "To be determined"


@dataclass(frozen=True, slots=True)
class OrderSummary:
    subtotal: Decimal
    delivery_determined: Decimal
    has_undetermined: bool
    total: Decimal
    delivery_display: str


@dataclass(frozen=True, slots=True)
class OrderItem:
    """Line sent to the order placement service."""

    product_id: str
    quantity: int
    price: Decimal
    delivery_fee: Decimal


def aggregate(lines: Sequence[CartLine]) -> OrderFeeSummary:
    """Combine per-line delivery fees into an order summary.

    Each distinct line is charged its fee once, whatever the quantity.
    """

    determined_total = ZERO
    has_undetermined = False
    for line in lines:
        result = resolve(line.product)
        if isinstance(result, Fixed):
            determined_total += result.amount
        elif isinstance(result, Undetermined):
            has_undetermined = True
    return OrderFeeSummary(determined_total=determined_total, has_undetermined=has_undetermined)


def subtotal(lines: Sequence[CartLine]) -> Decimal:
    return sum((line.line_total for line in lines), ZERO)


def delivery_display(fees: OrderFeeSummary, currency_symbol: str | None = None) -> str:
    if fees.has_undetermined:
        return TO_BE_DETERMINED
    if fees.determined_total == ZERO:
        return "Free"
    return format_money(fees.determined_total, currency_symbol)


def summarize_order(lines: Sequence[CartLine], currency_symbol: str | None = None) -> OrderSummary:
    fees = aggregate(lines)
    items_total = subtotal(lines)
    return OrderSummary(
        subtotal=items_total,
        delivery_determined=fees.determined_total,
        has_undetermined=fees.has_undetermined,
        total=items_total + fees.determined_total,
        delivery_display=delivery_display(fees, currency_symbol),
    )


def build_order_items(lines: Sequence[CartLine]) -> list[OrderItem]:
    return [
        OrderItem(
            product_id=line.product.id,
            quantity=line.quantity,
            price=line.product.price,
            delivery_fee=placement_fee(resolve(line.product)),
        )
        for line in lines
    ]
