"""Per-item delivery fee resolution and display."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, Optional

from ..config import settings
from ..models.domain import DeliveryFeeResult, Fixed, Free, Product, Undetermined

FeeKind = Literal["free", "fixed", "undetermined"]

ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class FeeBadge:
    kind: FeeKind
    amount: Optional[Decimal]
    display_text: str


def resolve(product: Product) -> DeliveryFeeResult:
    """Resolve a product's delivery fee; first matching rule wins.

    1. ``free_delivery`` -> Free, regardless of any custom fee.
    2. custom fee enabled and present -> Fixed(custom fee).
    3. anything else, including an enabled fee with no value -> Undetermined.
    """

    if product.free_delivery:
        return Free()
    if product.custom_delivery_fee_enabled and product.custom_delivery_fee is not None:
        return Fixed(Decimal(str(product.custom_delivery_fee)))
    return Undetermined()


def fee_kind(result: DeliveryFeeResult) -> FeeKind:
    if isinstance(result, Free):
        return "free"
    if isinstance(result, Fixed):
        return "fixed"
    return "undetermined"


def format_money(amount: Decimal, currency_symbol: str | None = None) -> str:
    symbol = settings.currency_symbol if currency_symbol is None else currency_symbol
    return f"{symbol}{amount:,.2f}"


def describe_fee(result: DeliveryFeeResult, currency_symbol: str | None = None) -> FeeBadge:
    """Badge text shown next to a product card."""

    if isinstance(result, Free):
        return FeeBadge(kind="free", amount=ZERO, display_text="Free Delivery")
    if isinstance(result, Fixed):
        return FeeBadge(
            kind="fixed",
            amount=result.amount,
            display_text=f"{format_money(result.amount, currency_symbol)} delivery",
        )
    return FeeBadge(kind="undetermined", amount=None, display_text="Delivery at checkout")


def placement_fee(result: DeliveryFeeResult) -> Decimal:
    """Numeric fee for the order placement service.

    The placement service has no way to express an unknown charge, so
    ``Undetermined`` becomes zero here and nowhere else.
    """

    if isinstance(result, Fixed):
        return result.amount
    return ZERO
