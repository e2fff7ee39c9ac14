"""Checkout endpoints: order totals, delivery point validation, order request."""

from __future__ import annotations

import logging
from typing import Sequence

from fastapi import APIRouter, HTTPException, status

from ...models.domain import CartLine
from ...schemas.catalog import DeliveryBadgeModel, vendors_by_id
from ...schemas.checkout import (
    CheckoutSummaryRequest,
    LineFeeModel,
    LocationValidationRequest,
    LocationValidationResponse,
    OrderItemModel,
    OrderRequestModel,
    OrderRequestResponse,
    OrderSummaryResponse,
    VendorLocationCheckModel,
)
from ...services.cart import OrderSummary, summarize_order
from ...services.checkout import DeliveryDetails, prepare_order_request
from ...services.fees import describe_fee, resolve
from ...services.location import validate_order_location

router = APIRouter(prefix="/checkout", tags=["checkout"])


def _summary_response(lines: Sequence[CartLine], summary: OrderSummary) -> OrderSummaryResponse:
    line_models = []
    for line in lines:
        badge = describe_fee(resolve(line.product))
        line_models.append(
            LineFeeModel(
                product_id=line.product.id,
                quantity=line.quantity,
                line_total=line.line_total,
                delivery=DeliveryBadgeModel(kind=badge.kind, amount=badge.amount, display_text=badge.display_text),
            )
        )
    return OrderSummaryResponse(
        subtotal=summary.subtotal,
        delivery_determined=summary.delivery_determined,
        has_undetermined=summary.has_undetermined,
        total=summary.total,
        delivery_display=summary.delivery_display,
        lines=line_models,
    )


@router.post("/summary", response_model=OrderSummaryResponse, status_code=status.HTTP_200_OK)
def order_summary(payload: CheckoutSummaryRequest) -> OrderSummaryResponse:
    lines = [line.to_domain() for line in payload.lines]
    return _summary_response(lines, summarize_order(lines))


@router.post("/validate-location", response_model=LocationValidationResponse, status_code=status.HTTP_200_OK)
def validate_location(payload: LocationValidationRequest) -> LocationValidationResponse:
    lines = [line.to_domain() for line in payload.lines]
    try:
        result = validate_order_location(
            payload.point.to_domain(),
            lines,
            vendors_by_id(payload.vendors),
            policy=payload.policy,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return LocationValidationResponse(
        valid=result.valid,
        policy=result.policy,
        checks=[
            VendorLocationCheckModel(
                vendor_id=check.vendor_id,
                valid=check.valid,
                distance_km=check.distance_km,
                max_radius_km=check.max_radius_km,
                message=check.message(),
            )
            for check in result.checks
        ],
    )


@router.post("/order-request", response_model=OrderRequestResponse, status_code=status.HTTP_200_OK)
def order_request(payload: OrderRequestModel) -> OrderRequestResponse:
    lines = [line.to_domain() for line in payload.lines]
    details = DeliveryDetails(
        name=payload.delivery_name,
        phone=payload.delivery_phone,
        address=payload.delivery_address,
        instructions=payload.delivery_instructions,
        payment_method=payload.payment_method,
    )
    try:
        request = prepare_order_request(
            payload.point.to_domain() if payload.point else None,
            lines,
            vendors_by_id(payload.vendors),
            details=details,
            policy=payload.policy,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error preparing order request: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to prepare order: {str(exc)}",
        ) from exc

    return OrderRequestResponse(
        items=[
            OrderItemModel(
                product_id=item.product_id,
                quantity=item.quantity,
                price=item.price,
                delivery_fee=item.delivery_fee,
            )
            for item in request.items
        ],
        delivery_latitude=request.delivery_latitude,
        delivery_longitude=request.delivery_longitude,
        delivery_name=request.details.name,
        delivery_phone=request.details.phone,
        delivery_address=request.details.address,
        delivery_instructions=request.details.instructions,
        payment_method=request.details.payment_method,
        notes=request.notes,
        summary=_summary_response(lines, request.summary),
    )
