"""
Customer order routes.

Placing an order is two calls: ``/placeOrder/{productId}`` emails a code,
``/otpverify`` turns the held order into a placed one.
"""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_customer_order_service
from src.api.models import (
    ERROR_RESPONSES,
    CodeSent,
    CodeSentResponse,
    ErrorResponse,
    OrderOut,
    OrderPlacedResponse,
    OrderResponse,
    OrderVerificationRequest,
    PlaceOrderRequest,
)
from src.domain.customer_orders import CustomerOrderService

router = APIRouter(tags=["orders"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Order missing or not in a valid state"}}


@router.post(
    "/placeOrder/{product_id}",
    response_model=CodeSentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **ERROR_RESPONSES,
        404: {"model": ErrorResponse, "description": "Product not found"},
        409: {"model": ErrorResponse, "description": "Product not available"},
    },
    summary="Place an order (sends a one-time code)",
)
async def place_order(
    product_id: str,
    request_data: PlaceOrderRequest,
    service: CustomerOrderService = Depends(get_customer_order_service),
) -> CodeSentResponse:
    pending = await service.place_order(
        product_id, request_data.name, request_data.email, request_data.quantity
    )
    return CodeSentResponse(
        message="Please enter the OTP to confirm your order",
        response=CodeSent(
            contact=pending.customer_email, expires_in_seconds=pending.expires_in_seconds
        ),
    )


@router.post(
    "/otpverify",
    response_model=OrderPlacedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        **ERROR_RESPONSES,
        404: {"model": ErrorResponse, "description": "No pending order (or expired)"},
        409: {"model": ErrorResponse, "description": "Wrong code"},
    },
    summary="Verify an order code",
)
async def verify_order(
    request_data: OrderVerificationRequest,
    service: CustomerOrderService = Depends(get_customer_order_service),
) -> OrderPlacedResponse:
    verified = await service.verify_order(request_data.email, request_data.otp)
    return OrderPlacedResponse(
        message="Order placed successfully!",
        response=OrderOut.from_order(verified.order),
        notified=verified.notified,
    )


@router.delete(
    "/cancelOrder/{order_id}",
    response_model=OrderResponse,
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
    summary="Cancel a placed order",
)
async def cancel_order(
    order_id: str,
    service: CustomerOrderService = Depends(get_customer_order_service),
) -> OrderResponse:
    order = await service.cancel_order(order_id)
    return OrderResponse(message="Order cancelled", response=OrderOut.from_order(order))


@router.patch(
    "/orderConfirmation/{order_id}",
    response_model=OrderResponse,
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
    summary="Confirm receipt of an accepted order",
)
async def order_confirmation(
    order_id: str,
    service: CustomerOrderService = Depends(get_customer_order_service),
) -> OrderResponse:
    order = await service.confirm_receipt(order_id)
    return OrderResponse(message="Order received, thank you!", response=OrderOut.from_order(order))
