"""
Notification messages and delivery helper.

Services never call the gateway directly: ``deliver`` turns adapter
exceptions into a failed DeliveryResult so each caller decides whether a
failure is fatal (OTP initiation) or only reported (confirmations).
"""

import logging

from .entities import Order
from .ports import DeliveryResult, NotificationGateway

logger = logging.getLogger(__name__)


async def deliver(gateway: NotificationGateway, to: str, subject: str, body: str) -> DeliveryResult:
    try:
        result = await gateway.send(to, subject, body)
    except Exception as e:
        logger.warning("Notification to %s raised: %s", to, e)
        return DeliveryResult(success=False, error=str(e))
    if not result.success:
        logger.warning("Notification to %s failed: %s", to, result.error)
    return result


def sign_up_code(restaurant: str, code: str) -> tuple[str, str]:
    return (
        "OTP confirmation",
        f"Use this OTP for the signup process {code}. Thanks from {restaurant}.",
    )


def welcome(restaurant: str, handle: str) -> tuple[str, str]:
    return (
        "Successful sign up!",
        f"Thanks {handle} for choosing {restaurant}.",
    )


def order_code(restaurant: str, code: str, product_name: str, quantity: int) -> tuple[str, str]:
    return (
        "Order OTP confirmation",
        f"Use this OTP to confirm your order of {quantity} {product_name}: {code}. "
        f"Thanks from {restaurant}.",
    )


def order_placed(restaurant: str, order: Order) -> tuple[str, str]:
    return (
        "Order placed",
        f"Thanks, {order.customer_name}. Your order {order.id} for {order.quantity} "
        f"{order.product_name} has been placed. From {restaurant}.",
    )


def order_accepted(restaurant: str, order: Order) -> tuple[str, str]:
    return (
        "Order Accepted",
        f"Thanks, {order.customer_name} for choosing us and ordering {order.quantity} "
        f"{order.product_name}. Please order again. From {restaurant}.",
    )
