"""
Customer order domain service - OTP-verified placement, cancellation and receipt.

Placement mirrors admin sign-up: the unverified order is written to the
PendingOrderRepository keyed by customer email, the code is emailed, and
only a matching code promotes it to a PLACED order.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import UUID

from . import notifications
from .entities import Order, OrderStatus, PendingOrder
from .exceptions import (
    BadRequest,
    Conflict,
    DependencyFailure,
    InvalidCode,
    NotFound,
    service_boundary,
)
from .ids import parse_id
from .otp import codes_match, generate_code, utcnow
from .ports import NotificationGateway, OrderRepository, PendingOrderRepository, ProductRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderPending:
    customer_email: str
    expires_in_seconds: int


@dataclass(frozen=True)
class OrderVerified:
    order: Order
    notified: bool


@dataclass
class CustomerOrderService:
    """Domain service for customer-facing order operations."""

    orders: OrderRepository
    pending: PendingOrderRepository
    products: ProductRepository
    notifier: NotificationGateway
    restaurant_name: str = "Innocent Restaurant"
    ttl_seconds: int = 600
    code_digits: int = 6
    clock: Callable[[], datetime] = field(default=utcnow)

    @service_boundary("An unexpected error occurred while placing an order")
    async def place_order(
        self,
        product_id: str | UUID,
        customer_name: str,
        customer_email: str,
        quantity: int,
    ) -> OrderPending:
        """
        Hold an order for a product and email the customer a code.

        Raises:
            BadRequest: If the product id is malformed, a field is blank,
                or ``quantity`` is below 1
            NotFound: If the product does not exist
            Conflict: If the product is not available
            DependencyFailure: If the code could not be sent
        """
        pid = parse_id(product_id)
        customer_name = customer_name.strip()
        customer_email = customer_email.strip().lower()
        if not customer_name or not customer_email:
            raise BadRequest("All fields required!")
        if quantity < 1:
            raise BadRequest("Quantity must be at least 1")

        product = await self.products.get(pid)
        if product is None:
            raise NotFound("Product not found!")
        if not product.available:
            raise Conflict("Product is not available")

        now = self.clock()
        code = generate_code(self.code_digits)
        await self.pending.put(
            PendingOrder(
                customer_email=customer_email,
                customer_name=customer_name,
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                code=code,
                created_at=now,
                expires_at=now + timedelta(seconds=self.ttl_seconds),
            )
        )

        subject, body = notifications.order_code(self.restaurant_name, code, product.name, quantity)
        result = await notifications.deliver(self.notifier, customer_email, subject, body)
        if not result.success:
            await self.pending.discard(customer_email, code)
            raise DependencyFailure("Could not send the OTP, please try again")

        logger.info("Order code sent to %s for product %s", customer_email, pid)
        return OrderPending(customer_email=customer_email, expires_in_seconds=self.ttl_seconds)

    @service_boundary("An unexpected error occurred while verifying an OTP")
    async def verify_order(self, customer_email: str, code: str) -> OrderVerified:
        """
        Promote a pending order to PLACED.

        Raises:
            BadRequest: If email or code is blank
            NotFound: If there is no live pending order for the email, or the
                product was deleted since (entry is discarded)
            InvalidCode: If ``code`` does not match (entry is left unchanged)
            Conflict: If the product is no longer available (entry is discarded)
        """
        customer_email = customer_email.strip().lower()
        if not customer_email or not code:
            raise BadRequest("Invalid otp")

        entry = await self.pending.get(customer_email)
        if entry is not None and entry.is_expired(self.clock()):
            await self.pending.discard(customer_email, entry.code)
            entry = None
        if entry is None:
            raise NotFound("No pending order found, please order again")

        if not codes_match(entry.code, code):
            raise InvalidCode("Wrong otp")

        # The catalog may have changed since the code was sent.
        product = await self.products.get(entry.product_id)
        if product is None or not product.available:
            await self.pending.discard(customer_email, entry.code)
            if product is None:
                raise NotFound("Product not found!")
            raise Conflict("Product is not available")

        order = await self.orders.create(
            customer_name=entry.customer_name,
            customer_email=entry.customer_email,
            product_id=product.id,
            product_name=product.name,
            quantity=entry.quantity,
        )
        await self.pending.delete(customer_email)
        logger.info("Order %s placed by %s", order.id, customer_email)

        subject, body = notifications.order_placed(self.restaurant_name, order)
        result = await notifications.deliver(self.notifier, order.customer_email, subject, body)
        return OrderVerified(order=order, notified=result.success)

    @service_boundary("An unexpected error occurred while cancelling an order")
    async def cancel_order(self, order_id: str | UUID) -> Order:
        """
        Cancel a PLACED order. The record is kept with status CANCELLED.

        Raises:
            BadRequest: If ``order_id`` is malformed
            NotFound: If the order is missing or already terminal
        """
        oid = parse_id(order_id)
        order = await self.orders.transition(oid, OrderStatus.PLACED, OrderStatus.CANCELLED)
        if order is None:
            raise NotFound("Order not found!")
        logger.info("Order %s cancelled", oid)
        return order

    @service_boundary("An unexpected error occurred while confirming an order")
    async def confirm_receipt(self, order_id: str | UUID) -> Order:
        """
        Record that the customer received an ACCEPTED order.

        Raises:
            BadRequest: If ``order_id`` is malformed
            NotFound: If the order is missing, not accepted, or already received
        """
        oid = parse_id(order_id)
        order = await self.orders.mark_received(oid, self.clock())
        if order is None:
            raise NotFound("Order not found!")
        logger.info("Order %s received", oid)
        return order
