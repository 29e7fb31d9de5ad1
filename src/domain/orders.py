"""
Order lifecycle domain service - Admin accept/reject.

Both operations are a single conditional write against the order store:
an order can only leave PLACED once, so a second accept (or an accept
after reject) finds nothing to update and reports NotFound.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from . import notifications
from .entities import Order, OrderStatus
from .exceptions import BadRequest, NotFound, service_boundary
from .ids import parse_id
from .otp import utcnow
from .ports import NotificationGateway, OrderRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderAccepted:
    order: Order
    notified: bool


@dataclass
class OrderLifecycleService:
    """Domain service for admin order handling."""

    orders: OrderRepository
    notifier: NotificationGateway
    restaurant_name: str = "Innocent Restaurant"
    clock: Callable[[], datetime] = field(default=utcnow)

    @service_boundary("An unexpected error occurred while accepting an order")
    async def accept(self, order_id: str | UUID, admin: str) -> OrderAccepted:
        """
        Accept a PLACED order and record who dispatched it.

        Notification failure is reported via ``notified`` and does not undo
        the transition.

        Raises:
            BadRequest: If ``order_id`` is malformed or ``admin`` is blank
            NotFound: If the order is missing or already terminal
        """
        oid = parse_id(order_id)
        admin = admin.strip()
        if not admin:
            raise BadRequest("Admin is required")

        order = await self.orders.transition(
            oid,
            OrderStatus.PLACED,
            OrderStatus.ACCEPTED,
            dispatched_at=self.clock(),
            dispatched_by=admin,
        )
        if order is None:
            raise NotFound("Order not found!")
        logger.info("Order %s accepted by %s", oid, admin)

        subject, body = notifications.order_accepted(self.restaurant_name, order)
        result = await notifications.deliver(self.notifier, order.customer_email, subject, body)
        return OrderAccepted(order=order, notified=result.success)

    @service_boundary("An unexpected error occurred while rejecting an order")
    async def reject(self, order_id: str | UUID) -> str:
        """
        Reject a PLACED order by deleting it.

        Returns:
            Acknowledgment message (the deleted record is not returned)

        Raises:
            BadRequest: If ``order_id`` is malformed
            NotFound: If the order is missing or already terminal
        """
        oid = parse_id(order_id)
        if not await self.orders.delete_placed(oid):
            raise NotFound("Order not found!")
        logger.info("Order %s rejected", oid)
        return "Order rejected successfully."
