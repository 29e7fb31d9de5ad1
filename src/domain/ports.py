"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol
from uuid import UUID

from .entities import Account, Order, OrderStatus, PendingOrder, PendingRegistration, Product


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a notification send."""

    success: bool
    error: str | None = None


class AccountRepository(Protocol):
    """Port interface for admin account persistence (the credential store)."""

    async def exists_by_handle(self, handle: str) -> bool:
        """Return True if an account with ``handle`` exists."""
        ...

    async def create(self, handle: str, contact: str, secret_hash: str) -> Account:
        """
        Persist a new account.

        Raises:
            DuplicateHandle: If ``handle`` is already taken
        """
        ...

    async def find_by_handle(self, handle: str, include_secret: bool = False) -> Account | None:
        """
        Look up an account by handle.

        The returned Account carries ``secret_hash`` only when
        ``include_secret`` is True.
        """
        ...


class PendingRegistrationRepository(Protocol):
    """Port interface for in-progress sign-ups, keyed by handle."""

    async def put(self, pending: PendingRegistration) -> None:
        """Insert or replace the entry for ``pending.handle`` (last writer wins)."""
        ...

    async def get(self, handle: str) -> PendingRegistration | None:
        """Return the stored entry, expired or not."""
        ...

    async def delete(self, handle: str) -> None:
        """Remove the entry for ``handle`` if present."""
        ...

    async def discard(self, handle: str, code: str) -> bool:
        """
        Remove the entry only if it still carries ``code``.

        Returns:
            True if an entry was removed
        """
        ...


class PendingOrderRepository(Protocol):
    """Port interface for unverified customer orders, keyed by email."""

    async def put(self, pending: PendingOrder) -> None:
        ...

    async def get(self, customer_email: str) -> PendingOrder | None:
        ...

    async def delete(self, customer_email: str) -> None:
        ...

    async def discard(self, customer_email: str, code: str) -> bool:
        ...


class OrderRepository(Protocol):
    """Port interface for order persistence."""

    async def create(
        self,
        customer_name: str,
        customer_email: str,
        product_id: UUID,
        product_name: str,
        quantity: int,
    ) -> Order:
        """Persist a new order in PLACED status."""
        ...

    async def get(self, order_id: UUID) -> Order | None:
        ...

    async def transition(
        self,
        order_id: UUID,
        from_status: OrderStatus,
        to_status: OrderStatus,
        dispatched_at: datetime | None = None,
        dispatched_by: str | None = None,
    ) -> Order | None:
        """
        Atomically move an order from one status to another.

        Returns:
            The updated Order, or None if no order with ``order_id`` is
            currently in ``from_status``
        """
        ...

    async def mark_received(self, order_id: UUID, received_at: datetime) -> Order | None:
        """
        Record receipt of an ACCEPTED order that has not been received yet.

        Returns:
            The updated Order, or None if no such order exists
        """
        ...

    async def delete_placed(self, order_id: UUID) -> bool:
        """
        Hard-delete an order that is still PLACED.

        Returns:
            True if a row was deleted
        """
        ...


class ProductRepository(Protocol):
    """Port interface for the product catalog."""

    async def create(self, name: str, price: Decimal, available: bool) -> Product:
        ...

    async def get(self, product_id: UUID) -> Product | None:
        ...

    async def update(self, product_id: UUID, changes: dict[str, Any]) -> Product | None:
        """Apply ``changes`` (subset of name/price/available); None if missing."""
        ...

    async def delete(self, product_id: UUID) -> bool:
        ...


class NotificationGateway(Protocol):
    """Port interface for message delivery."""

    async def send(self, to: str, subject: str, body: str) -> DeliveryResult:
        """
        Send a message to ``to``.

        Args:
            to: Recipient address
            subject: Message subject line
            body: Plain-text body
        """
        ...
