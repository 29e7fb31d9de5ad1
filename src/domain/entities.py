"""
Domain entities - Records owned by the stores.

Plain dataclasses shared by services and adapters. Timestamps are
timezone-aware UTC datetimes.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class OrderStatus(str, Enum):
    """
    Order lifecycle states.

    Transitions (forward-only):
    - PLACED -> ACCEPTED   (admin accepts)
    - PLACED -> REJECTED   (admin rejects)
    - PLACED -> CANCELLED  (customer cancels)

    ACCEPTED, REJECTED and CANCELLED are terminal.
    """

    PLACED = "placed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.PLACED


@dataclass(frozen=True)
class Account:
    """Admin account. ``secret_hash`` is only populated when explicitly requested."""

    handle: str
    contact: str
    created_at: datetime
    secret_hash: str | None = None

    def public(self) -> dict[str, str]:
        return {
            "handle": self.handle,
            "contact": self.contact,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class PendingRegistration:
    """Unconfirmed sign-up awaiting its one-time code."""

    handle: str
    contact: str
    secret_hash: str
    code: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class PendingOrder:
    """Unverified customer order awaiting its one-time code, keyed by email."""

    customer_email: str
    customer_name: str
    product_id: UUID
    product_name: str
    quantity: int
    code: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class Order:
    id: UUID
    customer_name: str
    customer_email: str
    product_id: UUID
    product_name: str
    quantity: int
    status: OrderStatus
    placed_at: datetime
    dispatched_at: datetime | None = None
    dispatched_by: str | None = None
    received_at: datetime | None = None


@dataclass(frozen=True)
class Product:
    id: UUID
    name: str
    price: Decimal
    available: bool
    created_at: datetime
    updated_at: datetime
