"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory implementations of every domain port
- A controllable clock for expiry tests
- Domain services wired to the in-memory ports
"""

import re
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

import pytest

from src.domain.catalog import ProductCatalogService
from src.domain.customer_orders import CustomerOrderService
from src.domain.entities import (
    Account,
    Order,
    OrderStatus,
    PendingOrder,
    PendingRegistration,
    Product,
)
from src.domain.exceptions import DuplicateHandle
from src.domain.orders import OrderLifecycleService
from src.domain.ports import DeliveryResult
from src.domain.registration import RegistrationService

# Lowest cost bcrypt accepts; keeps hashing fast in unit tests.
FAST_BCRYPT_COST = 4


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class InMemoryAccountRepository:
    def __init__(self, clock: FakeClock) -> None:
        self.accounts: dict[str, Account] = {}
        self._clock = clock

    async def exists_by_handle(self, handle: str) -> bool:
        return handle in self.accounts

    async def create(self, handle: str, contact: str, secret_hash: str) -> Account:
        if handle in self.accounts:
            raise DuplicateHandle(handle)
        account = Account(
            handle=handle, contact=contact, created_at=self._clock(), secret_hash=secret_hash
        )
        self.accounts[handle] = account
        return replace(account, secret_hash=None)

    async def find_by_handle(self, handle: str, include_secret: bool = False) -> Account | None:
        account = self.accounts.get(handle)
        if account is None or include_secret:
            return account
        return replace(account, secret_hash=None)


class InMemoryPendingStore:
    """Pending entries keyed by one attribute, last writer wins."""

    def __init__(self, key: str) -> None:
        self.entries: dict[str, Any] = {}
        self._key = key

    async def put(self, pending: Any) -> None:
        self.entries[getattr(pending, self._key)] = pending

    async def get(self, key: str) -> Any:
        return self.entries.get(key)

    async def delete(self, key: str) -> None:
        self.entries.pop(key, None)

    async def discard(self, key: str, code: str) -> bool:
        entry = self.entries.get(key)
        if entry is None or entry.code != code:
            return False
        del self.entries[key]
        return True


class InMemoryOrderRepository:
    def __init__(self, clock: FakeClock) -> None:
        self.orders: dict[uuid.UUID, Order] = {}
        self._clock = clock

    async def create(
        self,
        customer_name: str,
        customer_email: str,
        product_id: uuid.UUID,
        product_name: str,
        quantity: int,
    ) -> Order:
        order = Order(
            id=uuid.uuid4(),
            customer_name=customer_name,
            customer_email=customer_email,
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            status=OrderStatus.PLACED,
            placed_at=self._clock(),
        )
        self.orders[order.id] = order
        return order

    async def get(self, order_id: uuid.UUID) -> Order | None:
        return self.orders.get(order_id)

    async def transition(
        self,
        order_id: uuid.UUID,
        from_status: OrderStatus,
        to_status: OrderStatus,
        dispatched_at: datetime | None = None,
        dispatched_by: str | None = None,
    ) -> Order | None:
        order = self.orders.get(order_id)
        if order is None or order.status is not from_status:
            return None
        order = replace(
            order,
            status=to_status,
            dispatched_at=dispatched_at or order.dispatched_at,
            dispatched_by=dispatched_by or order.dispatched_by,
        )
        self.orders[order_id] = order
        return order

    async def mark_received(self, order_id: uuid.UUID, received_at: datetime) -> Order | None:
        order = self.orders.get(order_id)
        if order is None or order.status is not OrderStatus.ACCEPTED or order.received_at:
            return None
        order = replace(order, received_at=received_at)
        self.orders[order_id] = order
        return order

    async def delete_placed(self, order_id: uuid.UUID) -> bool:
        order = self.orders.get(order_id)
        if order is None or order.status is not OrderStatus.PLACED:
            return False
        del self.orders[order_id]
        return True


class InMemoryProductRepository:
    def __init__(self, clock: FakeClock) -> None:
        self.products: dict[uuid.UUID, Product] = {}
        self._clock = clock

    async def create(self, name: str, price: Decimal, available: bool) -> Product:
        now = self._clock()
        product = Product(
            id=uuid.uuid4(),
            name=name,
            price=price,
            available=available,
            created_at=now,
            updated_at=now,
        )
        self.products[product.id] = product
        return product

    async def get(self, product_id: uuid.UUID) -> Product | None:
        return self.products.get(product_id)

    async def update(self, product_id: uuid.UUID, changes: dict[str, Any]) -> Product | None:
        product = self.products.get(product_id)
        if product is None:
            return None
        product = replace(product, **changes, updated_at=self._clock())
        self.products[product_id] = product
        return product

    async def delete(self, product_id: uuid.UUID) -> bool:
        return self.products.pop(product_id, None) is not None


class RecordingNotifier:
    """Records sent messages; can be told to fail or raise."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False
        self.raise_error = False

    async def send(self, to: str, subject: str, body: str) -> DeliveryResult:
        if self.raise_error:
            raise ConnectionError("SMTP unreachable")
        if self.fail:
            return DeliveryResult(success=False, error="mailbox unavailable")
        self.sent.append((to, subject, body))
        return DeliveryResult(success=True)

    def last_code(self) -> str:
        """Extract the 6-digit code from the most recent message."""
        match = re.search(r"\b(\d{6})\b", self.sent[-1][2])
        assert match is not None, f"No code in {self.sent[-1]!r}"
        return match.group(1)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def accounts(clock: FakeClock) -> InMemoryAccountRepository:
    return InMemoryAccountRepository(clock)


@pytest.fixture
def pending_registrations() -> InMemoryPendingStore:
    return InMemoryPendingStore("handle")


@pytest.fixture
def pending_orders() -> InMemoryPendingStore:
    return InMemoryPendingStore("customer_email")


@pytest.fixture
def orders(clock: FakeClock) -> InMemoryOrderRepository:
    return InMemoryOrderRepository(clock)


@pytest.fixture
def products(clock: FakeClock) -> InMemoryProductRepository:
    return InMemoryProductRepository(clock)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def registration_service(
    accounts: InMemoryAccountRepository,
    pending_registrations: InMemoryPendingStore,
    notifier: RecordingNotifier,
    clock: FakeClock,
) -> RegistrationService:
    return RegistrationService(
        accounts=accounts,
        pending=pending_registrations,
        notifier=notifier,
        bcrypt_cost=FAST_BCRYPT_COST,
        clock=clock,
    )


@pytest.fixture
def order_lifecycle_service(
    orders: InMemoryOrderRepository, notifier: RecordingNotifier, clock: FakeClock
) -> OrderLifecycleService:
    return OrderLifecycleService(orders=orders, notifier=notifier, clock=clock)


@pytest.fixture
def customer_order_service(
    orders: InMemoryOrderRepository,
    pending_orders: InMemoryPendingStore,
    products: InMemoryProductRepository,
    notifier: RecordingNotifier,
    clock: FakeClock,
) -> CustomerOrderService:
    return CustomerOrderService(
        orders=orders,
        pending=pending_orders,
        products=products,
        notifier=notifier,
        clock=clock,
    )


@pytest.fixture
def catalog_service(products: InMemoryProductRepository) -> ProductCatalogService:
    return ProductCatalogService(products=products)


@pytest.fixture
async def placed_order(orders: InMemoryOrderRepository) -> Order:
    return await orders.create(
        customer_name="Ada",
        customer_email="ada@example.com",
        product_id=uuid.uuid4(),
        product_name="Margherita",
        quantity=2,
    )


@pytest.fixture
def pending_registration_factory(clock: FakeClock):
    def make(handle: str = "chef1", code: str = "123456", ttl: int = 600) -> PendingRegistration:
        return PendingRegistration(
            handle=handle,
            contact=f"{handle}@x.com",
            secret_hash="$2b$04$notarealhash",
            code=code,
            created_at=clock(),
            expires_at=clock() + timedelta(seconds=ttl),
        )

    return make


@pytest.fixture
def pending_order_factory(clock: FakeClock):
    def make(
        email: str = "ada@example.com", code: str = "123456", product_id: uuid.UUID | None = None
    ) -> PendingOrder:
        return PendingOrder(
            customer_email=email,
            customer_name="Ada",
            product_id=product_id or uuid.uuid4(),
            product_name="Margherita",
            quantity=1,
            code=code,
            created_at=clock(),
            expires_at=clock() + timedelta(seconds=600),
        )

    return make
