"""Repository adapters - Database implementations."""

from .postgres import (
    PostgresAccountRepository,
    PostgresOrderRepository,
    PostgresPendingOrderRepository,
    PostgresPendingRegistrationRepository,
    PostgresProductRepository,
    run_migrations,
)

__all__ = [
    "PostgresAccountRepository",
    "PostgresOrderRepository",
    "PostgresPendingOrderRepository",
    "PostgresPendingRegistrationRepository",
    "PostgresProductRepository",
    "run_migrations",
]
