"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Services are stateless, so a fresh one per request is cheap and shares
nothing mutable with other requests.
"""

from fastapi import Depends, Request
from psycopg_pool import AsyncConnectionPool

from src.adapters.repository.postgres import (
    PostgresAccountRepository,
    PostgresOrderRepository,
    PostgresPendingOrderRepository,
    PostgresPendingRegistrationRepository,
    PostgresProductRepository,
)
from src.adapters.smtp.console import ConsoleNotificationGateway
from src.config.settings import Settings, get_settings
from src.domain.catalog import ProductCatalogService
from src.domain.customer_orders import CustomerOrderService
from src.domain.orders import OrderLifecycleService
from src.domain.registration import RegistrationService

# Module-level singleton - ConsoleNotificationGateway is stateless
_notifier = ConsoleNotificationGateway()


def get_pool(request: Request) -> AsyncConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_notifier() -> ConsoleNotificationGateway:
    """Get console notification gateway (singleton)."""
    return _notifier


def get_registration_service(
    pool: AsyncConnectionPool = Depends(get_pool),
    settings: Settings = Depends(get_settings),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the account store, pending-registration store and
    notification gateway.
    """
    return RegistrationService(
        accounts=PostgresAccountRepository(pool),
        pending=PostgresPendingRegistrationRepository(pool),
        notifier=get_notifier(),
        restaurant_name=settings.restaurant_name,
        ttl_seconds=settings.otp_ttl_seconds,
        code_digits=settings.otp_digits,
        bcrypt_cost=settings.bcrypt_cost,
    )


def get_order_lifecycle_service(
    pool: AsyncConnectionPool = Depends(get_pool),
    settings: Settings = Depends(get_settings),
) -> OrderLifecycleService:
    return OrderLifecycleService(
        orders=PostgresOrderRepository(pool),
        notifier=get_notifier(),
        restaurant_name=settings.restaurant_name,
    )


def get_customer_order_service(
    pool: AsyncConnectionPool = Depends(get_pool),
    settings: Settings = Depends(get_settings),
) -> CustomerOrderService:
    return CustomerOrderService(
        orders=PostgresOrderRepository(pool),
        pending=PostgresPendingOrderRepository(pool),
        products=PostgresProductRepository(pool),
        notifier=get_notifier(),
        restaurant_name=settings.restaurant_name,
        ttl_seconds=settings.otp_ttl_seconds,
        code_digits=settings.otp_digits,
    )


def get_catalog_service(
    pool: AsyncConnectionPool = Depends(get_pool),
) -> ProductCatalogService:
    return ProductCatalogService(products=PostgresProductRepository(pool))
