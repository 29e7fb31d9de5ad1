"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for the restaurant
backend: admin registration, product catalog, and the order lifecycle.
It defines its own port interfaces for infrastructure abstraction.
"""

from .catalog import ProductCatalogService
from .customer_orders import CustomerOrderService
from .entities import Account, Order, OrderStatus, PendingOrder, PendingRegistration, Product
from .exceptions import (
    BadRequest,
    Conflict,
    DependencyFailure,
    DuplicateHandle,
    ErrorKind,
    InvalidCode,
    NotFound,
    ServiceError,
    Unauthorized,
    Unexpected,
)
from .orders import OrderLifecycleService
from .ports import (
    AccountRepository,
    DeliveryResult,
    NotificationGateway,
    OrderRepository,
    PendingOrderRepository,
    PendingRegistrationRepository,
    ProductRepository,
)
from .registration import RegistrationService

__all__ = [
    "Account",
    "AccountRepository",
    "BadRequest",
    "Conflict",
    "CustomerOrderService",
    "DeliveryResult",
    "DependencyFailure",
    "DuplicateHandle",
    "ErrorKind",
    "InvalidCode",
    "NotFound",
    "NotificationGateway",
    "Order",
    "OrderLifecycleService",
    "OrderRepository",
    "OrderStatus",
    "PendingOrder",
    "PendingOrderRepository",
    "PendingRegistration",
    "PendingRegistrationRepository",
    "Product",
    "ProductCatalogService",
    "ProductRepository",
    "RegistrationService",
    "ServiceError",
    "Unauthorized",
    "Unexpected",
]
