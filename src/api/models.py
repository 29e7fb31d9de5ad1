"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Field names are camelCase on the wire.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from src.domain.entities import Account, Order, Product


class CamelModel(BaseModel):
    """Base model accepting both camelCase aliases and field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Requests


class AdminSignUpRequest(CamelModel):
    admin_name: str = Field(..., min_length=1, description="Unique admin handle")
    admin_email: EmailStr
    admin_password: str = Field(..., min_length=1)


class AdminVerificationRequest(CamelModel):
    admin_name: str = Field(..., min_length=1)
    otp: str = Field(..., pattern=r"^\d+$", description="Numeric one-time code")


class AdminSignInRequest(CamelModel):
    admin_name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AcceptOrderRequest(CamelModel):
    order_id: str = Field(..., min_length=1)
    admin: str = Field(..., min_length=1, description="Handle of the dispatching admin")


class AddProductRequest(CamelModel):
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    available: bool = True


class UpdateProductRequest(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    available: bool | None = None


class PlaceOrderRequest(CamelModel):
    name: str = Field(..., min_length=1, description="Customer name")
    email: EmailStr
    quantity: int = Field(default=1, ge=1)


class OrderVerificationRequest(CamelModel):
    email: EmailStr
    otp: str = Field(..., pattern=r"^\d+$")


# Payloads


class AccountOut(CamelModel):
    handle: str
    contact: str
    created_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountOut":
        return cls(handle=account.handle, contact=account.contact, created_at=account.created_at)


class OrderOut(CamelModel):
    id: UUID
    customer_name: str
    customer_email: str
    product_id: UUID
    product_name: str
    quantity: int
    status: str
    placed_at: datetime
    dispatched_at: datetime | None = None
    dispatched_by: str | None = None
    received_at: datetime | None = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderOut":
        return cls(
            id=order.id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            product_id=order.product_id,
            product_name=order.product_name,
            quantity=order.quantity,
            status=order.status.value,
            placed_at=order.placed_at,
            dispatched_at=order.dispatched_at,
            dispatched_by=order.dispatched_by,
            received_at=order.received_at,
        )


class ProductOut(CamelModel):
    id: UUID
    name: str
    price: Decimal
    available: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_product(cls, product: Product) -> "ProductOut":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            available=product.available,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class CodeSent(CamelModel):
    contact: str
    expires_in_seconds: int


class SignInOut(CamelModel):
    handle: str
    signed_in_at: datetime


# Envelopes


class MessageResponse(CamelModel):
    """Acknowledgment envelope; also the error shape."""

    message: str


class CodeSentResponse(MessageResponse):
    response: CodeSent


class AdminVerificationResponse(MessageResponse):
    response: AccountOut
    verification: str
    notified: bool


class AdminSignInResponse(MessageResponse):
    response: SignInOut


class OrderResponse(MessageResponse):
    response: OrderOut


class AcceptOrderResponse(OrderResponse):
    dispatch_time: datetime
    notified: bool


class OrderPlacedResponse(OrderResponse):
    notified: bool


class ProductResponse(MessageResponse):
    response: ProductOut


ErrorResponse = MessageResponse

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Bad request"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}
