"""
Unit tests for API request/response models.

Tests Pydantic model validation and camelCase wire format.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.api.models import (
    AccountOut,
    AddProductRequest,
    AdminSignUpRequest,
    AdminVerificationRequest,
    PlaceOrderRequest,
    UpdateProductRequest,
)
from src.domain.entities import Account


class TestAdminSignUpRequest:
    def test_accepts_camel_case(self) -> None:
        request = AdminSignUpRequest.model_validate(
            {"adminName": "chef1", "adminEmail": "chef1@x.com", "adminPassword": "pw123"}
        )
        assert request.admin_name == "chef1"
        assert request.admin_email == "chef1@x.com"
        assert request.admin_password == "pw123"

    def test_accepts_field_names(self) -> None:
        request = AdminSignUpRequest(
            admin_name="chef1", admin_email="chef1@x.com", admin_password="pw123"
        )
        assert request.admin_name == "chef1"

    def test_invalid_email_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            AdminSignUpRequest.model_validate(
                {"adminName": "chef1", "adminEmail": "nope", "adminPassword": "pw123"}
            )
        assert "adminEmail" in str(exc_info.value)

    def test_empty_password_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AdminSignUpRequest(admin_name="chef1", admin_email="chef1@x.com", admin_password="")


class TestAdminVerificationRequest:
    def test_numeric_code(self) -> None:
        request = AdminVerificationRequest.model_validate({"adminName": "chef1", "otp": "012345"})
        assert request.otp == "012345"

    def test_non_numeric_code_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AdminVerificationRequest.model_validate({"adminName": "chef1", "otp": "12a456"})


class TestProductRequests:
    def test_price_parsed_as_decimal(self) -> None:
        request = AddProductRequest(name="Margherita", price="9.50")
        assert request.price == Decimal("9.50")
        assert request.available is True

    def test_negative_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AddProductRequest(name="Margherita", price="-0.01")

    def test_too_many_decimal_places_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AddProductRequest(name="Margherita", price="9.505")

    def test_update_all_optional(self) -> None:
        assert UpdateProductRequest().model_dump(exclude_none=True) == {}


class TestPlaceOrderRequest:
    def test_quantity_defaults_to_one(self) -> None:
        request = PlaceOrderRequest(name="Ada", email="ada@example.com")
        assert request.quantity == 1

    def test_zero_quantity_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PlaceOrderRequest(name="Ada", email="ada@example.com", quantity=0)


class TestAccountOut:
    def test_serializes_camel_case_without_secret(self) -> None:
        created = datetime(2024, 5, 1, tzinfo=timezone.utc)
        account = Account(
            handle="chef1", contact="chef1@x.com", created_at=created, secret_hash="$2b$hash"
        )

        dumped = AccountOut.from_account(account).model_dump(by_alias=True)

        assert dumped == {"handle": "chef1", "contact": "chef1@x.com", "createdAt": created}
