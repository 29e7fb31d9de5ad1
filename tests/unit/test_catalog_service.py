"""
Unit tests for ProductCatalogService.
"""

import uuid
from decimal import Decimal

import pytest

from src.domain.catalog import ProductCatalogService
from src.domain.exceptions import BadRequest, NotFound


class TestAddProduct:
    async def test_add_product(self, catalog_service: ProductCatalogService, products) -> None:
        product = await catalog_service.add_product("  Margherita ", Decimal("9.50"))

        assert product.name == "Margherita"
        assert product.price == Decimal("9.50")
        assert product.available is True
        assert products.products[product.id] == product

    async def test_blank_name_rejected(self, catalog_service: ProductCatalogService) -> None:
        with pytest.raises(BadRequest):
            await catalog_service.add_product("  ", Decimal("1"))

    async def test_negative_price_rejected(self, catalog_service: ProductCatalogService) -> None:
        with pytest.raises(BadRequest):
            await catalog_service.add_product("Margherita", Decimal("-1"))


class TestUpdateProduct:
    async def test_partial_update(
        self, catalog_service: ProductCatalogService, products, clock
    ) -> None:
        product = await catalog_service.add_product("Margherita", Decimal("9.50"))
        clock.advance(60)

        updated = await catalog_service.update_product(
            str(product.id), {"available": False, "price": None}
        )

        assert updated.available is False
        assert updated.price == Decimal("9.50")
        assert updated.updated_at == clock.now

    async def test_unknown_fields_ignored(self, catalog_service: ProductCatalogService) -> None:
        product = await catalog_service.add_product("Margherita", Decimal("9.50"))

        with pytest.raises(BadRequest):
            await catalog_service.update_product(product.id, {"id": "x", "created_at": None})

    async def test_missing_product_not_found(self, catalog_service: ProductCatalogService) -> None:
        with pytest.raises(NotFound):
            await catalog_service.update_product(uuid.uuid4(), {"name": "Calzone"})

    async def test_negative_price_rejected(self, catalog_service: ProductCatalogService) -> None:
        product = await catalog_service.add_product("Margherita", Decimal("9.50"))

        with pytest.raises(BadRequest):
            await catalog_service.update_product(product.id, {"price": Decimal("-0.01")})


class TestDeleteProduct:
    async def test_delete_product(self, catalog_service: ProductCatalogService, products) -> None:
        product = await catalog_service.add_product("Margherita", Decimal("9.50"))

        message = await catalog_service.delete_product(str(product.id))

        assert message == "Product deleted successfully."
        assert products.products == {}

    async def test_delete_missing_not_found(self, catalog_service: ProductCatalogService) -> None:
        with pytest.raises(NotFound):
            await catalog_service.delete_product(uuid.uuid4())

    async def test_delete_malformed_id(self, catalog_service: ProductCatalogService) -> None:
        with pytest.raises(BadRequest):
            await catalog_service.delete_product("nope")
