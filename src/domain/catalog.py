"""
Product catalog domain service - Admin CRUD over products.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from .entities import Product
from .exceptions import BadRequest, NotFound, service_boundary
from .ids import parse_id
from .ports import ProductRepository

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = ("name", "price", "available")


@dataclass
class ProductCatalogService:
    products: ProductRepository

    @service_boundary("An unexpected error occurred while adding a product")
    async def add_product(self, name: str, price: Decimal, available: bool = True) -> Product:
        name = name.strip()
        if not name:
            raise BadRequest("Product name is required")
        if price < 0:
            raise BadRequest("Price cannot be negative")

        product = await self.products.create(name, price, available)
        logger.info("Product %s added", product.id)
        return product

    @service_boundary("An unexpected error occurred while updating a product")
    async def update_product(self, product_id: str | UUID, changes: dict[str, Any]) -> Product:
        """
        Apply a partial update.

        Keys outside name/price/available and None values are ignored.

        Raises:
            BadRequest: If the id is malformed, nothing is left to update,
                the name is blank or the price is negative
            NotFound: If the product does not exist
        """
        pid = parse_id(product_id)
        changes = {k: v for k, v in changes.items() if k in _UPDATABLE_FIELDS and v is not None}
        if not changes:
            raise BadRequest("Nothing to update")
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise BadRequest("Product name is required")
        if "price" in changes and changes["price"] < 0:
            raise BadRequest("Price cannot be negative")

        product = await self.products.update(pid, changes)
        if product is None:
            raise NotFound("Product not found!")
        logger.info("Product %s updated (%s)", pid, ", ".join(sorted(changes)))
        return product

    @service_boundary("An unexpected error occurred while deleting a product")
    async def delete_product(self, product_id: str | UUID) -> str:
        pid = parse_id(product_id)
        if not await self.products.delete(pid):
            raise NotFound("Product not found!")
        logger.info("Product %s deleted", pid)
        return "Product deleted successfully."
