"""
Product catalog routes.
"""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_catalog_service
from src.api.models import (
    ERROR_RESPONSES,
    AddProductRequest,
    ErrorResponse,
    MessageResponse,
    ProductOut,
    ProductResponse,
    UpdateProductRequest,
)
from src.domain.catalog import ProductCatalogService

router = APIRouter(tags=["products"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Product not found"}}


@router.post(
    "/addProduct",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Add a product",
)
async def add_product(
    request_data: AddProductRequest,
    service: ProductCatalogService = Depends(get_catalog_service),
) -> ProductResponse:
    product = await service.add_product(
        request_data.name, request_data.price, request_data.available
    )
    return ProductResponse(message="Product added", response=ProductOut.from_product(product))


@router.patch(
    "/updateProduct/{product_id}",
    response_model=ProductResponse,
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
    summary="Update a product",
)
async def update_product(
    product_id: str,
    request_data: UpdateProductRequest,
    service: ProductCatalogService = Depends(get_catalog_service),
) -> ProductResponse:
    product = await service.update_product(product_id, request_data.model_dump(exclude_none=True))
    return ProductResponse(message="Product updated", response=ProductOut.from_product(product))


@router.delete(
    "/deleteProduct/{product_id}",
    response_model=MessageResponse,
    responses={**ERROR_RESPONSES, **_NOT_FOUND},
    summary="Delete a product",
)
async def delete_product(
    product_id: str,
    service: ProductCatalogService = Depends(get_catalog_service),
) -> MessageResponse:
    return MessageResponse(message=await service.delete_product(product_id))
