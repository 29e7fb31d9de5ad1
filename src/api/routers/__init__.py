"""
API routers.

Groups the HTTP endpoints by audience: admin account and order handling,
the product catalog, and customer-facing order operations.
"""

from fastapi import APIRouter

from src.api.routers.admin import router as admin_router
from src.api.routers.catalog import router as catalog_router
from src.api.routers.orders import router as orders_router

router = APIRouter()
router.include_router(orders_router)
router.include_router(catalog_router)
router.include_router(admin_router)

__all__ = ["router"]
