"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from storefront.api.cart import router as cart_router
from storefront.api.health import router as health_router
from storefront.api.products import category_router, product_type_router
from storefront.api.products import router as products_router

__all__ = [
    "cart_router",
    "category_router",
    "health_router",
    "product_type_router",
    "products_router",
]
