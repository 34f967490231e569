# API Routes

from .products import router as products_router
from .cart import router as cart_router
from .orders import router as orders_router
from .custom_requests import router as custom_requests_router
from .uploads import router as uploads_router
from .admin import router as admin_router

__all__ = [
    "products_router",
    "cart_router",
    "orders_router",
    "custom_requests_router",
    "uploads_router",
    "admin_router",
]
