"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from foodorder.api.carts import router as carts_router
from foodorder.api.health import router as health_router
from foodorder.api.menus import router as menus_router
from foodorder.api.orders import router as orders_router

__all__ = [
    "carts_router",
    "health_router",
    "menus_router",
    "orders_router",
]
