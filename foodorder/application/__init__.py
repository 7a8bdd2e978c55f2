"""Application layer module.

Contains application services (use cases) that orchestrate
domain logic and infrastructure.
"""

from foodorder.application.cart_service import (
    CartService,
    get_cart_service,
)
from foodorder.application.menu_service import (
    MenuService,
    get_menu_service,
)
from foodorder.application.order_service import (
    OrderService,
    get_order_service,
)

__all__ = [
    "CartService",
    "get_cart_service",
    "MenuService",
    "get_menu_service",
    "OrderService",
    "get_order_service",
]
