"""Domain events for the food ordering system.

Domain events represent significant occurrences in the domain. Aggregates
buffer them; the application layer drains the buffer after a successful
save. Delivery to other systems is not handled here.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from foodorder.domain.base import DomainEvent


# ============================================================================
# Menu Events
# ============================================================================


@dataclass(frozen=True)
class MenuOpened(DomainEvent):
    """Event raised when a menu passes the publication rules and opens."""

    event_type: ClassVar[str] = "menu.opened"

    menu_id: str = ""
    shop_id: str = ""
    menu_name: str = ""
    description: str = ""

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "menu_id": self.menu_id,
            "shop_id": self.shop_id,
            "menu_name": self.menu_name,
            "description": self.description,
        }


# ============================================================================
# Cart Events
# ============================================================================


@dataclass(frozen=True)
class CartItemAdded(DomainEvent):
    """Event raised when an item is added to a cart.

    ``quantity`` is the amount added by this call, not the merged line total.
    """

    event_type: ClassVar[str] = "cart.item_added"

    cart_id: str = ""
    user_id: str = ""
    shop_id: str = ""
    menu_id: str = ""
    quantity: int = 0

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "cart_id": self.cart_id,
            "user_id": self.user_id,
            "shop_id": self.shop_id,
            "menu_id": self.menu_id,
            "quantity": self.quantity,
        }


# ============================================================================
# Order Events
# ============================================================================


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """Event raised when an order is created from a cart."""

    event_type: ClassVar[str] = "order.placed"

    order_id: str = ""
    user_id: str = ""
    shop_id: str = ""
    total_amount: str = "0.00"
    currency: str = "KRW"

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "order_id": self.order_id,
            "user_id": self.user_id,
            "shop_id": self.shop_id,
            "total_amount": self.total_amount,
            "currency": self.currency,
        }


# ============================================================================
# Event Registry
# ============================================================================


EVENT_REGISTRY: dict[str, type[DomainEvent]] = {
    MenuOpened.event_type: MenuOpened,
    CartItemAdded.event_type: CartItemAdded,
    OrderPlaced.event_type: OrderPlaced,
}


def get_event_class(event_type: str) -> type[DomainEvent] | None:
    """Get event class by event type string.

    Args:
        event_type: Event type identifier (e.g., 'cart.item_added').

    Returns:
        Event class if found, None otherwise.
    """
    return EVENT_REGISTRY.get(event_type)
