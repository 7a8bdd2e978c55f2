"""Domain layer - Aggregates, value objects, domain events, repository contracts.

This module exports the core domain building blocks following DDD patterns:

- **Entities**: Objects with identity (Menu, OptionGroup, Cart, Order)
- **Value Objects**: Immutable objects compared by value (Money, Option, typed IDs)
- **Domain Events**: Represent significant domain occurrences
- **Exceptions**: Domain-specific errors with stable error codes

Example usage:
    from foodorder.domain import Cart, MenuId, ShopId, UserId

    cart = Cart.create(UserId.of("user-1"))
    cart.add_item(ShopId.of("shop-a"), MenuId.of("menu-1"), quantity=2)
    cart.add_item(ShopId.of("shop-a"), MenuId.of("menu-1"), quantity=3)
    cart.items[0].quantity  # 5

    order = cart.place_order()
    cart.is_empty  # True
"""

# Base classes
from foodorder.domain.base import AggregateRoot, DomainEvent, Entity, ValueObject

# Entities
from foodorder.domain.entities import (
    MAX_REQUIRED_OPTION_GROUPS,
    Cart,
    CartLineItem,
    Menu,
    OptionGroup,
    Order,
    OrderLineItem,
)

# Domain Events
from foodorder.domain.events import (
    EVENT_REGISTRY,
    CartItemAdded,
    MenuOpened,
    OrderPlaced,
    get_event_class,
)

# Exceptions
from foodorder.domain.exceptions import (
    CartEmptyError,
    CartError,
    CartErrorCode,
    CommonErrorCode,
    CurrencyMismatchError,
    DomainError,
    ErrorCode,
    ExternalServiceError,
    InvalidMoneyError,
    InvalidQuantityError,
    MenuError,
    MenuErrorCode,
    MoneyError,
    NotFoundError,
    OptimisticLockError,
    OrderError,
    OrderErrorCode,
)

# Repository contracts
from foodorder.domain.repositories import CartRepository, MenuRepository, OrderRepository

# Value Objects
from foodorder.domain.value_objects import (
    DEFAULT_CURRENCY,
    PLACEHOLDER_UNIT_PRICE,
    CartId,
    CartLineKey,
    EntityId,
    MenuId,
    Money,
    Option,
    OptionGroupId,
    OptionId,
    OrderId,
    ResolvedLine,
    SelectedOption,
    ShopId,
    UserId,
)

__all__ = [
    # Base
    "AggregateRoot",
    "DomainEvent",
    "Entity",
    "ValueObject",
    # Entities
    "MAX_REQUIRED_OPTION_GROUPS",
    "Cart",
    "CartLineItem",
    "Menu",
    "OptionGroup",
    "Order",
    "OrderLineItem",
    # Events
    "EVENT_REGISTRY",
    "CartItemAdded",
    "MenuOpened",
    "OrderPlaced",
    "get_event_class",
    # Exceptions
    "CartEmptyError",
    "CartError",
    "CartErrorCode",
    "CommonErrorCode",
    "CurrencyMismatchError",
    "DomainError",
    "ErrorCode",
    "ExternalServiceError",
    "InvalidMoneyError",
    "InvalidQuantityError",
    "MenuError",
    "MenuErrorCode",
    "MoneyError",
    "NotFoundError",
    "OptimisticLockError",
    "OrderError",
    "OrderErrorCode",
    # Repositories
    "CartRepository",
    "MenuRepository",
    "OrderRepository",
    # Value Objects
    "DEFAULT_CURRENCY",
    "PLACEHOLDER_UNIT_PRICE",
    "CartId",
    "CartLineKey",
    "EntityId",
    "MenuId",
    "Money",
    "Option",
    "OptionGroupId",
    "OptionId",
    "OrderId",
    "ResolvedLine",
    "SelectedOption",
    "ShopId",
    "UserId",
]
