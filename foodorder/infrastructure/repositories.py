"""In-memory repositories.

Implements the repository contracts with dictionaries guarded by a lock.
Aggregates are stored and handed out as deep copies, so a unit of work
that fails half way never leaks state into the store.

Saves check the aggregate's version stamp against the stored one and bump
it on success.

In production, these would be replaced with database persistence.
"""

import copy
import threading
from typing import Generic, TypeVar

import structlog

from foodorder.domain.base import AggregateRoot
from foodorder.domain.entities import Cart, Menu, Order
from foodorder.domain.exceptions import (
    CartErrorCode,
    ErrorCode,
    MenuErrorCode,
    NotFoundError,
    OptimisticLockError,
    OrderErrorCode,
)
from foodorder.domain.repositories import CartRepository, MenuRepository, OrderRepository
from foodorder.domain.value_objects import CartId, MenuId, OrderId, ShopId, UserId

logger = structlog.get_logger()

A = TypeVar("A", bound=AggregateRoot)


# ============================================================================
# Versioned Store
# ============================================================================


class VersionedStore(Generic[A]):
    """Dictionary of aggregate snapshots keyed by id, with version checks."""

    def __init__(self, aggregate_type: str, not_found_code: ErrorCode) -> None:
        self.aggregate_type = aggregate_type
        self.not_found_code = not_found_code
        self.lock = threading.RLock()
        self._items: dict[str, A] = {}

    def save(self, aggregate: A) -> A:
        """Store a snapshot of the aggregate.

        Args:
            aggregate: Aggregate to store. Its version is bumped in place.

        Returns:
            The same aggregate.

        Raises:
            OptimisticLockError: If the aggregate's version is stale.
        """
        key = str(aggregate.id)
        with self.lock:
            stored = self._items.get(key)
            current = stored.version if stored is not None else 0
            if aggregate.version != current:
                logger.warning(
                    "Optimistic lock conflict",
                    aggregate_type=self.aggregate_type,
                    aggregate_id=key,
                    version=aggregate.version,
                    stored_version=current,
                )
                raise OptimisticLockError(self.aggregate_type, key, aggregate.version, current)
            aggregate.version = current + 1
            snapshot = copy.deepcopy(aggregate)
            snapshot.clear_domain_events()
            self._items[key] = snapshot
        return aggregate

    def get(self, key: str) -> A | None:
        with self.lock:
            stored = self._items.get(key)
            return copy.deepcopy(stored) if stored is not None else None

    def require(self, key: str) -> A:
        found = self.get(key)
        if found is None:
            raise NotFoundError(self.not_found_code, key)
        return found

    def contains(self, key: str) -> bool:
        with self.lock:
            return key in self._items

    def remove(self, key: str) -> A | None:
        with self.lock:
            return self._items.pop(key, None)

    def values(self) -> list[A]:
        with self.lock:
            return [copy.deepcopy(item) for item in self._items.values()]


# ============================================================================
# Cart Repository
# ============================================================================


class InMemoryCartRepository(CartRepository):
    """In-memory cart repository. Each user has at most one cart."""

    def __init__(self) -> None:
        self._store: VersionedStore[Cart] = VersionedStore("Cart", CartErrorCode.CART_NOT_FOUND)
        self._by_user_id: dict[UserId, str] = {}

    def save(self, cart: Cart) -> Cart:
        """Save a cart.

        Raises:
            OptimisticLockError: If the version is stale, or if a different
                cart already exists for the same user.
        """
        with self._store.lock:
            existing = self._by_user_id.get(cart.user_id)
            if existing is not None and existing != str(cart.id):
                raise OptimisticLockError("Cart", str(cart.id), cart.version, 0)
            self._store.save(cart)
            self._by_user_id[cart.user_id] = str(cart.id)
        return cart

    def find_by_id(self, cart_id: CartId) -> Cart:
        return self._store.require(str(cart_id))

    def find_by_id_optional(self, cart_id: CartId) -> Cart | None:
        return self._store.get(str(cart_id))

    def find_by_user_id(self, user_id: UserId) -> Cart:
        cart = self.find_by_user_id_optional(user_id)
        if cart is None:
            raise NotFoundError(CartErrorCode.CART_NOT_FOUND, str(user_id))
        return cart

    def find_by_user_id_optional(self, user_id: UserId) -> Cart | None:
        with self._store.lock:
            cart_id = self._by_user_id.get(user_id)
            return self._store.get(cart_id) if cart_id is not None else None

    def exists_by_id(self, cart_id: CartId) -> bool:
        return self._store.contains(str(cart_id))

    def exists_by_user_id(self, user_id: UserId) -> bool:
        with self._store.lock:
            return user_id in self._by_user_id

    def delete(self, cart: Cart) -> None:
        self.delete_by_id(cart.id)

    def delete_by_id(self, cart_id: CartId) -> None:
        with self._store.lock:
            removed = self._store.remove(str(cart_id))
            if removed is not None:
                self._by_user_id.pop(removed.user_id, None)

    def delete_by_user_id(self, user_id: UserId) -> None:
        with self._store.lock:
            cart_id = self._by_user_id.pop(user_id, None)
            if cart_id is not None:
                self._store.remove(cart_id)


# ============================================================================
# Order Repository
# ============================================================================


class InMemoryOrderRepository(OrderRepository):
    """In-memory order repository."""

    def __init__(self) -> None:
        self._store: VersionedStore[Order] = VersionedStore(
            "Order", OrderErrorCode.ORDER_NOT_FOUND
        )

    def save(self, order: Order) -> Order:
        return self._store.save(order)

    def find_by_id(self, order_id: OrderId) -> Order:
        return self._store.require(str(order_id))

    def find_by_id_optional(self, order_id: OrderId) -> Order | None:
        return self._store.get(str(order_id))

    def find_by_user_id(self, user_id: UserId) -> list[Order]:
        orders = [o for o in self._store.values() if o.belongs_to_user(user_id)]
        orders.sort(key=lambda o: o.order_time)
        return orders

    def exists_by_id(self, order_id: OrderId) -> bool:
        return self._store.contains(str(order_id))

    def delete(self, order: Order) -> None:
        self._store.remove(str(order.id))


# ============================================================================
# Menu Repository
# ============================================================================


class InMemoryMenuRepository(MenuRepository):
    """In-memory menu repository."""

    def __init__(self) -> None:
        self._store: VersionedStore[Menu] = VersionedStore("Menu", MenuErrorCode.MENU_NOT_FOUND)

    def save(self, menu: Menu) -> Menu:
        return self._store.save(menu)

    def find_by_id(self, menu_id: MenuId) -> Menu:
        return self._store.require(str(menu_id))

    def find_by_id_optional(self, menu_id: MenuId) -> Menu | None:
        return self._store.get(str(menu_id))

    def find_by_shop_id(self, shop_id: ShopId) -> list[Menu]:
        menus = [m for m in self._store.values() if m.shop_id == shop_id]
        menus.sort(key=lambda m: m.created_at)
        return menus

    def exists_by_id(self, menu_id: MenuId) -> bool:
        return self._store.contains(str(menu_id))

    def delete(self, menu: Menu) -> None:
        self._store.remove(str(menu.id))


# ============================================================================
# Repository Singletons
# ============================================================================


_cart_repo: InMemoryCartRepository | None = None
_order_repo: InMemoryOrderRepository | None = None
_menu_repo: InMemoryMenuRepository | None = None


def get_cart_repository() -> InMemoryCartRepository:
    """Get cart repository singleton."""
    global _cart_repo
    if _cart_repo is None:
        _cart_repo = InMemoryCartRepository()
    return _cart_repo


def get_order_repository() -> InMemoryOrderRepository:
    """Get order repository singleton."""
    global _order_repo
    if _order_repo is None:
        _order_repo = InMemoryOrderRepository()
    return _order_repo


def get_menu_repository() -> InMemoryMenuRepository:
    """Get menu repository singleton."""
    global _menu_repo
    if _menu_repo is None:
        _menu_repo = InMemoryMenuRepository()
    return _menu_repo


def reset_repositories() -> None:
    """Reset all repositories (for testing)."""
    global _cart_repo, _order_repo, _menu_repo
    _cart_repo = InMemoryCartRepository()
    _order_repo = InMemoryOrderRepository()
    _menu_repo = InMemoryMenuRepository()
