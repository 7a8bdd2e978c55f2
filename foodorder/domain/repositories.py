"""Repository contracts.

Application services depend on these abstract seams; infrastructure
provides the implementations. ``find_by_id`` raises ``NotFoundError``
when nothing matches, the ``*_optional`` variants return None.

``save`` compares the aggregate's version stamp with the stored one and
raises ``OptimisticLockError`` on mismatch.
"""

from abc import ABC, abstractmethod

from foodorder.domain.entities import Cart, Menu, Order
from foodorder.domain.value_objects import CartId, MenuId, OrderId, ShopId, UserId


class CartRepository(ABC):
    """Load/store seam for carts."""

    @abstractmethod
    def save(self, cart: Cart) -> Cart:
        """Persist a cart and return it with its new version stamp."""

    @abstractmethod
    def find_by_id(self, cart_id: CartId) -> Cart:
        ...

    @abstractmethod
    def find_by_id_optional(self, cart_id: CartId) -> Cart | None:
        ...

    @abstractmethod
    def find_by_user_id(self, user_id: UserId) -> Cart:
        ...

    @abstractmethod
    def find_by_user_id_optional(self, user_id: UserId) -> Cart | None:
        ...

    @abstractmethod
    def exists_by_id(self, cart_id: CartId) -> bool:
        ...

    @abstractmethod
    def exists_by_user_id(self, user_id: UserId) -> bool:
        ...

    @abstractmethod
    def delete(self, cart: Cart) -> None:
        ...

    @abstractmethod
    def delete_by_id(self, cart_id: CartId) -> None:
        ...

    @abstractmethod
    def delete_by_user_id(self, user_id: UserId) -> None:
        ...


class OrderRepository(ABC):
    """Load/store seam for orders."""

    @abstractmethod
    def save(self, order: Order) -> Order:
        """Persist an order and return it with its new version stamp."""

    @abstractmethod
    def find_by_id(self, order_id: OrderId) -> Order:
        ...

    @abstractmethod
    def find_by_id_optional(self, order_id: OrderId) -> Order | None:
        ...

    @abstractmethod
    def find_by_user_id(self, user_id: UserId) -> list[Order]:
        """Orders of a user, oldest first."""

    @abstractmethod
    def exists_by_id(self, order_id: OrderId) -> bool:
        ...

    @abstractmethod
    def delete(self, order: Order) -> None:
        ...


class MenuRepository(ABC):
    """Load/store seam for menus."""

    @abstractmethod
    def save(self, menu: Menu) -> Menu:
        """Persist a menu and return it with its new version stamp."""

    @abstractmethod
    def find_by_id(self, menu_id: MenuId) -> Menu:
        ...

    @abstractmethod
    def find_by_id_optional(self, menu_id: MenuId) -> Menu | None:
        ...

    @abstractmethod
    def find_by_shop_id(self, shop_id: ShopId) -> list[Menu]:
        ...

    @abstractmethod
    def exists_by_id(self, menu_id: MenuId) -> bool:
        ...

    @abstractmethod
    def delete(self, menu: Menu) -> None:
        ...
