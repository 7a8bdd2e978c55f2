"""Cart application service.

Orchestrates cart commands for customers:
- Adding a menu with selected options (validated against the user and shop
  collaborators before the cart is touched)
- Removing a line and clearing the cart
- Reading the cart with resolved line prices
"""

from dataclasses import dataclass

import structlog

from foodorder.application.common import ServiceResult, drain_events, parse_id
from foodorder.application.pricing import LinePriceResolver, option_ids_of
from foodorder.domain.entities import Cart
from foodorder.domain.exceptions import (
    CartError,
    CartErrorCode,
    DomainError,
    InvalidQuantityError,
)
from foodorder.domain.repositories import CartRepository
from foodorder.domain.value_objects import MenuId, Money, ShopId, UserId
from foodorder.infrastructure.repositories import get_cart_repository
from foodorder.infrastructure.shop_client import ShopApiClient, get_shop_client
from foodorder.infrastructure.user_client import UserApiClient, get_user_client

logger = structlog.get_logger()


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class CartResult(ServiceResult):
    """Result of a cart command or lookup."""

    cart: Cart | None = None
    total_price: Money | None = None
    resource_id: str | None = None


# ============================================================================
# Cart Service
# ============================================================================


class CartService:
    """Application service for carts.

    Collaborator checks run before the cart is loaded; the cart itself never
    calls a collaborator.
    """

    def __init__(
        self,
        cart_repo: CartRepository | None = None,
        shop_client: ShopApiClient | None = None,
        user_client: UserApiClient | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            cart_repo: Cart repository.
            shop_client: Shop-status and menu-info collaborator.
            user_client: User-validity collaborator.
            request_id: Request ID for correlation.
        """
        self.cart_repo = cart_repo or get_cart_repository()
        self.shop_client = shop_client or get_shop_client()
        self.user_client = user_client or get_user_client()
        self.price_resolver = LinePriceResolver(self.shop_client)
        self.request_id = request_id

    def _user_id(self, user_id: str) -> UserId:
        return parse_id(UserId, user_id, CartErrorCode.USER_ID_REQUIRED)

    async def _priced(self, cart: Cart) -> Money:
        return cart.get_total_price(await self.price_resolver.resolve(cart))

    async def get_cart(self, user_id: str) -> CartResult:
        """Get a user's cart with its resolved total.

        Args:
            user_id: Owner of the cart.

        Returns:
            CartResult with the cart, or CART_NOT_FOUND.
        """
        try:
            cart = self.cart_repo.find_by_user_id(self._user_id(user_id))
            total = await self._priced(cart)
        except DomainError as e:
            return CartResult.failed(e)
        return CartResult(cart=cart, total_price=total, resource_id=str(cart.id))

    async def add_item(
        self,
        user_id: str,
        shop_id: str,
        menu_id: str,
        option_ids: list[str] | None = None,
        quantity: int = 1,
    ) -> CartResult:
        """Add a menu with selected options to the user's cart.

        Creates the cart on first use. Adding from another shop than the
        cart's current one discards the existing items.

        Args:
            user_id: Owner of the cart.
            shop_id: Shop offering the menu.
            menu_id: Menu to add.
            option_ids: Selected option ids.
            quantity: Units to add.

        Returns:
            CartResult with the saved cart.
        """
        try:
            user = self._user_id(user_id)
            shop = parse_id(ShopId, shop_id, CartErrorCode.SHOP_ID_REQUIRED)
            menu_ref = parse_id(MenuId, menu_id, CartErrorCode.MENU_ID_REQUIRED)
            selected = option_ids_of(option_ids)
            if quantity is None or quantity <= 0:
                raise InvalidQuantityError(quantity)

            if not await self.user_client.is_valid_user(user):
                raise CartError(CartErrorCode.INVALID_USER_ID, details={"user_id": user_id})
            if not await self.shop_client.is_shop_open(shop):
                raise CartError(CartErrorCode.SHOP_NOT_OPEN, details={"shop_id": shop_id})
            menu = await self.shop_client.get_menu(shop, menu_ref)
            if menu is None or not menu.is_open:
                raise CartError(
                    CartErrorCode.MENU_NOT_AVAILABLE,
                    details={"shop_id": shop_id, "menu_id": menu_id},
                )
            if selected:
                options = await self.shop_client.get_menu_options(shop, menu_ref)
                offered = {option.option_id for option in options}
                unknown = [str(o) for o in selected if str(o) not in offered]
                if unknown:
                    raise CartError(
                        CartErrorCode.INVALID_OPTION_SELECTION,
                        details={"menu_id": menu_id, "option_ids": unknown},
                    )

            cart = self.cart_repo.find_by_user_id_optional(user) or Cart.create(user)
            previous_shop = cart.shop_id
            cart.add_item(shop, menu_ref, selected, quantity)
            self.cart_repo.save(cart)
        except DomainError as e:
            logger.warning(
                "Failed to add cart item",
                user_id=user_id,
                shop_id=shop_id,
                menu_id=menu_id,
                error_code=e.code,
                error=e.message,
                request_id=self.request_id,
            )
            return CartResult.failed(e)

        if previous_shop is not None and previous_shop != shop:
            logger.info(
                "Cart switched shop, previous items discarded",
                cart_id=str(cart.id),
                previous_shop_id=str(previous_shop),
                shop_id=shop_id,
                request_id=self.request_id,
            )
        drain_events(cart, self.request_id)
        logger.info(
            "Cart item added",
            cart_id=str(cart.id),
            user_id=user_id,
            menu_id=menu_id,
            quantity=quantity,
            line_count=cart.item_count,
            request_id=self.request_id,
        )
        return CartResult(cart=cart, resource_id=str(cart.id))

    async def remove_item(
        self,
        user_id: str,
        menu_id: str,
        option_ids: list[str] | None = None,
    ) -> CartResult:
        """Remove the line for a menu and option set. Absent lines are ignored."""
        try:
            cart = self.cart_repo.find_by_user_id(self._user_id(user_id))
            removed = cart.remove_item(
                parse_id(MenuId, menu_id, CartErrorCode.MENU_ID_REQUIRED),
                option_ids_of(option_ids),
            )
            if removed:
                self.cart_repo.save(cart)
        except DomainError as e:
            return CartResult.failed(e)

        drain_events(cart, self.request_id)
        logger.info(
            "Cart item removed" if removed else "Cart item not in cart",
            cart_id=str(cart.id),
            menu_id=menu_id,
            request_id=self.request_id,
        )
        return CartResult(cart=cart, resource_id=str(cart.id))

    async def clear_cart(self, user_id: str) -> CartResult:
        """Empty a user's cart and unset its shop."""
        try:
            cart = self.cart_repo.find_by_user_id(self._user_id(user_id))
            removed = cart.clear()
            self.cart_repo.save(cart)
        except DomainError as e:
            logger.warning(
                "Failed to clear cart",
                user_id=user_id,
                error_code=e.code,
                request_id=self.request_id,
            )
            return CartResult.failed(e)

        drain_events(cart, self.request_id)
        logger.info(
            "Cart cleared",
            cart_id=str(cart.id),
            removed_lines=removed,
            request_id=self.request_id,
        )
        return CartResult(cart=cart, resource_id=str(cart.id))


def get_cart_service(request_id: str | None = None) -> CartService:
    """Get cart service instance.

    Args:
        request_id: Request ID for correlation.

    Returns:
        CartService instance.
    """
    return CartService(request_id=request_id)
