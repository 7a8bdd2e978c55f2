"""Order application service.

Orchestrates order placement and lookup:
- Placing an order from a user's cart (the cart is emptied in the same
  unit of work)
- Getting an order and listing a user's orders
"""

from dataclasses import dataclass, field

import structlog

from foodorder.application.common import ServiceResult, drain_events, parse_id
from foodorder.application.pricing import LinePriceResolver
from foodorder.domain.entities import Cart, Order
from foodorder.domain.exceptions import (
    DomainError,
    OptimisticLockError,
    OrderError,
    OrderErrorCode,
)
from foodorder.domain.repositories import CartRepository, OrderRepository
from foodorder.domain.value_objects import OrderId, UserId
from foodorder.infrastructure.repositories import get_cart_repository, get_order_repository
from foodorder.infrastructure.shop_client import ShopApiClient, get_shop_client
from foodorder.infrastructure.user_client import UserApiClient, get_user_client

logger = structlog.get_logger()


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class PlaceOrderResult(ServiceResult):
    """Result of placing an order."""

    order: Order | None = None
    cart: Cart | None = None


@dataclass
class GetOrderResult(ServiceResult):
    """Result of getting an order."""

    order: Order | None = None


@dataclass
class ListOrdersResult(ServiceResult):
    """Result of listing orders."""

    orders: list[Order] = field(default_factory=list)
    total: int = 0


# ============================================================================
# Order Service
# ============================================================================


class OrderService:
    """Application service for orders.

    Handles the cart to order transition:
    - Validate the user with the user collaborator
    - Resolve line prices with the shop collaborator
    - Save the order, then the emptied cart
    """

    def __init__(
        self,
        order_repo: OrderRepository | None = None,
        cart_repo: CartRepository | None = None,
        shop_client: ShopApiClient | None = None,
        user_client: UserApiClient | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            order_repo: Order repository.
            cart_repo: Cart repository.
            shop_client: Shop collaborator used for line pricing.
            user_client: User-validity collaborator.
            request_id: Request ID for correlation.
        """
        self.order_repo = order_repo or get_order_repository()
        self.cart_repo = cart_repo or get_cart_repository()
        self.shop_client = shop_client or get_shop_client()
        self.user_client = user_client or get_user_client()
        self.price_resolver = LinePriceResolver(self.shop_client)
        self.request_id = request_id

    def _user_id(self, user_id: str) -> UserId:
        return parse_id(UserId, user_id, OrderErrorCode.USER_ID_REQUIRED)

    async def place_order(self, user_id: str) -> PlaceOrderResult:
        """Place an order from the user's cart.

        If saving the order fails the cart is left untouched. If saving the
        emptied cart fails the order is removed again, so neither change is
        visible.

        Args:
            user_id: Owner of the cart.

        Returns:
            PlaceOrderResult with the order and the emptied cart.
        """
        try:
            user = self._user_id(user_id)
            if not await self.user_client.is_valid_user(user):
                raise OrderError(OrderErrorCode.INVALID_USER_ID, details={"user_id": user_id})
            cart = self.cart_repo.find_by_user_id(user)
            resolved = await self.price_resolver.resolve(cart)
            order = cart.place_order(resolved)

            self.order_repo.save(order)
            try:
                self.cart_repo.save(cart)
            except OptimisticLockError:
                logger.warning(
                    "Cart changed while placing order, rolling back order",
                    order_id=str(order.id),
                    cart_id=str(cart.id),
                    request_id=self.request_id,
                )
                self.order_repo.delete(order)
                raise
        except DomainError as e:
            logger.warning(
                "Failed to place order",
                user_id=user_id,
                error_code=e.code,
                error=e.message,
                request_id=self.request_id,
            )
            return PlaceOrderResult.failed(e)

        drain_events(order, self.request_id)
        drain_events(cart, self.request_id)
        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=user_id,
            shop_id=str(order.shop_id),
            line_count=order.item_count,
            total=str(order.total_price),
            request_id=self.request_id,
        )
        return PlaceOrderResult(order=order, cart=cart)

    async def get_order(self, order_id: str) -> GetOrderResult:
        """Get an order by ID.

        Args:
            order_id: Order identifier.

        Returns:
            GetOrderResult with the order if found.
        """
        try:
            order = self.order_repo.find_by_id(
                parse_id(OrderId, order_id, OrderErrorCode.ORDER_NOT_FOUND)
            )
        except DomainError as e:
            return GetOrderResult.failed(e)
        return GetOrderResult(order=order)

    async def list_orders(self, user_id: str) -> ListOrdersResult:
        """List a user's orders, oldest first."""
        try:
            orders = self.order_repo.find_by_user_id(self._user_id(user_id))
        except DomainError as e:
            return ListOrdersResult.failed(e)
        return ListOrdersResult(orders=orders, total=len(orders))


def get_order_service(request_id: str | None = None) -> OrderService:
    """Get order service instance.

    Args:
        request_id: Request ID for correlation.

    Returns:
        OrderService instance.
    """
    return OrderService(request_id=request_id)
