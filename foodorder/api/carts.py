"""Cart API endpoints.

Provides endpoints for a customer's cart:
- GET /carts/{user_id} - cart with resolved total
- POST /carts/{user_id}/items - add a menu with options
- DELETE /carts/{user_id}/items - remove a line
- DELETE /carts/{user_id} - clear the cart
- POST /carts/{user_id}/order - place an order from the cart
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from foodorder.api.errors import raise_for_result
from foodorder.api.schemas import (
    CartItemAddRequest,
    CartItemRemoveRequest,
    CartItemSchema,
    CartResponse,
    CommandResultResponse,
    ErrorResponse,
    MoneySchema,
)
from foodorder.application.cart_service import CartService, get_cart_service
from foodorder.application.order_service import OrderService, get_order_service
from foodorder.domain.entities import Cart
from foodorder.domain.value_objects import Money

router = APIRouter(prefix="/carts", tags=["Carts"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(request: Request) -> CartService:
    """Get cart service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_cart_service(request_id=request_id)


def get_orders(request: Request) -> OrderService:
    """Get order service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_order_service(request_id=request_id)


# ============================================================================
# Converters
# ============================================================================


def cart_to_response(cart: Cart, total_price: Money | None = None) -> CartResponse:
    """Convert Cart aggregate to response schema."""
    return CartResponse(
        id=str(cart.id),
        user_id=str(cart.user_id),
        shop_id=str(cart.shop_id) if cart.shop_id is not None else None,
        items=[
            CartItemSchema(
                id=str(item.id),
                menu_id=str(item.menu_id),
                option_ids=[str(o) for o in item.option_ids],
                quantity=item.quantity,
            )
            for item in cart.items
        ],
        total_quantity=cart.total_quantity,
        total_price=MoneySchema.from_money(total_price) if total_price is not None else None,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/{user_id}",
    response_model=CartResponse,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Get cart",
    description="Get a user's cart with line prices resolved from the shop.",
)
async def get_cart(
    user_id: str,
    service: Annotated[CartService, Depends(get_service)],
) -> CartResponse:
    """Get a user's cart.

    Raises:
        HTTPException: If the user has no cart.
    """
    result = await service.get_cart(user_id)
    raise_for_result(result)
    return cart_to_response(result.cart, result.total_price)


@router.post(
    "/{user_id}/items",
    response_model=CommandResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Add cart item",
    description=(
        "Add a menu with selected options. A cart holds items of one shop; "
        "adding from another shop discards the current items."
    ),
)
async def add_item(
    user_id: str,
    request: CartItemAddRequest,
    service: Annotated[CartService, Depends(get_service)],
) -> CommandResultResponse:
    """Add a menu to the user's cart.

    Args:
        user_id: Owner of the cart.
        request: Item to add.
        service: Cart service.

    Returns:
        Command result carrying the cart id.

    Raises:
        HTTPException: If the user is invalid, the shop is closed, the menu
            is unavailable or the quantity is not positive.
    """
    result = await service.add_item(
        user_id=user_id,
        shop_id=request.shop_id,
        menu_id=request.menu_id,
        option_ids=request.option_ids,
        quantity=request.quantity,
    )
    raise_for_result(result)
    return CommandResultResponse(message="Item added to cart", resource_id=result.resource_id)


@router.delete(
    "/{user_id}/items",
    response_model=CommandResultResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Remove cart item",
)
async def remove_item(
    user_id: str,
    request: CartItemRemoveRequest,
    service: Annotated[CartService, Depends(get_service)],
) -> CommandResultResponse:
    """Remove the line for a menu and option set; absent lines are ignored."""
    result = await service.remove_item(user_id, request.menu_id, request.option_ids)
    raise_for_result(result)
    return CommandResultResponse(
        message="Item removed from cart", resource_id=result.resource_id
    )


@router.delete(
    "/{user_id}",
    response_model=CommandResultResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Clear cart",
)
async def clear_cart(
    user_id: str,
    service: Annotated[CartService, Depends(get_service)],
) -> CommandResultResponse:
    result = await service.clear_cart(user_id)
    raise_for_result(result)
    return CommandResultResponse(message="Cart cleared", resource_id=result.resource_id)


@router.post(
    "/{user_id}/order",
    response_model=CommandResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Place order",
    description="Turn the user's cart into an order and empty the cart.",
)
async def place_order(
    user_id: str,
    orders: Annotated[OrderService, Depends(get_orders)],
) -> CommandResultResponse:
    """Place an order from the user's cart.

    Args:
        user_id: Owner of the cart.
        orders: Order service.

    Returns:
        Command result carrying the new order id.

    Raises:
        HTTPException: If the cart is missing or empty.
    """
    result = await orders.place_order(user_id)
    raise_for_result(result)
    return CommandResultResponse(message="Order placed", resource_id=str(result.order.id))
