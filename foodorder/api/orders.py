"""Order API endpoints.

Provides read access to placed orders:
- GET /orders?user_id=... - a user's orders, oldest first
- GET /orders/{id} - order details

Orders are created through POST /carts/{user_id}/order.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from foodorder.api.errors import raise_for_result
from foodorder.api.schemas import (
    ErrorResponse,
    MoneySchema,
    OrderItemSchema,
    OrderResponse,
    OrdersListResponse,
    SelectedOptionSchema,
)
from foodorder.application.order_service import OrderService, get_order_service
from foodorder.domain.entities import Order

router = APIRouter(prefix="/orders", tags=["Orders"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(request: Request) -> OrderService:
    """Get order service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_order_service(request_id=request_id)


# ============================================================================
# Converters
# ============================================================================


def order_to_response(order: Order) -> OrderResponse:
    """Convert Order aggregate to response schema."""
    items = [
        OrderItemSchema(
            id=str(item.id),
            menu_id=str(item.menu_id),
            menu_name=item.menu_name,
            quantity=item.quantity,
            unit_price=MoneySchema.from_money(item.unit_price),
            line_price=MoneySchema.from_money(item.line_price),
            selected_options=[
                SelectedOptionSchema(
                    option_id=str(option.option_id),
                    name=option.name,
                    price=MoneySchema.from_money(option.price),
                )
                for option in item.selected_options
            ],
        )
        for item in order.items
    ]

    return OrderResponse(
        id=str(order.id),
        user_id=str(order.user_id),
        shop_id=str(order.shop_id),
        items=items,
        total_price=MoneySchema.from_money(order.total_price),
        order_time=order.order_time,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=OrdersListResponse,
    responses={400: {"model": ErrorResponse}},
    summary="List orders",
    description="List a user's orders, oldest first.",
)
async def list_orders(
    service: Annotated[OrderService, Depends(get_service)],
    user_id: str = Query(..., description="Customer identifier"),
) -> OrdersListResponse:
    """List a user's orders.

    Args:
        service: Order service.
        user_id: Customer identifier.

    Returns:
        The user's orders.
    """
    result = await service.list_orders(user_id)
    raise_for_result(result)
    return OrdersListResponse(
        items=[order_to_response(order) for order in result.orders],
        total=result.total,
    )


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get order details",
    description="Get an order with its line snapshots.",
)
async def get_order(
    order_id: str,
    service: Annotated[OrderService, Depends(get_service)],
) -> OrderResponse:
    """Get an order by ID.

    Raises:
        HTTPException: If order not found.
    """
    result = await service.get_order(order_id)
    raise_for_result(result)
    return order_to_response(result.order)
