"""API schemas for the food ordering service.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from foodorder.domain.value_objects import Money


# ============================================================================
# Common Schemas
# ============================================================================


class MoneySchema(BaseModel):
    """Money representation."""

    amount: Decimal = Field(..., description="Amount with two fractional digits")
    currency: str = Field(..., description="ISO currency code")

    @classmethod
    def from_money(cls, money: Money) -> "MoneySchema":
        return cls(amount=money.amount, currency=money.currency)


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | list[Any] = Field(
        default_factory=dict, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class CommandResultResponse(BaseModel):
    """Result envelope for commands."""

    status: str = Field(default="SUCCESS", description="Command outcome")
    message: str = Field(..., description="Human-readable outcome")
    resource_id: str | None = Field(
        default=None, description="Identifier of the created or changed resource"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the command completed",
    )


# ============================================================================
# Menu Schemas
# ============================================================================


class MenuCreateRequest(BaseModel):
    """Request to create a menu."""

    shop_id: str = Field(..., description="Shop offering the menu")
    name: str = Field(..., description="Menu name")
    base_price: Decimal = Field(..., description="Price before option surcharges")
    description: str = Field(default="", description="Menu description")
    currency: str | None = Field(
        default=None, description="Currency code; defaults to the service currency"
    )


class OptionGroupCreateRequest(BaseModel):
    """Request to add an option group to a menu."""

    name: str = Field(..., description="Option group name")
    required: bool = Field(default=False, description="Whether a choice is mandatory")


class OptionGroupRenameRequest(BaseModel):
    """Request to rename an option group."""

    name: str = Field(..., description="New option group name")


class OptionRequest(BaseModel):
    """An option identified by name and price."""

    name: str = Field(..., description="Option name")
    price: Decimal = Field(..., description="Option surcharge")
    currency: str | None = Field(
        default=None, description="Currency code; defaults to the menu's currency"
    )


class OptionRenameRequest(OptionRequest):
    """Request to rename the option identified by name and price."""

    new_name: str = Field(..., description="New option name")


class OptionSchema(BaseModel):
    """An option of an option group."""

    id: str = Field(..., description="Id customers select the option with")
    name: str
    price: MoneySchema


class OptionGroupSchema(BaseModel):
    """An option group of a menu."""

    id: str
    name: str
    required: bool
    options: list[OptionSchema]


class MenuResponse(BaseModel):
    """Response for a menu."""

    id: str = Field(..., description="Menu identifier")
    shop_id: str = Field(..., description="Shop offering the menu")
    name: str = Field(..., description="Menu name")
    description: str = Field(default="", description="Menu description")
    base_price: MoneySchema = Field(..., description="Price before option surcharges")
    is_open: bool = Field(..., description="Whether customers can order the menu")
    option_groups: list[OptionGroupSchema] = Field(default_factory=list)
    version: int = Field(..., description="Optimistic lock version")


class MenusListResponse(BaseModel):
    """List of a shop's menus."""

    items: list[MenuResponse]
    total: int


# ============================================================================
# Cart Schemas
# ============================================================================


class CartItemAddRequest(BaseModel):
    """Request to add a menu to a cart."""

    shop_id: str = Field(..., description="Shop offering the menu")
    menu_id: str = Field(..., description="Menu to add")
    option_ids: list[str] = Field(default_factory=list, description="Selected option ids")
    quantity: int = Field(default=1, description="Units to add")


class CartItemRemoveRequest(BaseModel):
    """Request to remove a cart line."""

    menu_id: str = Field(..., description="Menu of the line")
    option_ids: list[str] = Field(default_factory=list, description="Option set of the line")


class CartItemSchema(BaseModel):
    """A cart line."""

    id: str
    menu_id: str
    option_ids: list[str]
    quantity: int


class CartResponse(BaseModel):
    """Response for a cart."""

    id: str = Field(..., description="Cart identifier")
    user_id: str = Field(..., description="Owner of the cart")
    shop_id: str | None = Field(default=None, description="Shop of the current items")
    items: list[CartItemSchema] = Field(default_factory=list)
    total_quantity: int = Field(..., description="Units across all lines")
    total_price: MoneySchema | None = Field(
        default=None, description="Total with resolved line prices"
    )


# ============================================================================
# Order Schemas
# ============================================================================


class SelectedOptionSchema(BaseModel):
    """Snapshot of a selected option."""

    option_id: str
    name: str
    price: MoneySchema


class OrderItemSchema(BaseModel):
    """An order line."""

    id: str
    menu_id: str
    menu_name: str
    quantity: int
    unit_price: MoneySchema
    line_price: MoneySchema
    selected_options: list[SelectedOptionSchema]


class OrderResponse(BaseModel):
    """Response for an order."""

    id: str = Field(..., description="Order identifier")
    user_id: str = Field(..., description="Customer")
    shop_id: str = Field(..., description="Shop fulfilling the order")
    items: list[OrderItemSchema] = Field(..., description="Order lines")
    total_price: MoneySchema = Field(..., description="Sum of line prices")
    order_time: datetime = Field(..., description="When the order was placed")


class OrdersListResponse(BaseModel):
    """List of a user's orders."""

    items: list[OrderResponse]
    total: int
