"""Domain exceptions.

All domain-level errors that represent business rule violations, plus the
infrastructure conditions (not found, optimistic lock, external failures)
that collaborators raise at the aggregate boundary.

Every error carries a stable machine-readable code from one of the
``ErrorCode`` enums so the API layer can translate it without inspecting
messages.
"""

from enum import Enum
from typing import Any


# ============================================================================
# Error Codes
# ============================================================================


class ErrorCode(Enum):
    """Base enum for error codes.

    Each member value is a ``(code, message)`` pair.
    """

    @property
    def code(self) -> str:
        """Stable machine-readable code, e.g. ``MENU-DOMAIN-006``."""
        return self.value[0]

    @property
    def message(self) -> str:
        """Default human-readable message."""
        return self.value[1]


class CommonErrorCode(ErrorCode):
    """System-wide error codes."""

    INTERNAL_SERVER_ERROR = ("COMMON-SYSTEM-001", "Internal server error")
    INVALID_REQUEST = ("COMMON-SYSTEM-002", "Invalid request")
    RESOURCE_NOT_FOUND = ("COMMON-SYSTEM-003", "Resource not found")
    VALIDATION_ERROR = ("COMMON-SYSTEM-006", "Validation error")
    CONFLICT = ("COMMON-SYSTEM-007", "Conflict")
    EXTERNAL_SERVICE_ERROR = ("COMMON-SYSTEM-008", "External service call failed")
    CURRENCY_MISMATCH = ("COMMON-SYSTEM-009", "Cannot operate on different currencies")
    OPTIMISTIC_LOCK_ERROR = ("COMMON-SYSTEM-010", "Optimistic lock error")
    INVALID_MONEY = ("COMMON-SYSTEM-011", "Amount and currency are required")


class MenuErrorCode(ErrorCode):
    """Menu aggregate error codes."""

    SHOP_ID_REQUIRED = ("MENU-DOMAIN-001", "Shop id is required")
    MENU_NAME_REQUIRED = ("MENU-DOMAIN-002", "Menu name is required")
    BASE_PRICE_REQUIRED = ("MENU-DOMAIN-003", "Base price is required")
    INVALID_BASE_PRICE = ("MENU-DOMAIN-004", "Price must not be negative")
    MENU_NOT_FOUND = ("MENU-DOMAIN-005", "Menu not found")
    MENU_ALREADY_OPEN = ("MENU-DOMAIN-006", "Menu is already open")
    INSUFFICIENT_OPTION_GROUPS = (
        "MENU-DOMAIN-007",
        "At least one option group is required to open a menu",
    )
    INVALID_REQUIRED_OPTION_GROUP_COUNT = (
        "MENU-DOMAIN-008",
        "At most 3 option groups may be required",
    )
    NO_PAID_OPTION_GROUP = (
        "MENU-DOMAIN-009",
        "At least one option group must contain a priced option",
    )
    NEW_OPTION_GROUP_NAME_REQUIRED = ("MENU-DOMAIN-010", "Option group name is required")
    OPTION_GROUP_NOT_FOUND = ("MENU-DOMAIN-011", "Option group not found")
    DUPLICATE_OPTION_GROUP_NAME = ("MENU-DOMAIN-012", "Option group name already exists")
    MAX_REQUIRED_OPTION_GROUPS_EXCEEDED = (
        "MENU-DOMAIN-013",
        "An open menu cannot have more than 3 required option groups",
    )
    OPTION_GROUP_ID_REQUIRED = ("MENU-DOMAIN-014", "Option group id is required")
    CURRENT_OPTION_NAME_REQUIRED = ("MENU-DOMAIN-015", "Option name is required")
    CURRENT_OPTION_PRICE_REQUIRED = ("MENU-DOMAIN-016", "Option price is required")
    NEW_OPTION_NAME_REQUIRED = ("MENU-DOMAIN-017", "New option name is required")
    NEW_OPTION_PRICE_REQUIRED = ("MENU-DOMAIN-018", "New option price is required")
    CANNOT_DELETE_REQUIRED_OPTION_GROUP = (
        "MENU-DOMAIN-019",
        "Removing this option group would leave the open menu unpublishable",
    )
    OPTION_REQUIRED = ("MENU-DOMAIN-021", "Option is required")
    OPTION_NOT_FOUND = ("MENU-DOMAIN-022", "Option not found")


class CartErrorCode(ErrorCode):
    """Cart aggregate error codes."""

    USER_ID_REQUIRED = ("CART-DOMAIN-001", "User id is required")
    CART_NOT_FOUND = ("CART-DOMAIN-002", "Cart not found")
    MENU_ID_REQUIRED = ("CART-DOMAIN-003", "Menu id is required")
    SHOP_ID_REQUIRED = ("CART-DOMAIN-004", "Shop id is required")
    INVALID_QUANTITY = ("CART-DOMAIN-005", "Quantity must be at least 1")
    SHOP_NOT_SELECTED = ("CART-DOMAIN-006", "No shop is selected for this cart")
    EMPTY_CART = ("CART-DOMAIN-007", "Cart is empty")
    INVALID_MENU_ID = ("CART-DOMAIN-009", "Invalid menu id")
    INVALID_USER_ID = ("CART-DOMAIN-010", "Invalid user id")
    SHOP_NOT_OPEN = ("CART-DOMAIN-011", "Shop is not open")
    INVALID_OPTION_SELECTION = ("CART-DOMAIN-012", "Selected option is not offered by this menu")
    MENU_NOT_AVAILABLE = ("CART-DOMAIN-013", "Menu is not available for ordering")


class OrderErrorCode(ErrorCode):
    """Order aggregate error codes."""

    USER_ID_REQUIRED = ("ORDER-DOMAIN-001", "User id is required")
    SHOP_ID_REQUIRED = ("ORDER-DOMAIN-002", "Shop id is required")
    EMPTY_ORDER_ITEMS = ("ORDER-DOMAIN-003", "An order needs at least one line item")
    INVALID_TOTAL_PRICE = ("ORDER-DOMAIN-004", "Invalid order total")
    ORDER_NOT_FOUND = ("ORDER-DOMAIN-005", "Order not found")
    INVALID_USER_ID = ("ORDER-DOMAIN-008", "Invalid user id")


# ============================================================================
# Base Errors
# ============================================================================


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    default_code: ErrorCode = CommonErrorCode.INVALID_REQUEST

    def __init__(
        self,
        code: ErrorCode | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize domain error.

        Args:
            code: Error code; defaults to the class's ``default_code``.
            message: Human-readable message; defaults to the code's message.
            details: Optional dictionary with additional error context.
        """
        self.error_code = code or self.default_code
        self.message = message or self.error_code.message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def code(self) -> str:
        """Stable machine-readable code."""
        return self.error_code.code


# ============================================================================
# Menu Errors
# ============================================================================


class MenuError(DomainError):
    """Raised when a menu or option group rule is violated."""

    pass


# ============================================================================
# Cart Errors
# ============================================================================


class CartError(DomainError):
    """Base class for cart-related errors."""

    pass


class CartEmptyError(CartError):
    """Raised when trying to place an order from an empty cart."""

    def __init__(self, cart_id: str) -> None:
        """Initialize cart empty error.

        Args:
            cart_id: ID of the cart.
        """
        super().__init__(
            CartErrorCode.EMPTY_CART,
            f"Cannot place an order from empty cart {cart_id}",
            details={"cart_id": cart_id},
        )


class InvalidQuantityError(CartError):
    """Raised when an invalid quantity is provided."""

    def __init__(self, quantity: int, reason: str = "Quantity must be positive") -> None:
        """Initialize invalid quantity error.

        Args:
            quantity: The invalid quantity value.
            reason: Explanation of why the quantity is invalid.
        """
        super().__init__(
            CartErrorCode.INVALID_QUANTITY,
            f"Invalid quantity {quantity}: {reason}",
            details={"quantity": quantity, "reason": reason},
        )


# ============================================================================
# Order Errors
# ============================================================================


class OrderError(DomainError):
    """Base class for order-related errors."""

    pass


# ============================================================================
# Money Errors
# ============================================================================


class MoneyError(DomainError):
    """Base class for money-related errors."""

    default_code = CommonErrorCode.INVALID_MONEY


class CurrencyMismatchError(MoneyError):
    """Raised when attempting to combine money with different currencies."""

    def __init__(self, currency1: str, currency2: str) -> None:
        """Initialize currency mismatch error.

        Args:
            currency1: First currency code.
            currency2: Second currency code.
        """
        super().__init__(
            CommonErrorCode.CURRENCY_MISMATCH,
            f"Cannot combine money with different currencies: {currency1} and {currency2}",
            details={"currency1": currency1, "currency2": currency2},
        )


class InvalidMoneyError(MoneyError):
    """Raised when money is constructed without a usable amount or currency."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            CommonErrorCode.INVALID_MONEY,
            f"Invalid money: {reason}",
            details={"reason": reason},
        )


# ============================================================================
# Infrastructure Errors
# ============================================================================


class NotFoundError(DomainError):
    """Raised by repositories when a lookup by id finds nothing."""

    default_code = CommonErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, code: ErrorCode, resource_id: str) -> None:
        """Initialize not found error.

        Args:
            code: Resource-specific not-found code.
            resource_id: Identifier that was looked up.
        """
        super().__init__(
            code,
            f"{code.message}: {resource_id}",
            details={"resource_id": resource_id},
        )


class OptimisticLockError(DomainError):
    """Raised when a save carries a stale version stamp."""

    default_code = CommonErrorCode.OPTIMISTIC_LOCK_ERROR

    def __init__(self, aggregate_type: str, aggregate_id: str, expected: int, actual: int) -> None:
        """Initialize optimistic lock error.

        Args:
            aggregate_type: Type name of the aggregate ("Cart", "Menu", ...).
            aggregate_id: Aggregate identifier.
            expected: Version carried by the aggregate being saved.
            actual: Version currently stored.
        """
        super().__init__(
            CommonErrorCode.OPTIMISTIC_LOCK_ERROR,
            f"{aggregate_type}({aggregate_id}) was modified concurrently "
            f"(version {expected}, stored {actual})",
            details={
                "aggregate_type": aggregate_type,
                "aggregate_id": aggregate_id,
                "expected_version": expected,
                "actual_version": actual,
            },
        )


class ExternalServiceError(DomainError):
    """Raised when a collaborator call fails after all attempts."""

    default_code = CommonErrorCode.EXTERNAL_SERVICE_ERROR

    def __init__(self, service: str, message: str, status_code: int | None = None) -> None:
        """Initialize external service error.

        Args:
            service: Name of the collaborator ("shop-api", "user-api").
            message: Failure description.
            status_code: HTTP status code, if a response was received.
        """
        super().__init__(
            CommonErrorCode.EXTERNAL_SERVICE_ERROR,
            f"[{service}] {message}",
            details={"service": service, "status_code": status_code},
        )
        self.service = service
        self.status_code = status_code
