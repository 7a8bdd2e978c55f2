"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Self
from uuid import NAMESPACE_URL, uuid4, uuid5

from foodorder.domain.base import ValueObject
from foodorder.domain.exceptions import (
    CurrencyMismatchError,
    InvalidMoneyError,
    MenuError,
    MenuErrorCode,
)

DEFAULT_CURRENCY = "KRW"

_CENTS = Decimal("0.01")


# ============================================================================
# Typed Identifiers
# ============================================================================


@dataclass(frozen=True)
class EntityId(ValueObject):
    """Base for strongly-typed identifiers.

    Each subclass wraps a non-empty opaque string. Identifiers of different
    kinds never compare equal, even when they wrap the same string.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate identifier value."""
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError(f"{type(self).__name__} cannot be empty")

    @classmethod
    def generate(cls) -> Self:
        """Generate a new identifier.

        Returns:
            New identifier wrapping a random UUID.
        """
        return cls(value=str(uuid4()))

    @classmethod
    def of(cls, value: str) -> Self:
        """Wrap an externally supplied identifier.

        Args:
            value: Identifier string.

        Returns:
            Typed identifier.

        Raises:
            ValueError: If the value is empty or blank.
        """
        return cls(value=value)

    def __str__(self) -> str:
        """Return string representation.

        Returns:
            Wrapped identifier value.
        """
        return self.value


@dataclass(frozen=True)
class ShopId(EntityId):
    """Strongly-typed shop identifier."""


@dataclass(frozen=True)
class MenuId(EntityId):
    """Strongly-typed menu identifier."""


@dataclass(frozen=True)
class OptionId(EntityId):
    """Strongly-typed option identifier.

    Options are values inside an option group; the id is what the shop
    collaborator hands out for a customer's selection.
    """

    @classmethod
    def derive(cls, group_key: str, name: str, price: "Money") -> Self:
        """Derive a stable id for an option that has none of its own.

        Options are unique by (name, price) within a group, so the group key
        together with name, amount and currency never collides.

        Args:
            group_key: Identifier of the owning option group.
            name: Option name.
            price: Option price.

        Returns:
            OptionId wrapping a name-based UUID.
        """
        key = "/".join((str(group_key), name, str(price.amount), price.currency))
        return cls(value=str(uuid5(NAMESPACE_URL, key)))


@dataclass(frozen=True)
class OptionGroupId(EntityId):
    """Strongly-typed option group identifier."""


@dataclass(frozen=True)
class CartId(EntityId):
    """Strongly-typed cart identifier."""


@dataclass(frozen=True)
class OrderId(EntityId):
    """Strongly-typed order identifier."""


@dataclass(frozen=True)
class UserId(EntityId):
    """Strongly-typed user identifier."""


# ============================================================================
# Money Value Object
# ============================================================================


@dataclass(frozen=True)
class Money(ValueObject):
    """Represents monetary value with currency.

    The amount is a Decimal fixed to two fractional digits, rounded half-up
    on construction. Negative amounts are representable so that subtraction
    stays total; price-bearing objects reject them themselves.

    Attributes:
        amount: Decimal amount in major units.
        currency: ISO 4217 currency code (e.g., 'KRW', 'USD').
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        """Normalize amount scale and currency code."""
        if self.amount is None:
            raise InvalidMoneyError("amount is required")
        if not self.currency or not str(self.currency).strip():
            raise InvalidMoneyError("currency is required")
        try:
            amount = self.amount if isinstance(self.amount, Decimal) else Decimal(str(self.amount))
        except InvalidOperation as exc:
            raise InvalidMoneyError(f"{self.amount!r} is not a number") from exc
        if not amount.is_finite():
            raise InvalidMoneyError(f"{self.amount!r} is not a finite number")
        object.__setattr__(self, "amount", amount.quantize(_CENTS, rounding=ROUND_HALF_UP))
        object.__setattr__(self, "currency", str(self.currency).strip().upper())

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str = DEFAULT_CURRENCY) -> Self:
        """Create money from an amount in major units.

        Args:
            amount: Decimal, numeric string or integer amount.
            currency: Currency code.

        Returns:
            Money instance.

        Raises:
            InvalidMoneyError: If amount or currency is missing or unusable.
        """
        return cls(amount=amount, currency=currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Self:
        """Create zero amount money.

        Args:
            currency: Currency code.

        Returns:
            Money with zero amount.
        """
        return cls(amount=Decimal("0"), currency=currency)

    def _check_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: "Money") -> "Money":
        """Add two money amounts.

        Args:
            other: Money to add.

        Returns:
            New Money with sum.

        Raises:
            CurrencyMismatchError: If currencies don't match.
        """
        self._check_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        """Subtract money amounts. The result may be negative.

        Raises:
            CurrencyMismatchError: If currencies don't match.
        """
        self._check_currency(other)
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def multiply(self, factor: int | Decimal) -> "Money":
        """Multiply money by an integer quantity or a decimal factor.

        Args:
            factor: Multiplier.

        Returns:
            New Money with product, re-rounded to two digits.
        """
        return Money(amount=self.amount * Decimal(factor), currency=self.currency)

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __mul__(self, factor: int | Decimal) -> "Money":
        return self.multiply(factor)

    def __rmul__(self, factor: int | Decimal) -> "Money":
        return self.multiply(factor)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def is_greater_than(self, other: "Money") -> bool:
        """Check if this amount is strictly greater than another.

        Raises:
            CurrencyMismatchError: If currencies don't match.
        """
        self._check_currency(other)
        return self.amount > other.amount

    def is_greater_than_or_equal(self, other: "Money") -> bool:
        """Check if this amount is greater than or equal to another.

        Raises:
            CurrencyMismatchError: If currencies don't match.
        """
        self._check_currency(other)
        return self.amount >= other.amount

    def is_less_than(self, other: "Money") -> bool:
        """Check if this amount is strictly less than another.

        Raises:
            CurrencyMismatchError: If currencies don't match.
        """
        self._check_currency(other)
        return self.amount < other.amount

    def is_zero(self) -> bool:
        """Check if amount is zero.

        Returns:
            True if amount is zero.
        """
        return self.amount == 0

    def is_positive(self) -> bool:
        """Check if amount is strictly positive.

        Returns:
            True if amount is greater than zero.
        """
        return self.amount > 0

    def is_negative(self) -> bool:
        """Check if amount is below zero.

        Returns:
            True if amount is less than zero.
        """
        return self.amount < 0

    def __str__(self) -> str:
        """Return formatted string representation.

        Returns:
            Formatted money string (e.g., '10000.00 KRW').
        """
        return f"{self.amount} {self.currency}"


PLACEHOLDER_UNIT_PRICE = Money.of(10000)
"""Unit price used for cart lines that have no resolved pricing data."""


# ============================================================================
# Menu Options
# ============================================================================


@dataclass(frozen=True)
class Option(ValueObject):
    """A selectable menu option.

    Options are compared by (name, price). A zero price means the option
    is free.

    Attributes:
        name: Display name, trimmed.
        price: Surcharge, never negative.
    """

    name: str
    price: Money

    def __post_init__(self) -> None:
        """Validate option constraints."""
        if self.name is None or not self.name.strip():
            raise MenuError(MenuErrorCode.CURRENT_OPTION_NAME_REQUIRED)
        if self.price is None:
            raise MenuError(MenuErrorCode.CURRENT_OPTION_PRICE_REQUIRED)
        if self.price.is_negative():
            raise MenuError(
                MenuErrorCode.INVALID_BASE_PRICE,
                f"Option price must not be negative: {self.price}",
                details={"name": self.name, "price": str(self.price.amount)},
            )
        object.__setattr__(self, "name", self.name.strip())

    def change_name(self, new_name: str) -> "Option":
        """Return a copy of this option with a new name.

        Raises:
            MenuError: If the new name is blank.
        """
        if new_name is None or not new_name.strip():
            raise MenuError(MenuErrorCode.NEW_OPTION_NAME_REQUIRED)
        return Option(name=new_name, price=self.price)

    def change_price(self, new_price: Money) -> "Option":
        """Return a copy of this option with a new price.

        Raises:
            MenuError: If the new price is missing or negative.
        """
        if new_price is None:
            raise MenuError(MenuErrorCode.NEW_OPTION_PRICE_REQUIRED)
        return Option(name=self.name, price=new_price)

    @property
    def is_paid(self) -> bool:
        """True if the option carries a positive surcharge."""
        return self.price.is_positive()

    @property
    def is_free(self) -> bool:
        """True if the option adds nothing to the unit price."""
        return not self.is_paid

    def matches(self, name: str, price: Money) -> bool:
        """Check whether this option is the one identified by (name, price)."""
        return self.name == name and self.price == price


# ============================================================================
# Order Snapshots
# ============================================================================


@dataclass(frozen=True)
class SelectedOption(ValueObject):
    """Snapshot of an option chosen for an order line.

    Attributes:
        option_id: Identifier the selection was made with.
        name: Option name at time of order.
        price: Option price at time of order.
    """

    option_id: OptionId
    name: str
    price: Money


# ============================================================================
# Cart Line Identity and Resolved Pricing
# ============================================================================


@dataclass(frozen=True)
class CartLineKey(ValueObject):
    """Identity of a cart line: the menu plus the set of selected options.

    Attributes:
        menu_id: Menu the line orders.
        option_ids: Selected option ids; order does not matter.
    """

    menu_id: MenuId
    option_ids: frozenset[OptionId] = field(default_factory=frozenset)

    @classmethod
    def of(cls, menu_id: MenuId, option_ids: Iterable[OptionId] = ()) -> "CartLineKey":
        """Build a key from any iterable of option ids.

        Args:
            menu_id: Menu identifier.
            option_ids: Selected option ids.

        Returns:
            CartLineKey instance.
        """
        return cls(menu_id=menu_id, option_ids=frozenset(option_ids))


@dataclass(frozen=True)
class ResolvedLine(ValueObject):
    """Pricing data for one cart line, resolved outside the aggregate.

    Attributes:
        menu_name: Menu name to snapshot onto the order line.
        unit_price: Price of one unit including option surcharges.
        selected_options: Option snapshots for the line.
    """

    menu_name: str
    unit_price: Money
    selected_options: tuple[SelectedOption, ...] = ()
