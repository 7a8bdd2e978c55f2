"""Domain entities for the food ordering system.

Entities are domain objects with identity that persists across state changes.
This module contains the core aggregates: Menu, Cart, and Order.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from foodorder.domain.base import AggregateRoot, Entity
from foodorder.domain.events import CartItemAdded, MenuOpened, OrderPlaced
from foodorder.domain.exceptions import (
    CartEmptyError,
    CartError,
    CartErrorCode,
    InvalidQuantityError,
    MenuError,
    MenuErrorCode,
    OrderError,
    OrderErrorCode,
)
from foodorder.domain.value_objects import (
    PLACEHOLDER_UNIT_PRICE,
    CartId,
    CartLineKey,
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

MAX_REQUIRED_OPTION_GROUPS = 3


# ============================================================================
# Option Group Entity
# ============================================================================


@dataclass(eq=False)
class OptionGroup(Entity[OptionGroupId]):
    """A named group of options on a menu.

    OptionGroup is an entity (not an aggregate root) that belongs to the
    Menu aggregate. No two options in a group share the same (name, price).

    Attributes:
        id: Unique identifier for this option group.
        name: Group name, trimmed.
        required: Whether a customer must choose from this group.
        options: Options in display order.
    """

    id: OptionGroupId
    name: str
    required: bool = False
    options: list[Option] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate option group constraints."""
        if self.id is None:
            raise MenuError(MenuErrorCode.OPTION_GROUP_ID_REQUIRED)
        self.name = _require_group_name(self.name)

    @classmethod
    def create(cls, name: str, required: bool = False) -> "OptionGroup":
        """Create an empty option group with a fresh id."""
        return cls(id=OptionGroupId.generate(), name=name, required=required)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    @property
    def has_paid_options(self) -> bool:
        """Check if any option in the group carries a surcharge.

        Returns:
            True if at least one option has a non-zero price.
        """
        return any(option.is_paid for option in self.options)

    @property
    def option_count(self) -> int:
        """Number of options in the group."""
        return len(self.options)

    @property
    def is_empty(self) -> bool:
        """True if the group offers no options yet."""
        return not self.options

    def option_id_of(self, option: Option) -> OptionId:
        """Selection id customers use to choose an option of this group.

        Args:
            option: Option of this group.

        Returns:
            Stable OptionId, distinct for every (group, name, price).
        """
        return OptionId.derive(str(self.id), option.name, option.price)

    def find_option(self, name: str, price: Money) -> Option | None:
        """Find an option by its exact (name, price) pair.

        Args:
            name: Option name; surrounding whitespace is ignored.
            price: Option price.

        Returns:
            Option if found, None otherwise.
        """
        index = self._index_of(name, price)
        return self.options[index] if index is not None else None

    def _index_of(self, name: str, price: Money) -> int | None:
        name = name.strip()
        for index, option in enumerate(self.options):
            if option.matches(name, price):
                return index
        return None

    def _require_index(self, name: str | None, price: Money | None) -> int:
        if name is None or not name.strip():
            raise MenuError(MenuErrorCode.CURRENT_OPTION_NAME_REQUIRED)
        if price is None:
            raise MenuError(MenuErrorCode.CURRENT_OPTION_PRICE_REQUIRED)
        index = self._index_of(name, price)
        if index is None:
            raise MenuError(
                MenuErrorCode.OPTION_NOT_FOUND,
                f"Option '{name.strip()}' ({price}) not found in group '{self.name}'",
                details={"option_group_id": str(self.id), "name": name.strip()},
            )
        return index

    # -------------------------------------------------------------------------
    # Option Operations
    # -------------------------------------------------------------------------

    def add_option(self, option: Option) -> None:
        """Add an option to the group.

        Args:
            option: Option to append.

        Raises:
            MenuError: If an option with the same (name, price) already exists.
        """
        if option is None:
            raise MenuError(MenuErrorCode.OPTION_REQUIRED)
        if self._index_of(option.name, option.price) is not None:
            raise MenuError(
                MenuErrorCode.DUPLICATE_OPTION_GROUP_NAME,
                f"Option '{option.name}' ({option.price}) already exists in group '{self.name}'",
                details={"option_group_id": str(self.id), "name": option.name},
            )
        self.options.append(option)

    def remove_option(self, name: str, price: Money) -> Option:
        """Remove the option identified by (name, price).

        Returns:
            The removed option.

        Raises:
            MenuError: If no option matches.
        """
        index = self._require_index(name, price)
        return self.options.pop(index)

    def change_option_name(self, current_name: str, current_price: Money, new_name: str) -> Option:
        """Rename an option, replacing the value at the same position.

        Args:
            current_name: Name of the option to rename.
            current_price: Price of the option to rename.
            new_name: New option name.

        Returns:
            The replacement option.

        Raises:
            MenuError: If the option is missing, the new name is blank, or the
                rename would duplicate another option's (name, price).
        """
        index = self._require_index(current_name, current_price)
        renamed = self.options[index].change_name(new_name)
        clash = self._index_of(renamed.name, renamed.price)
        if clash is not None and clash != index:
            raise MenuError(
                MenuErrorCode.DUPLICATE_OPTION_GROUP_NAME,
                f"Option '{renamed.name}' ({renamed.price}) already exists in group '{self.name}'",
                details={"option_group_id": str(self.id), "name": renamed.name},
            )
        self.options[index] = renamed
        return renamed

    def change_name(self, new_name: str) -> None:
        """Rename the group.

        Uniqueness among sibling groups is checked by the owning menu.
        """
        self.name = _require_group_name(new_name)


def _require_group_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise MenuError(MenuErrorCode.NEW_OPTION_GROUP_NAME_REQUIRED)
    return name.strip()


# ============================================================================
# Menu Aggregate Root
# ============================================================================


@dataclass(kw_only=True, eq=False)
class Menu(AggregateRoot[MenuId]):
    """Menu aggregate root.

    A menu starts closed. Shop operators shape its option groups and then
    open it; opening is allowed only when the publication rules hold:

    1. at least one option group exists;
    2. at most 3 option groups are required;
    3. at least one option group contains a priced option.

    Attributes:
        id: Unique menu identifier.
        shop_id: Shop that offers this menu.
        name: Menu name, trimmed.
        description: Free-form description.
        base_price: Price before option surcharges.
        is_open: Whether customers can see and order this menu.
        option_groups: Option groups in display order.
    """

    id: MenuId
    shop_id: ShopId
    name: str
    base_price: Money
    description: str = ""
    is_open: bool = False
    option_groups: list[OptionGroup] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate menu constraints."""
        if self.shop_id is None:
            raise MenuError(MenuErrorCode.SHOP_ID_REQUIRED)
        if self.name is None or not self.name.strip():
            raise MenuError(MenuErrorCode.MENU_NAME_REQUIRED)
        if self.base_price is None:
            raise MenuError(MenuErrorCode.BASE_PRICE_REQUIRED)
        if self.base_price.is_negative():
            raise MenuError(
                MenuErrorCode.INVALID_BASE_PRICE,
                f"Base price must not be negative: {self.base_price}",
                details={"base_price": str(self.base_price.amount)},
            )
        self.name = self.name.strip()
        self.description = (self.description or "").strip()

    @classmethod
    def create(
        cls,
        shop_id: ShopId,
        name: str,
        base_price: Money,
        description: str = "",
        menu_id: MenuId | None = None,
    ) -> "Menu":
        """Create a new, closed menu.

        Args:
            shop_id: Shop that offers the menu.
            name: Menu name.
            base_price: Price before option surcharges.
            description: Optional description.
            menu_id: Optional pre-generated menu ID.

        Returns:
            New Menu instance.

        Raises:
            MenuError: If shop, name or base price are missing or invalid.
        """
        return cls(
            id=menu_id or MenuId.generate(),
            shop_id=shop_id,
            name=name,
            base_price=base_price,
            description=description,
        )

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    @property
    def required_group_count(self) -> int:
        """Number of option groups marked as required."""
        return _count_required(self.option_groups)

    @property
    def has_paid_option_group(self) -> bool:
        """True if any option group holds an option with a surcharge."""
        return _any_paid(self.option_groups)

    def find_option_group(self, group_id: OptionGroupId) -> OptionGroup | None:
        """Find option group by ID.

        Args:
            group_id: Option group identifier.

        Returns:
            OptionGroup if found, None otherwise.
        """
        for group in self.option_groups:
            if group.id == group_id:
                return group
        return None

    def get_option_group(self, group_id: OptionGroupId) -> OptionGroup:
        """Get option group by ID.

        Raises:
            MenuError: If the id is missing or unknown.
        """
        if group_id is None:
            raise MenuError(MenuErrorCode.OPTION_GROUP_ID_REQUIRED)
        group = self.find_option_group(group_id)
        if group is None:
            raise MenuError(
                MenuErrorCode.OPTION_GROUP_NOT_FOUND,
                f"Option group {group_id} not found on menu {self.id}",
                details={"menu_id": str(self.id), "option_group_id": str(group_id)},
            )
        return group

    def _name_taken(self, name: str, exclude: OptionGroupId | None = None) -> bool:
        return any(
            group.name == name and group.id != exclude for group in self.option_groups
        )

    # -------------------------------------------------------------------------
    # Option Group Operations
    # -------------------------------------------------------------------------

    def add_option_group(self, name: str, required: bool = False) -> OptionGroup:
        """Add an empty option group.

        Args:
            name: Group name; compared trimmed and case-sensitive.
            required: Whether the group is required.

        Returns:
            The new OptionGroup.

        Raises:
            MenuError: If the name is blank or taken, or if the menu is open
                and already has the maximum number of required groups.
        """
        group = OptionGroup.create(name, required)
        if self._name_taken(group.name):
            raise MenuError(
                MenuErrorCode.DUPLICATE_OPTION_GROUP_NAME,
                f"Option group '{group.name}' already exists on menu {self.id}",
                details={"menu_id": str(self.id), "name": group.name},
            )
        if self.is_open and required and self.required_group_count >= MAX_REQUIRED_OPTION_GROUPS:
            raise MenuError(
                MenuErrorCode.MAX_REQUIRED_OPTION_GROUPS_EXCEEDED,
                details={"menu_id": str(self.id), "required_count": self.required_group_count},
            )
        self.option_groups.append(group)
        self._touch()
        return group

    def change_option_group_name(self, group_id: OptionGroupId, new_name: str) -> OptionGroup:
        """Rename an option group; the name must stay unique on the menu."""
        group = self.get_option_group(group_id)
        trimmed = _require_group_name(new_name)
        if self._name_taken(trimmed, exclude=group.id):
            raise MenuError(
                MenuErrorCode.DUPLICATE_OPTION_GROUP_NAME,
                f"Option group '{trimmed}' already exists on menu {self.id}",
                details={"menu_id": str(self.id), "name": trimmed},
            )
        group.change_name(trimmed)
        self._touch()
        return group

    def remove_option_group(self, group_id: OptionGroupId) -> OptionGroup:
        """Remove an option group.

        On an open menu the remaining groups must still satisfy the rules
        for being open: at least one group, and at least one group with a
        priced option.

        Raises:
            MenuError: If the group is unknown or its removal would leave an
                open menu unpublishable.
        """
        group = self.get_option_group(group_id)
        remaining = [g for g in self.option_groups if g.id != group.id]
        if self.is_open and (not remaining or not _any_paid(remaining)):
            raise MenuError(
                MenuErrorCode.CANNOT_DELETE_REQUIRED_OPTION_GROUP,
                details={"menu_id": str(self.id), "option_group_id": str(group.id)},
            )
        self.option_groups = remaining
        self._touch()
        return group

    # -------------------------------------------------------------------------
    # Option Operations
    # -------------------------------------------------------------------------

    def add_option(self, group_id: OptionGroupId, option: Option) -> None:
        self.get_option_group(group_id).add_option(option)
        self._touch()

    def remove_option(self, group_id: OptionGroupId, name: str, price: Money) -> Option:
        """Remove an option from one of the menu's groups.

        An open menu must keep at least one priced option, the same rule
        that ``remove_option_group`` enforces.

        Raises:
            MenuError: If the group or option is unknown, or the option is
                the last priced one of an open menu.
        """
        group = self.get_option_group(group_id)
        target = group.find_option(name, price) if name and price is not None else None
        if self.is_open and target is not None and target.is_paid:
            still_paid = any(
                option.is_paid
                for other in self.option_groups
                for option in other.options
                if not (other is group and option == target)
            )
            if not still_paid:
                raise MenuError(
                    MenuErrorCode.NO_PAID_OPTION_GROUP,
                    f"Cannot remove the last priced option '{target.name}' from an open menu",
                    details={"menu_id": str(self.id), "option_group_id": str(group.id)},
                )
        removed = group.remove_option(name, price)
        self._touch()
        return removed

    def change_option_name(
        self,
        group_id: OptionGroupId,
        current_name: str,
        current_price: Money,
        new_name: str,
    ) -> Option:
        renamed = self.get_option_group(group_id).change_option_name(
            current_name, current_price, new_name
        )
        self._touch()
        return renamed

    # -------------------------------------------------------------------------
    # Publication
    # -------------------------------------------------------------------------

    def open(self) -> None:
        """Open the menu to customers.

        Raises:
            MenuError: If the menu is already open or a publication rule
                does not hold.
        """
        if self.is_open:
            raise MenuError(MenuErrorCode.MENU_ALREADY_OPEN, details={"menu_id": str(self.id)})
        if not self.option_groups:
            raise MenuError(
                MenuErrorCode.INSUFFICIENT_OPTION_GROUPS, details={"menu_id": str(self.id)}
            )
        if self.required_group_count > MAX_REQUIRED_OPTION_GROUPS:
            raise MenuError(
                MenuErrorCode.INVALID_REQUIRED_OPTION_GROUP_COUNT,
                details={"menu_id": str(self.id), "required_count": self.required_group_count},
            )
        if not self.has_paid_option_group:
            raise MenuError(MenuErrorCode.NO_PAID_OPTION_GROUP, details={"menu_id": str(self.id)})

        self.is_open = True
        self._touch()
        self._record_event(
            MenuOpened(
                aggregate_id=str(self.id),
                aggregate_type="Menu",
                menu_id=str(self.id),
                shop_id=str(self.shop_id),
                menu_name=self.name,
                description=self.description,
            )
        )


def _count_required(groups: Iterable[OptionGroup]) -> int:
    return sum(1 for group in groups if group.required)


def _any_paid(groups: Iterable[OptionGroup]) -> bool:
    return any(group.has_paid_options for group in groups)


# ============================================================================
# Cart Line Item Entity
# ============================================================================


@dataclass(kw_only=True, eq=False)
class CartLineItem(Entity[UUID]):
    """A line in a cart: one menu with a set of selected options.

    Two line items are the same line when their menu and selected option
    set are equal; the order of ``option_ids`` is kept only for display.

    Attributes:
        id: Unique identifier for this line.
        menu_id: Menu ordered.
        option_ids: Selected option ids, duplicates removed.
        quantity: Number of units, at least 1.
    """

    id: UUID = field(default_factory=uuid4)
    menu_id: MenuId
    option_ids: tuple[OptionId, ...] = ()
    quantity: int = 1

    def __post_init__(self) -> None:
        """Validate cart line constraints."""
        if self.menu_id is None:
            raise CartError(CartErrorCode.INVALID_MENU_ID)
        if self.quantity is None or self.quantity <= 0:
            raise InvalidQuantityError(self.quantity)
        self.option_ids = tuple(dict.fromkeys(self.option_ids))

    @property
    def key(self) -> CartLineKey:
        """Identity of this line within the cart."""
        return CartLineKey.of(self.menu_id, self.option_ids)

    def is_same_line(self, other: "CartLineItem") -> bool:
        """Check if both lines order the same menu with the same option set."""
        return self.key == other.key

    def combine(self, other: "CartLineItem") -> "CartLineItem":
        """Return a new line carrying the summed quantity of both lines.

        The combined line keeps this line's id and option order.
        """
        return CartLineItem(
            id=self.id,
            menu_id=self.menu_id,
            option_ids=self.option_ids,
            quantity=self.quantity + other.quantity,
        )


# ============================================================================
# Cart Aggregate Root
# ============================================================================


@dataclass(kw_only=True, eq=False)
class Cart(AggregateRoot[CartId]):
    """Shopping cart aggregate root.

    A cart belongs to exactly one user for its whole life. While it holds
    items they all come from the single shop in ``shop_id``; adding an item
    from another shop discards the existing items first.

    Attributes:
        id: Unique cart identifier.
        user_id: Owner of the cart.
        shop_id: Shop of the current items, None when no shop is selected.
        items: Cart lines in insertion order.
    """

    id: CartId
    user_id: UserId
    shop_id: ShopId | None = None
    items: list[CartLineItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate cart constraints."""
        if self.user_id is None:
            raise CartError(CartErrorCode.USER_ID_REQUIRED)

    @classmethod
    def create(cls, user_id: UserId, cart_id: CartId | None = None) -> "Cart":
        """Create an empty cart for a user.

        Args:
            user_id: Owner of the cart.
            cart_id: Optional pre-generated cart ID.

        Returns:
            New Cart instance.
        """
        return cls(id=cart_id or CartId.generate(), user_id=user_id)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        """Check if cart has no items.

        Returns:
            True if cart has no items.
        """
        return not self.items

    @property
    def item_count(self) -> int:
        """Get number of distinct lines."""
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        """Get total number of units (sum of quantities).

        Returns:
            Total quantity across all lines.
        """
        return sum(item.quantity for item in self.items)

    def find_item(
        self, menu_id: MenuId, option_ids: Iterable[OptionId] = ()
    ) -> CartLineItem | None:
        """Find the line for a menu and option set.

        Args:
            menu_id: Menu identifier.
            option_ids: Selected option ids in any order.

        Returns:
            CartLineItem if found, None otherwise.
        """
        key = CartLineKey.of(menu_id, option_ids)
        for item in self.items:
            if item.key == key:
                return item
        return None

    def get_total_price(
        self, resolved_lines: Mapping[CartLineKey, ResolvedLine] | None = None
    ) -> Money:
        """Calculate the cart total.

        Args:
            resolved_lines: Pricing data per line. Lines without an entry are
                priced at ``PLACEHOLDER_UNIT_PRICE``.

        Returns:
            Sum of unit price times quantity; zero for an empty cart.
        """
        if not self.items:
            return Money.zero(PLACEHOLDER_UNIT_PRICE.currency)
        lines = [_unit_price(item, resolved_lines) * item.quantity for item in self.items]
        total = lines[0]
        for line in lines[1:]:
            total = total + line
        return total

    # -------------------------------------------------------------------------
    # Cart Item Operations
    # -------------------------------------------------------------------------

    def add_item(
        self,
        shop_id: ShopId,
        menu_id: MenuId,
        selected_option_ids: Iterable[OptionId] = (),
        quantity: int = 1,
    ) -> CartLineItem:
        """Add a menu with selected options to the cart.

        A matching line (same menu and option set) is replaced by a combined
        line at the same position; otherwise a new line is appended. If the
        cart holds items of another shop they are discarded first.

        Args:
            shop_id: Shop offering the menu.
            menu_id: Menu to add.
            selected_option_ids: Selected option ids.
            quantity: Units to add.

        Returns:
            The resulting cart line.

        Raises:
            InvalidQuantityError: If quantity is not positive.
            CartError: If the menu or shop id is missing.
        """
        if quantity is None or quantity <= 0:
            raise InvalidQuantityError(quantity)
        if shop_id is None:
            raise CartError(CartErrorCode.SHOP_ID_REQUIRED)
        new_item = CartLineItem(
            menu_id=menu_id,
            option_ids=tuple(selected_option_ids),
            quantity=quantity,
        )

        if self.shop_id is not None and self.shop_id != shop_id:
            self._start(shop_id)
        else:
            self.shop_id = shop_id
        line = self._merge(new_item)

        self._touch()
        self._record_event(
            CartItemAdded(
                aggregate_id=str(self.id),
                aggregate_type="Cart",
                cart_id=str(self.id),
                user_id=str(self.user_id),
                shop_id=str(shop_id),
                menu_id=str(menu_id),
                quantity=quantity,
            )
        )
        return line

    def _start(self, shop_id: ShopId) -> None:
        self.items = []
        self.shop_id = shop_id

    def _merge(self, new_item: CartLineItem) -> CartLineItem:
        for index, item in enumerate(self.items):
            if item.is_same_line(new_item):
                combined = item.combine(new_item)
                self.items[index] = combined
                return combined
        self.items.append(new_item)
        return new_item

    def remove_item(self, menu_id: MenuId, selected_option_ids: Iterable[OptionId] = ()) -> bool:
        """Remove the line for a menu and option set.

        Removing a line that is not in the cart does nothing.

        Returns:
            True if a line was removed.
        """
        item = self.find_item(menu_id, selected_option_ids)
        if item is None:
            return False
        self.items = [i for i in self.items if i.id != item.id]
        self._touch()
        return True

    def clear(self) -> int:
        """Remove all items and unset the shop.

        Returns:
            Number of lines removed.
        """
        removed = len(self.items)
        self.items = []
        self.shop_id = None
        self._touch()
        return removed

    # -------------------------------------------------------------------------
    # Ordering
    # -------------------------------------------------------------------------

    def place_order(
        self, resolved_lines: Mapping[CartLineKey, ResolvedLine] | None = None
    ) -> "Order":
        """Turn the cart into an order and empty the cart.

        Args:
            resolved_lines: Pricing data per line, see ``get_total_price``.

        Returns:
            The new Order.

        Raises:
            CartEmptyError: If the cart has no items.
            CartError: If no shop is selected.
        """
        if self.is_empty:
            raise CartEmptyError(str(self.id))
        if self.shop_id is None:
            raise CartError(CartErrorCode.SHOP_NOT_SELECTED, details={"cart_id": str(self.id)})
        order = Order.from_cart(self, resolved_lines)
        self.clear()
        return order


def _unit_price(
    item: CartLineItem, resolved_lines: Mapping[CartLineKey, ResolvedLine] | None
) -> Money:
    resolved = resolved_lines.get(item.key) if resolved_lines else None
    return resolved.unit_price if resolved is not None else PLACEHOLDER_UNIT_PRICE


# ============================================================================
# Order Aggregate Root
# ============================================================================


@dataclass(frozen=True, kw_only=True)
class OrderLineItem:
    """A line item in an order.

    Order line items are immutable snapshots of cart lines at the time
    of order placement.

    Attributes:
        id: Unique identifier for this line.
        menu_id: Menu ordered.
        menu_name: Menu name at time of order.
        selected_options: Option snapshots at time of order.
        quantity: Ordered quantity.
        unit_price: Price per unit including option surcharges.
    """

    id: UUID = field(default_factory=uuid4)
    menu_id: MenuId
    menu_name: str
    unit_price: Money
    quantity: int
    selected_options: tuple[SelectedOption, ...] = ()

    def __post_init__(self) -> None:
        """Validate order line constraints."""
        if self.quantity is None or self.quantity <= 0:
            raise InvalidQuantityError(self.quantity)
        object.__setattr__(self, "selected_options", tuple(self.selected_options))

    @property
    def line_price(self) -> Money:
        """Calculate line price.

        Returns:
            Unit price multiplied by quantity.
        """
        return self.unit_price * self.quantity

    @classmethod
    def from_cart_line(cls, item: CartLineItem, resolved: ResolvedLine | None) -> "OrderLineItem":
        """Create an order line from a cart line.

        Without resolved data the line gets the menu id as its name, no
        option snapshots and ``PLACEHOLDER_UNIT_PRICE``.

        Args:
            item: Cart line to snapshot.
            resolved: Pricing data for the line, if any.

        Returns:
            OrderLineItem snapshot.
        """
        if resolved is None:
            return cls(
                menu_id=item.menu_id,
                menu_name=str(item.menu_id),
                unit_price=PLACEHOLDER_UNIT_PRICE,
                quantity=item.quantity,
            )
        return cls(
            menu_id=item.menu_id,
            menu_name=resolved.menu_name,
            unit_price=resolved.unit_price,
            quantity=item.quantity,
            selected_options=resolved.selected_options,
        )


@dataclass(kw_only=True, eq=False)
class Order(AggregateRoot[OrderId]):
    """Order aggregate root.

    Orders are created from carts and are immutable once constructed. An
    order always has at least one line.

    Attributes:
        id: Unique order identifier.
        user_id: Customer who placed the order.
        shop_id: Shop fulfilling the order.
        items: Order line items.
        order_time: UTC timestamp of placement.
    """

    id: OrderId
    user_id: UserId
    shop_id: ShopId
    items: tuple[OrderLineItem, ...]
    order_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate order constraints."""
        if self.user_id is None:
            raise OrderError(OrderErrorCode.USER_ID_REQUIRED)
        if self.shop_id is None:
            raise OrderError(OrderErrorCode.SHOP_ID_REQUIRED)
        self.items = tuple(self.items or ())
        if not self.items:
            raise OrderError(OrderErrorCode.EMPTY_ORDER_ITEMS, details={"order_id": str(self.id)})

    @classmethod
    def place(
        cls,
        user_id: UserId,
        shop_id: ShopId,
        items: Iterable[OrderLineItem],
        order_id: OrderId | None = None,
    ) -> "Order":
        """Create a new order and record the placement event.

        Raises:
            OrderError: If user, shop or line items are missing.
        """
        order = cls(
            id=order_id or OrderId.generate(),
            user_id=user_id,
            shop_id=shop_id,
            items=tuple(items),
        )
        total = order.total_price
        order._record_event(
            OrderPlaced(
                aggregate_id=str(order.id),
                aggregate_type="Order",
                order_id=str(order.id),
                user_id=str(user_id),
                shop_id=str(shop_id),
                total_amount=str(total.amount),
                currency=total.currency,
            )
        )
        return order

    @classmethod
    def from_cart(
        cls,
        cart: Cart,
        resolved_lines: Mapping[CartLineKey, ResolvedLine] | None = None,
        order_id: OrderId | None = None,
    ) -> "Order":
        """Create an order with snapshots of the cart's lines.

        The cart itself is not modified; ``Cart.place_order`` clears it.

        Args:
            cart: Cart to create the order from.
            resolved_lines: Pricing data per cart line.
            order_id: Optional pre-generated order ID.

        Returns:
            New Order instance.

        Raises:
            OrderError: If the cart has no lines or no shop.
        """
        lines = [
            OrderLineItem.from_cart_line(
                item, resolved_lines.get(item.key) if resolved_lines else None
            )
            for item in cart.items
        ]
        return cls.place(cart.user_id, cart.shop_id, lines, order_id=order_id)

    @classmethod
    def restore(
        cls,
        order_id: OrderId,
        user_id: UserId,
        shop_id: ShopId,
        items: Iterable[OrderLineItem],
        order_time: datetime,
        version: int = 0,
    ) -> "Order":
        """Rebuild a persisted order. No event is recorded."""
        return cls(
            id=order_id,
            user_id=user_id,
            shop_id=shop_id,
            items=tuple(items),
            order_time=order_time,
            version=version,
        )

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    @property
    def total_price(self) -> Money:
        """Sum of line prices."""
        total = self.items[0].line_price
        for item in self.items[1:]:
            total = total + item.line_price
        return total

    @property
    def item_count(self) -> int:
        """Number of order lines."""
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        """Get total number of units.

        Returns:
            Sum of all item quantities.
        """
        return sum(item.quantity for item in self.items)

    def belongs_to_user(self, user_id: UserId) -> bool:
        """Check if the order was placed by the given user."""
        return self.user_id == user_id

    def is_from_shop(self, shop_id: ShopId) -> bool:
        """Check if the order is fulfilled by the given shop."""
        return self.shop_id == shop_id
