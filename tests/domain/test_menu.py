"""Tests for the Menu aggregate and its option groups."""

import pytest

from foodorder.domain import (
    Menu,
    MenuErrorCode,
    MenuOpened,
    Money,
    Option,
    OptionGroup,
    OptionGroupId,
    ShopId,
)
from foodorder.domain.exceptions import MenuError


# ============================================================================
# Test Fixtures
# ============================================================================


def make_menu(name: str = "Bulgogi Burger", base_price: int = 8000) -> Menu:
    """Create a closed test menu."""
    return Menu.create(
        shop_id=ShopId.of("shop-a"),
        name=name,
        base_price=Money.of(base_price),
        description="House special",
    )


def make_openable_menu() -> Menu:
    """Create a menu that satisfies every publication rule."""
    menu = make_menu()
    size = menu.add_option_group("Size", required=True)
    menu.add_option(size.id, Option(name="Regular", price=Money.zero()))
    menu.add_option(size.id, Option(name="Large", price=Money.of(1500)))
    return menu


def error_code(exc_info: pytest.ExceptionInfo) -> MenuErrorCode:
    return exc_info.value.error_code


# ============================================================================
# Option Group Tests
# ============================================================================


class TestOptionGroup:
    """Tests for OptionGroup entity."""

    def test_create(self) -> None:
        """Groups start empty with a trimmed name."""
        group = OptionGroup.create("  Toppings ", required=False)
        assert group.name == "Toppings"
        assert group.is_empty
        assert not group.required

    def test_blank_name_rejected(self) -> None:
        """Group names must not be blank."""
        with pytest.raises(MenuError) as exc_info:
            OptionGroup.create("   ")
        assert error_code(exc_info) == MenuErrorCode.NEW_OPTION_GROUP_NAME_REQUIRED

    def test_identity_equality(self) -> None:
        """Groups compare by id only."""
        group_id = OptionGroupId.of("g-1")
        assert OptionGroup(id=group_id, name="A") == OptionGroup(id=group_id, name="B")

    def test_add_option(self) -> None:
        """Options keep insertion order."""
        group = OptionGroup.create("Toppings")
        group.add_option(Option(name="Cheese", price=Money.of(500)))
        group.add_option(Option(name="Bacon", price=Money.of(1000)))
        assert [o.name for o in group.options] == ["Cheese", "Bacon"]
        assert group.option_count == 2
        assert group.has_paid_options

    def test_add_duplicate_option_rejected(self) -> None:
        """The same (name, price) pair cannot be added twice."""
        group = OptionGroup.create("Toppings")
        group.add_option(Option(name="Cheese", price=Money.of(500)))
        with pytest.raises(MenuError) as exc_info:
            group.add_option(Option(name="Cheese", price=Money.of(500)))
        assert error_code(exc_info) == MenuErrorCode.DUPLICATE_OPTION_GROUP_NAME

    def test_same_name_different_price_allowed(self) -> None:
        """Options are identified by name and price together."""
        group = OptionGroup.create("Toppings")
        group.add_option(Option(name="Cheese", price=Money.of(500)))
        group.add_option(Option(name="Cheese", price=Money.of(800)))
        assert group.option_count == 2

    def test_free_options_only(self) -> None:
        """A group with only free options has no paid options."""
        group = OptionGroup.create("Sauce")
        group.add_option(Option(name="Ketchup", price=Money.zero()))
        assert not group.has_paid_options

    def test_remove_option(self) -> None:
        """Options are removed by exact (name, price)."""
        group = OptionGroup.create("Toppings")
        group.add_option(Option(name="Cheese", price=Money.of(500)))
        removed = group.remove_option("Cheese", Money.of(500))
        assert removed.name == "Cheese"
        assert group.is_empty

    def test_remove_missing_option_rejected(self) -> None:
        """Removing an unknown option fails."""
        group = OptionGroup.create("Toppings")
        group.add_option(Option(name="Cheese", price=Money.of(500)))
        with pytest.raises(MenuError) as exc_info:
            group.remove_option("Cheese", Money.of(700))
        assert error_code(exc_info) == MenuErrorCode.OPTION_NOT_FOUND

    def test_change_option_name_keeps_position(self) -> None:
        """Renaming replaces the option at the same index."""
        group = OptionGroup.create("Toppings")
        group.add_option(Option(name="Cheese", price=Money.of(500)))
        group.add_option(Option(name="Bacon", price=Money.of(1000)))
        group.change_option_name("Cheese", Money.of(500), "Cheddar")
        assert group.options[0] == Option(name="Cheddar", price=Money.of(500))
        assert group.options[1].name == "Bacon"

    def test_change_option_name_to_existing_pair_rejected(self) -> None:
        """A rename may not produce a duplicate (name, price)."""
        group = OptionGroup.create("Toppings")
        group.add_option(Option(name="Cheese", price=Money.of(500)))
        group.add_option(Option(name="Cheddar", price=Money.of(500)))
        with pytest.raises(MenuError) as exc_info:
            group.change_option_name("Cheese", Money.of(500), "Cheddar")
        assert error_code(exc_info) == MenuErrorCode.DUPLICATE_OPTION_GROUP_NAME

    def test_change_option_name_requires_current_values(self) -> None:
        """Current name and price must be given."""
        group = OptionGroup.create("Toppings")
        with pytest.raises(MenuError) as exc_info:
            group.change_option_name("", Money.of(500), "X")
        assert error_code(exc_info) == MenuErrorCode.CURRENT_OPTION_NAME_REQUIRED
        with pytest.raises(MenuError) as exc_info:
            group.change_option_name("Cheese", None, "X")
        assert error_code(exc_info) == MenuErrorCode.CURRENT_OPTION_PRICE_REQUIRED


# ============================================================================
# Menu Construction Tests
# ============================================================================


class TestMenuCreation:
    """Tests for Menu construction rules."""

    def test_create(self) -> None:
        """New menus are closed and have no groups."""
        menu = make_menu(name="  Kimchi Fried Rice ")
        assert menu.name == "Kimchi Fried Rice"
        assert not menu.is_open
        assert menu.option_groups == []
        assert not menu.has_domain_events

    def test_shop_required(self) -> None:
        with pytest.raises(MenuError) as exc_info:
            Menu.create(shop_id=None, name="X", base_price=Money.of(1))
        assert error_code(exc_info) == MenuErrorCode.SHOP_ID_REQUIRED

    def test_name_required(self) -> None:
        with pytest.raises(MenuError) as exc_info:
            Menu.create(shop_id=ShopId.of("s"), name=" ", base_price=Money.of(1))
        assert error_code(exc_info) == MenuErrorCode.MENU_NAME_REQUIRED

    def test_base_price_required(self) -> None:
        with pytest.raises(MenuError) as exc_info:
            Menu.create(shop_id=ShopId.of("s"), name="X", base_price=None)
        assert error_code(exc_info) == MenuErrorCode.BASE_PRICE_REQUIRED

    def test_negative_base_price_rejected(self) -> None:
        with pytest.raises(MenuError) as exc_info:
            Menu.create(shop_id=ShopId.of("s"), name="X", base_price=Money.of(-1))
        assert error_code(exc_info) == MenuErrorCode.INVALID_BASE_PRICE

    def test_zero_base_price_allowed(self) -> None:
        """Free menus are allowed; surcharges come from options."""
        menu = make_menu(base_price=0)
        assert menu.base_price.is_zero()


# ============================================================================
# Option Group Management Tests
# ============================================================================


class TestMenuOptionGroups:
    """Tests for option group management on a menu."""

    def test_add_option_group(self) -> None:
        menu = make_menu()
        group = menu.add_option_group("Size", required=True)
        assert menu.find_option_group(group.id) is group
        assert menu.required_group_count == 1

    def test_duplicate_group_name_rejected(self) -> None:
        """Group names are unique after trimming."""
        menu = make_menu()
        menu.add_option_group("Size")
        with pytest.raises(MenuError) as exc_info:
            menu.add_option_group("  Size ")
        assert error_code(exc_info) == MenuErrorCode.DUPLICATE_OPTION_GROUP_NAME

    def test_group_names_case_sensitive(self) -> None:
        menu = make_menu()
        menu.add_option_group("Size")
        menu.add_option_group("size")
        assert len(menu.option_groups) == 2

    def test_unknown_group_rejected(self) -> None:
        menu = make_menu()
        with pytest.raises(MenuError) as exc_info:
            menu.add_option(OptionGroupId.of("missing"), Option(name="X", price=Money.of(1)))
        assert error_code(exc_info) == MenuErrorCode.OPTION_GROUP_NOT_FOUND

    def test_closed_menu_accepts_many_required_groups(self) -> None:
        """The required-group limit is enforced when opening a closed menu."""
        menu = make_menu()
        for name in ("A", "B", "C", "D"):
            menu.add_option_group(name, required=True)
        assert menu.required_group_count == 4

    def test_open_menu_limits_required_groups(self) -> None:
        """An open menu cannot gain a fourth required group."""
        menu = make_openable_menu()
        menu.add_option_group("Bread", required=True)
        menu.add_option_group("Sauce", required=True)
        menu.open()
        with pytest.raises(MenuError) as exc_info:
            menu.add_option_group("Drink", required=True)
        assert error_code(exc_info) == MenuErrorCode.MAX_REQUIRED_OPTION_GROUPS_EXCEEDED
        menu.add_option_group("Extras", required=False)

    def test_rename_group(self) -> None:
        menu = make_menu()
        group = menu.add_option_group("Size")
        menu.change_option_group_name(group.id, "Portion")
        assert group.name == "Portion"

    def test_rename_group_to_taken_name_rejected(self) -> None:
        menu = make_menu()
        menu.add_option_group("Size")
        group = menu.add_option_group("Sauce")
        with pytest.raises(MenuError) as exc_info:
            menu.change_option_group_name(group.id, "Size")
        assert error_code(exc_info) == MenuErrorCode.DUPLICATE_OPTION_GROUP_NAME

    def test_rename_group_to_own_name_allowed(self) -> None:
        menu = make_menu()
        group = menu.add_option_group("Size")
        menu.change_option_group_name(group.id, "Size")
        assert group.name == "Size"

    def test_remove_group_from_closed_menu(self) -> None:
        menu = make_openable_menu()
        group = menu.option_groups[0]
        menu.remove_option_group(group.id)
        assert menu.option_groups == []

    def test_open_menu_keeps_a_paid_group(self) -> None:
        """An open menu cannot lose its only priced group."""
        menu = make_openable_menu()
        sauce = menu.add_option_group("Sauce")
        menu.add_option(sauce.id, Option(name="Ketchup", price=Money.zero()))
        menu.open()
        with pytest.raises(MenuError) as exc_info:
            menu.remove_option_group(menu.option_groups[0].id)
        assert error_code(exc_info) == MenuErrorCode.CANNOT_DELETE_REQUIRED_OPTION_GROUP
        menu.remove_option_group(sauce.id)
        assert len(menu.option_groups) == 1

    def test_open_menu_keeps_a_paid_option(self) -> None:
        """An open menu cannot lose its last priced option."""
        menu = make_openable_menu()
        menu.open()
        size = menu.option_groups[0]
        before = list(size.options)

        with pytest.raises(MenuError) as exc_info:
            menu.remove_option(size.id, "Large", Money.of(1500))
        assert error_code(exc_info) == MenuErrorCode.NO_PAID_OPTION_GROUP
        assert size.options == before

        removed = menu.remove_option(size.id, "Regular", Money.zero())
        assert removed.is_free
        assert [o.name for o in size.options] == ["Large"]

    def test_paid_option_removable_while_another_remains(self) -> None:
        menu = make_openable_menu()
        toppings = menu.add_option_group("Toppings")
        menu.add_option(toppings.id, Option(name="Cheese", price=Money.of(500)))
        menu.open()

        menu.remove_option(menu.option_groups[0].id, "Large", Money.of(1500))
        assert not menu.option_groups[0].has_paid_options

    def test_same_name_options_have_distinct_ids(self) -> None:
        """Options sharing a name are told apart by their price."""
        menu = make_menu()
        group = menu.add_option_group("Cheese")
        menu.add_option(group.id, Option(name="Cheese", price=Money.of(500)))
        menu.add_option(group.id, Option(name="Cheese", price=Money.zero()))
        paid, free = group.options
        assert group.option_id_of(paid) != group.option_id_of(free)
        assert group.option_id_of(paid) == group.option_id_of(Option(name="Cheese", price=Money.of(500)))

    def test_menu_level_option_operations(self) -> None:
        menu = make_menu()
        group = menu.add_option_group("Toppings")
        menu.add_option(group.id, Option(name="Cheese", price=Money.of(500)))
        menu.change_option_name(group.id, "Cheese", Money.of(500), "Cheddar")
        removed = menu.remove_option(group.id, "Cheddar", Money.of(500))
        assert removed.name == "Cheddar"
        assert group.is_empty


# ============================================================================
# Publication Tests
# ============================================================================


class TestMenuOpen:
    """Tests for the menu publication rules."""

    def test_open(self) -> None:
        """Opening a valid menu records MenuOpened."""
        menu = make_openable_menu()
        menu.open()
        assert menu.is_open
        events = menu.domain_events
        assert len(events) == 1
        event = events[0]
        assert isinstance(event, MenuOpened)
        assert event.menu_id == str(menu.id)
        assert event.shop_id == "shop-a"
        assert event.menu_name == "Bulgogi Burger"
        assert event.description == "House special"

    def test_open_without_groups_rejected(self) -> None:
        menu = make_menu()
        with pytest.raises(MenuError) as exc_info:
            menu.open()
        assert error_code(exc_info) == MenuErrorCode.INSUFFICIENT_OPTION_GROUPS
        assert not menu.is_open
        assert not menu.has_domain_events

    def test_open_with_too_many_required_groups_rejected(self) -> None:
        menu = make_openable_menu()
        for name in ("Bread", "Sauce", "Drink"):
            menu.add_option_group(name, required=True)
        with pytest.raises(MenuError) as exc_info:
            menu.open()
        assert error_code(exc_info) == MenuErrorCode.INVALID_REQUIRED_OPTION_GROUP_COUNT

    def test_open_with_three_required_groups_allowed(self) -> None:
        menu = make_openable_menu()
        menu.add_option_group("Bread", required=True)
        menu.add_option_group("Sauce", required=True)
        menu.open()
        assert menu.is_open

    def test_open_without_paid_option_rejected(self) -> None:
        menu = make_menu()
        group = menu.add_option_group("Sauce")
        menu.add_option(group.id, Option(name="Ketchup", price=Money.zero()))
        with pytest.raises(MenuError) as exc_info:
            menu.open()
        assert error_code(exc_info) == MenuErrorCode.NO_PAID_OPTION_GROUP

    def test_open_twice_rejected(self) -> None:
        menu = make_openable_menu()
        menu.open()
        menu.clear_domain_events()
        with pytest.raises(MenuError) as exc_info:
            menu.open()
        assert error_code(exc_info) == MenuErrorCode.MENU_ALREADY_OPEN
        assert not menu.has_domain_events
