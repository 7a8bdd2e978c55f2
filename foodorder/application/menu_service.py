"""Menu application service.

Orchestrates menu management for shop operators:
- Creating menus
- Shaping option groups and options
- Opening a menu once the publication rules hold
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import structlog

from foodorder.application.common import ServiceResult, drain_events, parse_id
from foodorder.domain.entities import Menu
from foodorder.domain.exceptions import DomainError, MenuErrorCode
from foodorder.domain.repositories import MenuRepository
from foodorder.domain.value_objects import MenuId, Money, Option, OptionGroupId, ShopId
from foodorder.infrastructure.config import settings
from foodorder.infrastructure.repositories import get_menu_repository

logger = structlog.get_logger()


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class MenuResult(ServiceResult):
    """Result of a menu command or lookup.

    ``resource_id`` names what the command created or changed: the menu id,
    or the option group id for group commands.
    """

    menu: Menu | None = None
    resource_id: str | None = None


@dataclass
class ListMenusResult(ServiceResult):
    """Result of listing a shop's menus."""

    menus: list[Menu] = field(default_factory=list)


# ============================================================================
# Menu Service
# ============================================================================


class MenuService:
    """Application service for menus.

    Each command loads one menu, performs one operation, saves it and
    drains its events.
    """

    def __init__(
        self,
        menu_repo: MenuRepository | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            menu_repo: Menu repository.
            request_id: Request ID for correlation.
        """
        self.menu_repo = menu_repo or get_menu_repository()
        self.request_id = request_id

    def _money(self, amount: Decimal | str | int | None, currency: str | None) -> Money | None:
        if amount is None:
            return None
        return Money.of(amount, currency or settings.default_currency)

    async def create_menu(
        self,
        shop_id: str,
        name: str,
        base_price: Decimal | str | int | None,
        description: str = "",
        currency: str | None = None,
    ) -> MenuResult:
        """Create a new, closed menu.

        Args:
            shop_id: Shop offering the menu.
            name: Menu name.
            base_price: Price before option surcharges.
            description: Optional description.
            currency: Currency code; defaults to the configured currency.

        Returns:
            MenuResult with the created menu.
        """
        try:
            menu = Menu.create(
                shop_id=parse_id(ShopId, shop_id, MenuErrorCode.SHOP_ID_REQUIRED),
                name=name,
                base_price=self._money(base_price, currency),
                description=description,
            )
            self.menu_repo.save(menu)
        except DomainError as e:
            logger.warning(
                "Failed to create menu",
                shop_id=shop_id,
                error_code=e.code,
                error=e.message,
                request_id=self.request_id,
            )
            return MenuResult.failed(e)

        drain_events(menu, self.request_id)
        logger.info(
            "Menu created",
            menu_id=str(menu.id),
            shop_id=shop_id,
            request_id=self.request_id,
        )
        return MenuResult(menu=menu, resource_id=str(menu.id))

    async def get_menu(self, menu_id: str) -> MenuResult:
        """Get a menu by ID."""
        try:
            menu = self.menu_repo.find_by_id(
                parse_id(MenuId, menu_id, MenuErrorCode.MENU_NOT_FOUND)
            )
        except DomainError as e:
            return MenuResult.failed(e)
        return MenuResult(menu=menu, resource_id=str(menu.id))

    async def list_menus(self, shop_id: str) -> ListMenusResult:
        """List the menus of a shop, oldest first."""
        try:
            menus = self.menu_repo.find_by_shop_id(
                parse_id(ShopId, shop_id, MenuErrorCode.SHOP_ID_REQUIRED)
            )
        except DomainError as e:
            return ListMenusResult.failed(e)
        return ListMenusResult(menus=menus)

    async def _execute(
        self,
        menu_id: str,
        command: str,
        action: Callable[[Menu], str | None],
        **log_fields: Any,
    ) -> MenuResult:
        """Load a menu, apply one operation, save and drain events.

        Args:
            menu_id: Menu identifier.
            command: Command name for logging.
            action: Operation to apply; returns the affected resource id.
            **log_fields: Extra fields for log entries.

        Returns:
            MenuResult with the saved menu.
        """
        try:
            menu = self.menu_repo.find_by_id(
                parse_id(MenuId, menu_id, MenuErrorCode.MENU_NOT_FOUND)
            )
            resource_id = action(menu)
            self.menu_repo.save(menu)
        except DomainError as e:
            logger.warning(
                "Menu command rejected",
                command=command,
                menu_id=menu_id,
                error_code=e.code,
                error=e.message,
                request_id=self.request_id,
                **log_fields,
            )
            return MenuResult.failed(e)

        drain_events(menu, self.request_id)
        logger.info(
            "Menu command applied",
            command=command,
            menu_id=menu_id,
            version=menu.version,
            request_id=self.request_id,
            **log_fields,
        )
        return MenuResult(menu=menu, resource_id=resource_id or str(menu.id))

    def _group_id(self, group_id: str) -> OptionGroupId:
        return parse_id(OptionGroupId, group_id, MenuErrorCode.OPTION_GROUP_ID_REQUIRED)

    async def add_option_group(self, menu_id: str, name: str, required: bool = False) -> MenuResult:
        """Add an option group to a menu.

        Returns:
            MenuResult whose ``resource_id`` is the new group's id.
        """
        return await self._execute(
            menu_id,
            "add_option_group",
            lambda menu: str(menu.add_option_group(name, required).id),
            name=name,
            required=required,
        )

    async def change_option_group_name(self, menu_id: str, group_id: str, new_name: str) -> MenuResult:
        """Rename an option group."""
        return await self._execute(
            menu_id,
            "change_option_group_name",
            lambda menu: str(menu.change_option_group_name(self._group_id(group_id), new_name).id),
            option_group_id=group_id,
        )

    async def remove_option_group(self, menu_id: str, group_id: str) -> MenuResult:
        """Remove an option group."""
        return await self._execute(
            menu_id,
            "remove_option_group",
            lambda menu: str(menu.remove_option_group(self._group_id(group_id)).id),
            option_group_id=group_id,
        )

    async def add_option(
        self,
        menu_id: str,
        group_id: str,
        name: str,
        price: Decimal | str | int | None,
        currency: str | None = None,
    ) -> MenuResult:
        """Add an option to an option group."""

        def action(menu: Menu) -> str:
            price_value = self._money(price, currency or menu.base_price.currency)
            menu.add_option(self._group_id(group_id), Option(name=name, price=price_value))
            return group_id

        return await self._execute(menu_id, "add_option", action, option_group_id=group_id)

    async def remove_option(
        self,
        menu_id: str,
        group_id: str,
        name: str,
        price: Decimal | str | int | None,
        currency: str | None = None,
    ) -> MenuResult:
        """Remove the option identified by (name, price)."""

        def action(menu: Menu) -> str:
            menu.remove_option(
                self._group_id(group_id),
                name,
                self._money(price, currency or menu.base_price.currency),
            )
            return group_id

        return await self._execute(menu_id, "remove_option", action, option_group_id=group_id)

    async def change_option_name(
        self,
        menu_id: str,
        group_id: str,
        current_name: str,
        current_price: Decimal | str | int | None,
        new_name: str,
        currency: str | None = None,
    ) -> MenuResult:
        """Rename the option identified by (current_name, current_price)."""

        def action(menu: Menu) -> str:
            menu.change_option_name(
                self._group_id(group_id),
                current_name,
                self._money(current_price, currency or menu.base_price.currency),
                new_name,
            )
            return group_id

        return await self._execute(
            menu_id, "change_option_name", action, option_group_id=group_id
        )

    async def open_menu(self, menu_id: str) -> MenuResult:
        """Open a menu to customers."""

        def action(menu: Menu) -> None:
            menu.open()

        return await self._execute(menu_id, "open_menu", action)


def get_menu_service(request_id: str | None = None) -> MenuService:
    """Get menu service instance.

    Args:
        request_id: Request ID for correlation.

    Returns:
        MenuService instance.
    """
    return MenuService(request_id=request_id)
