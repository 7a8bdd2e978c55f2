"""Cart line pricing.

Builds the per-line pricing data the Cart and Order aggregates consume,
from menu and option information served by the shop collaborator. The
aggregates never call the collaborator themselves.
"""

import structlog

from foodorder.domain.entities import Cart
from foodorder.domain.value_objects import (
    CartLineKey,
    MenuId,
    OptionId,
    ResolvedLine,
    SelectedOption,
)
from foodorder.infrastructure.shop_client import MenuInfo, OptionInfo, ShopApiClient

logger = structlog.get_logger()


class LinePriceResolver:
    """Resolves unit prices and option snapshots for cart lines.

    Unit price is the menu base price plus the surcharges of the selected
    options. Lines whose menu the shop no longer serves are left out, so
    the aggregates fall back to their placeholder price for them.
    """

    def __init__(self, shop_client: ShopApiClient) -> None:
        self.shop_client = shop_client

    async def resolve(self, cart: Cart) -> dict[CartLineKey, ResolvedLine]:
        """Resolve pricing data for every line of a cart.

        Args:
            cart: Cart to price.

        Returns:
            Mapping of line key to resolved data.

        Raises:
            ExternalServiceError: If the shop collaborator fails.
        """
        if cart.is_empty or cart.shop_id is None:
            return {}

        menus: dict[MenuId, tuple[MenuInfo | None, dict[str, OptionInfo]]] = {}
        resolved: dict[CartLineKey, ResolvedLine] = {}
        for item in cart.items:
            if item.menu_id not in menus:
                menu = await self.shop_client.get_menu(cart.shop_id, item.menu_id)
                options = (
                    await self.shop_client.get_menu_options(cart.shop_id, item.menu_id)
                    if menu is not None
                    else []
                )
                menus[item.menu_id] = (menu, {o.option_id: o for o in options})

            menu, offered = menus[item.menu_id]
            if menu is None:
                logger.warning(
                    "Menu not served by shop, using placeholder price",
                    shop_id=str(cart.shop_id),
                    menu_id=str(item.menu_id),
                )
                continue

            selected = tuple(
                SelectedOption(
                    option_id=option_id,
                    name=offered[str(option_id)].name,
                    price=offered[str(option_id)].price,
                )
                for option_id in item.option_ids
                if str(option_id) in offered
            )
            unit_price = menu.base_price
            for option in selected:
                unit_price = unit_price + option.price
            resolved[item.key] = ResolvedLine(
                menu_name=menu.name,
                unit_price=unit_price,
                selected_options=selected,
            )
        return resolved


def option_ids_of(raw_ids: list[str] | None) -> tuple[OptionId, ...]:
    """Wrap raw option ids from a request, dropping blanks."""
    return tuple(OptionId.of(value) for value in raw_ids or () if value and value.strip())
