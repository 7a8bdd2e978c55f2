"""Shop service collaborator.

Answers "is this shop open" and "what does this menu look like" for the
cart and order services. Two implementations are provided: an HTTP client
for the remote shop service, and a local one backed by this service's own
menu repository so the API can run standalone.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import httpx

from foodorder.domain.repositories import MenuRepository
from foodorder.domain.value_objects import DEFAULT_CURRENCY, MenuId, Money, OptionId, ShopId
from foodorder.infrastructure.config import settings
from foodorder.infrastructure.http_client import CollaboratorHttpClient
from foodorder.infrastructure.repositories import get_menu_repository


# ============================================================================
# Read Models
# ============================================================================


@dataclass(frozen=True)
class OptionInfo:
    """An option offered by a menu.

    Attributes:
        option_id: Identifier customers select the option with.
        name: Option name.
        price: Option surcharge.
    """

    option_id: str
    name: str
    price: Money


@dataclass(frozen=True)
class MenuInfo:
    """Read-only view of a menu as published by the shop service."""

    menu_id: str
    name: str
    description: str
    base_price: Money
    is_open: bool


# ============================================================================
# Client Contract
# ============================================================================


class ShopApiClient(ABC):
    """Shop-status and menu-info provider."""

    @abstractmethod
    async def is_shop_open(self, shop_id: ShopId) -> bool:
        ...

    @abstractmethod
    async def get_menu(self, shop_id: ShopId, menu_id: MenuId) -> MenuInfo | None:
        """Get a menu of a shop, or None if the shop has no such menu."""

    @abstractmethod
    async def get_menu_options(self, shop_id: ShopId, menu_id: MenuId) -> list[OptionInfo]:
        """Get every option of a menu across all of its option groups."""

    async def close(self) -> None:
        """Release resources held by the client."""
        return None


# ============================================================================
# HTTP Implementation
# ============================================================================


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def _to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


class HttpShopApiClient(CollaboratorHttpClient, ShopApiClient):
    """HTTP client for the shop service.

    Endpoints:
        GET /api/shops/{shop_id} -> {"shop": {"open": bool}}
        GET /api/shops/{shop_id}/menus/{menu_id} -> {"menu": {...}}
    """

    service_name = "shop-api"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        max_attempts: int = 2,
        retry_delay_seconds: float = 0.2,
        currency: str = DEFAULT_CURRENCY,
        request_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            base_url,
            timeout=timeout,
            max_attempts=max_attempts,
            retry_delay_seconds=retry_delay_seconds,
            request_id=request_id,
            transport=transport,
        )
        self.currency = currency

    async def is_shop_open(self, shop_id: ShopId) -> bool:
        data = await self._get_json(f"/api/shops/{shop_id}")
        shop = (data or {}).get("shop")
        if not shop:
            return False
        return _to_bool(shop.get("open"))

    async def _fetch_menu(self, shop_id: ShopId, menu_id: MenuId) -> dict[str, Any] | None:
        data = await self._get_json(f"/api/shops/{shop_id}/menus/{menu_id}")
        return (data or {}).get("menu")

    async def get_menu(self, shop_id: ShopId, menu_id: MenuId) -> MenuInfo | None:
        menu = await self._fetch_menu(shop_id, menu_id)
        if not menu:
            return None
        currency = menu.get("currency") or self.currency
        return MenuInfo(
            menu_id=str(menu.get("id") or menu_id),
            name=menu.get("name") or "",
            description=menu.get("description") or "",
            base_price=Money.of(_to_decimal(menu.get("basePrice")), currency),
            is_open=_to_bool(menu.get("open")),
        )

    async def get_menu_options(self, shop_id: ShopId, menu_id: MenuId) -> list[OptionInfo]:
        menu = await self._fetch_menu(shop_id, menu_id)
        if not menu:
            return []
        currency = menu.get("currency") or self.currency
        options = []
        for group in menu.get("optionGroups") or []:
            group_key = str(group.get("id") or group.get("name") or "")
            for option in group.get("options") or []:
                name = option.get("name") or ""
                price = Money.of(_to_decimal(option.get("price")), currency)
                option_id = option.get("id") or OptionId.derive(group_key, name, price)
                options.append(OptionInfo(option_id=str(option_id), name=name, price=price))
        return options


# ============================================================================
# Local Implementation
# ============================================================================


class LocalShopApiClient(ShopApiClient):
    """Shop collaborator served from the in-process menu repository.

    Every shop counts as open unless listed in ``closed_shops``. Options carry
    no id of their own; each is offered under the id its group derives from
    the option's name and price.
    """

    def __init__(
        self,
        menu_repo: MenuRepository,
        closed_shops: set[str] | None = None,
    ) -> None:
        self.menu_repo = menu_repo
        self.closed_shops = set(closed_shops or ())

    async def is_shop_open(self, shop_id: ShopId) -> bool:
        return str(shop_id) not in self.closed_shops

    async def get_menu(self, shop_id: ShopId, menu_id: MenuId) -> MenuInfo | None:
        menu = self.menu_repo.find_by_id_optional(menu_id)
        if menu is None or menu.shop_id != shop_id:
            return None
        return MenuInfo(
            menu_id=str(menu.id),
            name=menu.name,
            description=menu.description,
            base_price=menu.base_price,
            is_open=menu.is_open,
        )

    async def get_menu_options(self, shop_id: ShopId, menu_id: MenuId) -> list[OptionInfo]:
        menu = self.menu_repo.find_by_id_optional(menu_id)
        if menu is None or menu.shop_id != shop_id:
            return []
        return [
            OptionInfo(
                option_id=str(group.option_id_of(option)), name=option.name, price=option.price
            )
            for group in menu.option_groups
            for option in group.options
        ]


# ============================================================================
# Client Factory
# ============================================================================


_http_shop_client: HttpShopApiClient | None = None


def get_shop_client() -> ShopApiClient:
    """Get the configured shop client.

    The HTTP client is shared for the process lifetime; the local client is
    rebuilt on each call so it always reads the current menu repository.

    Returns:
        ShopApiClient instance.
    """
    global _http_shop_client
    if not settings.use_remote_clients:
        return LocalShopApiClient(get_menu_repository())
    if _http_shop_client is None:
        _http_shop_client = HttpShopApiClient(
            settings.shop_api_url,
            timeout=settings.http_timeout_seconds,
            currency=settings.default_currency,
        )
    return _http_shop_client


async def close_shop_client() -> None:
    """Close the shared HTTP shop client, if one was created."""
    global _http_shop_client
    if _http_shop_client is not None:
        await _http_shop_client.close()
        _http_shop_client = None
