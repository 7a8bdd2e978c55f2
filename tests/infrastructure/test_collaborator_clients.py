"""Tests for the shop and user collaborator clients."""

import httpx
import pytest

from foodorder.domain import MenuId, Money, Option, OptionId, ShopId, UserId
from foodorder.domain.entities import Menu
from foodorder.domain.exceptions import ExternalServiceError
from foodorder.infrastructure.repositories import InMemoryMenuRepository
from foodorder.infrastructure.shop_client import HttpShopApiClient, LocalShopApiClient
from foodorder.infrastructure.user_client import HttpUserApiClient, LocalUserApiClient

BASE_URL = "http://collaborator.test"


def make_transport(*responses):
    """Create a mock transport that replays responses in order.

    Each entry is an ``httpx.Response`` or an exception instance to raise.
    The list of seen requests is exposed as ``transport.calls``.
    """
    queue = list(responses)
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    transport = httpx.MockTransport(handler)
    transport.calls = calls
    return transport


# ============================================================================
# User Client
# ============================================================================


class TestHttpUserApiClient:
    """Tests for HttpUserApiClient."""

    @pytest.mark.asyncio
    async def test_known_user_is_valid(self) -> None:
        transport = make_transport(httpx.Response(200, json={"id": "user-1"}))
        client = HttpUserApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        assert await client.is_valid_user(UserId.of("user-1"))
        assert transport.calls[0].url.path == "/api/users/user-1"
        await client.close()

    @pytest.mark.asyncio
    async def test_unknown_user_is_invalid(self) -> None:
        transport = make_transport(httpx.Response(404))
        client = HttpUserApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        assert not await client.is_valid_user(UserId.of("ghost"))
        assert len(transport.calls) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_body_without_id_is_invalid(self) -> None:
        transport = make_transport(httpx.Response(200, json={}))
        client = HttpUserApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        assert not await client.is_valid_user(UserId.of("user-1"))
        await client.close()

    @pytest.mark.asyncio
    async def test_retries_transport_failure_once(self) -> None:
        transport = make_transport(
            httpx.ConnectError("connection refused"),
            httpx.Response(200, json={"id": "user-1"}),
        )
        client = HttpUserApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        assert await client.is_valid_user(UserId.of("user-1"))
        assert len(transport.calls) == 2
        await client.close()

    @pytest.mark.asyncio
    async def test_retries_server_error(self) -> None:
        transport = make_transport(
            httpx.Response(503),
            httpx.Response(200, json={"id": "user-1"}),
        )
        client = HttpUserApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        assert await client.is_valid_user(UserId.of("user-1"))
        assert len(transport.calls) == 2
        await client.close()

    @pytest.mark.asyncio
    async def test_persistent_failure_raises(self) -> None:
        transport = make_transport(httpx.ConnectError("connection refused"))
        client = HttpUserApiClient(
            BASE_URL, max_attempts=2, retry_delay_seconds=0, transport=transport
        )

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.is_valid_user(UserId.of("user-1"))
        assert exc_info.value.service == "user-api"
        assert len(transport.calls) == 2
        await client.close()

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self) -> None:
        transport = make_transport(httpx.Response(400, text="bad id"))
        client = HttpUserApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.is_valid_user(UserId.of("user-1"))
        assert exc_info.value.status_code == 400
        assert len(transport.calls) == 1
        await client.close()


class TestLocalUserApiClient:
    """Tests for LocalUserApiClient."""

    @pytest.mark.asyncio
    async def test_blocked_users_are_invalid(self) -> None:
        client = LocalUserApiClient(blocked_users={"banned"})
        assert await client.is_valid_user(UserId.of("user-1"))
        assert not await client.is_valid_user(UserId.of("banned"))


# ============================================================================
# Shop Client
# ============================================================================


MENU_BODY = {
    "menu": {
        "id": "menu-1",
        "name": "Bulgogi Burger",
        "description": "House special",
        "basePrice": 8000,
        "open": True,
        "optionGroups": [
            {
                "name": "Size",
                "options": [
                    {"id": "opt-regular", "name": "Regular", "price": 0},
                    {"name": "Large", "price": "1500"},
                ],
            }
        ],
    }
}


class TestHttpShopApiClient:
    """Tests for HttpShopApiClient."""

    @pytest.mark.asyncio
    async def test_shop_open(self) -> None:
        transport = make_transport(httpx.Response(200, json={"shop": {"open": True}}))
        client = HttpShopApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        assert await client.is_shop_open(ShopId.of("shop-a"))
        assert transport.calls[0].url.path == "/api/shops/shop-a"
        await client.close()

    @pytest.mark.asyncio
    async def test_shop_closed_or_unknown(self) -> None:
        transport = make_transport(
            httpx.Response(200, json={"shop": {"open": False}}),
            httpx.Response(404),
        )
        client = HttpShopApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        assert not await client.is_shop_open(ShopId.of("shop-a"))
        assert not await client.is_shop_open(ShopId.of("shop-x"))
        await client.close()

    @pytest.mark.asyncio
    async def test_get_menu(self) -> None:
        transport = make_transport(httpx.Response(200, json=MENU_BODY))
        client = HttpShopApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        menu = await client.get_menu(ShopId.of("shop-a"), MenuId.of("menu-1"))
        assert menu is not None
        assert menu.name == "Bulgogi Burger"
        assert menu.base_price == Money.of(8000)
        assert menu.is_open
        assert transport.calls[0].url.path == "/api/shops/shop-a/menus/menu-1"
        await client.close()

    @pytest.mark.asyncio
    async def test_get_menu_options(self) -> None:
        transport = make_transport(httpx.Response(200, json=MENU_BODY))
        client = HttpShopApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        options = await client.get_menu_options(ShopId.of("shop-a"), MenuId.of("menu-1"))
        assert [(o.option_id, o.price) for o in options] == [
            ("opt-regular", Money.zero()),
            (str(OptionId.derive("Size", "Large", Money.of(1500))), Money.of(1500)),
        ]
        await client.close()

    @pytest.mark.asyncio
    async def test_options_without_ids_stay_distinct(self) -> None:
        """Options sharing a name get different ids when their prices differ."""
        body = {
            "menu": {
                "id": "menu-2",
                "name": "Pizza",
                "basePrice": 8000,
                "open": True,
                "optionGroups": [
                    {
                        "id": "group-cheese",
                        "name": "Cheese",
                        "options": [
                            {"name": "Cheese", "price": 500},
                            {"name": "Cheese", "price": 0},
                        ],
                    }
                ],
            }
        }
        transport = make_transport(httpx.Response(200, json=body))
        client = HttpShopApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        options = await client.get_menu_options(ShopId.of("shop-a"), MenuId.of("menu-2"))
        paid, free = options
        assert paid.option_id != free.option_id
        assert paid.option_id == str(OptionId.derive("group-cheese", "Cheese", Money.of(500)))
        await client.close()

    @pytest.mark.asyncio
    async def test_missing_menu(self) -> None:
        transport = make_transport(httpx.Response(404))
        client = HttpShopApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        assert await client.get_menu(ShopId.of("shop-a"), MenuId.of("menu-9")) is None
        await client.close()

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self) -> None:
        transport = make_transport(httpx.Response(200, text="not json"))
        client = HttpShopApiClient(BASE_URL, retry_delay_seconds=0, transport=transport)

        with pytest.raises(ExternalServiceError):
            await client.is_shop_open(ShopId.of("shop-a"))
        await client.close()


class TestLocalShopApiClient:
    """Tests for LocalShopApiClient."""

    def make_client(self, closed_shops=None) -> tuple[LocalShopApiClient, Menu]:
        repo = InMemoryMenuRepository()
        menu = Menu.create(ShopId.of("shop-a"), "Bulgogi Burger", Money.of(8000))
        size = menu.add_option_group("Size", required=True)
        menu.add_option(size.id, Option(name="Large", price=Money.of(1500)))
        repo.save(menu)
        return LocalShopApiClient(repo, closed_shops=closed_shops), menu

    @pytest.mark.asyncio
    async def test_shops_open_unless_listed(self) -> None:
        client, _ = self.make_client(closed_shops={"shop-b"})
        assert await client.is_shop_open(ShopId.of("shop-a"))
        assert not await client.is_shop_open(ShopId.of("shop-b"))

    @pytest.mark.asyncio
    async def test_menu_must_belong_to_shop(self) -> None:
        client, menu = self.make_client()
        assert await client.get_menu(ShopId.of("shop-a"), menu.id) is not None
        assert await client.get_menu(ShopId.of("shop-b"), menu.id) is None

    @pytest.mark.asyncio
    async def test_options_identified_by_derived_id(self) -> None:
        client, menu = self.make_client()
        size = menu.option_groups[0]
        options = await client.get_menu_options(ShopId.of("shop-a"), menu.id)
        assert [o.option_id for o in options] == [str(size.option_id_of(size.options[0]))]
        assert options[0].name == "Large"

    @pytest.mark.asyncio
    async def test_same_name_options_get_distinct_ids(self) -> None:
        client, menu = self.make_client()
        size = menu.option_groups[0]
        menu.add_option(size.id, Option(name="Large", price=Money.zero()))
        client.menu_repo.save(menu)

        options = await client.get_menu_options(ShopId.of("shop-a"), menu.id)
        assert [o.name for o in options] == ["Large", "Large"]
        assert len({o.option_id for o in options}) == 2
