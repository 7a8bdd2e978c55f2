"""Tests for Cart API endpoints."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from foodorder.api import carts
from foodorder.application.cart_service import CartService
from foodorder.application.order_service import OrderService
from foodorder.infrastructure.repositories import get_menu_repository
from foodorder.infrastructure.shop_client import LocalShopApiClient
from foodorder.infrastructure.user_client import LocalUserApiClient
from foodorder.main import app


@pytest.fixture
def restricted_client(client: TestClient):
    """Client whose collaborators report shop-closed as closed and banned as invalid."""

    def collaborators() -> dict:
        return {
            "shop_client": LocalShopApiClient(get_menu_repository(), closed_shops={"shop-closed"}),
            "user_client": LocalUserApiClient(blocked_users={"banned"}),
        }

    app.dependency_overrides[carts.get_service] = lambda: CartService(**collaborators())
    app.dependency_overrides[carts.get_orders] = lambda: OrderService(**collaborators())
    yield client
    app.dependency_overrides.clear()


def add_item(client: TestClient, menu_id: str, option_ids=None, quantity: int = 1, user_id: str = "user-1"):
    return client.post(
        f"/carts/{user_id}/items",
        json={
            "shop_id": "shop-a",
            "menu_id": menu_id,
            "option_ids": option_ids or [],
            "quantity": quantity,
        },
    )


class TestAddItem:
    """Tests for POST /carts/{user_id}/items."""

    def test_add_item(self, client: TestClient, open_menu: dict[str, str]) -> None:
        response = add_item(client, open_menu["menu_id"], [open_menu["large"]], 2)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Item added to cart"
        assert data["resource_id"]

    def test_same_line_merges(self, client: TestClient, open_menu: dict[str, str]) -> None:
        add_item(client, open_menu["menu_id"], [open_menu["large"]], 2)
        add_item(client, open_menu["menu_id"], [open_menu["large"]], 3)

        data = client.get("/carts/user-1").json()
        assert len(data["items"]) == 1
        assert data["items"][0]["quantity"] == 5
        assert data["total_quantity"] == 5

    def test_closed_menu_not_available(self, client: TestClient) -> None:
        menu_id = client.post(
            "/menus",
            json={"shop_id": "shop-a", "name": "Draft", "base_price": "5000"},
        ).json()["resource_id"]

        response = add_item(client, menu_id)
        assert response.status_code == 422
        assert response.json()["error_code"] == "CART-DOMAIN-013"

    def test_unknown_option(self, client: TestClient, open_menu: dict[str, str]) -> None:
        response = add_item(client, open_menu["menu_id"], ["Huge"])
        assert response.status_code == 422
        assert response.json()["error_code"] == "CART-DOMAIN-012"

    def test_zero_quantity(self, client: TestClient, open_menu: dict[str, str]) -> None:
        response = add_item(client, open_menu["menu_id"], quantity=0)
        assert response.status_code == 400
        assert response.json()["error_code"] == "CART-DOMAIN-005"

    def test_closed_shop(self, restricted_client: TestClient) -> None:
        response = restricted_client.post(
            "/carts/user-1/items",
            json={"shop_id": "shop-closed", "menu_id": "menu-1"},
        )
        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "CART-DOMAIN-011"
        assert data["details"] == {"shop_id": "shop-closed"}

    def test_invalid_user(self, restricted_client: TestClient, open_menu: dict[str, str]) -> None:
        response = add_item(restricted_client, open_menu["menu_id"], user_id="banned")
        assert response.status_code == 422
        assert response.json()["error_code"] == "CART-DOMAIN-010"


class TestCartLifecycle:
    """Tests for reading, removing and clearing a cart."""

    def test_get_cart_with_total(self, client: TestClient, open_menu: dict[str, str]) -> None:
        add_item(client, open_menu["menu_id"], [open_menu["large"]], 2)
        add_item(client, open_menu["menu_id"])

        response = client.get("/carts/user-1")

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == "user-1"
        assert data["shop_id"] == "shop-a"
        assert [item["option_ids"] for item in data["items"]] == [[open_menu["large"]], []]
        assert Decimal(data["total_price"]["amount"]) == Decimal("27000")

    def test_cart_not_found(self, client: TestClient) -> None:
        response = client.get("/carts/nobody")
        assert response.status_code == 404
        assert response.json()["error_code"] == "CART-DOMAIN-002"

    def test_remove_item(self, client: TestClient, open_menu: dict[str, str]) -> None:
        add_item(client, open_menu["menu_id"], [open_menu["large"]])
        add_item(client, open_menu["menu_id"])

        response = client.request(
            "DELETE",
            "/carts/user-1/items",
            json={"menu_id": open_menu["menu_id"], "option_ids": [open_menu["large"]]},
        )

        assert response.status_code == 200
        items = client.get("/carts/user-1").json()["items"]
        assert [item["option_ids"] for item in items] == [[]]

    def test_clear_cart(self, client: TestClient, open_menu: dict[str, str]) -> None:
        add_item(client, open_menu["menu_id"])

        response = client.delete("/carts/user-1")

        assert response.status_code == 200
        data = client.get("/carts/user-1").json()
        assert data["items"] == []
        assert data["shop_id"] is None
        assert Decimal(data["total_price"]["amount"]) == Decimal("0")


class TestPlaceOrder:
    """Tests for POST /carts/{user_id}/order."""

    def test_place_order(self, client: TestClient, open_menu: dict[str, str]) -> None:
        add_item(client, open_menu["menu_id"], [open_menu["large"]], 2)

        response = client.post("/carts/user-1/order")

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Order placed"
        order = client.get(f"/orders/{data['resource_id']}").json()
        assert Decimal(order["total_price"]["amount"]) == Decimal("19000")
        assert client.get("/carts/user-1").json()["items"] == []

    def test_empty_cart(self, client: TestClient, open_menu: dict[str, str]) -> None:
        add_item(client, open_menu["menu_id"])
        client.delete("/carts/user-1")

        response = client.post("/carts/user-1/order")
        assert response.status_code == 400
        assert response.json()["error_code"] == "CART-DOMAIN-007"

    def test_no_cart(self, client: TestClient) -> None:
        response = client.post("/carts/nobody/order")
        assert response.status_code == 404

    def test_invalid_user(self, restricted_client: TestClient) -> None:
        response = restricted_client.post("/carts/banned/order")
        assert response.status_code == 422
        assert response.json()["error_code"] == "ORDER-DOMAIN-008"
