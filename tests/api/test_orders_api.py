"""Tests for Order API endpoints."""

from decimal import Decimal

from fastapi.testclient import TestClient


def place_order(client: TestClient, menu_id: str, option_ids: list[str], quantity: int) -> str:
    client.post(
        "/carts/user-1/items",
        json={
            "shop_id": "shop-a",
            "menu_id": menu_id,
            "option_ids": option_ids,
            "quantity": quantity,
        },
    )
    response = client.post("/carts/user-1/order")
    assert response.status_code == 201
    return response.json()["resource_id"]


class TestGetOrder:
    """Tests for GET /orders/{order_id}."""

    def test_order_snapshot(self, client: TestClient, open_menu: dict[str, str]) -> None:
        order_id = place_order(client, open_menu["menu_id"], [open_menu["large"]], 2)

        response = client.get(f"/orders/{order_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == order_id
        assert data["user_id"] == "user-1"
        assert data["shop_id"] == "shop-a"
        assert data["order_time"]
        item = data["items"][0]
        assert item["menu_id"] == open_menu["menu_id"]
        assert item["menu_name"] == "Bulgogi Burger"
        assert item["quantity"] == 2
        assert Decimal(item["unit_price"]["amount"]) == Decimal("9500")
        assert Decimal(item["line_price"]["amount"]) == Decimal("19000")
        assert [o["name"] for o in item["selected_options"]] == ["Large"]
        assert item["selected_options"][0]["option_id"] == open_menu["large"]

    def test_order_not_found(self, client: TestClient) -> None:
        response = client.get("/orders/missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "ORDER-DOMAIN-005"


class TestListOrders:
    """Tests for GET /orders."""

    def test_list_orders(self, client: TestClient, open_menu: dict[str, str]) -> None:
        first = place_order(client, open_menu["menu_id"], [], 1)
        second = place_order(client, open_menu["menu_id"], [open_menu["large"]], 1)

        response = client.get("/orders", params={"user_id": "user-1"})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [o["id"] for o in data["items"]] == [first, second]

    def test_no_orders(self, client: TestClient) -> None:
        response = client.get("/orders", params={"user_id": "nobody"})
        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0}

    def test_user_id_required(self, client: TestClient) -> None:
        response = client.get("/orders")
        assert response.status_code == 422
