"""Shared fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from foodorder.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def open_menu(client: TestClient) -> dict[str, str]:
    """Create an open menu for shop-a through the API.

    The menu costs 8000 and has a required Size group offering Regular (0)
    and Large (1500). Option ids are returned under "regular" and "large".
    """
    response = client.post(
        "/menus",
        json={"shop_id": "shop-a", "name": "Bulgogi Burger", "base_price": "8000"},
    )
    menu_id = response.json()["resource_id"]

    response = client.post(
        f"/menus/{menu_id}/option-groups",
        json={"name": "Size", "required": True},
    )
    group_id = response.json()["resource_id"]

    for name, price in (("Regular", "0"), ("Large", "1500")):
        client.post(
            f"/menus/{menu_id}/option-groups/{group_id}/options",
            json={"name": name, "price": price},
        )

    response = client.post(f"/menus/{menu_id}/open")
    assert response.status_code == 200

    options = client.get(f"/menus/{menu_id}").json()["option_groups"][0]["options"]
    ids = {option["name"].lower(): option["id"] for option in options}
    return {"menu_id": menu_id, "group_id": group_id, **ids}
