from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient


def test_root_lists_endpoints(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Welcome to the Menu API"
    assert "GET /api/menu" in data["endpoints"]


def test_list_menu_returns_seeded_items(client: TestClient) -> None:
    response = client.get("/api/menu")

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 6
    assert data[0] == {
        "id": 1,
        "name": "Classic Burger",
        "description": "Beef patty with lettuce, tomato, and cheese on a sesame seed bun",
        "price": 12.99,
        "category": "entree",
        "ingredients": ["beef", "lettuce", "tomato", "cheese", "bun"],
        "available": True,
    }


def test_get_menu_item(client: TestClient) -> None:
    response = client.get("/api/menu/5")

    assert response.status_code == 200
    assert response.json()["name"] == "Fresh Lemonade"


def test_get_missing_menu_item(client: TestClient) -> None:
    response = client.get("/api/menu/99")

    assert response.status_code == 404
    assert response.json() == {"error": "Menu item not found"}


@pytest.mark.parametrize("raw_id", ["abc", "0_1", "%203", "3%20", "+3", "-3", "1.0", "%D9%A3"])
def test_non_numeric_id_is_not_found(
    client: TestClient, valid_payload: dict[str, Any], raw_id: str
) -> None:
    responses = [
        client.get(f"/api/menu/{raw_id}"),
        client.put(f"/api/menu/{raw_id}", json=valid_payload),
        client.delete(f"/api/menu/{raw_id}"),
    ]

    for response in responses:
        assert response.status_code == 404
        assert response.json() == {"error": "Menu item not found"}
    assert len(client.get("/api/menu").json()) == 6
    assert client.get("/api/menu/1").json()["name"] == "Classic Burger"
    assert client.get("/api/menu/3").json()["name"] == "Mozzarella Sticks"


def test_create_menu_item_defaults_available(
    client: TestClient, valid_payload: dict[str, Any]
) -> None:
    response = client.post("/api/menu", json=valid_payload)

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == 7
    assert data["available"] is True
    assert client.get("/api/menu/7").json() == data


def test_create_with_short_name(client: TestClient, valid_payload: dict[str, Any]) -> None:
    valid_payload["name"] = "ab"
    response = client.post("/api/menu", json=valid_payload)

    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Validation failed"
    assert "Name must be at least 3 characters long" in data["messages"]


def test_create_reports_all_violations(client: TestClient) -> None:
    response = client.post(
        "/api/menu",
        json={"name": "ab", "description": "short", "price": -2, "category": "entree",
              "ingredients": ["salt"]},
    )

    assert response.status_code == 400
    assert response.json()["messages"] == [
        "Name must be at least 3 characters long",
        "Description must be at least 10 characters long",
        "Price must be a number greater than 0",
    ]
    assert len(client.get("/api/menu").json()) == 6


def test_create_requires_body(client: TestClient) -> None:
    for kwargs in ({}, {"json": {}}):
        response = client.post("/api/menu", **kwargs)
        assert response.status_code == 400
        assert response.json() == {"error": "Request body required"}


def test_create_rejects_non_object_body(client: TestClient) -> None:
    response = client.post("/api/menu", json=["not", "an", "object"])

    assert response.status_code == 422
    assert "detail" in response.json()


def test_create_rejects_malformed_json(client: TestClient) -> None:
    response = client.post(
        "/api/menu",
        content=b'{"name": ',
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 422


def test_update_menu_item(client: TestClient, valid_payload: dict[str, Any]) -> None:
    valid_payload["available"] = False
    response = client.put("/api/menu/2", json=valid_payload)

    assert response.status_code == 200
    data = response.json()
    assert data == {**valid_payload, "id": 2}
    assert client.get("/api/menu/2").json() == data
    assert [item["id"] for item in client.get("/api/menu").json()] == [1, 2, 3, 4, 5, 6]


def test_update_missing_item(client: TestClient, valid_payload: dict[str, Any]) -> None:
    response = client.put("/api/menu/42", json=valid_payload)

    assert response.status_code == 404
    assert response.json() == {"error": "Menu item not found"}


def test_update_missing_item_wins_over_invalid_body(client: TestClient) -> None:
    response = client.put("/api/menu/42", json={"name": "ab"})

    assert response.status_code == 404


def test_update_with_invalid_payload(client: TestClient, valid_payload: dict[str, Any]) -> None:
    valid_payload["ingredients"] = []
    response = client.put("/api/menu/1", json=valid_payload)

    assert response.status_code == 400
    assert response.json()["messages"] == ["Ingredients must be an array with at least one item"]
    assert client.get("/api/menu/1").json()["name"] == "Classic Burger"


def test_update_requires_body(client: TestClient) -> None:
    response = client.put("/api/menu/1", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Request body required"}


def test_delete_menu_item(client: TestClient) -> None:
    response = client.delete("/api/menu/3")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Menu item deleted successfully"
    assert data["menuItem"]["id"] == 3
    assert data["menuItem"]["name"] == "Mozzarella Sticks"

    assert client.get("/api/menu/3").status_code == 404
    assert client.delete("/api/menu/3").status_code == 404


def test_create_after_delete_does_not_duplicate_ids(
    client: TestClient, valid_payload: dict[str, Any]
) -> None:
    client.delete("/api/menu/1")
    created = client.post("/api/menu", json=valid_payload).json()

    ids = [item["id"] for item in client.get("/api/menu").json()]
    assert created["id"] == 7
    assert len(ids) == len(set(ids))
