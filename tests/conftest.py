from __future__ import annotations

import copy
from typing import Any

import pytest
from fastapi.testclient import TestClient

from menu_api import main
from menu_api.menu import SEED_MENU, MenuCollection


@pytest.fixture()
def menu() -> MenuCollection:
    return MenuCollection(SEED_MENU)


@pytest.fixture()
def client(menu: MenuCollection) -> TestClient:
    main.app.state.menu = menu
    main.limiter.reset()
    return TestClient(main.app)


@pytest.fixture()
def valid_payload() -> dict[str, Any]:
    return copy.deepcopy(
        {
            "name": "Veggie Wrap",
            "description": "Grilled vegetables and hummus in a spinach tortilla",
            "price": 9.5,
            "category": "entree",
            "ingredients": ["tortilla", "zucchini", "peppers", "hummus"],
        }
    )
