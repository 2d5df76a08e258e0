from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from menu_api.core.errors import MenuItemNotFound, MenuValidationError
from menu_api.menu.models import MenuItem, MenuItemFields

logger = structlog.get_logger(__name__)

FIELD_MESSAGES = {
    "name": "Name must be at least 3 characters long",
    "description": "Description must be at least 10 characters long",
    "price": "Price must be a number greater than 0",
    "category": "Category must be one of appetizer, entree, dessert, beverage",
    "ingredients": "Ingredients must be an array with at least one item",
    "ingredients.*": "Each ingredient must be a string",
    "available": "Available must be true or false",
}


def _rule_for(loc: tuple[int | str, ...]) -> str:
    field = str(loc[0]) if loc else ""
    if field == "ingredients" and len(loc) > 1:
        return "ingredients.*"
    return field


def validate_fields(candidate: Mapping[str, Any]) -> MenuItemFields:
    """Validate a create/update payload.

    Every violated rule is reported, one message per rule, in field order.
    Raises MenuValidationError when anything fails.
    """
    try:
        return MenuItemFields.model_validate(dict(candidate))
    except ValidationError as exc:
        messages: list[str] = []
        for error in exc.errors():
            rule = _rule_for(error["loc"])
            message = FIELD_MESSAGES.get(rule, error["msg"])
            if message not in messages:
                messages.append(message)
        raise MenuValidationError(messages) from exc


class MenuCollection:
    """In-memory, insertion-ordered menu.

    Ids come from a counter that only moves forward, so an id freed by
    ``remove`` is never handed out again. Not safe for concurrent writers.
    """

    def __init__(self, seed: Iterable[MenuItem | Mapping[str, Any]] = ()) -> None:
        self._seed = [MenuItem.model_validate(item).model_copy(deep=True) for item in seed]
        seed_ids = [item.id for item in self._seed]
        if len(seed_ids) != len(set(seed_ids)):
            raise ValueError("Seed menu contains duplicate ids")
        self._items: list[MenuItem] = []
        self._next_id = 1
        self.reset()

    def __len__(self) -> int:
        return len(self._items)

    def reset(self) -> None:
        # Items hand out mutable ingredient lists; never share them with the seed
        self._items = [item.model_copy(deep=True) for item in self._seed]
        self._next_id = max((item.id for item in self._seed), default=0) + 1

    def list_all(self) -> list[MenuItem]:
        return list(self._items)

    def find_by_id(self, item_id: int) -> MenuItem:
        return self._items[self._index_of(item_id)]

    def insert(self, candidate: Mapping[str, Any]) -> MenuItem:
        fields = validate_fields(candidate)
        item = MenuItem.from_fields(self._next_id, fields)
        self._next_id += 1
        self._items.append(item)
        logger.info("menu_item_created", item_id=item.id, name=item.name)
        return item

    def replace(self, item_id: int, candidate: Mapping[str, Any]) -> MenuItem:
        index = self._index_of(item_id)
        fields = validate_fields(candidate)
        item = MenuItem.from_fields(item_id, fields)
        self._items[index] = item
        logger.info("menu_item_updated", item_id=item_id)
        return item

    def remove(self, item_id: int) -> MenuItem:
        index = self._index_of(item_id)
        item = self._items.pop(index)
        logger.info("menu_item_deleted", item_id=item_id)
        return item

    def _index_of(self, item_id: int) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise MenuItemNotFound(item_id)
