from menu_api.menu.collection import FIELD_MESSAGES, MenuCollection, validate_fields
from menu_api.menu.models import Category, MenuItem, MenuItemDeleted, MenuItemFields
from menu_api.menu.seed import SEED_MENU

__all__ = [
    "FIELD_MESSAGES",
    "SEED_MENU",
    "Category",
    "MenuCollection",
    "MenuItem",
    "MenuItemDeleted",
    "MenuItemFields",
    "validate_fields",
]
