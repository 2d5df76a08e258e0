from __future__ import annotations


class MenuError(Exception):
    """Base class for errors surfaced by the menu API."""


class MenuItemNotFound(MenuError):
    def __init__(self, item_id: int | str) -> None:
        super().__init__(f"Menu item {item_id} not found")
        self.item_id = item_id


class MenuValidationError(MenuError):
    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages = messages


class EmptyBodyError(MenuError):
    def __init__(self) -> None:
        super().__init__("Request body required")
