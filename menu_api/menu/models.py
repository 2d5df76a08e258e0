from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator


class Category(str, Enum):
    appetizer = "appetizer"
    entree = "entree"
    dessert = "dessert"
    beverage = "beverage"


class MenuItemFields(BaseModel):
    """Client-supplied fields of a menu item, validated on create and update."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    price: float = Field(..., gt=0, allow_inf_nan=False)
    category: Category
    ingredients: list[StrictStr] = Field(..., min_length=1)
    available: StrictBool = True

    @field_validator("price", mode="before")
    @classmethod
    def reject_boolean_price(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("price must be a number")
        return value


class MenuItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    name: str
    description: str
    price: float
    category: Category
    ingredients: list[str]
    available: bool = True

    @classmethod
    def from_fields(cls, item_id: int, fields: MenuItemFields) -> MenuItem:
        return cls(id=item_id, **fields.model_dump())


class MenuItemDeleted(BaseModel):
    message: str = "Menu item deleted successfully"
    menuItem: MenuItem


class ErrorResponse(BaseModel):
    error: str
    messages: list[str] | None = None
