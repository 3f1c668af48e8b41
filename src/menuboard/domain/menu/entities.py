from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Iterable

from menuboard.domain.common.ids import MenuItemId
from menuboard.domain.common.money import format_price, to_price

DEFAULT_CATEGORY = "Main"
EDITOR_CATEGORIES = ("Main", "Appetizer", "Dessert", "Drink")

ALL_CATEGORIES = "All"
MENU_FILTER_LABELS = (ALL_CATEGORIES, "Appetizers", "Mains", "Desserts", "Drinks")

EDITABLE_FIELDS = frozenset({"name", "description", "price", "category"})


class InvalidMenuItemError(ValueError):
    pass


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId | None
    name: str
    description: str
    price: Decimal
    category: str
    available: bool

    def __post_init__(self) -> None:
        try:
            price = to_price(self.price)
        except ValueError as exc:
            raise InvalidMenuItemError(str(exc)) from exc
        if price < 0:
            raise InvalidMenuItemError("price must be >= 0")
        object.__setattr__(self, "price", price)
        if self.description is None:
            object.__setattr__(self, "description", "")

    @classmethod
    def draft(cls) -> MenuItem:
        return cls(
            item_id=None,
            name="",
            description="",
            price=Decimal("0"),
            category=DEFAULT_CATEGORY,
            available=True,
        )

    @property
    def is_draft(self) -> bool:
        return self.item_id is None

    @property
    def display_price(self) -> str:
        return format_price(self.price)

    def with_changes(self, **changes: Any) -> MenuItem:
        if self.item_id is not None and changes.get("item_id", self.item_id) != self.item_id:
            raise InvalidMenuItemError("item_id is immutable once assigned")
        return replace(self, **changes)

    def ensure_submittable(self) -> None:
        if not self.name.strip():
            raise InvalidMenuItemError("name must be non-empty")


def matches_category(item: MenuItem, label: str) -> bool:
    return item.category.lower() == label.lower()


def filter_by_category(items: Iterable[MenuItem], label: str) -> list[MenuItem]:
    if label == ALL_CATEGORIES:
        return list(items)
    return [item for item in items if matches_category(item, label)]
