from __future__ import annotations

import logging

from menuboard.application.metrics.menu_mutations import record_items_held, record_load_failure
from menuboard.application.ports.store import MenuItemStore, StoreError
from menuboard.domain.menu.entities import (
    ALL_CATEGORIES,
    MENU_FILTER_LABELS,
    MenuItem,
    filter_by_category,
)

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No items available in this category at the moment."


class UnknownCategoryError(Exception):
    pass


class MenuView:
    """Public, read-only listing of available menu items with a category filter."""

    def __init__(self, store: MenuItemStore, categories: tuple[str, ...] = MENU_FILTER_LABELS) -> None:
        self._store = store
        self._categories = categories
        self._items: list[MenuItem] = []
        self._active_category = ALL_CATEGORIES
        self.loading = True

    @property
    def categories(self) -> tuple[str, ...]:
        return self._categories

    @property
    def active_category(self) -> str:
        return self._active_category

    @property
    def items(self) -> list[MenuItem]:
        return list(self._items)

    def load(self) -> None:
        self.loading = True
        try:
            self._items = self._store.list_available()
        except StoreError:
            logger.exception("menu_fetch_failed")
            self._items = []
            record_load_failure("menu")
        finally:
            self.loading = False
        record_items_held("menu", len(self._items))

    def select_category(self, label: str) -> None:
        if label not in self._categories:
            raise UnknownCategoryError(
                f"unknown category filter {label!r}; expected one of {', '.join(self._categories)}"
            )
        self._active_category = label

    @property
    def visible_items(self) -> list[MenuItem]:
        return filter_by_category(self._items, self._active_category)

    @property
    def empty_message(self) -> str | None:
        if self.loading or self.visible_items:
            return None
        return EMPTY_MESSAGE
