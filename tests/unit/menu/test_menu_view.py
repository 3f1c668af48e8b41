from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from menuboard.application.ports.store import StoreError
from menuboard.application.views.menu_view import EMPTY_MESSAGE, MenuView, UnknownCategoryError
from menuboard.domain.common.ids import MenuItemId
from menuboard.domain.menu.entities import MenuItem


class FakeMenuItemStore:
    def __init__(self, items: list[MenuItem], error: str | None = None) -> None:
        self._items = items
        self._error = error
        self.calls = 0

    def list_available(self) -> list[MenuItem]:
        self.calls += 1
        if self._error:
            raise StoreError(self._error)
        return sorted((item for item in self._items if item.available), key=lambda item: item.name)


def _item(item_id: str, name: str, category: str, available: bool = True) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(item_id),
        name=name,
        description="",
        price=Decimal("6.00"),
        category=category,
        available=available,
    )


def _sample_items() -> list[MenuItem]:
    return [
        _item("itm_001", "Tiramisu", "Desserts"),
        _item("itm_002", "Bruschetta", "appetizers"),
        _item("itm_003", "Margherita Pizza", "Mains"),
        _item("itm_004", "Chicken Alfredo", "Mains", available=False),
    ]


def test_menu_view_is_loading_until_load_resolves() -> None:
    view = MenuView(store=FakeMenuItemStore(_sample_items()))
    assert view.loading is True
    assert view.empty_message is None

    view.load()

    assert view.loading is False


def test_menu_view_load_holds_only_available_items_ordered_by_name() -> None:
    view = MenuView(store=FakeMenuItemStore(_sample_items()))

    view.load()

    assert all(item.available for item in view.items)
    assert [item.name for item in view.items] == ["Bruschetta", "Margherita Pizza", "Tiramisu"]


def test_menu_view_filters_by_category_chip() -> None:
    view = MenuView(store=FakeMenuItemStore(_sample_items()))
    view.load()

    view.select_category("Appetizers")
    assert [item.item_id for item in view.visible_items] == ["itm_002"]

    view.select_category("All")
    assert view.visible_items == view.items


def test_menu_view_reports_empty_category() -> None:
    view = MenuView(store=FakeMenuItemStore(_sample_items()))
    view.load()

    view.select_category("Drinks")

    assert view.visible_items == []
    assert view.empty_message == EMPTY_MESSAGE


def test_menu_view_rejects_unknown_category_label() -> None:
    view = MenuView(store=FakeMenuItemStore(_sample_items()))

    with pytest.raises(UnknownCategoryError):
        view.select_category("Brunch")
    assert view.active_category == "All"


def test_menu_view_fetch_failure_degrades_to_empty_list() -> None:
    store = FakeMenuItemStore(_sample_items(), error="connection refused")
    view = MenuView(store=store)

    view.load()

    assert store.calls == 1
    assert view.loading is False
    assert view.items == []
    assert view.empty_message == EMPTY_MESSAGE


def test_menu_view_reload_failure_clears_previous_items() -> None:
    store = FakeMenuItemStore(_sample_items())
    view = MenuView(store=store)
    view.load()
    assert len(view.items) == 3

    store._error = "connection reset by peer"
    view.load()

    assert view.items == []
    assert view.loading is False
    assert view.empty_message == EMPTY_MESSAGE
