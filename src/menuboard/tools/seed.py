from __future__ import annotations

from decimal import Decimal

from menuboard.application.ports.store import MenuItemStore
from menuboard.domain.menu.entities import MenuItem
from menuboard.infrastructure.store_factory import get_menu_item_store

SAMPLE_ITEMS = [
    MenuItem(
        item_id=None,
        name="Bruschetta",
        description="Grilled bread, tomato, garlic, basil",
        price=Decimal("7.50"),
        category="Appetizers",
        available=True,
    ),
    MenuItem(
        item_id=None,
        name="Margherita Pizza",
        description="Tomato, mozzarella, basil",
        price=Decimal("14.50"),
        category="Mains",
        available=True,
    ),
    MenuItem(
        item_id=None,
        name="Chicken Alfredo",
        description="Fettuccine, creamy parmesan sauce",
        price=Decimal("16.90"),
        category="Mains",
        available=True,
    ),
    MenuItem(
        item_id=None,
        name="Tiramisu",
        description="Espresso-soaked ladyfingers",
        price=Decimal("8.50"),
        category="Desserts",
        available=False,
    ),
    MenuItem(
        item_id=None,
        name="Lemonade",
        description="Fresh lemons, cane sugar",
        price=Decimal("3.00"),
        category="Drinks",
        available=True,
    ),
]


def seed(store: MenuItemStore) -> list[MenuItem]:
    existing_names = {item.name for item in store.list_all()}
    missing = [item for item in SAMPLE_ITEMS if item.name not in existing_names]
    if not missing:
        return []
    return store.insert(missing)


def main() -> None:
    created = seed(get_menu_item_store())
    print(f"seed complete: {len(created)} item(s) created")


if __name__ == "__main__":
    main()
