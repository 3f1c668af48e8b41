from __future__ import annotations

from decimal import Decimal
from typing import Protocol, Sequence

from menuboard.domain.common.ids import MenuItemId
from menuboard.domain.menu.entities import MenuItem


class StoreError(Exception):
    """Raised by store adapters for any backend failure; carries the store's message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MenuItemStore(Protocol):
    def list_available(self) -> list[MenuItem]: ...

    def list_all(self) -> list[MenuItem]: ...

    def set_availability(self, item_id: MenuItemId, available: bool) -> None: ...

    def update_details(
        self,
        item_id: MenuItemId,
        *,
        name: str,
        price: Decimal,
        description: str,
        category: str,
    ) -> None: ...

    def insert(self, items: Sequence[MenuItem]) -> list[MenuItem]: ...

    def ping(self) -> bool: ...
