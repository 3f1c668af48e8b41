from __future__ import annotations

from decimal import Decimal
from typing import Sequence
from uuid import uuid4

from sqlalchemy import Engine, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from menuboard.application.ports.store import MenuItemStore, StoreError
from menuboard.domain.common.ids import MenuItemId
from menuboard.domain.menu.entities import MenuItem
from menuboard.infrastructure.db.models.menu import MenuItemModel
from menuboard.infrastructure.db.session import get_engine, ping_engine
from menuboard.infrastructure.observability.otel import store_span

BACKEND = "sql"


def new_menu_item_id() -> MenuItemId:
    return MenuItemId(f"itm_{uuid4().hex[:12]}")


class SqlAlchemyMenuItemStore(MenuItemStore):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def list_available(self) -> list[MenuItem]:
        statement = (
            select(MenuItemModel)
            .where(MenuItemModel.available.is_(True))
            .order_by(MenuItemModel.name.asc())
        )
        return self._select("list_available", statement)

    def list_all(self) -> list[MenuItem]:
        statement = select(MenuItemModel).order_by(
            MenuItemModel.category.asc(),
            MenuItemModel.name.asc(),
        )
        return self._select("list_all", statement)

    def set_availability(self, item_id: MenuItemId, available: bool) -> None:
        self._update("set_availability", item_id, {"available": available})

    def update_details(
        self,
        item_id: MenuItemId,
        *,
        name: str,
        price: Decimal,
        description: str,
        category: str,
    ) -> None:
        self._update(
            "update_details",
            item_id,
            {
                "name": name,
                "price": price,
                "description": description,
                "category": category,
            },
        )

    def insert(self, items: Sequence[MenuItem]) -> list[MenuItem]:
        models = [
            MenuItemModel(
                id=str(new_menu_item_id()),
                name=item.name,
                description=item.description,
                price=item.price,
                category=item.category,
                available=item.available,
            )
            for item in items
        ]
        try:
            with store_span("insert", BACKEND), Session(self._engine) as session:
                session.add_all(models)
                session.commit()
                for model in models:
                    session.refresh(model)
                return [self._to_domain(model) for model in models]
        except SQLAlchemyError as exc:
            raise StoreError(f"insert into menu_items failed: {exc}") from exc

    def ping(self) -> bool:
        return ping_engine(self._engine)

    def _select(self, operation: str, statement) -> list[MenuItem]:
        try:
            with store_span(operation, BACKEND), Session(self._engine) as session:
                models = session.execute(statement).scalars().all()
                return [self._to_domain(model) for model in models]
        except SQLAlchemyError as exc:
            raise StoreError(f"select from menu_items failed: {exc}") from exc

    def _update(self, operation: str, item_id: MenuItemId, values: dict[str, object]) -> None:
        statement = update(MenuItemModel).where(MenuItemModel.id == str(item_id)).values(**values)
        try:
            with store_span(operation, BACKEND), Session(self._engine) as session:
                matched = session.execute(statement).rowcount
                session.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"update of menu_items failed: {exc}") from exc

        if matched == 0:
            raise StoreError(f"menu item {item_id} not found")

    @staticmethod
    def _to_domain(model: MenuItemModel) -> MenuItem:
        return MenuItem(
            item_id=MenuItemId(model.id),
            name=model.name,
            description=model.description or "",
            price=model.price,
            category=model.category,
            available=model.available,
        )
