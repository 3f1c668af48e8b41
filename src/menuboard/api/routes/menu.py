from __future__ import annotations

from fastapi import APIRouter, Query

from menuboard.application.dto.responses import MenuViewResponse
from menuboard.application.mappers.menu_mapper import to_menu_view_response
from menuboard.application.ports.store import MenuItemStore
from menuboard.application.views.menu_view import MenuView
from menuboard.domain.menu.entities import ALL_CATEGORIES
from menuboard.infrastructure.store_factory import get_menu_item_store

router = APIRouter()


def _menu_item_store() -> MenuItemStore:
    return get_menu_item_store()


@router.get("/v1/menu", response_model=MenuViewResponse)
def get_menu(category: str = Query(default=ALL_CATEGORIES)) -> MenuViewResponse:
    view = MenuView(store=_menu_item_store())
    view.select_category(category)
    view.load()
    return to_menu_view_response(view)
