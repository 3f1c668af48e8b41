from __future__ import annotations

from menuboard.application.dto.responses import (
    DashboardResponse,
    EditorResponse,
    MenuItemResponse,
    MenuViewResponse,
    MutationResultResponse,
)
from menuboard.application.views.admin_dashboard import DashboardSnapshot, MutationResult
from menuboard.application.views.menu_view import MenuView
from menuboard.domain.menu.entities import MenuItem


def to_menu_item_response(item: MenuItem) -> MenuItemResponse:
    return MenuItemResponse(
        id=str(item.item_id) if item.item_id is not None else None,
        name=item.name,
        description=item.description,
        price=item.display_price,
        category=item.category,
        available=item.available,
    )


def to_menu_view_response(view: MenuView) -> MenuViewResponse:
    return MenuViewResponse(
        activeCategory=view.active_category,
        categories=list(view.categories),
        loading=view.loading,
        items=[to_menu_item_response(item) for item in view.visible_items],
        emptyMessage=view.empty_message,
    )


def to_mutation_result_response(result: MutationResult) -> MutationResultResponse:
    return MutationResultResponse(
        kind=result.kind.value,
        ok=result.ok,
        applied=result.applied,
        message=result.message,
        item=to_menu_item_response(result.item) if result.item is not None else None,
    )


def to_dashboard_response(snapshot: DashboardSnapshot) -> DashboardResponse:
    editing = snapshot.editing
    return DashboardResponse(
        loading=snapshot.loading,
        items=[to_menu_item_response(item) for item in snapshot.items],
        editor=EditorResponse(
            state=snapshot.editor_state.value,
            modalOpen=snapshot.modal_open,
            item=to_menu_item_response(editing) if editing is not None else None,
        ),
        lastResult=(
            to_mutation_result_response(snapshot.last_result)
            if snapshot.last_result is not None
            else None
        ),
    )
