from __future__ import annotations

import threading

from fastapi import APIRouter, Body, Request

from menuboard.api.error_handling import MutationFailedError
from menuboard.application.dto.requests import EditorChangeRequest, OpenEditorRequest
from menuboard.application.dto.responses import DashboardResponse
from menuboard.application.mappers.menu_mapper import to_dashboard_response
from menuboard.application.ports.store import MenuItemStore
from menuboard.application.views.admin_dashboard import AdminDashboard, MutationResult
from menuboard.domain.common.ids import MenuItemId
from menuboard.infrastructure.store_factory import get_menu_item_store

router = APIRouter(prefix="/v1/admin/dashboard")

_dashboard_lock = threading.Lock()


def _menu_item_store() -> MenuItemStore:
    return get_menu_item_store()


def _admin_dashboard(request: Request) -> AdminDashboard:
    state = request.app.state
    dashboard = getattr(state, "admin_dashboard", None)
    if dashboard is not None:
        return dashboard

    with _dashboard_lock:
        dashboard = getattr(state, "admin_dashboard", None)
        if dashboard is None:
            dashboard = AdminDashboard(store=_menu_item_store())
            dashboard.load()
            state.admin_dashboard = dashboard
    return dashboard


def _respond(dashboard: AdminDashboard, result: MutationResult | None = None) -> DashboardResponse:
    if result is not None and not result.ok:
        raise MutationFailedError(
            result.message or "menu item mutation failed",
            details={"kind": result.kind.value},
        )
    return to_dashboard_response(dashboard.snapshot())


@router.get("", response_model=DashboardResponse)
def get_dashboard(request: Request) -> DashboardResponse:
    return _respond(_admin_dashboard(request))


@router.post("/refresh", response_model=DashboardResponse)
def refresh(request: Request) -> DashboardResponse:
    dashboard = _admin_dashboard(request)
    dashboard.load()
    return _respond(dashboard)


@router.post("/items/{item_id}/toggle-availability", response_model=DashboardResponse)
def toggle_availability(item_id: str, request: Request) -> DashboardResponse:
    dashboard = _admin_dashboard(request)
    result = dashboard.toggle_availability(MenuItemId(item_id))
    return _respond(dashboard, result)


@router.post("/editor", response_model=DashboardResponse)
def open_editor(
    request: Request,
    payload: OpenEditorRequest | None = Body(default=None),
) -> DashboardResponse:
    dashboard = _admin_dashboard(request)
    if payload is not None and payload.item_id is not None:
        dashboard.begin_edit(MenuItemId(payload.item_id))
    else:
        dashboard.begin_add()
    return _respond(dashboard)


@router.patch("/editor", response_model=DashboardResponse)
def change_editor(payload: EditorChangeRequest, request: Request) -> DashboardResponse:
    dashboard = _admin_dashboard(request)
    dashboard.change_field(**payload.changes())
    return _respond(dashboard)


@router.post("/editor/submit", response_model=DashboardResponse)
def submit_editor(request: Request) -> DashboardResponse:
    dashboard = _admin_dashboard(request)
    result = dashboard.submit()
    return _respond(dashboard, result)


@router.delete("/editor", response_model=DashboardResponse)
def cancel_editor(request: Request) -> DashboardResponse:
    dashboard = _admin_dashboard(request)
    dashboard.cancel()
    return _respond(dashboard)
